from rest_framework import serializers

UNSPLASH_MAX_PER_PAGE = 30


class CloudinaryDeleteSerializer(serializers.Serializer):
    publicId = serializers.CharField(
        max_length=255,
        error_messages={
            "required": "Public ID is required",
            "blank": "Public ID is required",
        },
    )


class UnsplashSearchSerializer(serializers.Serializer):
    query = serializers.CharField(
        error_messages={
            "required": "Search query is required",
            "blank": "Search query is required",
        },
    )
    page = serializers.IntegerField(required=False, default=1, min_value=1)
    per_page = serializers.IntegerField(required=False, default=10, min_value=1)

    def validate_per_page(self, value):
        return min(value, UNSPLASH_MAX_PER_PAGE)


class TrackDownloadSerializer(serializers.Serializer):
    downloadLocation = serializers.URLField(
        max_length=1000,
        error_messages={"required": "Download location is required"},
    )
