from django.contrib.auth import get_user_model
from rest_framework import serializers

from apps.blog.serializers import BlogCardSerializer

User = get_user_model()

ASSIGNABLE_ROLES = [User.Role.USER.value, User.Role.ADMIN.value]


class ManagedUserSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source="id", read_only=True)
    joinedAt = serializers.DateTimeField(source="date_joined", read_only=True)

    class Meta:
        model = User
        fields = [
            "_id",
            "fullname",
            "username",
            "email",
            "profile_img",
            "role",
            "google_auth",
            "total_posts",
            "total_reads",
            "joinedAt",
        ]
        read_only_fields = fields


class ManagedBlogSerializer(BlogCardSerializer):
    class Meta(BlogCardSerializer.Meta):
        fields = BlogCardSerializer.Meta.fields + ["updated_at"]
        read_only_fields = fields


class RoleUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=ASSIGNABLE_ROLES)


class GrowthSerializer(serializers.Serializer):
    newUsers = serializers.IntegerField()
    newBlogs = serializers.IntegerField()
    newComments = serializers.IntegerField()


class SiteStatsSerializer(serializers.Serializer):
    totalUsers = serializers.IntegerField()
    totalBlogs = serializers.IntegerField()
    totalDrafts = serializers.IntegerField()
    totalComments = serializers.IntegerField()
    totalAdmins = serializers.IntegerField()
    growth = GrowthSerializer()
