from rest_framework import serializers

from apps.blog.serializers import AuthorSerializer

from .models import Notification


class NotificationBlogSerializer(serializers.Serializer):
    _id = serializers.IntegerField(source="id")
    blog_id = serializers.CharField()
    title = serializers.CharField()


class NotificationCommentSerializer(serializers.Serializer):
    _id = serializers.IntegerField(source="id")
    comment = serializers.CharField()


class NotificationSerializer(serializers.ModelSerializer):
    """Inbox entry with the blog, actor and comments it refers to."""

    _id = serializers.IntegerField(source="id", read_only=True)
    user = AuthorSerializer(read_only=True)
    blog = NotificationBlogSerializer(read_only=True)
    comment = NotificationCommentSerializer(read_only=True)
    reply = NotificationCommentSerializer(read_only=True)
    replied_on_comment = NotificationCommentSerializer(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Notification
        fields = [
            "_id",
            "type",
            "user",
            "blog",
            "comment",
            "reply",
            "replied_on_comment",
            "tutorial_link",
            "seen",
            "createdAt",
        ]
        read_only_fields = fields
