from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from apps.accounts.serializers import PersonalInfoSerializer

from .models import MAX_COMMENT_LENGTH, MAX_DESCRIPTION_LENGTH, MAX_TAGS, Blog, Comment
from .utils import get_blocks, normalize_tags


class AuthorSerializer(serializers.Serializer):
    """``{_id, personal_info}`` summary of a blog author or commenter."""

    _id = serializers.IntegerField(source="id", read_only=True)
    personal_info = serializers.SerializerMethodField()

    def get_personal_info(self, obj):
        return PersonalInfoSerializer(obj).data


class ActivitySerializer(serializers.Serializer):
    total_likes = serializers.IntegerField()
    total_comments = serializers.IntegerField()
    total_reads = serializers.IntegerField()
    total_parent_comments = serializers.IntegerField()


class BlogCardSerializer(serializers.ModelSerializer):
    """Blog summary used by feeds, search results and dashboards."""

    _id = serializers.IntegerField(source="id", read_only=True)
    tags = serializers.SlugRelatedField(many=True, read_only=True, slug_field="name")
    author = AuthorSerializer(read_only=True)
    activity = serializers.SerializerMethodField()
    publishedAt = serializers.DateTimeField(source="published_at", read_only=True)
    reading_time = serializers.IntegerField(read_only=True)

    class Meta:
        model = Blog
        fields = [
            "_id",
            "blog_id",
            "title",
            "banner",
            "des",
            "tags",
            "author",
            "activity",
            "draft",
            "publishedAt",
            "reading_time",
        ]
        read_only_fields = fields

    def get_activity(self, obj):
        return ActivitySerializer(obj).data


class BlogDetailSerializer(BlogCardSerializer):
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    original_blog = serializers.SlugRelatedField(read_only=True, slug_field="blog_id")

    class Meta(BlogCardSerializer.Meta):
        fields = BlogCardSerializer.Meta.fields + [
            "content",
            "original_blog",
            "updatedAt",
        ]
        read_only_fields = fields


class BlogWriteSerializer(serializers.Serializer):
    """
    Payload of ``/create-blog``.

    Drafts only need a title. Publishing also needs a description, a
    banner, at least one content block and 1 to 10 tags.
    """

    id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    title = serializers.CharField(
        max_length=300,
        error_messages={
            "required": _("You must provide a title"),
            "blank": _("You must provide a title"),
        },
    )
    banner = serializers.URLField(
        max_length=500, required=False, allow_blank=True, default=""
    )
    des = serializers.CharField(
        required=False, allow_blank=True, default="", trim_whitespace=True
    )
    content = serializers.JSONField(required=False, default=list)
    tags = serializers.ListField(
        child=serializers.CharField(allow_blank=True, max_length=100),
        required=False,
        default=list,
    )
    draft = serializers.BooleanField(required=False, default=False)

    def validate_tags(self, value):
        tags = normalize_tags(value)
        if len(tags) > MAX_TAGS:
            raise serializers.ValidationError(
                _("Provide tags in order to publish the blog, maximum 10")
            )
        return tags

    def validate_des(self, value):
        if len(value) > MAX_DESCRIPTION_LENGTH:
            raise serializers.ValidationError(
                _("Blog description must be under 200 characters")
            )
        return value

    def validate(self, attrs):
        if attrs.get("draft"):
            return attrs

        errors = {}
        if not attrs.get("des"):
            errors["des"] = [_("You must provide blog description under 200 characters")]
        if not attrs.get("banner"):
            errors["banner"] = [_("You must provide blog banner to publish it")]
        if not get_blocks(attrs.get("content")):
            errors["content"] = [_("There must be some blog content to publish it")]
        if not attrs.get("tags"):
            errors["tags"] = [_("Provide tags in order to publish the blog, maximum 10")]

        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class CommentSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source="id", read_only=True)
    blog_id = serializers.IntegerField(read_only=True)
    commented_by = AuthorSerializer(read_only=True)
    commentedAt = serializers.DateTimeField(source="commented_at", read_only=True)
    isReply = serializers.BooleanField(source="is_reply", read_only=True)
    parent = serializers.PrimaryKeyRelatedField(read_only=True)
    children = serializers.SerializerMethodField()

    class Meta:
        model = Comment
        fields = [
            "_id",
            "blog_id",
            "comment",
            "commented_by",
            "commentedAt",
            "isReply",
            "parent",
            "children",
        ]
        read_only_fields = fields

    def get_children(self, obj):
        return [child.pk for child in obj.children.all()]


class AddCommentSerializer(serializers.Serializer):
    _id = serializers.IntegerField(help_text=_("Primary key of the blog"))
    comment = serializers.CharField(
        max_length=MAX_COMMENT_LENGTH,
        error_messages={
            "blank": _("Write something to leave a comment"),
            "required": _("Write something to leave a comment"),
        },
    )
    replying_to = serializers.IntegerField(required=False, allow_null=True)
    notification_id = serializers.IntegerField(required=False, allow_null=True)
