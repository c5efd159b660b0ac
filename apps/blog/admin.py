from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import Blog, Comment, Tag


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ("name", "blog_count")
    search_fields = ("name",)

    def blog_count(self, obj):
        return obj.blogs.count()

    blog_count.short_description = _("Blogs")


class CommentInline(admin.TabularInline):
    """Inline admin for blog comments."""

    model = Comment
    fk_name = "blog"
    extra = 0
    fields = ("commented_by", "comment", "is_reply", "commented_at")
    readonly_fields = ("commented_by", "commented_at")


@admin.register(Blog)
class BlogAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "blog_id",
        "author",
        "status_badge",
        "total_reads",
        "total_likes",
        "total_comments",
        "published_at",
    )
    list_filter = ("draft", "published_at", "tags")
    search_fields = ("title", "blog_id", "des", "author__username")
    readonly_fields = (
        "blog_id",
        "total_reads",
        "total_likes",
        "total_comments",
        "total_parent_comments",
        "updated_at",
    )
    raw_id_fields = ("author", "original_blog")
    filter_horizontal = ("tags",)
    inlines = [CommentInline]
    date_hierarchy = "published_at"

    def status_badge(self, obj):
        """Display draft/published as colored badge."""
        if obj.draft:
            label = _("Edit-copy") if obj.original_blog_id else _("Draft")
            return format_html('<span style="color: orange;">{}</span>', label)
        return format_html('<span style="color: green;">{}</span>', _("Published"))

    status_badge.short_description = _("Status")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("short_comment", "blog", "commented_by", "is_reply", "commented_at")
    list_filter = ("is_reply", "commented_at")
    search_fields = ("comment", "commented_by__username", "blog__title")
    raw_id_fields = ("blog", "blog_author", "commented_by", "parent")

    def short_comment(self, obj):
        return obj.comment[:60]

    short_comment.short_description = _("Comment")
