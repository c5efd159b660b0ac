from typing import List

from django.conf import settings
from django.core.validators import MaxLengthValidator
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.common.utils import generate_random_string, slugify_title

from .utils import calculate_reading_time, normalize_tags

MAX_TAGS = 10
MAX_DESCRIPTION_LENGTH = 200
MAX_COMMENT_LENGTH = 1000
BLOG_ID_SUFFIX_LENGTH = 8


class Tag(models.Model):
    """Blog topic. Names are stored lowercase and trimmed."""

    name = models.CharField(_("Name"), max_length=100, unique=True)

    class Meta:
        verbose_name = _("Tag")
        verbose_name_plural = _("Tags")
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name = self.name.strip().lower()
        super().save(*args, **kwargs)

    @classmethod
    def from_names(cls, names) -> List["Tag"]:
        """Get or create tags for ``names`` after normalising them."""
        return [cls.objects.get_or_create(name=name)[0] for name in normalize_tags(names)]


class BlogQuerySet(models.QuerySet):
    def published(self):
        return self.filter(draft=False)

    def drafts(self):
        return self.filter(draft=True)


class Blog(models.Model):
    """
    A blog post or draft.

    ``content`` holds Editor.js output: a list with one object whose
    ``blocks`` array is the document. A draft with ``original_blog`` set
    is an edit-copy that replaces the original when published.
    """

    blog_id = models.CharField(_("Blog ID"), max_length=400, unique=True, editable=False)
    title = models.CharField(_("Title"), max_length=300)
    banner = models.URLField(_("Banner"), max_length=500, blank=True, default="")
    des = models.CharField(
        _("Description"),
        max_length=MAX_DESCRIPTION_LENGTH,
        blank=True,
        default="",
    )
    content = models.JSONField(_("Content"), default=list, blank=True)
    tags = models.ManyToManyField(Tag, blank=True, related_name="blogs")
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blogs",
        verbose_name=_("Author"),
    )
    draft = models.BooleanField(_("Draft"), default=False, db_index=True)
    original_blog = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="edit_drafts",
        verbose_name=_("Original blog"),
    )

    # Activity
    total_likes = models.PositiveIntegerField(default=0)
    total_comments = models.PositiveIntegerField(default=0)
    total_reads = models.PositiveIntegerField(default=0)
    total_parent_comments = models.PositiveIntegerField(default=0)

    published_at = models.DateTimeField(_("Published at"), default=timezone.now)
    updated_at = models.DateTimeField(_("Updated at"), auto_now=True)

    objects = BlogQuerySet.as_manager()

    class Meta:
        verbose_name = _("Blog")
        verbose_name_plural = _("Blogs")
        ordering = ["-published_at"]
        indexes = [
            models.Index(
                fields=["draft", "-published_at"], name="blog_blog_draft_8a1f3c_idx"
            ),
            models.Index(fields=["author", "draft"], name="blog_blog_author__5d2e71_idx"),
            models.Index(
                fields=["-total_reads", "-total_likes"],
                name="blog_blog_total_r_c4b09e_idx",
            ),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.blog_id:
            self.blog_id = self.generate_blog_id(self.title)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """
        Delete the blog with its comments, notifications and edit-copies,
        dropping it from the author's post count when it was published.
        """
        from django.contrib.auth import get_user_model

        with transaction.atomic():
            if not self.draft:
                get_user_model().objects.filter(
                    pk=self.author_id, total_posts__gt=0
                ).update(total_posts=F("total_posts") - 1)
            return super().delete(*args, **kwargs)

    @classmethod
    def generate_blog_id(cls, title: str) -> str:
        slug = slugify_title(title)
        while True:
            suffix = generate_random_string(BLOG_ID_SUFFIX_LENGTH)
            blog_id = f"{slug}-{suffix}" if slug else suffix
            if not cls.objects.filter(blog_id=blog_id).exists():
                return blog_id

    @property
    def reading_time(self) -> int:
        return calculate_reading_time(self.content)

    def set_tags(self, names):
        self.tags.set(Tag.from_names(names))

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags.all()]


class Comment(models.Model):
    """Threaded comment; replies point at their parent comment."""

    blog = models.ForeignKey(
        Blog, on_delete=models.CASCADE, related_name="comments", verbose_name=_("Blog")
    )
    blog_author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="received_comments",
    )
    commented_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
    )
    comment = models.TextField(
        _("Comment"), validators=[MaxLengthValidator(MAX_COMMENT_LENGTH)]
    )
    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="children",
    )
    is_reply = models.BooleanField(default=False)
    commented_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name = _("Comment")
        verbose_name_plural = _("Comments")
        ordering = ["-commented_at"]
        indexes = [
            models.Index(
                fields=["blog", "parent", "-commented_at"],
                name="blog_commen_blog_id_7e3b52_idx",
            ),
        ]

    def __str__(self):
        return f"{self.commented_by} on {self.blog}"

    def get_descendant_ids(self) -> List[int]:
        """Ids of every reply below this comment, at any depth."""
        ids = []
        frontier = [self.pk]
        while frontier:
            frontier = list(
                Comment.objects.filter(parent_id__in=frontier).values_list(
                    "pk", flat=True
                )
            )
            ids.extend(frontier)
        return ids
