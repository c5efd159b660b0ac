import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Tag",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "name",
                    models.CharField(max_length=100, unique=True, verbose_name="Name"),
                ),
            ],
            options={
                "verbose_name": "Tag",
                "verbose_name_plural": "Tags",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Blog",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "blog_id",
                    models.CharField(
                        editable=False,
                        max_length=400,
                        unique=True,
                        verbose_name="Blog ID",
                    ),
                ),
                ("title", models.CharField(max_length=300, verbose_name="Title")),
                (
                    "banner",
                    models.URLField(
                        blank=True, default="", max_length=500, verbose_name="Banner"
                    ),
                ),
                (
                    "des",
                    models.CharField(
                        blank=True,
                        default="",
                        max_length=200,
                        verbose_name="Description",
                    ),
                ),
                (
                    "content",
                    models.JSONField(blank=True, default=list, verbose_name="Content"),
                ),
                (
                    "draft",
                    models.BooleanField(
                        db_index=True, default=False, verbose_name="Draft"
                    ),
                ),
                ("total_likes", models.PositiveIntegerField(default=0)),
                ("total_comments", models.PositiveIntegerField(default=0)),
                ("total_reads", models.PositiveIntegerField(default=0)),
                ("total_parent_comments", models.PositiveIntegerField(default=0)),
                (
                    "published_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, verbose_name="Published at"
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(auto_now=True, verbose_name="Updated at"),
                ),
                (
                    "author",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="blogs",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Author",
                    ),
                ),
                (
                    "original_blog",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="edit_drafts",
                        to="blog.blog",
                        verbose_name="Original blog",
                    ),
                ),
                (
                    "tags",
                    models.ManyToManyField(
                        blank=True, related_name="blogs", to="blog.tag"
                    ),
                ),
            ],
            options={
                "verbose_name": "Blog",
                "verbose_name_plural": "Blogs",
                "ordering": ["-published_at"],
                "indexes": [
                    models.Index(
                        fields=["draft", "-published_at"],
                        name="blog_blog_draft_8a1f3c_idx",
                    ),
                    models.Index(
                        fields=["author", "draft"], name="blog_blog_author__5d2e71_idx"
                    ),
                    models.Index(
                        fields=["-total_reads", "-total_likes"],
                        name="blog_blog_total_r_c4b09e_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Comment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "comment",
                    models.TextField(
                        validators=[django.core.validators.MaxLengthValidator(1000)],
                        verbose_name="Comment",
                    ),
                ),
                ("is_reply", models.BooleanField(default=False)),
                (
                    "commented_at",
                    models.DateTimeField(
                        db_index=True, default=django.utils.timezone.now
                    ),
                ),
                (
                    "blog",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comments",
                        to="blog.blog",
                        verbose_name="Blog",
                    ),
                ),
                (
                    "blog_author",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="received_comments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "commented_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="comments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="blog.comment",
                    ),
                ),
            ],
            options={
                "verbose_name": "Comment",
                "verbose_name_plural": "Comments",
                "ordering": ["-commented_at"],
                "indexes": [
                    models.Index(
                        fields=["blog", "parent", "-commented_at"],
                        name="blog_commen_blog_id_7e3b52_idx",
                    ),
                ],
            },
        ),
    ]
