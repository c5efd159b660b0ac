from unittest import mock

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.notifications.models import Notification

from .models import Blog, Comment, Tag
from .tasks import record_blog_read, seed_tutorial, send_comment_notification
from .tutorial import TUTORIAL_TITLE
from .utils import calculate_reading_time, get_blocks, normalize_tags

User = get_user_model()


def make_content(*paragraphs):
    return [
        {
            "blocks": [
                {"type": "paragraph", "data": {"text": text}} for text in paragraphs
            ]
        }
    ]


class BlogTestMixin:
    """Users, blogs and helpers shared by the blog tests."""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username="author",
            email="author@example.com",
            password="Testpass123",
            fullname="Blog Author",
            role=User.Role.ADMIN,
        )
        self.reader = User.objects.create_user(
            username="reader",
            email="reader@example.com",
            password="Testpass123",
            fullname="Avid Reader",
        )
        self.other_admin = User.objects.create_user(
            username="editor",
            email="editor@example.com",
            password="Testpass123",
            fullname="Other Editor",
            role=User.Role.ADMIN,
        )

    def create_blog(
        self, author=None, title="Django tips", draft=False, tags=None, **kwargs
    ):
        blog = Blog.objects.create(
            author=author or self.admin,
            title=title,
            banner="https://example.com/banner.png",
            des="A short description",
            content=make_content("Some useful words"),
            draft=draft,
            **kwargs,
        )
        blog.set_tags(tags or ["django"])
        return blog

    def publish_payload(self, **overrides):
        payload = {
            "title": "Hello World",
            "banner": "https://example.com/banner.png",
            "des": "First post",
            "content": make_content("Hello <b>world</b>"),
            "tags": ["Python", "django "],
            "draft": False,
        }
        payload.update(overrides)
        return payload


class BlogUtilsTest(TestCase):
    def test_reading_time(self):
        """Test reading time counts words in text blocks only."""
        content = [
            {
                "blocks": [
                    {"type": "header", "data": {"text": "<i>Title</i>"}},
                    {"type": "paragraph", "data": {"text": "word " * 238}},
                    {"type": "list", "data": {"items": ["one", {"content": "two"}]}},
                    {"type": "image", "data": {"file": {"url": "x"}}},
                ]
            }
        ]
        self.assertEqual(calculate_reading_time(content), 2)
        self.assertEqual(calculate_reading_time(make_content("short")), 1)
        self.assertEqual(calculate_reading_time([]), 0)

    def test_get_blocks_tolerates_bad_shapes(self):
        self.assertEqual(get_blocks(None), [])
        self.assertEqual(get_blocks([{"blocks": "nope"}]), [])
        self.assertEqual(get_blocks(["text"]), [])

    def test_reading_time_tolerates_bad_blocks(self):
        """Test malformed blocks count as no words instead of failing."""
        content = [
            {
                "blocks": [
                    "x",
                    None,
                    {"type": "paragraph", "data": "text"},
                    {"type": "list", "data": {"items": "one two"}},
                    {"type": "paragraph", "data": {"text": "three words here"}},
                ]
            }
        ]
        self.assertEqual(calculate_reading_time(content), 1)
        self.assertEqual(calculate_reading_time([{"blocks": ["x"]}]), 0)

    def test_normalize_tags(self):
        self.assertEqual(
            normalize_tags([" Python", "python", "", "Web Dev"]), ["python", "web dev"]
        )


class BlogModelTest(BlogTestMixin, TestCase):
    def test_blog_id_from_title(self):
        blog = self.create_blog(title="Hello, World & Friends!")

        prefix, _, suffix = blog.blog_id.rpartition("-")
        self.assertEqual(prefix, "Hello-World-Friends")
        self.assertEqual(len(suffix), 8)

    def test_blog_id_unique(self):
        first = self.create_blog(title="Same")
        second = self.create_blog(title="Same")
        self.assertNotEqual(first.blog_id, second.blog_id)

    def test_tags_stored_lowercase(self):
        blog = self.create_blog(tags=["Django", " REST "])
        self.assertEqual(sorted(blog.tag_names), ["django", "rest"])
        self.assertEqual(Tag.objects.count(), 2)

    def test_delete_published_blog_decrements_posts(self):
        User.objects.filter(pk=self.admin.pk).update(total_posts=1)
        blog = self.create_blog()

        blog.delete()

        self.admin.refresh_from_db()
        self.assertEqual(self.admin.total_posts, 0)

    def test_delete_draft_keeps_posts(self):
        User.objects.filter(pk=self.admin.pk).update(total_posts=1)
        blog = self.create_blog(draft=True)

        blog.delete()

        self.admin.refresh_from_db()
        self.assertEqual(self.admin.total_posts, 1)

    def test_comment_descendants(self):
        blog = self.create_blog()
        root = Comment.objects.create(
            blog=blog, blog_author=self.admin, commented_by=self.reader, comment="a"
        )
        child = Comment.objects.create(
            blog=blog,
            blog_author=self.admin,
            commented_by=self.admin,
            comment="b",
            parent=root,
            is_reply=True,
        )
        grandchild = Comment.objects.create(
            blog=blog,
            blog_author=self.admin,
            commented_by=self.reader,
            comment="c",
            parent=child,
            is_reply=True,
        )

        self.assertEqual(sorted(root.get_descendant_ids()), [child.pk, grandchild.pk])
        self.assertEqual(grandchild.get_descendant_ids(), [])


class CreateBlogViewTest(BlogTestMixin, APITestCase):
    """Test cases for the create/update/publish workflow."""

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(user=self.admin)
        self.url = reverse("create-blog")

    def test_publish_new_blog(self):
        response = self.client.post(self.url, self.publish_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        blog = Blog.objects.get(blog_id=response.data["id"])
        self.assertFalse(blog.draft)
        self.assertEqual(sorted(blog.tag_names), ["django", "python"])
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.total_posts, 1)

    def test_save_draft_needs_only_title(self):
        response = self.client.post(
            self.url, {"title": "Rough idea", "draft": True}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        blog = Blog.objects.get(blog_id=response.data["id"])
        self.assertTrue(blog.draft)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.total_posts, 0)

    def test_publish_validation(self):
        """Test publishing requires description, banner, content and tags."""
        cases = {
            "title": {"title": ""},
            "des": {"des": ""},
            "banner": {"banner": ""},
            "content": {"content": [{"blocks": []}]},
            "tags": {"tags": []},
        }
        for field, override in cases.items():
            with self.subTest(field=field):
                response = self.client.post(
                    self.url, self.publish_payload(**override), format="json"
                )
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(field, response.data["field_errors"])

    def test_too_many_tags(self):
        tags = [f"tag{i}" for i in range(11)]
        response = self.client.post(
            self.url, self.publish_payload(tags=tags), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_description_too_long(self):
        response = self.client.post(
            self.url, self.publish_payload(des="x" * 201), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_regular_user_cannot_write(self):
        self.client.force_authenticate(user=self.reader)
        response = self.client.post(self.url, self.publish_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Blog.objects.exists())

    def test_publish_draft(self):
        draft = self.create_blog(draft=True)

        response = self.client.post(
            self.url, self.publish_payload(id=draft.blog_id), format="json"
        )

        self.assertEqual(response.data["id"], draft.blog_id)
        draft.refresh_from_db()
        self.assertFalse(draft.draft)
        self.assertEqual(draft.title, "Hello World")
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.total_posts, 1)

    def test_saving_published_blog_as_draft_creates_edit_copy(self):
        """Test the live post is untouched while an edit-copy is saved."""
        blog = self.create_blog(title="Live post")

        response = self.client.post(
            self.url,
            self.publish_payload(id=blog.blog_id, title="Live post v2", draft=True),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotEqual(response.data["id"], blog.blog_id)
        edit_copy = Blog.objects.get(blog_id=response.data["id"])
        self.assertTrue(edit_copy.draft)
        self.assertEqual(edit_copy.original_blog, blog)
        self.assertEqual(edit_copy.title, "Live post v2")

        blog.refresh_from_db()
        self.assertEqual(blog.title, "Live post")
        self.assertFalse(blog.draft)

        # Saving again reuses the same edit-copy
        again = self.client.post(
            self.url,
            self.publish_payload(id=blog.blog_id, title="Live post v3", draft=True),
            format="json",
        )
        self.assertEqual(again.data["id"], edit_copy.blog_id)
        self.assertEqual(blog.edit_drafts.count(), 1)

    def test_publishing_edit_copy_overwrites_original(self):
        blog = self.create_blog(title="Live post")
        blog.total_likes = 4
        blog.save()
        edit_copy = self.create_blog(
            title="Live post v2", draft=True, original_blog=blog
        )

        response = self.client.post(
            self.url,
            self.publish_payload(id=edit_copy.blog_id, title="Live post v2"),
            format="json",
        )

        self.assertEqual(response.data["id"], blog.blog_id)
        blog.refresh_from_db()
        self.assertEqual(blog.title, "Live post v2")
        self.assertEqual(blog.total_likes, 4)
        self.assertFalse(Blog.objects.filter(pk=edit_copy.pk).exists())

    def test_update_published_blog_in_place(self):
        blog = self.create_blog(title="Live post")

        response = self.client.post(
            self.url,
            self.publish_payload(id=blog.blog_id, title="Fixed typo"),
            format="json",
        )

        self.assertEqual(response.data["id"], blog.blog_id)
        blog.refresh_from_db()
        self.assertEqual(blog.title, "Fixed typo")
        self.assertEqual(Blog.objects.count(), 1)

    def test_cannot_edit_someone_elses_blog(self):
        blog = self.create_blog(author=self.other_admin)

        response = self.client.post(
            self.url, self.publish_payload(id=blog.blog_id), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_edit_unknown_blog(self):
        response = self.client.post(
            self.url, self.publish_payload(id="missing-12345678"), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class FeedViewTest(BlogTestMixin, APITestCase):
    """Test cases for latest, trending and search feeds."""

    def setUp(self):
        super().setUp()
        self.python = [
            self.create_blog(title=f"Python {i}", tags=["python"]) for i in range(6)
        ]
        self.rust = self.create_blog(
            title="Rust intro", tags=["rust"], author=self.other_admin
        )
        self.draft = self.create_blog(title="Python draft", draft=True, tags=["python"])

    def test_latest_blogs_paginated(self):
        response = self.client.post(reverse("latest-blogs"), {"page": 1}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["blogs"]), 5)
        self.assertEqual(response.data["page"], 1)
        self.assertEqual(response.data["totalDocs"], 7)
        self.assertEqual(response.data["blogs"][0]["blog_id"], self.rust.blog_id)

        card = response.data["blogs"][0]
        for key in ("_id", "title", "des", "banner", "tags", "author", "activity"):
            self.assertIn(key, card)
        self.assertNotIn("content", card)

    def test_cards_keep_reading_time_for_malformed_content(self):
        Blog.objects.filter(pk=self.rust.pk).update(
            content=[{"blocks": [{"type": "paragraph", "data": "text"}]}]
        )

        response = self.client.post(reverse("latest-blogs"), {"page": 1}, format="json")

        cards = {card["blog_id"]: card for card in response.data["blogs"]}
        self.assertEqual(cards[self.rust.blog_id]["reading_time"], 0)
        self.assertEqual(cards[self.python[5].blog_id]["reading_time"], 1)

    def test_latest_blogs_page_past_end(self):
        response = self.client.get(reverse("latest-blogs"), {"page": 9})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["blogs"], [])

    def test_latest_count_excludes_drafts(self):
        response = self.client.post(reverse("all-latest-blogs-count"))
        self.assertEqual(response.data, {"totalDocs": 7})

    def test_trending(self):
        Blog.objects.filter(pk=self.python[2].pk).update(total_reads=50)

        response = self.client.get(reverse("trending-blogs"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["blogs"]), 5)
        self.assertEqual(response.data["blogs"][0]["blog_id"], self.python[2].blog_id)

    def test_search_by_tag(self):
        response = self.client.post(
            reverse("search-blogs"), {"tag": "Python"}, format="json"
        )

        self.assertEqual(response.data["totalDocs"], 6)
        self.assertEqual(len(response.data["blogs"]), 5)

    def test_similar_blogs_limit(self):
        """Test tag plus eliminate_blog returns two results by default."""
        response = self.client.post(
            reverse("search-blogs"),
            {"tag": "python", "eliminate_blog": self.python[0].blog_id},
            format="json",
        )

        self.assertEqual(response.data["totalDocs"], 5)
        self.assertEqual(len(response.data["blogs"]), 2)
        ids = [blog["blog_id"] for blog in response.data["blogs"]]
        self.assertNotIn(self.python[0].blog_id, ids)

    def test_search_by_query_and_author(self):
        by_query = self.client.post(
            reverse("search-blogs"), {"query": "rust"}, format="json"
        )
        by_author = self.client.post(
            reverse("search-blogs"), {"author": self.other_admin.pk}, format="json"
        )

        self.assertEqual(by_query.data["totalDocs"], 1)
        self.assertEqual(by_author.data["blogs"][0]["blog_id"], self.rust.blog_id)

    def test_search_count(self):
        response = self.client.post(
            reverse("search-blogs-count"), {"tag": "rust"}, format="json"
        )
        self.assertEqual(response.data, {"totalDocs": 1})

    def test_site_search(self):
        response = self.client.get(reverse("search"), {"query": "edit"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data["results"]
        self.assertEqual(results["blogs"], [])
        self.assertEqual(
            [u["personal_info"]["username"] for u in results["users"]], ["editor"]
        )
        self.assertEqual(results["total"], 1)

    def test_site_search_blogs_only(self):
        response = self.client.get(
            reverse("search"), {"query": "python", "type": "blogs", "limit": 3}
        )

        self.assertEqual(len(response.data["results"]["blogs"]), 3)
        self.assertEqual(response.data["results"]["users"], [])

    def test_site_search_validation(self):
        missing = self.client.get(reverse("search"))
        bad_type = self.client.get(reverse("search"), {"query": "x", "type": "tags"})

        self.assertEqual(missing.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(bad_type.status_code, status.HTTP_400_BAD_REQUEST)


class GetBlogViewTest(BlogTestMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.blog = self.create_blog()
        self.url = reverse("get-blog-detail", kwargs={"blog_id": self.blog.blog_id})

    def test_get_blog_counts_one_read_per_viewer(self):
        first = self.client.get(self.url)
        self.client.get(self.url)

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["blog"]["content"], self.blog.content)
        self.blog.refresh_from_db()
        self.admin.refresh_from_db()
        self.assertEqual(self.blog.total_reads, 1)
        self.assertEqual(self.admin.total_reads, 1)

        self.client.force_authenticate(user=self.reader)
        self.client.get(self.url)
        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_reads, 2)

    def test_spoofed_forwarded_for_does_not_inflate_reads(self):
        for ip in ("203.0.113.1", "203.0.113.2", "203.0.113.3"):
            self.client.get(self.url, HTTP_X_FORWARDED_FOR=ip)

        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_reads, 1)

    def test_edit_mode_does_not_count(self):
        self.client.get(self.url, {"mode": "edit"})

        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_reads, 0)

    def test_get_blog_by_post_body(self):
        response = self.client.post(
            reverse("get-blog"), {"blog_id": self.blog.blog_id}, format="json"
        )
        self.assertEqual(response.data["blog"]["_id"], self.blog.pk)

    def test_get_unknown_blog(self):
        response = self.client.post(
            reverse("get-blog"), {"blog_id": "nope"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_draft_visibility(self):
        """Test drafts are only served to their author or to admins asking for one."""
        draft = self.create_blog(draft=True)
        url = reverse("get-blog-detail", kwargs={"blog_id": draft.blog_id})

        anonymous = self.client.get(url, {"draft": "true"})
        self.client.force_authenticate(user=self.reader)
        reader = self.client.get(url, {"draft": "true"})
        self.client.force_authenticate(user=self.other_admin)
        admin_implicit = self.client.get(url)
        admin_explicit = self.client.get(url, {"draft": "true"})
        self.client.force_authenticate(user=self.admin)
        owner = self.client.get(url)

        self.assertEqual(anonymous.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(reader.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(admin_implicit.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(admin_explicit.status_code, status.HTTP_200_OK)
        self.assertEqual(owner.status_code, status.HTTP_200_OK)

        draft.refresh_from_db()
        self.assertEqual(draft.total_reads, 0)


class UserBlogsAndDeleteTest(BlogTestMixin, APITestCase):
    def test_user_blogs_split_drafts(self):
        published = self.create_blog()
        draft = self.create_blog(draft=True)
        self.create_blog(author=self.other_admin)
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(reverse("user-blogs"))

        self.assertEqual(
            [b["blog_id"] for b in response.data["blogs"]], [published.blog_id]
        )
        self.assertEqual([b["blog_id"] for b in response.data["drafts"]], [draft.blog_id])

    def test_author_deletes_blog(self):
        blog = self.create_blog()
        User.objects.filter(pk=self.admin.pk).update(total_posts=1)
        comment = Comment.objects.create(
            blog=blog, blog_author=self.admin, commented_by=self.reader, comment="hi"
        )
        Notification.objects.create(
            type=Notification.NotificationType.COMMENT,
            notification_for=self.admin,
            user=self.reader,
            blog=blog,
            comment=comment,
        )
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(
            reverse("delete-blog", kwargs={"blog_id": blog.blog_id})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "done")
        self.assertFalse(Blog.objects.exists())
        self.assertFalse(Comment.objects.exists())
        self.assertFalse(Notification.objects.exists())
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.total_posts, 0)

    def test_admin_deletes_any_blog(self):
        blog = self.create_blog()
        self.client.force_authenticate(user=self.other_admin)

        response = self.client.delete(
            reverse("delete-blog", kwargs={"blog_id": blog.blog_id})
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_reader_cannot_delete(self):
        blog = self.create_blog()
        self.client.force_authenticate(user=self.reader)

        response = self.client.delete(
            reverse("delete-blog", kwargs={"blog_id": blog.blog_id})
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Blog.objects.filter(pk=blog.pk).exists())


class LikeBlogViewTest(BlogTestMixin, APITestCase):
    def setUp(self):
        super().setUp()
        self.blog = self.create_blog()
        self.client.force_authenticate(user=self.reader)

    def like(self, liked):
        return self.client.post(
            reverse("like-blog"),
            {"_id": self.blog.pk, "islikedByUser": liked},
            format="json",
        )

    def test_like_and_unlike(self):
        response = self.like(False)

        self.assertEqual(response.data, {"liked_by_user": True})
        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_likes, 1)
        notification = Notification.objects.get(type="like")
        self.assertEqual(notification.notification_for, self.admin)

        is_liked = self.client.post(
            reverse("isliked-by-user"), {"_id": self.blog.pk}, format="json"
        )
        self.assertTrue(is_liked.data["result"])

        response = self.like(True)
        self.assertEqual(response.data, {"liked_by_user": False})
        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_likes, 0)
        self.assertFalse(Notification.objects.exists())

    def test_double_like_counts_once(self):
        self.like(False)
        self.like(False)

        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_likes, 1)

    def test_unlike_without_like(self):
        response = self.like(True)

        self.assertEqual(response.data, {"liked_by_user": False})
        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_likes, 0)

    def test_like_draft_not_found(self):
        draft = self.create_blog(draft=True)
        response = self.client.post(
            reverse("like-blog"), {"_id": draft.pk, "islikedByUser": False}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_like_requires_auth(self):
        self.client.force_authenticate(user=None)
        self.assertEqual(self.like(False).status_code, status.HTTP_401_UNAUTHORIZED)


class CommentViewTest(BlogTestMixin, APITestCase):
    """Test cases for threaded comments."""

    def setUp(self):
        super().setUp()
        self.blog = self.create_blog()

    def add_comment(self, user, text, replying_to=None, notification_id=None):
        self.client.force_authenticate(user=user)
        data = {"_id": self.blog.pk, "comment": text}
        if replying_to:
            data["replying_to"] = replying_to
        if notification_id:
            data["notification_id"] = notification_id
        return self.client.post(reverse("add-comment"), data, format="json")

    def test_add_comment_notifies_author(self):
        response = self.add_comment(self.reader, "Great post")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["comment"], "Great post")
        self.assertEqual(response.data["children"], [])

        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_comments, 1)
        self.assertEqual(self.blog.total_parent_comments, 1)

        notification = Notification.objects.get(type="comment")
        self.assertEqual(notification.notification_for, self.admin)
        self.assertEqual(notification.comment_id, response.data["_id"])

    def test_reply_notifies_parent_commenter(self):
        parent = self.add_comment(self.reader, "Question?").data["_id"]
        comment_notification = Notification.objects.get(type="comment")

        response = self.add_comment(
            self.admin,
            "Answer",
            replying_to=parent,
            notification_id=comment_notification.pk,
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        reply = Comment.objects.get(pk=response.data["_id"])
        self.assertTrue(reply.is_reply)
        self.assertEqual(reply.parent_id, parent)

        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_comments, 2)
        self.assertEqual(self.blog.total_parent_comments, 1)

        notification = Notification.objects.get(type="reply")
        self.assertEqual(notification.notification_for, self.reader)
        self.assertEqual(notification.replied_on_comment_id, parent)

        comment_notification.refresh_from_db()
        self.assertEqual(comment_notification.reply_id, reply.pk)

    def test_notification_id_of_another_user_rejected(self):
        """Test a reply can't be attached to someone else's notification."""
        parent = self.add_comment(self.reader, "Question?").data["_id"]
        comment_notification = Notification.objects.get(type="comment")

        response = self.add_comment(
            self.other_admin,
            "spam",
            replying_to=parent,
            notification_id=comment_notification.pk,
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "notification_not_found")
        self.assertFalse(Comment.objects.filter(comment="spam").exists())
        comment_notification.refresh_from_db()
        self.assertIsNone(comment_notification.reply_id)

    def test_empty_comment_rejected(self):
        response = self.add_comment(self.reader, "")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Write something to leave a comment")

    def test_comment_on_draft_not_found(self):
        self.blog.draft = True
        self.blog.save()

        response = self.add_comment(self.reader, "Hello")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_reply_to_unknown_comment(self):
        response = self.add_comment(self.reader, "Hello", replying_to=9999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_get_comments_and_replies(self):
        first = self.add_comment(self.reader, "First").data["_id"]
        self.add_comment(self.reader, "Second")
        self.add_comment(self.admin, "Reply one", replying_to=first)
        self.add_comment(self.reader, "Reply two", replying_to=first)
        self.client.force_authenticate(user=None)

        comments = self.client.post(
            reverse("get-blog-comments"), {"blog_id": self.blog.pk}, format="json"
        )
        replies = self.client.post(
            reverse("get-replies"), {"_id": first}, format="json"
        )
        skipped = self.client.post(
            reverse("get-blog-comments"),
            {"blog_id": self.blog.pk, "skip": 1},
            format="json",
        )

        self.assertEqual([c["comment"] for c in comments.data], ["Second", "First"])
        self.assertEqual(len(comments.data[1]["children"]), 2)
        self.assertEqual(
            comments.data[0]["commented_by"]["personal_info"]["username"], "reader"
        )
        self.assertEqual(
            [r["comment"] for r in replies.data["replies"]], ["Reply one", "Reply two"]
        )
        self.assertEqual([c["comment"] for c in skipped.data], ["First"])

    def test_delete_comment_thread(self):
        """Test deleting a comment removes its replies and fixes the counters."""
        root = self.add_comment(self.reader, "Root").data["_id"]
        child = self.add_comment(self.admin, "Child", replying_to=root).data["_id"]
        self.add_comment(self.reader, "Grandchild", replying_to=child)
        self.add_comment(self.reader, "Unrelated")

        self.client.force_authenticate(user=self.reader)
        response = self.client.delete(
            reverse("delete-comment"), {"_id": root}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["deleted"], 3)
        self.assertEqual(Comment.objects.count(), 1)
        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_comments, 1)
        self.assertEqual(self.blog.total_parent_comments, 1)
        self.assertFalse(Notification.objects.filter(type="reply").exists())

    def test_delete_reply_keeps_parent_count(self):
        root = self.add_comment(self.reader, "Root").data["_id"]
        child = self.add_comment(self.admin, "Child", replying_to=root).data["_id"]

        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f"{reverse('delete-comment')}?_id={child}")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_comments, 1)
        self.assertEqual(self.blog.total_parent_comments, 1)

    def test_delete_comment_permissions(self):
        comment = self.add_comment(self.reader, "Mine").data["_id"]
        stranger = User.objects.create_user(
            username="stranger",
            email="stranger@example.com",
            password="Testpass123",
            fullname="Some Stranger",
        )

        self.client.force_authenticate(user=stranger)
        denied = self.client.delete(
            reverse("delete-comment"), {"_id": comment}, format="json"
        )
        self.client.force_authenticate(user=self.admin)
        allowed = self.client.delete(
            reverse("delete-comment"), {"_id": comment}, format="json"
        )

        self.assertEqual(denied.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(allowed.status_code, status.HTTP_200_OK)


class BlogTasksTest(BlogTestMixin, TestCase):
    def test_record_blog_read(self):
        blog = self.create_blog()

        record_blog_read(blog.pk)

        blog.refresh_from_db()
        self.admin.refresh_from_db()
        self.assertEqual(blog.total_reads, 1)
        self.assertEqual(self.admin.total_reads, 1)

    def test_record_read_missing_blog(self):
        record_blog_read(9999)
        self.admin.refresh_from_db()
        self.assertEqual(self.admin.total_reads, 0)

    @mock.patch("apps.blog.tasks.send_user_notification.delay")
    def test_comment_notification_payload(self, mock_delay):
        blog = self.create_blog()
        comment = Comment.objects.create(
            blog=blog, blog_author=self.admin, commented_by=self.reader, comment="hi"
        )

        send_comment_notification(comment.pk)

        mock_delay.assert_called_once_with(
            {
                "type": Notification.NotificationType.COMMENT,
                "notification_for_id": self.admin.pk,
                "user_id": self.reader.pk,
                "blog_id": blog.pk,
                "comment_id": comment.pk,
            }
        )

    @mock.patch("apps.blog.tasks.send_user_notification.delay")
    def test_comment_notification_missing_comment(self, mock_delay):
        send_comment_notification(9999)
        mock_delay.assert_not_called()

    @mock.patch("apps.blog.tasks.send_user_notification.delay")
    def test_reply_link_only_on_commenters_notification(self, mock_delay):
        blog = self.create_blog()
        notification = Notification.objects.create(
            type=Notification.NotificationType.LIKE,
            notification_for=self.admin,
            user=self.other_admin,
            blog=blog,
        )
        comment = Comment.objects.create(
            blog=blog, blog_author=self.admin, commented_by=self.reader, comment="hi"
        )

        send_comment_notification(comment.pk, notification.pk)

        notification.refresh_from_db()
        self.assertIsNone(notification.reply_id)

    def test_seed_tutorial(self):
        pk = seed_tutorial(self.reader.pk)

        notification = Notification.objects.get(pk=pk)
        blog = notification.blog
        self.assertEqual(notification.type, Notification.NotificationType.TUTORIAL)
        self.assertEqual(notification.notification_for, self.reader)
        self.assertIsNone(notification.user)
        self.assertTrue(notification.tutorial_link.endswith(f"/editor/{blog.blog_id}"))
        notification.full_clean()

        self.assertEqual(blog.title, TUTORIAL_TITLE)
        self.assertEqual(blog.author, self.reader)
        self.assertTrue(blog.draft)
        self.assertIn("tutorial", blog.tag_names)
        self.assertGreater(blog.reading_time, 0)
        self.reader.refresh_from_db()
        self.assertEqual(self.reader.total_posts, 0)

    def test_seed_tutorial_runs_once(self):
        seed_tutorial(self.reader.pk)
        self.assertIsNone(seed_tutorial(self.reader.pk))

        self.assertEqual(Blog.objects.filter(author=self.reader).count(), 1)

    def test_seed_tutorial_missing_user(self):
        self.assertIsNone(seed_tutorial(9999))
        self.assertFalse(Blog.objects.exists())
