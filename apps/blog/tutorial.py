"""
Starter draft every new account receives, walking through the editor.

The blocks follow the Editor.js layout stored in ``Blog.content``.
"""

import copy

from django.conf import settings

TUTORIAL_TITLE = "Welcome to Your Blog Editor - A Complete Guide"
TUTORIAL_DESCRIPTION = (
    "Learn how to use the blog editor to create great content, from basic "
    "formatting to publishing and working with drafts."
)
TUTORIAL_TAGS = ["tutorial", "editor", "guide", "help"]


def _header(text, level=2):
    return {"type": "header", "data": {"text": text, "level": level}}


def _paragraph(text):
    return {"type": "paragraph", "data": {"text": text}}


def _list(items, style="unordered"):
    return {"type": "list", "data": {"style": style, "items": items}}


def _quote(text, caption):
    return {
        "type": "quote",
        "data": {"text": text, "caption": caption, "alignment": "left"},
    }


TUTORIAL_BLOCKS = [
    _header("Welcome to Your Blog Editor!", level=1),
    _paragraph(
        "Congratulations on joining! This tutorial draft shows you what the "
        "editor can do. Edit it to practice, or delete it when you're ready to "
        "start your first blog."
    ),
    _header("Basic Text Formatting"),
    _paragraph(
        "You can make text <b>bold</b>, <i>italic</i>, or add "
        "<code>inline code</code>. Select text and use the toolbar that appears."
    ),
    _header("Headers and Structure"),
    _paragraph(
        "Use different header levels to structure your content. It makes your "
        "blog easier to read and helps with SEO."
    ),
    _header("Lists and Organization", level=3),
    _list(
        [
            "Create bulleted lists like this",
            "Organize your thoughts clearly",
            "Make content scannable for readers",
        ]
    ),
    _list(
        [
            "Or use numbered lists",
            "For step-by-step instructions",
            "Perfect for tutorials and guides",
        ],
        style="ordered",
    ),
    _header("Quotes and Emphasis", level=3),
    _quote(
        "Use quotes to highlight important information or cite other sources.",
        "Pro Tip",
    ),
    _header("Code Blocks", level=3),
    _paragraph("Technical posts can include code blocks:"),
    {
        "type": "code",
        "data": {
            "code": (
                "def welcome(name):\n"
                "    print(f\"Welcome to the blog editor, {name}!\")\n"
                "    return \"Happy blogging!\""
            )
        },
    },
    _header("Adding Images"),
    _paragraph(
        "Images make posts more engaging. Upload them directly or search "
        "Unsplash, and don't forget a banner image for your post!"
    ),
    _header("Publishing Your Blog"),
    _paragraph("When you're ready to publish:"),
    _list(
        [
            "Add a compelling title (required)",
            "Upload a banner image (required)",
            "Write a description of up to 200 characters (required)",
            "Add up to 10 tags to help readers find your content",
            "Save as draft first to review your work",
            "Publish when you're ready to share it with the world",
        ],
        style="ordered",
    ),
    _header("Working with Drafts"),
    _paragraph(
        "Drafts only need a title, so you can come back to them later. All your "
        "drafts are listed on your dashboard."
    ),
    _header("Ready to Start Blogging!"),
    _paragraph(
        "This tutorial draft will remain in your drafts folder. Reference it "
        "anytime, edit it to practice, or delete it when you're comfortable "
        "with the editor. Happy blogging!"
    ),
    _quote(
        "Great content comes from practice. Your first post doesn't have to be "
        "perfect, just start writing!",
        "Final Tip",
    ),
]


def tutorial_content():
    """Fresh copy of the tutorial document, ready to store on a blog."""
    return [{"blocks": copy.deepcopy(TUTORIAL_BLOCKS)}]


def tutorial_link(blog) -> str:
    return f"{settings.FRONTEND_URL}/editor/{blog.blog_id}"
