from rest_framework.exceptions import NotFound, PermissionDenied


class BlogNotFound(NotFound):
    """Exception raised when a blog is not found."""

    default_detail = "Blog not found."
    default_code = "blog_not_found"


class CommentNotFound(NotFound):
    """Exception raised when a comment is not found."""

    default_detail = "Comment not found."
    default_code = "comment_not_found"


class UnauthorizedBlogAccess(PermissionDenied):
    """Exception raised when a draft is requested by someone who can't see it."""

    default_detail = "You can not access draft blogs."
    default_code = "unauthorized_blog_access"


class UnauthorizedBlogEdit(PermissionDenied):
    """Exception raised when user tries to edit a blog they don't own."""

    default_detail = "You don't have permission to edit this blog."
    default_code = "unauthorized_blog_edit"


class UnauthorizedBlogDelete(PermissionDenied):
    """Exception raised when user tries to delete a blog they don't own."""

    default_detail = "You don't have permission to delete this blog."
    default_code = "unauthorized_blog_delete"


class UnauthorizedCommentDelete(PermissionDenied):
    """Exception raised when user tries to delete a comment they can't moderate."""

    default_detail = "You can not delete this comment."
    default_code = "unauthorized_comment_delete"
