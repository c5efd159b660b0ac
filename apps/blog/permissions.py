
def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and user.is_admin_role)


def can_view_blog(user, blog) -> bool:
    """Published blogs are public; drafts only for their author and admins."""
    if not blog.draft:
        return True
    return bool(user and user.is_authenticated) and (
        blog.author_id == user.pk or is_admin(user)
    )


def can_delete_blog(user, blog) -> bool:
    return blog.author_id == user.pk or is_admin(user)


def can_delete_comment(user, comment) -> bool:
    """The commenter, the blog author and admins may delete a comment."""
    return (
        comment.commented_by_id == user.pk
        or comment.blog_author_id == user.pk
        or is_admin(user)
    )
