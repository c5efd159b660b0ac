from django.urls import path

from . import views

urlpatterns = [
    # Posts
    path("create-blog", views.CreateBlogView.as_view(), name="create-blog"),
    path("latest-blogs", views.LatestBlogsView.as_view(), name="latest-blogs"),
    path(
        "all-latest-blogs-count",
        views.AllLatestBlogsCountView.as_view(),
        name="all-latest-blogs-count",
    ),
    path("trending-blogs", views.TrendingBlogsView.as_view(), name="trending-blogs"),
    path("search-blogs", views.SearchBlogsView.as_view(), name="search-blogs"),
    path(
        "search-blogs-count",
        views.SearchBlogsCountView.as_view(),
        name="search-blogs-count",
    ),
    path("search", views.SearchView.as_view(), name="search"),
    path("get-blog", views.GetBlogView.as_view(), name="get-blog"),
    path(
        "get-blog/<str:blog_id>",
        views.GetBlogView.as_view(),
        name="get-blog-detail",
    ),
    path("user-blogs", views.UserBlogsView.as_view(), name="user-blogs"),
    path("blog/<str:blog_id>", views.DeleteBlogView.as_view(), name="delete-blog"),
    path("like-blog", views.LikeBlogView.as_view(), name="like-blog"),
    path("isliked-by-user", views.IsLikedByUserView.as_view(), name="isliked-by-user"),
    # Comments
    path("add-comment", views.AddCommentView.as_view(), name="add-comment"),
    path(
        "get-blog-comments",
        views.BlogCommentsView.as_view(),
        name="get-blog-comments",
    ),
    path("get-replies", views.RepliesView.as_view(), name="get-replies"),
    path("delete-comment", views.DeleteCommentView.as_view(), name="delete-comment"),
]
