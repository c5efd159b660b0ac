from django.urls import path

from . import views

urlpatterns = [
    path(
        "api/cloudinary/delete",
        views.CloudinaryDeleteView.as_view(),
        name="cloudinary-delete",
    ),
    path(
        "unsplash/search/photos",
        views.UnsplashSearchView.as_view(),
        name="unsplash-search",
    ),
    path(
        "unsplash/track-download",
        views.UnsplashTrackDownloadView.as_view(),
        name="unsplash-track-download",
    ),
]
