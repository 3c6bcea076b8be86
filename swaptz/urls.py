from django.urls import path, include

handler404 = "converter.views.view_404"

urlpatterns = [
    # "" is the landing page, "/<timestamp>/" the converted view.
    path("", include("converter.urls")),
]
