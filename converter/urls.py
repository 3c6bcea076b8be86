from django.contrib.sitemaps.views import sitemap
from django.urls import path

from . import views
from .sitemap import RootSitemap

app_name = "converter"

sitemaps = {
    "root": RootSitemap,
}

urlpatterns = [
    path("", views.home, name="home"),
    path("robots.txt", views.robots_txt, name="robots_txt"),
    path("sitemap.xml", sitemap, {"sitemaps": sitemaps}, name="sitemap"),
    # Catch-all for the timestamp itself; keep it last.
    path("<str:timestamp>/", views.timestamp_page, name="timestamp"),
]
