from django.urls import reverse
from django.contrib.sitemaps import Sitemap


class RootSitemap(Sitemap):
    priority = 1.0
    changefreq = "monthly"

    # MUST be a method
    def items(self):
        return ["converter:home"]

    def location(self, item):
        return reverse(item)
