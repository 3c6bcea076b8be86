from django.apps import AppConfig

from .timezone_utils import TimezoneCatalog


class ConverterConfig(AppConfig):
    name = "converter"
    verbose_name = "Unix Timestamp Converter"

    def ready(self):
        # Owned here so views share one cache without module-level state.
        self.timezone_catalog = TimezoneCatalog()
