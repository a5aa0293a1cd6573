"""
Django app configuration.
"""

from django.apps import AppConfig


class DocStoreConfig(AppConfig):
    name = "docstore"
    label = "docstore"
    verbose_name = "Document Store"

    def ready(self):
        """Document models are built per table at runtime, nothing to import here."""
        pass
