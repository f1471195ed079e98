"""Neuro app configuration."""
from django.apps import AppConfig


class NeuroConfig(AppConfig):
    """Configuration for the neuroevolution app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.neuro'
    verbose_name = 'Neuroevolution'
