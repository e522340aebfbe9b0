"""App configuration for the core Django app."""

from __future__ import annotations

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the `core` app (parsers and management commands)."""

    name = "core"
    verbose_name = "Battle Report parsing"
