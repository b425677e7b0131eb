"""Configuration: environment-driven settings."""

from __future__ import annotations

from .settings import DEFAULT_API_BASE_URL, OffxSettings, Transport, clear_settings_cache, get_settings

__all__ = ["OffxSettings", "Transport", "DEFAULT_API_BASE_URL", "get_settings", "clear_settings_cache"]
