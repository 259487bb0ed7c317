"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, IndexSettings, LoggingSettings, TimeSettings, get_settings

__all__ = ["AppSettings", "IndexSettings", "LoggingSettings", "TimeSettings", "get_settings"]
