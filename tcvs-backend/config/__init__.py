"""
Configuration Module

Exposes the environment-backed settings singleton. Core services never read
it directly; they receive a TcvsConfig built from it.
"""

from .settings import settings, get_settings, Settings

__all__ = ["settings", "get_settings", "Settings"]
