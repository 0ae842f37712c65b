"""
Module: config
Description: Package initialization for client configuration.
"""

from .settings import DEFAULT_API_VERSION, Settings, get_settings

__all__ = ["DEFAULT_API_VERSION", "Settings", "get_settings"]
