"""
sy-common: Shared library for SecureYou.

Provides the alert data models, configuration management and structured
logging setup used by the SecureYou alerts service.
"""

from sy_common.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
