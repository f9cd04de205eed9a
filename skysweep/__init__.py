"""
Skysweep - delete Bluesky posts, reposts and likes older than a retention window.
"""

from .categories import select_categories
from .cleanup import CleanupRunner
from .client import RecordStore, XrpcClient
from .deletion import should_delete
from .exceptions import (
    AuthenticationError,
    ConfigError,
    DeleteError,
    ListError,
    SkysweepError,
)
from .models import Category, Page, Record, Session, Settings
from .settings import load_settings

__version__ = "1.0.0"

__all__ = [
    "AuthenticationError",
    "Category",
    "CleanupRunner",
    "ConfigError",
    "DeleteError",
    "ListError",
    "Page",
    "Record",
    "RecordStore",
    "Session",
    "Settings",
    "SkysweepError",
    "XrpcClient",
    "load_settings",
    "select_categories",
    "should_delete",
]
