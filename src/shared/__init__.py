# Shared module for configuration and common types
from .config import Settings, get_settings
from .models import CatalogFile, Entry, Query, WildcardMode, is_absent

__all__ = [
    "Settings",
    "get_settings",
    "CatalogFile",
    "Entry",
    "Query",
    "WildcardMode",
    "is_absent",
]
