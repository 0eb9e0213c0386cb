# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Cache configuration.

Ages are expressed in milliseconds. ``MAX_AGE_MILLIS`` means entries never expire.

Environment variables (all optional):
    METAFS_MAX_ENTRY_AGE_MS: Maximum age of a cache entry.
    METAFS_MAX_INFO_AGE_MS:  Maximum age of the metadata attached to an entry.
"""
import os
import sys
from dataclasses import dataclass

from .exceptions import ConfigurationError

MAX_AGE_MILLIS = sys.maxsize

def _age_from_env(name: str) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return MAX_AGE_MILLIS
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer number of milliseconds, got '{raw}'")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value

@dataclass
class CacheConfig:
    """Mutable age thresholds for a DirectoryListCache."""
    max_entry_age_millis: int = MAX_AGE_MILLIS
    max_info_age_millis: int = MAX_AGE_MILLIS

    @classmethod
    def from_env(cls) -> "CacheConfig":
        """Build config from environment variables."""
        return cls(
            max_entry_age_millis=_age_from_env("METAFS_MAX_ENTRY_AGE_MS"),
            max_info_age_millis=_age_from_env("METAFS_MAX_INFO_AGE_MS"),
        )

    def never_expire(self) -> None:
        self.max_entry_age_millis = MAX_AGE_MILLIS
        self.max_info_age_millis = MAX_AGE_MILLIS
