# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
MetaFS client.

Read-only, directory-style access to a snapshot of object store metadata.
"""
from .cache import CacheEntry, DirectoryListCache
from .config import MAX_AGE_MILLIS, CacheConfig
from .exceptions import (
    CacheInvariantError,
    ConfigurationError,
    MetaFSError,
    SnapshotError,
    UnsupportedOperationError,
)
from .read_only import Access, MetadataReadOnlyStorage, Operation
from .snapshot import dump_item_infos, load_item_infos
from .types import ItemInfo, ResourceId

__all__ = [
    "Access",
    "CacheConfig",
    "CacheEntry",
    "CacheInvariantError",
    "ConfigurationError",
    "DirectoryListCache",
    "ItemInfo",
    "MAX_AGE_MILLIS",
    "MetaFSError",
    "MetadataReadOnlyStorage",
    "Operation",
    "ResourceId",
    "SnapshotError",
    "UnsupportedOperationError",
    "dump_item_infos",
    "load_item_infos",
]
