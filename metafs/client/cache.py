# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Directory list cache.

This module indexes bucket and object metadata by resource id and answers the two
query shapes a directory view needs: exact lookups and prefix listings with
delimiter grouping, the way object store list APIs group names into common
prefixes.

Classes:
    CacheEntry: One resource id plus its (optional) metadata.
    DirectoryListCache: Thread-safe index of cache entries grouped by bucket.
"""

import time
from bisect import bisect_left, insort
from threading import Lock, RLock
from typing import Callable, Dict, List, Optional

from .config import CacheConfig
from .types import ItemInfo, ResourceId
from .utils import logger, now_millis

class CacheEntry:
    """
    A cached resource id with the metadata known for it.

    The entry is created empty by ``DirectoryListCache.put_resource_id``; callers
    attach metadata afterwards with ``set_item_info`` or ``set_item_info_if_absent``.

    Attributes:
        resource_id (ResourceId): The resource this entry describes
        creation_time (int): Milliseconds since epoch when the entry was created
        item_info_update_time (int): Milliseconds since epoch of the last metadata update,
            0 while the entry has no metadata
    """

    def __init__(self, resource_id: ResourceId, clock: Callable[[], float] = time.time):
        self._resource_id = resource_id
        self._clock = clock
        self._lock = Lock()
        self._item_info = None
        self._creation_time = now_millis(clock)
        self._item_info_update_time = 0

    @property
    def resource_id(self) -> ResourceId:
        return self._resource_id

    @property
    def item_info(self) -> Optional[ItemInfo]:
        return self._item_info

    @property
    def creation_time(self) -> int:
        return self._creation_time

    @property
    def item_info_update_time(self) -> int:
        return self._item_info_update_time

    def _check_resource_id(self, item_info: ItemInfo) -> None:
        if item_info.resource_id != self._resource_id:
            raise ValueError(
                f"ItemInfo for '{item_info.resource_id}' cannot be attached to entry '{self._resource_id}'")

    def set_item_info(self, item_info: ItemInfo) -> Optional[ItemInfo]:
        """
        Attach metadata to this entry, replacing whatever was there.

        Args:
            item_info (ItemInfo): Metadata for this entry's resource id

        Returns:
            Optional[ItemInfo]: The metadata previously attached, if any

        Raises:
            ValueError: If the metadata belongs to a different resource id
        """
        self._check_resource_id(item_info)
        with self._lock:
            previous = self._item_info
            self._item_info = item_info
            self._item_info_update_time = now_millis(self._clock)
            return previous

    def set_item_info_if_absent(self, item_info: ItemInfo) -> ItemInfo:
        """
        Attach metadata only if the entry has none yet.

        Returns:
            ItemInfo: The metadata held by the entry after the call
        """
        self._check_resource_id(item_info)
        with self._lock:
            if self._item_info is None:
                self._item_info = item_info
                self._item_info_update_time = now_millis(self._clock)
            return self._item_info

    def clear_item_info(self) -> None:
        with self._lock:
            self._item_info = None
            self._item_info_update_time = 0

    def clear_item_info_if_stale(self, max_age_millis: int, now: int) -> bool:
        """Drop metadata older than ``max_age_millis``; returns True if it was dropped."""
        with self._lock:
            if self._item_info is None or now - self._item_info_update_time <= max_age_millis:
                return False
            self._item_info = None
            self._item_info_update_time = 0
            return True

    def __repr__(self):
        return f"CacheEntry({self._resource_id!s}, item_info={self._item_info!r})"

class _CachedBucket:
    """Entries of one bucket. ``entry`` is only set when the bucket itself was put."""

    def __init__(self, name: str):
        self.name = name
        self.entry: Optional[CacheEntry] = None
        self.objects: Dict[str, CacheEntry] = {}
        # Object names in sorted order, for prefix range scans
        self.names: List[str] = []

    def __len__(self):
        return len(self.objects) + (1 if self.entry is not None else 0)

    def add_object(self, entry: CacheEntry) -> None:
        name = entry.resource_id.object_name
        if name not in self.objects:
            insort(self.names, name)
        self.objects[name] = entry

    def remove_object(self, name: str) -> None:
        del self.objects[name]
        del self.names[bisect_left(self.names, name)]

class DirectoryListCache:
    """
    In-memory index of cache entries keyed by (bucket, object name).

    All structural changes happen under ``lock``, so ``put_resource_id`` is an atomic
    get-or-create: concurrent callers inserting the same id all receive the same entry.
    Absence is reported as ``None`` or an empty list, never as an exception.

    Attributes:
        lock (threading.RLock): Guards the bucket and object indexes
    """

    def __init__(self, config: Optional[CacheConfig] = None, clock: Callable[[], float] = time.time):
        """
        Initialize an empty cache.

        Args:
            config (CacheConfig, optional): Age thresholds. Defaults to never expiring.
            clock (callable, optional): Source of the current time in seconds. Defaults to time.time.
        """
        self._config = config if config is not None else CacheConfig()
        self._clock = clock
        self._buckets: Dict[str, _CachedBucket] = {}
        self.lock = RLock()

    @property
    def mutable_config(self) -> CacheConfig:
        """The live configuration; changes apply to subsequent lookups."""
        return self._config

    def __len__(self):
        with self.lock:
            return sum(len(bucket) for bucket in self._buckets.values())

    def _is_expired(self, entry: CacheEntry, now: int) -> bool:
        return now - entry.creation_time > self._config.max_entry_age_millis

    def _clear_if_stale(self, entry: CacheEntry, now: int) -> None:
        if entry.clear_item_info_if_stale(self._config.max_info_age_millis, now):
            logger.debug(f"Cleared stale info for {entry.resource_id}")

    def put_resource_id(self, resource_id: ResourceId) -> CacheEntry:
        """
        Return the entry for ``resource_id``, creating an empty one if absent.

        Inserting an object id also makes its bucket known to ``get_object_list``.

        Args:
            resource_id (ResourceId): Bucket or object id to insert

        Returns:
            CacheEntry: The existing or newly created entry

        Raises:
            ValueError: If ``resource_id`` is the root id
        """
        if resource_id.is_root:
            raise ValueError("Cannot cache the root resource id")

        with self.lock:
            now = now_millis(self._clock)
            bucket = self._buckets.get(resource_id.bucket_name)
            if bucket is None:
                bucket = _CachedBucket(resource_id.bucket_name)
                self._buckets[bucket.name] = bucket

            if resource_id.is_bucket:
                entry = bucket.entry
                if entry is None or self._is_expired(entry, now):
                    entry = CacheEntry(resource_id, self._clock)
                    bucket.entry = entry
                    logger.debug(f"Added cache entry for bucket {resource_id}")
                return entry

            entry = bucket.objects.get(resource_id.object_name)
            if entry is None or self._is_expired(entry, now):
                entry = CacheEntry(resource_id, self._clock)
                bucket.add_object(entry)
                logger.debug(f"Added cache entry for object {resource_id}")
            return entry

    def get_cache_entry(self, resource_id: ResourceId) -> Optional[CacheEntry]:
        """
        Exact lookup.

        Returns:
            Optional[CacheEntry]: The entry, or None if it was never inserted or has expired
        """
        if resource_id.is_root:
            return None

        with self.lock:
            bucket = self._buckets.get(resource_id.bucket_name)
            if bucket is None:
                return None

            now = now_millis(self._clock)
            if resource_id.is_bucket:
                entry = bucket.entry
                if entry is not None and self._is_expired(entry, now):
                    logger.debug(f"Expired cache entry for bucket {resource_id}")
                    bucket.entry = None
                    entry = None
            else:
                entry = bucket.objects.get(resource_id.object_name)
                if entry is not None and self._is_expired(entry, now):
                    logger.debug(f"Expired cache entry for object {resource_id}")
                    bucket.remove_object(resource_id.object_name)
                    entry = None

            if entry is not None:
                self._clear_if_stale(entry, now)
            return entry

    def get_object_list(
        self,
        bucket_name: str,
        prefix: Optional[str],
        delimiter: Optional[str],
        prefixes: Optional[List[str]] = None,
    ) -> Optional[List[CacheEntry]]:
        """
        List entries of a bucket whose object names start with ``prefix``.

        With a non-empty ``delimiter``, a name whose remainder after ``prefix`` contains the
        delimiter is not returned. Instead the name cut just after that first delimiter is
        appended to ``prefixes`` as a common prefix, once, in discovery order.

        Args:
            bucket_name (str): Bucket to list
            prefix (str, optional): Object name prefix; None lists the whole bucket
            delimiter (str, optional): Grouping delimiter; None or "" disables grouping
            prefixes (list, optional): Accumulator for common prefixes

        Returns:
            Optional[List[CacheEntry]]: Matching entries in name order, or None if the
            bucket is unknown
        """
        if prefix is None:
            prefix = ""

        with self.lock:
            bucket = self._buckets.get(bucket_name)
            if bucket is None:
                return None

            now = now_millis(self._clock)
            matched = []
            discovered = {}
            start = bisect_left(bucket.names, prefix)
            in_range = []
            for name in bucket.names[start:]:
                if not name.startswith(prefix):
                    break
                in_range.append(name)

            for name in in_range:
                entry = bucket.objects[name]
                if self._is_expired(entry, now):
                    logger.debug(f"Expired cache entry for object {entry.resource_id}")
                    bucket.remove_object(name)
                    continue
                if delimiter:
                    index = name.find(delimiter, len(prefix))
                    if index >= 0:
                        discovered[name[:index + len(delimiter)]] = None
                        continue
                self._clear_if_stale(entry, now)
                matched.append(entry)

        if prefixes is not None:
            known = set(prefixes)
            prefixes.extend(p for p in discovered if p not in known)
        return matched
