# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Read-only storage view backed by a metadata cache.

MetadataReadOnlyStorage holds a collection of bucket and object metadata entries and
serves list_object_names, list_object_info, get_item_info and get_item_infos exclusively
from its in-memory DirectoryListCache. Every other storage operation fails with
UnsupportedOperationError.

Prefixes that only exist because deeper objects live under them are reported as
implicit directories. The first listing that discovers one stores a marker for it in
the cache, so later point lookups on the same path find it.

Classes:
    Access: Kind of access an operation needs.
    Operation: Every operation of the storage contract, tagged with its access.
    MetadataReadOnlyStorage: The read-only view.
"""

import time
from enum import Enum
from typing import Iterable, List, Optional

from .cache import CacheEntry, DirectoryListCache
from .exceptions import CacheInvariantError, UnsupportedOperationError
from .snapshot import load_item_infos
from .types import ItemInfo, ResourceId
from .utils import logger, time_function

class Access(Enum):
    READ = "read"
    WRITE = "write"
    BUCKET_SCAN = "bucket_scan"
    CONTENT = "content"

class Operation(Enum):
    """Storage operations as (method name, access) pairs."""
    LIST_OBJECT_NAMES = ("list_object_names", Access.READ)
    LIST_OBJECT_INFO = ("list_object_info", Access.READ)
    GET_ITEM_INFO = ("get_item_info", Access.READ)
    GET_ITEM_INFOS = ("get_item_infos", Access.READ)
    CREATE = ("create", Access.WRITE)
    CREATE_BUCKET = ("create_bucket", Access.WRITE)
    CREATE_EMPTY_OBJECT = ("create_empty_object", Access.WRITE)
    CREATE_EMPTY_OBJECTS = ("create_empty_objects", Access.WRITE)
    DELETE_OBJECTS = ("delete_objects", Access.WRITE)
    DELETE_BUCKETS = ("delete_buckets", Access.WRITE)
    COPY = ("copy", Access.WRITE)
    UPDATE_ITEMS = ("update_items", Access.WRITE)
    LIST_BUCKET_NAMES = ("list_bucket_names", Access.BUCKET_SCAN)
    LIST_BUCKET_INFO = ("list_bucket_info", Access.BUCKET_SCAN)
    WAIT_FOR_BUCKET_EMPTY = ("wait_for_bucket_empty", Access.BUCKET_SCAN)
    OPEN = ("open", Access.CONTENT)

    def __init__(self, method, access):
        self.method = method
        self.access = access

class MetadataReadOnlyStorage:
    """
    Storage view that answers metadata reads from a cache populated at construction.

    Attributes:
        resource_cache (DirectoryListCache): Cache owned by this view
        capabilities (frozenset): Access kinds this view serves
    """

    capabilities = frozenset({Access.READ})

    def __init__(self, item_infos: Iterable[ItemInfo], cache: Optional[DirectoryListCache] = None):
        """
        Build the view and load every item info into its cache.

        Args:
            item_infos (Iterable[ItemInfo]): Metadata with which to serve all list/get requests
            cache (DirectoryListCache, optional): Cache to take ownership of. A new one is
                created if not given.
        """
        start_time = time.time()
        self.resource_cache = cache if cache is not None else DirectoryListCache()

        # Entries never expire for this use case.
        self.resource_cache.mutable_config.never_expire()

        item_infos = list(item_infos)
        logger.debug(f"Populating cache with {len(item_infos)} entries.")
        for item_info in item_infos:
            self.resource_cache.put_resource_id(item_info.resource_id).set_item_info(item_info)
        time_function("MetadataReadOnlyStorage.__init__", start_time)

    @classmethod
    def from_snapshot(cls, path) -> "MetadataReadOnlyStorage":
        """Build a view from a JSON metadata snapshot (see metafs.client.snapshot)."""
        return cls(load_item_infos(path))

    def execute(self, operation: Operation, *args, **kwargs):
        """
        Run ``operation`` if this view supports its access kind.

        Raises:
            UnsupportedOperationError: If the operation needs access this view lacks
        """
        if operation.access not in self.capabilities:
            logger.debug(f"Rejecting {operation.method}: {operation.access.value} access is not supported")
            raise UnsupportedOperationError(
                f"{operation.method} is not supported by a read-only metadata view",
                operation=operation.name,
            )
        return getattr(self, f"_{operation.method}")(*args, **kwargs)

    @staticmethod
    def _require_info(entry: CacheEntry) -> ItemInfo:
        info = entry.item_info
        if info is None:
            raise CacheInvariantError(f"Cache entry missing info for name '{entry.resource_id}'!")
        return info

    # Metadata reads

    def list_object_names(self, bucket_name: str, object_name_prefix: Optional[str] = None,
                          delimiter: Optional[str] = None) -> List[str]:
        return self.execute(Operation.LIST_OBJECT_NAMES, bucket_name, object_name_prefix, delimiter)

    def list_object_info(self, bucket_name: str, object_name_prefix: Optional[str] = None,
                         delimiter: Optional[str] = None) -> List[ItemInfo]:
        """
        List metadata under a prefix, adding implicit directories for bare prefixes.

        Real entries come first in name order, followed by implicit directories in the
        order their prefixes were discovered.

        Args:
            bucket_name (str): Bucket to list
            object_name_prefix (str, optional): Object name prefix
            delimiter (str, optional): Directory delimiter, usually "/"

        Returns:
            List[ItemInfo]: Matching metadata; empty if the bucket is unknown

        Raises:
            CacheInvariantError: If a listed cache entry has no metadata
        """
        return self.execute(Operation.LIST_OBJECT_INFO, bucket_name, object_name_prefix, delimiter)

    def get_item_info(self, resource_id: ResourceId) -> ItemInfo:
        """Cached metadata for ``resource_id``, or the not-found sentinel."""
        return self.execute(Operation.GET_ITEM_INFO, resource_id)

    def get_item_infos(self, resource_ids: Iterable[ResourceId]) -> List[ItemInfo]:
        return self.execute(Operation.GET_ITEM_INFOS, resource_ids)

    def _list_object_names(self, bucket_name, object_name_prefix, delimiter):
        logger.debug(f"list_object_names({bucket_name}, {object_name_prefix}, {delimiter})")
        return [info.object_name for info in self._list_object_info(bucket_name, object_name_prefix, delimiter)]

    def _list_object_info(self, bucket_name, object_name_prefix, delimiter):
        logger.debug(f"list_object_info({bucket_name}, {object_name_prefix}, {delimiter})")
        all_object_infos = []
        retrieved_names = set()
        prefixes = []
        cached_objects = self.resource_cache.get_object_list(
            bucket_name, object_name_prefix, delimiter, prefixes)
        if cached_objects is None:
            return all_object_infos

        for entry in cached_objects:
            all_object_infos.append(self._require_info(entry))
            retrieved_names.add(entry.resource_id.object_name)

        for prefix in prefixes:
            if prefix in retrieved_names:
                continue
            fake_info = ItemInfo.for_implicit_directory(ResourceId(bucket_name, prefix))
            info = self.resource_cache.put_resource_id(fake_info.resource_id).set_item_info_if_absent(fake_info)
            if info is fake_info:
                logger.debug(f"Found implicit directory '{prefix}'. Added fake entry for it.")
            all_object_infos.append(info)
            retrieved_names.add(prefix)

        return all_object_infos

    def _get_item_info(self, resource_id):
        logger.debug(f"get_item_info({resource_id})")
        entry = self.resource_cache.get_cache_entry(resource_id)
        if entry is None:
            return ItemInfo.for_not_found(resource_id)
        return self._require_info(entry)

    def _get_item_infos(self, resource_ids):
        resource_ids = list(resource_ids)
        logger.debug(f"get_item_infos({[str(resource_id) for resource_id in resource_ids]})")
        return [self._get_item_info(resource_id) for resource_id in resource_ids]

    # Unsupported operations

    def create(self, resource_id: ResourceId, options=None):
        return self.execute(Operation.CREATE, resource_id, options)

    def create_bucket(self, bucket_name: str):
        return self.execute(Operation.CREATE_BUCKET, bucket_name)

    def create_empty_object(self, resource_id: ResourceId, options=None):
        return self.execute(Operation.CREATE_EMPTY_OBJECT, resource_id, options)

    def create_empty_objects(self, resource_ids: List[ResourceId], options=None):
        return self.execute(Operation.CREATE_EMPTY_OBJECTS, resource_ids, options)

    def open(self, resource_id: ResourceId):
        return self.execute(Operation.OPEN, resource_id)

    def delete_objects(self, resource_ids: List[ResourceId]):
        return self.execute(Operation.DELETE_OBJECTS, resource_ids)

    def delete_buckets(self, bucket_names: List[str]):
        return self.execute(Operation.DELETE_BUCKETS, bucket_names)

    def copy(self, src_bucket_name: str, src_object_names: List[str],
             dst_bucket_name: str, dst_object_names: List[str]):
        return self.execute(Operation.COPY, src_bucket_name, src_object_names,
                            dst_bucket_name, dst_object_names)

    def update_items(self, item_infos: List[ItemInfo]):
        return self.execute(Operation.UPDATE_ITEMS, item_infos)

    def list_bucket_names(self):
        return self.execute(Operation.LIST_BUCKET_NAMES)

    def list_bucket_info(self):
        return self.execute(Operation.LIST_BUCKET_INFO)

    def wait_for_bucket_empty(self, bucket_name: str):
        return self.execute(Operation.WAIT_FOR_BUCKET_EMPTY, bucket_name)

    def close(self):
        logger.debug("close()")
