# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Metadata snapshots.

A snapshot is a JSON list of item records previously fetched from an object store::

    [
        {"bucket": "logs", "object_name": "2024/01/app.log", "creation_time": 1704067200000,
         "size": 2048, "location": "us-east-1", "storage_class": "STANDARD"},
        {"bucket": "logs", "creation_time": 1704067200000, "size": 0}
    ]

Records without ``object_name`` describe the bucket itself.
"""

import json
from typing import Any, Dict, Iterable, List

from .exceptions import SnapshotError
from .types import ItemInfo, ResourceId
from .utils import logger

def _integer_field(record: Dict[str, Any], name: str) -> int:
    value = record.get(name, 0)
    if not isinstance(value, int) or isinstance(value, bool):
        raise SnapshotError(f"Snapshot record {record!r} has non-integer {name} {value!r}")
    return value

def item_info_from_dict(record: Dict[str, Any]) -> ItemInfo:
    """
    Build an ItemInfo from a snapshot record.

    Raises:
        SnapshotError: If the record is missing fields or has the wrong types
    """
    if not isinstance(record, dict):
        raise SnapshotError(f"Snapshot record must be an object, got {type(record).__name__}")
    try:
        resource_id = ResourceId(record["bucket"], record.get("object_name"))
    except KeyError as e:
        raise SnapshotError(f"Snapshot record {record!r} is missing field {e}")
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid snapshot record {record!r}: {e}")
    if resource_id.is_root:
        raise SnapshotError(f"Snapshot record {record!r} has no bucket")

    return ItemInfo(
        resource_id,
        creation_time=_integer_field(record, "creation_time"),
        size=_integer_field(record, "size"),
        location=record.get("location"),
        storage_class=record.get("storage_class"),
    )

def item_info_to_dict(item_info: ItemInfo) -> Dict[str, Any]:
    """Serialize an ItemInfo to a snapshot record."""
    record = {"bucket": item_info.bucket_name}
    if item_info.object_name is not None:
        record["object_name"] = item_info.object_name
    record["creation_time"] = item_info.creation_time
    record["size"] = item_info.size
    if item_info.location is not None:
        record["location"] = item_info.location
    if item_info.storage_class is not None:
        record["storage_class"] = item_info.storage_class
    return record

def load_item_infos(path) -> List[ItemInfo]:
    """
    Read every ItemInfo of a snapshot file.

    Args:
        path (str): Path to the JSON snapshot

    Returns:
        List[ItemInfo]: Infos in file order

    Raises:
        SnapshotError: If the file cannot be read or parsed
    """
    logger.debug(f"Loading metadata snapshot from {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}")
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}")

    if not isinstance(records, list):
        raise SnapshotError(f"Snapshot {path} must contain a JSON list")

    infos = [item_info_from_dict(record) for record in records]
    logger.debug(f"Loaded {len(infos)} entries from {path}")
    return infos

def dump_item_infos(item_infos: Iterable[ItemInfo], path) -> None:
    """Write infos to a snapshot file. Sentinels and implicit directories are skipped."""
    records = [item_info_to_dict(info) for info in item_infos if info.exists and not info.synthetic]
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(records, f, indent=2)
    except OSError as e:
        raise SnapshotError(f"Cannot write snapshot {path}: {e}")
    logger.debug(f"Wrote {len(records)} entries to {path}")
