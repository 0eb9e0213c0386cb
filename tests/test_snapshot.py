import json
import pytest

from metafs.client.exceptions import SnapshotError
from metafs.client.read_only import MetadataReadOnlyStorage
from metafs.client.snapshot import dump_item_infos, item_info_from_dict, load_item_infos
from metafs.client.types import ItemInfo, ResourceId

def test_dump_then_load_preserves_infos(tmp_path, item_infos):
    path = tmp_path / "snapshot.json"
    dump_item_infos(item_infos, path)
    assert load_item_infos(path) == item_infos

def test_dump_skips_sentinels(tmp_path):
    path = tmp_path / "snapshot.json"
    real = ItemInfo(ResourceId("B", "a/x"), creation_time=1, size=2)
    dump_item_infos([
        real,
        ItemInfo.for_implicit_directory(ResourceId("B", "a/")),
        ItemInfo.for_not_found(ResourceId("B", "gone")),
    ], path)
    assert load_item_infos(path) == [real]

def test_bucket_record_without_object_name():
    info = item_info_from_dict({"bucket": "B", "creation_time": 3, "size": 0})
    assert info.resource_id == ResourceId("B")
    assert info.location is None

def test_from_snapshot(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps([
        {"bucket": "B", "object_name": "logs/2024/app.log", "creation_time": 10, "size": 4},
    ]))
    storage = MetadataReadOnlyStorage.from_snapshot(str(path))
    assert storage.list_object_names("B", "logs/", "/") == ["logs/2024/"]
    assert storage.get_item_info(ResourceId("B", "logs/2024/app.log")).size == 4

@pytest.mark.parametrize("content", [
    "not json",
    json.dumps({"bucket": "B"}),
    json.dumps([{"object_name": "a"}]),
    json.dumps([{"bucket": "B", "size": "big"}]),
    json.dumps(["B/a"]),
    json.dumps([{"bucket": ""}]),
    json.dumps([{"bucket": None, "size": 0}]),
    json.dumps([{"bucket": "B", "object_name": "a", "size": 1.9}]),
    json.dumps([{"bucket": "B", "object_name": "a", "creation_time": True}]),
])
def test_malformed_snapshots(tmp_path, content):
    path = tmp_path / "snapshot.json"
    path.write_text(content)
    with pytest.raises(SnapshotError) as excinfo:
        load_item_infos(path)
    assert excinfo.value.code == "ERR_SNAPSHOT"

def test_missing_snapshot_file(tmp_path):
    with pytest.raises(SnapshotError):
        load_item_infos(tmp_path / "absent.json")

def test_bucketless_snapshot_cannot_build_storage(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps([{"bucket": None, "size": 0}]))
    with pytest.raises(SnapshotError) as excinfo:
        MetadataReadOnlyStorage.from_snapshot(str(path))
    assert "has no bucket" in str(excinfo.value)
