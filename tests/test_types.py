import pytest

from metafs.client.types import ItemInfo, ResourceId

def test_resource_id_equality_and_hashing():
    assert ResourceId("B", "a/x") == ResourceId("B", "a/x")
    assert ResourceId("B", "a/x") != ResourceId("B", "a/y")
    assert len({ResourceId("B", "a/x"), ResourceId("B", "a/x"), ResourceId("B")}) == 2

def test_resource_id_kinds():
    assert ResourceId(None).is_root
    assert ResourceId("B").is_bucket
    assert ResourceId("B", "") == ResourceId("B"), "Empty object name should mean bucket"
    assert ResourceId("B", "a/x").is_storage_object
    assert ResourceId("B", "a/").is_directory
    assert not ResourceId("B", "a/x").is_directory
    assert str(ResourceId("B", "a/x")) == "B/a/x"
    assert str(ResourceId("B")) == "B"

def test_resource_id_rejects_object_without_bucket():
    with pytest.raises(ValueError):
        ResourceId(None, "a/x")

def test_resource_id_is_immutable():
    resource_id = ResourceId("B", "a")
    with pytest.raises(Exception):
        resource_id.object_name = "b"

def test_sentinels_are_distinct_from_real_empty_object():
    resource_id = ResourceId("B", "a/")
    not_found = ItemInfo.for_not_found(resource_id)
    implicit = ItemInfo.for_implicit_directory(resource_id)
    real_empty = ItemInfo(resource_id, creation_time=0, size=0)

    assert not not_found.exists
    assert implicit.exists and implicit.synthetic
    assert implicit.size == 0 and implicit.creation_time == 0
    assert implicit.location is None and implicit.storage_class is None
    assert implicit.is_implicit_directory
    assert not real_empty.is_implicit_directory
    assert len({not_found, implicit, real_empty}) == 3

def test_item_info_accessors():
    info = ItemInfo(ResourceId("B", "dir/"), creation_time=5, size=0, location="eu")
    assert info.bucket_name == "B"
    assert info.object_name == "dir/"
    assert info.is_directory
    assert not ItemInfo.for_not_found(ResourceId("B", "dir/")).is_directory
