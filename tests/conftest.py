import pytest
import os

from metafs.client.types import ItemInfo, ResourceId

def pytest_configure(config):
    """Configure test environment."""
    os.environ.setdefault("METAFS_LOG_LEVEL", "DEBUG")

def pytest_sessionstart(session):
    """Called before test session starts."""
    print("\nSetting up test session...")

def pytest_sessionfinish(session, exitstatus):
    """Called after test session finishes."""
    print("\nTearing down test session...")

def object_info(bucket, name, size=10, creation_time=1700000000000):
    return ItemInfo(ResourceId(bucket, name), creation_time=creation_time, size=size,
                    location="us-east-1", storage_class="STANDARD")

@pytest.fixture
def item_infos():
    """Bucket B with a small directory tree, plus bucket C with one object."""
    return [
        ItemInfo(ResourceId("B"), creation_time=1600000000000, size=0, location="us-east-1"),
        object_info("B", "a/b/c"),
        object_info("B", "a/b/d", size=20),
        object_info("B", "a/x", size=0),
        object_info("B", "top.txt", size=5),
        object_info("B", "real/", size=0),
        object_info("B", "real/inside.txt"),
        object_info("C", "only.bin", size=1),
    ]
