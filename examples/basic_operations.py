# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from metafs.client import ItemInfo, MetadataReadOnlyStorage, ResourceId, UnsupportedOperationError

def main():
    # Metadata as it would come back from a bucket listing
    infos = [
        ItemInfo(ResourceId("my-bucket", "models/bert/config.json"), creation_time=1735689600000, size=570),
        ItemInfo(ResourceId("my-bucket", "models/bert/weights.bin"), creation_time=1735689600000, size=440473133),
        ItemInfo(ResourceId("my-bucket", "README.md"), creation_time=1735689600000, size=1024),
    ]
    storage = MetadataReadOnlyStorage(infos)

    try:
        # List the top level like a directory
        print("Top level of my-bucket:")
        for info in storage.list_object_info("my-bucket", "", "/"):
            kind = "implicit dir" if info.is_implicit_directory else f"{info.size} bytes"
            print(f"- {info.object_name} ({kind})")

        # The listing above made models/ visible to point lookups
        models = storage.get_item_info(ResourceId("my-bucket", "models/"))
        print(f"models/ exists: {models.exists}, implicit: {models.is_implicit_directory}")

        # Unknown paths come back as a not-found sentinel
        missing = storage.get_item_info(ResourceId("my-bucket", "nothing-here"))
        print(f"nothing-here exists: {missing.exists}")

        # Writes are rejected
        try:
            storage.delete_objects([ResourceId("my-bucket", "README.md")])
        except UnsupportedOperationError as e:
            print(f"Delete rejected: {e}")

    finally:
        storage.close()

if __name__ == "__main__":
    main()
