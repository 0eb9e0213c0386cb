from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class ResourceId:
    """Identifies a bucket, or an object inside a bucket."""
    bucket_name: Optional[str]
    object_name: Optional[str] = None

    def __post_init__(self):
        if self.object_name == "":
            object.__setattr__(self, "object_name", None)
        if self.object_name is not None and not self.bucket_name:
            raise ValueError(f"Object name '{self.object_name}' given without a bucket name")

    @property
    def is_root(self) -> bool:
        return not self.bucket_name

    @property
    def is_bucket(self) -> bool:
        return bool(self.bucket_name) and self.object_name is None

    @property
    def is_storage_object(self) -> bool:
        return self.object_name is not None

    @property
    def is_directory(self) -> bool:
        return self.object_name is None or self.object_name.endswith("/")

    def __str__(self) -> str:
        if self.is_root:
            return "/"
        if self.object_name is None:
            return self.bucket_name
        return f"{self.bucket_name}/{self.object_name}"

@dataclass(frozen=True)
class ItemInfo:
    """Metadata snapshot for a bucket or object."""
    resource_id: ResourceId
    creation_time: int
    size: int
    location: Optional[str] = None
    storage_class: Optional[str] = None
    exists: bool = True
    synthetic: bool = False

    @classmethod
    def for_not_found(cls, resource_id: ResourceId) -> "ItemInfo":
        """Sentinel returned for resources with no cache entry."""
        return cls(resource_id, creation_time=0, size=-1, exists=False)

    @classmethod
    def for_implicit_directory(cls, resource_id: ResourceId) -> "ItemInfo":
        """Marker for a directory that only exists as a prefix of other objects."""
        return cls(resource_id, creation_time=0, size=0, synthetic=True)

    @property
    def bucket_name(self) -> Optional[str]:
        return self.resource_id.bucket_name

    @property
    def object_name(self) -> Optional[str]:
        return self.resource_id.object_name

    @property
    def is_directory(self) -> bool:
        return self.exists and self.resource_id.is_directory

    @property
    def is_implicit_directory(self) -> bool:
        return self.exists and self.synthetic
