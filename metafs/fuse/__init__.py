# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Read-only FUSE mount of a MetaFS metadata snapshot.

Importing this package does not load libfuse; use metafs.fuse.fuse_mount for the
filesystem itself.
"""
