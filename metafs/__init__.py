# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""MetaFS - directory view over object store metadata."""

__version__ = "0.1.0"
