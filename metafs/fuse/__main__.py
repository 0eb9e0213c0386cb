# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from .fuse_mount import main

if __name__ == '__main__':
    main()
