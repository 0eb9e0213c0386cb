# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved
'''
This example demonstrates browsing a mounted metadata snapshot.

Setup:
    # Install the package
    pip install metafs

    # Install FUSE on your system
    # On Ubuntu/Debian:
    sudo apt-get install fuse

    # On macOS (using Homebrew):
    brew install macfuse

Usage:
    # Mount bucket "my-bucket" of a snapshot
    python -m metafs.fuse snapshot.json my-bucket /mnt/my-bucket

    # In another terminal
    python fuse_operations.py /mnt/my-bucket

    # Unmount when done
    fusermount -u /mnt/my-bucket

Troubleshooting:
    # Enable debug logging and per-operation traces
    export METAFS_LOG_LEVEL=DEBUG
    python -m metafs.fuse snapshot.json my-bucket /mnt/my-bucket --trace
'''
import sys
import os

def main():
    if len(sys.argv) != 2:
        print("Usage: python fuse_operations.py <mountpoint>")
        sys.exit(1)

    mountpoint = sys.argv[1]

    # Walk the tree, implicit directories included
    for root, dirs, files in os.walk(mountpoint):
        for name in files:
            path = os.path.join(root, name)
            print(f"{path}: {os.stat(path).st_size} bytes")

    # Writing fails on a read-only mount
    try:
        with open(os.path.join(mountpoint, "example.txt"), 'w') as f:
            f.write("Hello FUSE")
    except OSError as e:
        print(f"Write operation failed as expected: {e}")

if __name__ == '__main__':
    main()
