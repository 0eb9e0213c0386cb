# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Read-only FUSE view of a metadata snapshot.

This module mounts one bucket of a MetadataReadOnlyStorage as a local directory
tree. Objects appear as files with their recorded size and creation time;
directory objects and implicit directories appear as directories. Object
contents are not part of a snapshot, so files can be listed and stat'ed but
not opened, and every mutating call fails with EROFS.

Usage:
    # Mount bucket "logs" of a snapshot
    python -m metafs.fuse snapshot.json logs /mnt/logs

    # Now browse the snapshot as if it were local
    ls -l /mnt/logs/2024/
"""

from fuse import FUSE, FuseOSError, Operations
import errno
import os
import time
import subprocess
from datetime import datetime

from metafs.client.exceptions import MetaFSError, SnapshotError, UnsupportedOperationError
from metafs.client.read_only import MetadataReadOnlyStorage
from metafs.client.types import ResourceId

from .utils import logger, time_function, trace_op
from .mount_utils import unmount, setup_signal_handlers, get_mount_options

WRITE_FLAGS = os.O_WRONLY | os.O_RDWR | os.O_APPEND | os.O_CREAT | os.O_TRUNC
BLOCK_SIZE = 4096

class MetaFSFuse(Operations):
    """
    FUSE operations answering from a MetadataReadOnlyStorage.

    Attributes:
        storage (MetadataReadOnlyStorage): Metadata view serving every lookup
        bucket (str): Name of the bucket being mounted
    """

    def __init__(self, storage, bucket):
        """
        Args:
            storage (MetadataReadOnlyStorage): Metadata view to expose
            bucket (str): Name of the bucket to mount
        """
        logger.info(f"Initializing MetaFSFuse with bucket: {bucket}")
        self.storage = storage
        self.bucket = bucket
        self.mount_time = datetime.now().timestamp()

    def _get_path(self, path):
        """Convert a FUSE path to an object name."""
        return path.lstrip('/')

    def _base_stat(self, mtime=None):
        if not mtime:
            mtime = self.mount_time
        return {
            'st_uid': os.getuid(),
            'st_gid': os.getgid(),
            'st_atime': mtime,
            'st_mtime': mtime,
            'st_ctime': mtime,
            'st_blksize': BLOCK_SIZE,
            'st_rdev': 0,
        }

    def _dir_stat(self, info=None):
        mtime = info.creation_time / 1000 if info is not None else None
        return {**self._base_stat(mtime),
                'st_mode': 0o40555,
                'st_nlink': 2,
                'st_size': BLOCK_SIZE,
                'st_blocks': 8}

    def _file_stat(self, info):
        blocks = (max(info.size, 0) + BLOCK_SIZE - 1) // BLOCK_SIZE
        return {**self._base_stat(info.creation_time / 1000),
                'st_mode': 0o100444,
                'st_nlink': 1,
                'st_size': max(info.size, 0),
                'st_blocks': blocks}

    def _read_only(self, operation, path):
        trace_op(operation, path)
        logger.debug(f"{operation} rejected for {path}: filesystem is read-only")
        raise FuseOSError(errno.EROFS)

    def getattr(self, path, fh=None):
        """
        Get file attributes.

        A path is a file if an object with its exact name exists, and a directory if
        a directory object, an implicit directory, or any object lives under it.

        Raises:
            FuseOSError: ENOENT if nothing exists at the path, EIO on cache errors
        """
        trace_op("getattr", path, fh=fh)
        start_time = time.time()

        if path == '/':
            return self._dir_stat()

        key = self._get_path(path)
        try:
            info = self.storage.get_item_info(ResourceId(self.bucket, key))
            if info.exists and not info.is_directory:
                logger.debug(f"getattr returning file attributes for {path}")
                return self._file_stat(info)

            dir_key = key if key.endswith('/') else key + '/'
            dir_info = self.storage.get_item_info(ResourceId(self.bucket, dir_key))
            if dir_info.exists:
                logger.debug(f"getattr returning directory attributes for {path}")
                return self._dir_stat(dir_info)

            if self.storage.list_object_names(self.bucket, dir_key, '/'):
                logger.debug(f"getattr returning directory attributes for {path} (has children)")
                return self._dir_stat()

            logger.debug(f"getattr: Path {path} does not exist")
            raise FuseOSError(errno.ENOENT)
        except MetaFSError as e:
            logger.error(f"getattr error for {path}: {e}", exc_info=True)
            raise FuseOSError(errno.EIO)
        finally:
            time_function("getattr", start_time)

    def readdir(self, path, fh):
        """
        List directory contents.

        Returns:
            list: '.', '..' and the names directly under the directory

        Raises:
            FuseOSError: ENOENT if the directory does not exist, EIO on cache errors
        """
        trace_op("readdir", path, fh=fh)
        start_time = time.time()

        prefix = '' if path == '/' else self._get_path(path).rstrip('/') + '/'
        logger.debug(f"readdir using prefix: '{prefix}'")
        try:
            infos = self.storage.list_object_info(self.bucket, prefix, '/')
            if not infos and prefix:
                if not self.storage.get_item_info(ResourceId(self.bucket, prefix)).exists:
                    logger.error(f"Directory {path} (prefix: {prefix}) does not exist")
                    raise FuseOSError(errno.ENOENT)

            entries = ['.', '..']
            seen = set()
            for info in infos:
                name = info.object_name[len(prefix):].rstrip('/')
                if not name or name in seen:
                    continue
                seen.add(name)
                entries.append(name)

            logger.debug(f"readdir returning {len(entries)} entries for {path}")
            return entries
        except MetaFSError as e:
            logger.error(f"Error in readdir for {path}: {e}", exc_info=True)
            raise FuseOSError(errno.EIO)
        finally:
            time_function("readdir", start_time)

    def open(self, path, flags):
        """
        Open a file.

        Snapshots carry metadata only; opening for write gives EROFS and opening
        for read gives ENOTSUP.
        """
        trace_op("open", path, flags=flags)
        if flags & WRITE_FLAGS:
            raise FuseOSError(errno.EROFS)

        self.getattr(path)
        try:
            return self.storage.open(ResourceId(self.bucket, self._get_path(path)))
        except UnsupportedOperationError as e:
            logger.debug(f"open: {path} has no readable content: {e}")
            raise FuseOSError(errno.ENOTSUP)

    def access(self, path, mode):
        """
        Check if a path can be accessed with the given mode.

        Raises:
            FuseOSError: EROFS for write access, ENOENT if the path does not exist
        """
        trace_op("access", path, mode=mode)
        if mode & os.W_OK:
            raise FuseOSError(errno.EROFS)
        self.getattr(path)
        return 0

    def statfs(self, path):
        """
        Get filesystem statistics.

        Reports a read-only filesystem with one inode per cache entry and no free space.
        """
        trace_op("statfs", path)
        entries = len(self.storage.resource_cache)
        return {
            'f_bsize': BLOCK_SIZE,
            'f_frsize': BLOCK_SIZE,
            'f_blocks': 0,
            'f_bfree': 0,
            'f_bavail': 0,
            'f_files': entries,
            'f_ffree': 0,
            'f_favail': 0,
            'f_flag': os.ST_RDONLY,
            'f_namemax': 255,
        }

    def create(self, path, mode, fi=None):
        self._read_only("create", path)

    def write(self, path, data, offset, fh):
        self._read_only("write", path)

    def truncate(self, path, length, fh=None):
        self._read_only("truncate", path)

    def unlink(self, path):
        self._read_only("unlink", path)

    def mkdir(self, path, mode):
        self._read_only("mkdir", path)

    def rmdir(self, path):
        self._read_only("rmdir", path)

    def rename(self, old, new):
        self._read_only("rename", old)

    def chmod(self, path, mode):
        self._read_only("chmod", path)

    def chown(self, path, uid, gid):
        self._read_only("chown", path)

    def symlink(self, target, source):
        self._read_only("symlink", target)

    def link(self, target, source):
        self._read_only("link", target)

    def utimens(self, path, times=None):
        self._read_only("utimens", path)

    def setxattr(self, path, name, value, options, position=0):
        self._read_only("setxattr", path)

    def removexattr(self, path, name):
        self._read_only("removexattr", path)

def mount(snapshot: str, bucket: str, mountpoint: str, foreground: bool = True, allow_other: bool = False):
    """
    Mount one bucket of a metadata snapshot at the specified mountpoint.

    Args:
        snapshot (str): Path to the JSON metadata snapshot
        bucket (str): Name of the bucket to mount
        mountpoint (str): Local path where the filesystem should be mounted
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount.
            Requires 'user_allow_other' in /etc/fuse.conf. Defaults to False.
    """
    logger.info(f"Mounting bucket {bucket} of {snapshot} at {mountpoint}")
    start_time = time.time()

    if os.path.exists(mountpoint):
        if not os.path.isdir(mountpoint):
            logger.error(f"Mountpoint path exists but is not a directory: {mountpoint}")
            print(f"Error: {mountpoint} exists but is not a directory. Please specify a directory path.")
            return
    else:
        logger.info(f"Mountpoint {mountpoint} does not exist, creating it...")
        try:
            os.makedirs(mountpoint, mode=0o755)
            print(f"Created mountpoint directory: {mountpoint}")
        except OSError as e:
            logger.error(f"Failed to create mountpoint {mountpoint}: {e}")
            print(f"Error: Failed to create mountpoint directory {mountpoint}: {e}")
            print(f"Try: sudo mkdir -p {mountpoint}")
            return

    try:
        storage = MetadataReadOnlyStorage.from_snapshot(snapshot)
    except SnapshotError as e:
        logger.error(f"Cannot load snapshot {snapshot}: {e}")
        print(f"Error: {e}")
        return

    try:
        process = subprocess.run(["mountpoint", "-q", mountpoint], check=False)
        if process.returncode == 0:
            logger.warning(f"Mountpoint {mountpoint} is already mounted")
            print(f"Warning: {mountpoint} is already mounted. Unmounting first...")
            unmount(mountpoint)
    except OSError as e:
        logger.warning(f"Could not check if {mountpoint} is mounted: {e}")

    options = get_mount_options(foreground, allow_other)
    setup_signal_handlers(mountpoint, unmount)

    try:
        logger.info(f"Starting FUSE mount with options: {options}")
        FUSE(MetaFSFuse(storage, bucket), mountpoint, nothreads=False, **options)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, unmounting...")
        print("Keyboard interrupt received, unmounting...")
        unmount(mountpoint)
    except RuntimeError as e:
        logger.error(f"Error during mount: {e}")
        print(f"Error: {e}")
        unmount(mountpoint)
    finally:
        storage.close()
        time_function("mount", start_time)

def main():
    """
    CLI entry point for mounting a metadata snapshot.

    Usage:
        python -m metafs.fuse <snapshot> <bucket> <mountpoint>

    Options:
        --allow-other: Allow other users to access the mount
            (requires user_allow_other in /etc/fuse.conf)
        --trace: Enable detailed tracing of file operations for debugging
    """
    import argparse
    parser = argparse.ArgumentParser(description='Mount a metadata snapshot as a read-only filesystem')
    parser.add_argument('snapshot', help='Path to the JSON metadata snapshot')
    parser.add_argument('bucket', help='The name of the bucket to mount')
    parser.add_argument('mountpoint', help='The directory to mount the bucket on')
    parser.add_argument('--allow-other', action='store_true',
                        help='Allow other users to access the mount (requires user_allow_other in /etc/fuse.conf)')
    parser.add_argument('--trace', action='store_true',
                        help='Enable detailed tracing of file operations for debugging')

    args = parser.parse_args()

    if args.trace:
        os.environ['METAFS_FUSE_TRACE_OPS'] = 'true'
        print("Detailed operation tracing enabled")

    mount(args.snapshot, args.bucket, args.mountpoint, allow_other=args.allow_other)

if __name__ == '__main__':
    main()
