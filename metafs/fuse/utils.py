# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Utility functions for the MetaFS FUSE filesystem.

This module provides logging configuration and tracing helpers
for the read-only FUSE view.
"""

import logging
import time
import os

# Configure logging
logging.basicConfig(
    level=os.environ.get('METAFS_LOG_LEVEL', 'INFO').upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s] - %(message)s'
)
logger = logging.getLogger('MetaFSFuse')

def tracing_enabled():
    """True when METAFS_FUSE_TRACE_OPS asks for per-operation traces."""
    return os.environ.get('METAFS_FUSE_TRACE_OPS', '').lower() in ('true', '1', 'yes')

def time_function(func_name, start_time):
    """
    Helper function for timing operations.

    Args:
        func_name (str): Name of the function being timed
        start_time (float): Start time from time.time()

    Returns:
        float: Elapsed time in seconds
    """
    elapsed = time.time() - start_time
    logger.debug(f"{func_name} completed in {elapsed:.4f} seconds")
    return elapsed

def trace_op(operation, path, **details):
    """
    Trace a file operation when METAFS_FUSE_TRACE_OPS is set.

    Args:
        operation (str): The file operation being performed
        path (str): The path of the file being operated on
        **details: Additional details to log
    """
    if tracing_enabled():
        detail_str = ', '.join(f"{k}={v}" for k, v in details.items())
        logger.debug(f"TRACE: {operation} on {path} {detail_str}")
