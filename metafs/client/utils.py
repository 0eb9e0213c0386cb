# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Logging helpers for the MetaFS client.

The client never configures logging handlers itself; applications decide
where the ``MetaFS`` logger goes.
"""

import logging
import time

logger = logging.getLogger('MetaFS')

def now_millis(clock=time.time) -> int:
    """Current time of ``clock`` in whole milliseconds."""
    return int(clock() * 1000)

def time_function(func_name, start_time):
    """
    Log and return the time elapsed since ``start_time``.

    Args:
        func_name (str): Name of the operation being timed
        start_time (float): Start time from time.time()

    Returns:
        float: Elapsed time in seconds
    """
    elapsed = time.time() - start_time
    logger.debug(f"{func_name} completed in {elapsed:.4f} seconds")
    return elapsed
