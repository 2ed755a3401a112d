"""
Utils package - Shared utility functions.
"""

from apktrack.utils.logger import setup_logging, get_logger

__all__ = ['setup_logging', 'get_logger']
