"""
Utility functions for the genmon-info utilities.
"""
from genmon_info.utils.logger import get_logger, setup_logger
from genmon_info.utils.utils import (
    atomic_write_text,
    expand_home,
    get_home_directory,
    resolve_icon_path
)

__all__ = [
    'get_logger',
    'setup_logger',
    'atomic_write_text',
    'expand_home',
    'get_home_directory',
    'resolve_icon_path'
]
