"""
Output formatting for the genmon-info utilities.
"""
from genmon_info.ui.formatter import (
    Fragment,
    Severity,
    classify,
    emphasize,
    format_cpu,
    format_disk,
    format_interface_down,
    format_memory,
    format_network
)

__all__ = [
    'Fragment',
    'Severity',
    'classify',
    'emphasize',
    'format_cpu',
    'format_disk',
    'format_interface_down',
    'format_memory',
    'format_network'
]
