"""
Configuration modules for the genmon-info utilities.
"""
from .config_manager import ConfigManager
from .options import RunOptions
from .topology import HardwareTopology

__all__ = [
    'ConfigManager',
    'RunOptions',
    'HardwareTopology'
]
