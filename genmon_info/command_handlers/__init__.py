"""
Handlers for the monitor programs.

This package provides one handler per program:
    - BaseInfoHandler: Abstract base class for all handlers
    - CpuInfoHandler: cpuinfo, per-core usage, temperature and fan speed
    - DiskInfoHandler: diskinfo, filesystem usage and drive temperature
    - MemInfoHandler: meminfo, memory usage
    - NetInfoHandler: netinfo, network throughput
"""
from .base_handler import BaseInfoHandler
from .cpu_handler import CpuInfoHandler
from .disk_handler import DiskInfoHandler
from .mem_handler import MemInfoHandler
from .net_handler import NetInfoHandler

HANDLERS = {
    CpuInfoHandler.program: CpuInfoHandler,
    DiskInfoHandler.program: DiskInfoHandler,
    MemInfoHandler.program: MemInfoHandler,
    NetInfoHandler.program: NetInfoHandler,
}

__all__ = [
    'BaseInfoHandler',
    'CpuInfoHandler',
    'DiskInfoHandler',
    'MemInfoHandler',
    'NetInfoHandler',
    'HANDLERS'
]
