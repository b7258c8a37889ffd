"""
genmon-info - panel monitor utilities for Linux.

This package contains small run-once programs that each poll one subsystem
and print an XML-like fragment for a desktop panel "generic monitor" widget.

Main components:
- CpuInfoHandler, DiskInfoHandler, MemInfoHandler, NetInfoHandler: one
  sample/cache/delta cycle per program (genmon_info.command_handlers)
- CacheStore: previous sample and running maxima per resource
  (genmon_info.core.cache_store)
- calculator: percentages, rates and running maxima (genmon_info.core.calculator)
- CpuMonitor, DiskMonitor, MemoryMonitor, NetworkMonitor: samplers
  (genmon_info.monitoring)
- ConfigManager, HardwareTopology, RunOptions: configuration (genmon_info.config)
- formatter: the output fragment (genmon_info.ui)
"""
from .version import __version__, __app_name__

__all__ = [
    '__version__',
    '__app_name__'
]
