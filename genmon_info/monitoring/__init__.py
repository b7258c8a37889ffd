"""
Samplers for the genmon-info utilities, one per monitored subsystem.
"""
from genmon_info.monitoring.cpu_monitor import CpuMonitor
from genmon_info.monitoring.disk_monitor import DiskMonitor
from genmon_info.monitoring.memory_monitor import MemoryMonitor
from genmon_info.monitoring.network_monitor import NetworkMonitor

__all__ = [
    'CpuMonitor',
    'DiskMonitor',
    'MemoryMonitor',
    'NetworkMonitor'
]
