"""
Sample types produced by the monitors.

A sample is a one-time snapshot of subsystem counters; none of these
objects outlive the invocation that created them.
"""
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class CoreTimes:
    """Cumulative clock ticks of one CPU core (total = user+nice+system+idle)."""
    total: int
    idle: int


@dataclass(frozen=True)
class CpuSample:
    cores: Tuple[CoreTimes, ...]
    temperature: float  # Celsius
    fan_rpm: int


@dataclass(frozen=True)
class MemorySample:
    """Kernel memory statistics, all in the same unit (bytes or kB)."""
    total: int
    free: int
    buffers: int
    cached: int


@dataclass(frozen=True)
class DiskSample:
    total_blocks: int
    free_blocks: int
    block_size: int


@dataclass(frozen=True)
class DiskTemperature:
    model: str
    celsius: float


@dataclass(frozen=True)
class NetworkSample:
    rx_bytes: int
    tx_bytes: int
    timestamp_ns: int  # monotonic clock
