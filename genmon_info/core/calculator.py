"""
Delta, rate and ratio calculations between two samples.

All functions are pure. A previous value of ``None`` means "no previous
sample" (first run or forced cache reset) and always yields the zero
baseline instead of an error.
"""
import math
from typing import Optional

from genmon_info.core.samples import CoreTimes, DiskSample, MemorySample

KIB = 1024
MIB = 1024 * 1024
GIB = 1024 * 1024 * 1024

DEFAULT_MIN_ELAPSED = 0.001


def counter_delta(previous: int, current: int) -> Optional[int]:
    """
    Difference between two readings of a monotonically increasing counter.

    :param previous: Earlier reading
    :type previous: int
    :param current: Later reading
    :type current: int
    :return: The delta, or None when the counter went backwards (wrap or
             subsystem reset); callers treat None as a cache reset
    :rtype: Optional[int]
    """
    if current < previous:
        return None
    return current - previous


def clamp_percent(value: float) -> int:
    return int(min(100.0, max(0.0, value)))


def busy_percent(previous: Optional[CoreTimes], current: CoreTimes) -> int:
    """
    Busy percentage of one core over the interval between two samples:
    100 * (dtotal - didle) / dtotal, clamped to [0, 100].

    :param previous: Counters from the cache, None on the first run
    :type previous: Optional[CoreTimes]
    :param current: Counters sampled now
    :type current: CoreTimes
    :return: Whole percent busy; 0 on first run, reset, or an empty interval
    :rtype: int
    """
    if previous is None:
        return 0

    interval_total = counter_delta(previous.total, current.total)
    interval_idle = counter_delta(previous.idle, current.idle)
    if interval_total is None or interval_idle is None or interval_total == 0:
        return 0

    return clamp_percent(100.0 * (interval_total - interval_idle) / interval_total)


def transfer_rate(previous_bytes: Optional[int], current_bytes: int,
                  elapsed_seconds: float, bits_per_sec: bool = False,
                  min_elapsed: float = DEFAULT_MIN_ELAPSED) -> float:
    """
    Throughput between two byte counter readings.

    :param previous_bytes: Earlier byte count, None on the first run
    :type previous_bytes: Optional[int]
    :param current_bytes: Byte count now
    :type current_bytes: int
    :param elapsed_seconds: Monotonic time between the two readings
    :type elapsed_seconds: float
    :param bits_per_sec: True for decimal kilobits/second, False for
                         binary kilobytes (KiB) per second
    :type bits_per_sec: bool
    :param min_elapsed: Intervals shorter than this make the rate unavailable
    :type min_elapsed: float
    :return: The rate, or 0.0 when it is unavailable
    :rtype: float
    """
    if previous_bytes is None:
        return 0.0
    if not math.isfinite(elapsed_seconds) or elapsed_seconds < min_elapsed:
        return 0.0

    delta = counter_delta(previous_bytes, current_bytes)
    if delta is None:
        return 0.0

    if bits_per_sec:
        return (delta * 8.0) / elapsed_seconds / 1000.0
    return delta / elapsed_seconds / KIB


def running_max(previous_max: float, current: float) -> float:
    return current if current > previous_max else previous_max


def usage_percent(used: int, total: int) -> int:
    """
    Whole-number percentage of ``total`` that is ``used``, clamped to [0, 100].
    """
    if total <= 0:
        return 0
    return clamp_percent((100 * used) // total)


def memory_used(sample: MemorySample) -> int:
    """Memory in use excluding buffers and page cache."""
    return max(0, sample.total - sample.free - sample.buffers - sample.cached)


def memory_percent(sample: MemorySample) -> int:
    return usage_percent(memory_used(sample), sample.total)


def disk_percent(sample: DiskSample) -> int:
    return usage_percent(sample.total_blocks - sample.free_blocks, sample.total_blocks)


def blocks_to_gib(blocks: int, block_size: int) -> float:
    return blocks * block_size / GIB


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 1.8 + 32.0
