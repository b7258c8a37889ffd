"""
Handler for the cpuinfo program: per-core usage, temperature and fan speed.
"""
from typing import List, Optional

from genmon_info.command_handlers.base_handler import BaseInfoHandler
from genmon_info.core.cache_store import CpuCacheRecord
from genmon_info.core.calculator import busy_percent, running_max
from genmon_info.core.samples import CpuSample
from genmon_info.monitoring import CpuMonitor
from genmon_info.ui.formatter import Fragment, format_cpu
from genmon_info.utils import get_logger

logger = get_logger(__name__)


def _counters_went_backwards(record: CpuCacheRecord, sample: CpuSample) -> bool:
    return any(current.total < previous.total or current.idle < previous.idle
               for previous, current in zip(record.cores, sample.cores))


class CpuInfoHandler(BaseInfoHandler):
    """
    Computes busy percentages against the previous tick counters and keeps
    the highest temperature and fan speed seen.
    """

    program = "cpuinfo"

    def execute(self) -> Fragment:
        sample = CpuMonitor(self.topology).sample()

        key = self.cache.key(self.program)
        record: Optional[CpuCacheRecord] = self.cache.load(key, CpuCacheRecord, core_count=len(sample.cores))

        if record is None:
            percents: List[int] = [0] * len(sample.cores)
            max_temperature, max_fan_rpm = sample.temperature, sample.fan_rpm
        else:
            if _counters_went_backwards(record, sample):
                logger.warning("CPU counters decreased since the last run, resetting the usage baseline")
                percents = [0] * len(sample.cores)
            else:
                percents = [busy_percent(previous, current)
                            for previous, current in zip(record.cores, sample.cores)]
            max_temperature = running_max(record.max_temperature, sample.temperature)
            max_fan_rpm = int(running_max(record.max_fan_rpm, sample.fan_rpm))

        self.cache.store(key, CpuCacheRecord(cores=sample.cores, max_temperature=max_temperature,
                                             max_fan_rpm=max_fan_rpm))
        logger.debug(f"CPU usage: {percents}, max temperature {max_temperature}, max rpm {max_fan_rpm}")

        return format_cpu(percents, sample.temperature, sample.fan_rpm, max_temperature, max_fan_rpm,
                          self.options, self.topology.hardware_class)
