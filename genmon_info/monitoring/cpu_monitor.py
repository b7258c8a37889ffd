"""
CPU monitor: per-core tick counters, temperature and fan speed.
"""
import os
import re
from typing import Tuple

import psutil

from genmon_info.config.topology import HardwareTopology
from genmon_info.core.errors import DataFormatError, PreconditionError
from genmon_info.core.samples import CoreTimes, CpuSample
from genmon_info.monitoring.helper_command import run_helper
from genmon_info.utils import get_logger

logger = get_logger(__name__)

CLOCK_TICKS = os.sysconf('SC_CLK_TCK')


def _to_ticks(seconds: float) -> int:
    return int(round(seconds * CLOCK_TICKS))


def parse_sensors_output(output: str, temperature_label: str, fan_label: str) -> Tuple[float, int]:
    """
    Extracts the CPU temperature and fan speed from ``sensors`` output.

    Lines look like ``temp1:        +45.0°C  (crit = +100.0°C)`` and
    ``CPU Fan Speed: 1200 RPM``. When a label appears more than once the
    last line wins; a missing label reads as 0.

    :param output: Standard output of the sensors helper
    :type output: str
    :param temperature_label: Label of the temperature line (without ':')
    :type temperature_label: str
    :param fan_label: Label of the fan speed line (without ':')
    :type fan_label: str
    :return: Tuple (temperature in Celsius, fan RPM)
    :rtype: Tuple[float, int]
    :raises DataFormatError: If a labelled line cannot be parsed
    """
    temp_re = re.compile(r'^' + re.escape(temperature_label) + r':\s*\+?(-?\d+(?:\.\d+)?)')
    fan_re = re.compile(r'^' + re.escape(fan_label) + r':\s*(\d+)\s*RPM')
    temperature = 0.0
    rpm = 0

    for line in output.splitlines():
        if line.startswith(temperature_label + ":"):
            match = temp_re.match(line)
            if not match:
                raise DataFormatError(f"Unexpected temperature line from sensors: {line!r}")
            temperature = float(match.group(1))
        elif line.startswith(fan_label + ":"):
            match = fan_re.match(line)
            if not match:
                raise DataFormatError(f"Unexpected fan speed line from sensors: {line!r}")
            rpm = int(match.group(1))

    return temperature, rpm


class CpuMonitor:
    """
    Samples per-core CPU times through psutil and the temperature and fan
    speed through the ``sensors`` helper.
    """

    def __init__(self, topology: HardwareTopology):
        self.topology = topology
        self.expected_cores = topology.cores or psutil.cpu_count(logical=True)
        logger.debug(f"CpuMonitor initialized for {self.expected_cores} cores")

    def read_core_times(self) -> Tuple[CoreTimes, ...]:
        """
        Reads cumulative (total, idle) ticks for every core.

        :return: One CoreTimes per declared core
        :rtype: Tuple[CoreTimes, ...]
        :raises PreconditionError: If the number of cores differs from the
                                   declared topology
        :raises DataFormatError: If the counters lack the expected fields
        """
        per_cpu = psutil.cpu_times(percpu=True)
        if len(per_cpu) != self.expected_cores:
            raise PreconditionError(
                f"Unsupported CPU topology: found {len(per_cpu)} cores, expected {self.expected_cores}")

        cores = []
        for times in per_cpu:
            try:
                total = times.user + times.nice + times.system + times.idle
                idle = times.idle
            except AttributeError as e:
                raise DataFormatError(f"CPU times lack a required field: {e}") from e
            cores.append(CoreTimes(total=_to_ticks(total), idle=_to_ticks(idle)))
        return tuple(cores)

    def read_sensors(self) -> Tuple[float, int]:
        output = run_helper(self.topology.sensors_command, self.topology.sensors_timeout)
        return parse_sensors_output(output, self.topology.temperature_label, self.topology.fan_label)

    def sample(self) -> CpuSample:
        cores = self.read_core_times()
        temperature, rpm = self.read_sensors()
        sample = CpuSample(cores=cores, temperature=temperature, fan_rpm=rpm)
        logger.debug(f"CPU sample: {sample}")
        return sample
