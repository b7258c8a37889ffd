"""
Disk monitor: filesystem usage, backing device and drive temperature.
"""
import os
import re
from typing import Optional, Tuple

import psutil

from genmon_info.config.topology import HardwareTopology
from genmon_info.core.errors import (
    DataFormatError,
    EXIT_FILESYSTEM_UNAVAILABLE,
    EXIT_MOUNT_UNAVAILABLE,
    PreconditionError,
    ResourceUnavailable
)
from genmon_info.core.samples import DiskSample, DiskTemperature
from genmon_info.monitoring.helper_command import run_helper
from genmon_info.utils import get_logger

logger = get_logger(__name__)

_NUMBER_RE = re.compile(r'\s*(-?\d+(?:\.\d+)?)')


def parse_hddtemp_output(output: str) -> DiskTemperature:
    """
    Parses the first line of ``hddtemp`` output, ``DEVICE: MODEL: 35°C``.

    A drive that reports no number (e.g. "drive is sleeping") reads as 0.

    :param output: Standard output of the hddtemp helper
    :type output: str
    :return: Drive model and temperature in Celsius
    :rtype: DiskTemperature
    :raises DataFormatError: If the line does not have the three fields
    """
    line = output.splitlines()[0] if output else ""
    parts = line.split(": ")
    if len(parts) < 3:
        raise DataFormatError(f"Unexpected hddtemp output: {line!r}")

    model = ": ".join(parts[1:-1]).strip()
    match = _NUMBER_RE.match(parts[-1])
    celsius = float(match.group(1)) if match else 0.0
    if not match:
        logger.debug(f"No temperature reported for {parts[0]}: {parts[-1]!r}")
    return DiskTemperature(model=model, celsius=celsius)


class DiskMonitor:
    """
    Samples one mounted filesystem.
    """

    def __init__(self, topology: HardwareTopology, mount_path: str):
        self.topology = topology
        self.mount_path = mount_path

    def usage(self) -> DiskSample:
        """
        :return: Block counts of the filesystem
        :rtype: DiskSample
        :raises ResourceUnavailable: If the filesystem cannot be queried
        """
        try:
            stats = os.statvfs(self.mount_path)
        except OSError as e:
            raise ResourceUnavailable(f"Cannot stat filesystem {self.mount_path}: {e}",
                                      EXIT_FILESYSTEM_UNAVAILABLE) from e
        sample = DiskSample(total_blocks=stats.f_blocks, free_blocks=stats.f_bfree,
                            block_size=stats.f_frsize or stats.f_bsize)
        logger.debug(f"Disk sample for {self.mount_path}: {sample}")
        return sample

    def device_number(self) -> Tuple[int, int]:
        """
        :return: (major, minor) of the device holding the mount path
        :rtype: Tuple[int, int]
        :raises ResourceUnavailable: If the mount path cannot be stat'ed
        """
        try:
            st_dev = os.stat(self.mount_path).st_dev
        except OSError as e:
            raise ResourceUnavailable(f"Cannot stat mount path {self.mount_path}: {e}",
                                      EXIT_MOUNT_UNAVAILABLE) from e
        return os.major(st_dev), os.minor(st_dev)

    def find_device_path(self) -> str:
        """
        Scans the partition table for the block device backing the mount path:
        the first entry on the same device whose device name is a path.

        :return: Device path, e.g. '/dev/sda1'
        :rtype: str
        :raises PreconditionError: If no such entry exists
        """
        target_dev = os.stat(self.mount_path).st_dev
        for partition in psutil.disk_partitions(all=True):
            try:
                if os.stat(partition.mountpoint).st_dev != target_dev:
                    continue
            except OSError:
                continue
            if partition.device.startswith('/'):
                logger.debug(f"Mount {self.mount_path} is backed by {partition.device}")
                return partition.device

        raise PreconditionError(f"No block device found for mount path {self.mount_path}")

    def temperature(self, device_path: str) -> Optional[DiskTemperature]:
        """
        Queries the drive temperature with the hddtemp helper.

        :param device_path: Device to query
        :type device_path: str
        :return: Model and temperature, or None when disabled by configuration
        :rtype: Optional[DiskTemperature]
        """
        if not self.topology.read_disk_temperature:
            return None
        command = list(self.topology.disk_temperature_command) + [device_path]
        output = run_helper(command, self.topology.disk_temperature_timeout)
        return parse_hddtemp_output(output)
