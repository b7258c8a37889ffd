"""
Declared hardware and sensor layout, enumerated once at startup.

The monitors never hard-code core counts or sensor line labels; they read
them from the HardwareTopology built here from the configuration.
"""
import shlex
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from genmon_info.config.config_manager import ConfigManager
from genmon_info.core.errors import PreconditionError

HARDWARE_CLASSES = ("desktop", "laptop")


def _command(value: Any, key: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = shlex.split(value)
    if not isinstance(value, (list, tuple)) or not value or not all(isinstance(part, str) for part in value):
        raise PreconditionError(f"Invalid '{key}' configuration: must be a non-empty command")
    return tuple(value)


def _positive_number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise PreconditionError(f"Invalid '{key}' configuration: must be a positive number")
    return float(value)


@dataclass(frozen=True)
class HardwareTopology:
    cores: Optional[int]
    hardware_class: str
    sensors_command: Tuple[str, ...]
    sensors_timeout: float
    temperature_label: str
    fan_label: str
    read_disk_temperature: bool
    disk_temperature_command: Tuple[str, ...]
    disk_temperature_timeout: float
    min_elapsed: float

    @classmethod
    def from_config(cls, config: ConfigManager) -> 'HardwareTopology':
        """
        Builds and validates the topology from configuration values.

        :param config: Loaded configuration
        :type config: ConfigManager
        :return: Immutable topology
        :rtype: HardwareTopology
        :raises PreconditionError: If a value has the wrong type or range
        """
        cores = config.get('cpu.cores')
        if cores is not None and (isinstance(cores, bool) or not isinstance(cores, int) or cores <= 0):
            raise PreconditionError("Invalid 'cpu.cores' configuration: must be a positive integer")

        hardware_class = config.get('cpu.hardware_class', 'desktop')
        if hardware_class not in HARDWARE_CLASSES:
            raise PreconditionError(
                f"Invalid 'cpu.hardware_class' configuration: {hardware_class!r} not in {HARDWARE_CLASSES}")

        return cls(
            cores=cores,
            hardware_class=hardware_class,
            sensors_command=_command(config.get('sensors.command'), 'sensors.command'),
            sensors_timeout=_positive_number(config.get('sensors.timeout'), 'sensors.timeout'),
            temperature_label=str(config.get('sensors.temperature_label')),
            fan_label=str(config.get('sensors.fan_label')),
            read_disk_temperature=bool(config.get('disk.read_temperature', True)),
            disk_temperature_command=_command(config.get('disk.temperature_command'), 'disk.temperature_command'),
            disk_temperature_timeout=_positive_number(config.get('disk.temperature_timeout'), 'disk.temperature_timeout'),
            min_elapsed=_positive_number(config.get('network.min_elapsed'), 'network.min_elapsed'),
        )
