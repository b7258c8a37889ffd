"""
Renders monitor results as the markup fragment read by the panel's
generic monitor widget:

    <img>ICON</img>
    <txt>LINE1
    LINE2</txt>
    <tool>TOOLTIP</tool>
    <bar>PERCENT</bar>

Every function here is pure; nothing is printed.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from genmon_info.config.options import RunOptions
from genmon_info.core.calculator import (
    GIB,
    MIB,
    blocks_to_gib,
    celsius_to_fahrenheit,
    disk_percent,
    memory_percent,
    memory_used,
    usage_percent
)
from genmon_info.core.samples import DiskSample, DiskTemperature, MemorySample


class Severity(Enum):
    """
    Severity tiers used by the rich markup mode.

    NORMAL values are shown as-is, the other tiers get increasing emphasis.
    """
    NORMAL = 0
    WARNING = 1
    ELEVATED = 2
    CRITICAL = 3


# Pango span attributes per tier
SEVERITY_STYLES: Dict[Severity, Optional[str]] = {
    Severity.NORMAL: None,
    Severity.WARNING: 'foreground="#e5c07b"',
    Severity.ELEVATED: 'foreground="#d19a66" weight="bold"',
    Severity.CRITICAL: 'foreground="#e06c75" weight="bold"',
}

# (warning, elevated, critical) lower bounds
TEMPERATURE_THRESHOLDS: Dict[Tuple[str, str], Tuple[float, float, float]] = {
    ('desktop', 'C'): (60.0, 70.0, 80.0),
    ('desktop', 'F'): (140.0, 158.0, 176.0),
    ('laptop', 'C'): (70.0, 80.0, 90.0),
    ('laptop', 'F'): (158.0, 176.0, 194.0),
}
USAGE_THRESHOLDS: Tuple[float, float, float] = (50.0, 75.0, 90.0)


@dataclass(frozen=True)
class Fragment:
    text: str
    tooltip: str
    icon: Optional[str] = None
    bar: Optional[int] = None

    def render(self) -> str:
        """
        :return: The fragment as printed to standard output
        :rtype: str
        """
        parts = []
        if self.icon:
            parts.append(f"<img>{self.icon}</img>")
        parts.append(f"<txt>{self.text}</txt>")
        parts.append(f"<tool>{self.tooltip}</tool>")
        if self.bar is not None:
            parts.append(f"<bar>{self.bar}</bar>")
        return "\n".join(parts) + "\n"


def classify(value: float, thresholds: Tuple[float, float, float]) -> Severity:
    """
    Maps a value to its severity tier.

    :param value: Value to classify
    :type value: float
    :param thresholds: Lower bounds of the WARNING, ELEVATED and CRITICAL tiers
    :type thresholds: Tuple[float, float, float]
    :return: The tier the value falls in
    :rtype: Severity
    """
    warning, elevated, critical = thresholds
    if value >= critical:
        return Severity.CRITICAL
    if value >= elevated:
        return Severity.ELEVATED
    if value >= warning:
        return Severity.WARNING
    return Severity.NORMAL


def emphasize(text: str, severity: Severity) -> str:
    style = SEVERITY_STYLES[severity]
    if style is None:
        return text
    return f"<span {style}>{text}</span>"


def percent_text(percent: int) -> str:
    """Two-digit percentage, or '100' so the column keeps three characters."""
    if percent < 100:
        return "%2d%%" % percent
    return "100"


def display_temperature(celsius: float, options: RunOptions) -> float:
    return celsius_to_fahrenheit(celsius) if options.fahrenheit else celsius


def format_cpu(percents: Sequence[int], temperature: float, fan_rpm: int,
               max_temperature: float, max_fan_rpm: int,
               options: RunOptions, hardware_class: str = 'desktop') -> Fragment:
    """
    Builds the cpuinfo fragment.

    Without ``cpu_usage`` the text shows temperature over fan speed. With it,
    the first half of the cores follows the temperature and the second half
    follows the fan speed.

    :param percents: Busy percentage per core
    :type percents: Sequence[int]
    :param temperature: Current temperature in Celsius
    :type temperature: float
    :param fan_rpm: Current fan speed
    :type fan_rpm: int
    :param max_temperature: Highest temperature observed, Celsius
    :type max_temperature: float
    :param max_fan_rpm: Highest fan speed observed
    :type max_fan_rpm: int
    :param options: Invocation options (unit, markup, icon, cpu_usage)
    :type options: RunOptions
    :param hardware_class: Selects the temperature severity bands
    :type hardware_class: str
    :return: The fragment
    :rtype: Fragment
    """
    unit = options.temperature_unit
    shown_temperature = display_temperature(temperature, options)
    shown_max = display_temperature(max_temperature, options)

    temperature_field = "%8s" % ("%3.1f°%s" % (shown_temperature, unit))
    rpm_field = "%7s" % ("%-4drpm" % fan_rpm)
    if options.markup:
        thresholds = TEMPERATURE_THRESHOLDS[(hardware_class, unit)]
        temperature_field = emphasize(temperature_field, classify(shown_temperature, thresholds))

    if options.cpu_usage:
        cells = []
        for percent in percents:
            cell = percent_text(percent)
            if options.markup:
                cell = emphasize(cell, classify(percent, USAGE_THRESHOLDS))
            cells.append(cell)
        half = (len(cells) + 1) // 2
        line1 = " ".join([temperature_field] + cells[:half])
        line2 = " ".join([rpm_field] + cells[half:])
    else:
        line1, line2 = temperature_field, rpm_field

    tooltip = (f"Maximum temperature observed: {shown_max:.1f}°{unit}\n"
               f"Maximum RPM observed: {max_fan_rpm}rpm")
    return Fragment(text=f"{line1}\n{line2}", tooltip=tooltip, icon=options.icon_path)


def _field_width(value: int, width: int) -> int:
    if value > 9999:
        own = 5
    elif value > 999:
        own = 4
    elif value > 99:
        own = 3
    else:
        own = 2
    return max(own, width)


def format_memory(sample: MemorySample, options: RunOptions) -> Fragment:
    """
    Builds the meminfo fragment from a sample in bytes.

    The text shows memory used excluding buffers/cache and its percentage,
    then the page cache and buffer sizes. The tooltip and bar count
    buffers/cache as used.

    :param sample: Memory statistics in bytes
    :type sample: MemorySample
    :param options: Invocation options (icon, percent_bar)
    :type options: RunOptions
    :return: The fragment
    :rtype: Fragment
    """
    used_m = memory_used(sample) // MIB
    cached_m = sample.cached // MIB
    buffers_m = sample.buffers // MIB
    width = _field_width(used_m, _field_width(cached_m, 1))

    text = (f"{used_m:>{width}}M {memory_percent(sample)}%\n"
            f"{cached_m:>{width}}M {buffers_m}M")

    allocated = sample.total - sample.free
    allocated_percent = usage_percent(allocated, sample.total)
    tooltip = (f"Total memory available: {sample.total // MIB}M\n"
               f"Memory currently being used: {allocated // MIB}M ({allocated_percent}%)")

    bar = allocated_percent if options.percent_bar else None
    return Fragment(text=text, tooltip=tooltip, icon=options.icon_path, bar=bar)


def _gib_text(value: float) -> str:
    if value > 100.0:
        return "%d" % int(value)
    return "%.1f" % value


def format_disk(sample: DiskSample, temperature: Optional[DiskTemperature], max_temperature: float,
                mount_path: str, device_path: str, options: RunOptions) -> Fragment:
    """
    Builds the diskinfo fragment.

    :param sample: Filesystem block counts
    :type sample: DiskSample
    :param temperature: Drive model and temperature, None when not read
    :type temperature: Optional[DiskTemperature]
    :param max_temperature: Highest drive temperature observed, Celsius
    :type max_temperature: float
    :param mount_path: Mount path given on the command line
    :type mount_path: str
    :param device_path: Block device backing the mount
    :type device_path: str
    :param options: Invocation options (unit, icon, percent_bar)
    :type options: RunOptions
    :return: The fragment
    :rtype: Fragment
    """
    unit = options.temperature_unit
    celsius = temperature.celsius if temperature else 0.0
    model = temperature.model if temperature else "n/a"
    shown_temperature = display_temperature(celsius, options)
    shown_max = display_temperature(max_temperature, options)

    total_g = blocks_to_gib(sample.total_blocks, sample.block_size)
    free_g = blocks_to_gib(sample.free_blocks, sample.block_size)
    used_g = total_g - free_g
    percent = disk_percent(sample)

    text = f"{int(shown_temperature)}°{unit}\n{_gib_text(used_g)}G"
    tooltip = (f"ID: {model}\n"
               f"Mount: {mount_path}  Device: {device_path}\n"
               f"Total: {total_g:.2f}G  Available: {free_g:.2f}G  Used: {used_g:.2f}G ({percent}%)\n"
               f"Maximum temperature observed: {int(shown_max)}°{unit}")

    bar = percent if options.percent_bar else None
    return Fragment(text=text, tooltip=tooltip, icon=options.icon_path, bar=bar)


def transfer_text(rate: float, total_bytes: int, receive: bool, bits_per_sec: bool) -> str:
    """
    Formats one direction of network traffic.

    A zero rate shows the running total in GiB instead.

    :param rate: kbit/s (bits_per_sec) or KiB/s
    :type rate: float
    :param total_bytes: Total bytes moved in this direction
    :type total_bytes: int
    :param receive: True for the receive direction
    :type receive: bool
    :param bits_per_sec: Whether ``rate`` is in kbit/s
    :type bits_per_sec: bool
    :return: Formatted cell
    :rtype: str
    """
    label = "Rx" if receive else "Tx"
    if rate == 0.0:
        return "%6.3fG" % (total_bytes / GIB)
    if bits_per_sec:
        if rate < 1000.0:
            return "%s %3dk" % (label, int(rate))
        return "%6.3fm" % (rate / 1000.0)
    if rate < 1000.0:
        return "%s %3dK" % (label, int(rate))
    return "%6dK" % int(rate)


def format_network(interface: str, rx_rate: float, tx_rate: float,
                   rx_total: int, tx_total: int, options: RunOptions) -> Fragment:
    """
    Builds the netinfo fragment. When the link is idle (both rates below one
    unit) the text shows totals instead of rates.
    """
    if rx_rate < 1.0 and tx_rate < 1.0:
        rx_rate = tx_rate = 0.0

    text = (f"{transfer_text(rx_rate, rx_total, True, options.bits_per_sec)}\n"
            f"{transfer_text(tx_rate, tx_total, False, options.bits_per_sec)}")
    tooltip = (f"Network interface: {interface}\n"
               f"Total data received: {transfer_text(0.0, rx_total, True, options.bits_per_sec)}\n"
               f"Total data sent: {transfer_text(0.0, tx_total, False, options.bits_per_sec)}")
    return Fragment(text=text, tooltip=tooltip, icon=options.icon_path)


def format_interface_down(interface: str, options: RunOptions) -> Fragment:
    return Fragment(text="   Down\n", tooltip=f"{interface} is down", icon=options.icon_path)
