"""
Immutable per-invocation options parsed from the command line.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RunOptions:
    """
    Flags of one monitor invocation, threaded through handlers, monitors
    and the formatter instead of module-level globals.

    ``icon_path`` is None when the icon is disabled.
    """
    program: str
    debug: bool = False
    icon_path: Optional[str] = None
    fahrenheit: bool = False
    cpu_usage: bool = False
    markup: bool = False
    percent_bar: bool = False
    disk_temp_device: Optional[str] = None
    bits_per_sec: bool = False
    target: Optional[str] = None
    config_path: Optional[str] = None

    @property
    def temperature_unit(self) -> str:
        return 'F' if self.fahrenheit else 'C'
