"""
Per-user, per-resource cache of the previous sample and running maxima.

Each monitored resource owns one small text file in a fast, usually
memory-backed directory (``/dev/shm``). Records are whitespace-separated
ASCII fields, one record per line. The file is read once at the start of a
run and rewritten once at the end; writes go through a temporary file and
a rename, but there is no locking between concurrent invocations, so the
last writer wins.
"""
import os
import re
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple, Type, TypeVar

from genmon_info.core.errors import CacheFormatError, PreconditionError
from genmon_info.core.samples import CoreTimes
from genmon_info.utils.logger import get_logger
from genmon_info.utils.utils import atomic_write_text

logger = get_logger(__name__)

DEFAULT_CACHE_DIR = "/dev/shm"

R = TypeVar('R', bound='CacheRecord')

_ESCAPE_RE = re.compile(r'[\s\\]')
_UNESCAPE_RE = re.compile(r'\\([0-7]{3})')


def _escape_field(value: str) -> str:
    """Octal-escapes whitespace and backslashes, as /proc/mounts does."""
    return _ESCAPE_RE.sub(lambda m: "\\%03o" % ord(m.group(0)), value)


def _unescape_field(value: str) -> str:
    return _UNESCAPE_RE.sub(lambda m: chr(int(m.group(1), 8)), value)


def _split_line(line: str, count: int, what: str) -> List[str]:
    fields = line.split()
    if len(fields) != count:
        raise CacheFormatError(f"{what}: expected {count} fields, found {len(fields)} in {line!r}")
    return fields


class CacheRecord(ABC):
    """
    Abstract base class for the records kept in a cache file.

    Subclasses define the line layout of one resource type.
    """

    @abstractmethod
    def to_lines(self) -> List[str]:
        """
        Serialises the record.

        :return: Lines of whitespace-separated fields, without newlines
        :rtype: List[str]
        """
        pass

    @classmethod
    @abstractmethod
    def from_lines(cls: Type[R], lines: List[str], **kwargs) -> R:
        """
        Parses a record written by ``to_lines``.

        :param lines: Lines of the cache file, without newlines
        :type lines: List[str]
        :raises CacheFormatError: If the lines do not match the layout
        """
        pass


@dataclass(frozen=True)
class CpuCacheRecord(CacheRecord):
    """Per-core (total, idle) ticks, then the maximum temperature and fan speed."""
    cores: Tuple[CoreTimes, ...]
    max_temperature: float
    max_fan_rpm: int

    def to_lines(self) -> List[str]:
        lines = [f"{core.total} {core.idle}" for core in self.cores]
        lines.append(f"{self.max_temperature:.1f} {self.max_fan_rpm}")
        return lines

    @classmethod
    def from_lines(cls, lines: List[str], core_count: Optional[int] = None) -> 'CpuCacheRecord':
        if not lines:
            raise CacheFormatError("CPU cache record is empty")
        if core_count is not None and len(lines) != core_count + 1:
            raise CacheFormatError(f"CPU cache record has {len(lines) - 1} core lines, expected {core_count}")

        try:
            cores = []
            for line in lines[:-1]:
                total, idle = _split_line(line, 2, "CPU core counters")
                cores.append(CoreTimes(total=int(total), idle=int(idle)))
            max_temperature, max_fan_rpm = _split_line(lines[-1], 2, "CPU maxima")
            return cls(cores=tuple(cores), max_temperature=float(max_temperature), max_fan_rpm=int(max_fan_rpm))
        except ValueError as e:
            raise CacheFormatError(f"CPU cache record is not numeric: {e}") from e


@dataclass(frozen=True)
class DiskCacheRecord(CacheRecord):
    """Mount path, resolved device path and maximum disk temperature."""
    mount_path: str
    device_path: str
    max_temperature: float

    def to_lines(self) -> List[str]:
        return [f"{_escape_field(self.mount_path)} {_escape_field(self.device_path)} {self.max_temperature:f}"]

    @classmethod
    def from_lines(cls, lines: List[str]) -> 'DiskCacheRecord':
        if len(lines) != 1:
            raise CacheFormatError(f"Disk cache record must be one line, found {len(lines)}")
        mount_path, device_path, max_temperature = _split_line(lines[0], 3, "Disk record")
        try:
            return cls(mount_path=_unescape_field(mount_path),
                       device_path=_unescape_field(device_path),
                       max_temperature=float(max_temperature))
        except ValueError as e:
            raise CacheFormatError(f"Disk cache temperature is not numeric: {e}") from e


@dataclass(frozen=True)
class NetworkCacheRecord(CacheRecord):
    """Received and transmitted byte counters with their monotonic timestamp."""
    rx_bytes: int
    tx_bytes: int
    timestamp_ns: int

    def to_lines(self) -> List[str]:
        return [f"{self.rx_bytes} {self.tx_bytes} {self.timestamp_ns}"]

    @classmethod
    def from_lines(cls, lines: List[str]) -> 'NetworkCacheRecord':
        if len(lines) != 1:
            raise CacheFormatError(f"Network cache record must be one line, found {len(lines)}")
        rx_bytes, tx_bytes, timestamp_ns = _split_line(lines[0], 3, "Network record")
        try:
            return cls(rx_bytes=int(rx_bytes), tx_bytes=int(tx_bytes), timestamp_ns=int(timestamp_ns))
        except ValueError as e:
            raise CacheFormatError(f"Network cache record is not numeric: {e}") from e


def default_cache_directory() -> str:
    """
    Returns ``/dev/shm`` when present, otherwise the system temp directory.

    :return: Cache directory path
    :rtype: str
    """
    if os.path.isdir(DEFAULT_CACHE_DIR):
        return DEFAULT_CACHE_DIR
    return tempfile.gettempdir()


class CacheStore:
    """
    Loads and stores cache records keyed by resource identity.
    """

    def __init__(self, directory: Optional[str] = None, uid: Optional[int] = None):
        """
        Initialize the cache store.

        :param directory: Directory holding the cache files; defaults to
                          ``/dev/shm`` or the system temp directory
        :type directory: Optional[str]
        :param uid: User id made part of every key; defaults to the real uid
        :type uid: Optional[int]
        """
        self.directory = directory or default_cache_directory()
        self.uid = os.getuid() if uid is None else uid
        logger.debug(f"CacheStore initialized. Directory: {self.directory}, uid: {self.uid}")

    def key(self, program: str, *identity) -> str:
        """
        Builds the resource key: program name, identifying attributes
        (device numbers, interface name), then the user id.

        :param program: Monitor program name
        :type program: str
        :param identity: Extra identifying attributes of the resource
        :return: Resource key, also used as the file name
        :rtype: str
        """
        parts = [program] + [str(part).replace(os.sep, "_") for part in identity] + [str(self.uid)]
        return ".".join(parts)

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, key)

    def load(self, key: str, record_type: Type[R], **kwargs) -> Optional[R]:
        """
        Reads the record for a resource.

        :param key: Resource key from ``key()``
        :type key: str
        :param record_type: CacheRecord subclass describing the layout
        :type record_type: Type[CacheRecord]
        :param kwargs: Extra arguments for ``record_type.from_lines``
        :return: The record, or None when there is none yet (first run)
        :rtype: Optional[CacheRecord]
        :raises CacheFormatError: If the file exists but cannot be parsed
        :raises PreconditionError: If the file exists but cannot be read
        """
        path = self.path_for(key)
        try:
            with open(path, 'r', encoding='ascii') as f:
                lines = [line.rstrip('\n') for line in f if line.strip()]
        except FileNotFoundError:
            logger.debug(f"No cache record at {path}, first run")
            return None
        except UnicodeDecodeError as e:
            raise CacheFormatError(f"Cache file {path} is not ASCII: {e}") from e
        except OSError as e:
            raise PreconditionError(f"Cannot read cache file {path}: {e}") from e

        try:
            record = record_type.from_lines(lines, **kwargs)
        except CacheFormatError as e:
            raise CacheFormatError(f"Malformed cache file {path}: {e}") from e

        logger.debug(f"Loaded cache record from {path}: {record}")
        return record

    def store(self, key: str, record: CacheRecord) -> None:
        """
        Replaces the record for a resource (full overwrite).

        :param key: Resource key from ``key()``
        :type key: str
        :param record: Record to persist
        :type record: CacheRecord
        :raises PreconditionError: If the cache directory is not writable
        """
        path = self.path_for(key)
        try:
            os.makedirs(self.directory, exist_ok=True)
            atomic_write_text(path, "\n".join(record.to_lines()) + "\n")
        except OSError as e:
            raise PreconditionError(f"Cannot write cache file {path}: {e}") from e
        logger.debug(f"Stored cache record to {path}: {record}")
