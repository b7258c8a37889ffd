"""
Handler for the diskinfo program: filesystem usage and drive temperature.
"""
from genmon_info.command_handlers.base_handler import BaseInfoHandler
from genmon_info.core.cache_store import DiskCacheRecord
from genmon_info.core.errors import UsageError
from genmon_info.monitoring import DiskMonitor
from genmon_info.ui.formatter import Fragment, format_disk
from genmon_info.utils import get_logger

logger = get_logger(__name__)


class DiskInfoHandler(BaseInfoHandler):
    """
    The cache remembers which block device backs the mount path, so the
    partition table is only scanned on the first run, along with the
    highest drive temperature seen. The record is rewritten only when it
    changes.
    """

    program = "diskinfo"

    def execute(self) -> Fragment:
        mount_path = self.options.target
        if not mount_path:
            raise UsageError("diskinfo requires a mount path")

        monitor = DiskMonitor(self.topology, mount_path)
        usage = monitor.usage()
        major, minor = monitor.device_number()

        key = self.cache.key(self.program, major, minor)
        record = self.cache.load(key, DiskCacheRecord)

        cache_update = False
        if record is not None and record.mount_path == mount_path:
            device_path = record.device_path
            max_temperature = record.max_temperature
        else:
            if record is not None:
                logger.info(f"Cached mount path {record.mount_path} differs from {mount_path}, rescanning")
            max_temperature = record.max_temperature if record is not None else 0.0
            device_path = monitor.find_device_path()
            cache_update = True

        temperature = monitor.temperature(self.options.disk_temp_device or device_path)
        if temperature is not None and temperature.celsius > max_temperature:
            max_temperature = temperature.celsius
            cache_update = True

        if cache_update:
            self.cache.store(key, DiskCacheRecord(mount_path=mount_path, device_path=device_path,
                                                  max_temperature=max_temperature))

        return format_disk(usage, temperature, max_temperature, mount_path, device_path, self.options)
