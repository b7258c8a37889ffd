"""
Handler for the netinfo program: receive and transmit rates of one interface.
"""
import time
from typing import Callable, Optional

from genmon_info.command_handlers.base_handler import BaseInfoHandler
from genmon_info.config import ConfigManager, HardwareTopology, RunOptions
from genmon_info.core.cache_store import CacheStore, NetworkCacheRecord
from genmon_info.core.calculator import transfer_rate
from genmon_info.core.errors import EXIT_INTERFACE_DOWN, ResourceUnavailable, UsageError
from genmon_info.monitoring import NetworkMonitor
from genmon_info.ui.formatter import Fragment, format_interface_down, format_network
from genmon_info.utils import get_logger

logger = get_logger(__name__)


class NetInfoHandler(BaseInfoHandler):
    """
    Rates are derived from the byte counters and monotonic timestamp stored
    by the previous run. The first run reports rate 0 in both directions.
    """

    program = "netinfo"

    def __init__(self, config: ConfigManager, options: RunOptions,
                 cache: Optional[CacheStore] = None,
                 topology: Optional[HardwareTopology] = None,
                 clock: Callable[[], int] = time.monotonic_ns):
        super().__init__(config, options, cache, topology)
        self.clock = clock

    def execute(self) -> Fragment:
        interface = self.options.target
        if not interface:
            raise UsageError("netinfo requires a network interface")

        sample = NetworkMonitor(interface, clock=self.clock).sample()
        if sample is None:
            raise ResourceUnavailable(f"{interface} is down", EXIT_INTERFACE_DOWN,
                                      fragment=format_interface_down(interface, self.options).render())

        key = self.cache.key(self.program, interface)
        record = self.cache.load(key, NetworkCacheRecord)

        rx_rate = tx_rate = 0.0
        if record is not None:
            if sample.rx_bytes < record.rx_bytes or sample.tx_bytes < record.tx_bytes:
                logger.warning(f"Byte counters of {interface} decreased since the last run, resetting the baseline")
            else:
                elapsed = (sample.timestamp_ns - record.timestamp_ns) / 1e9
                bits = self.options.bits_per_sec
                min_elapsed = self.topology.min_elapsed
                rx_rate = transfer_rate(record.rx_bytes, sample.rx_bytes, elapsed, bits, min_elapsed)
                tx_rate = transfer_rate(record.tx_bytes, sample.tx_bytes, elapsed, bits, min_elapsed)

        self.cache.store(key, NetworkCacheRecord(rx_bytes=sample.rx_bytes, tx_bytes=sample.tx_bytes,
                                                 timestamp_ns=sample.timestamp_ns))
        logger.debug(f"{interface} rates: rx={rx_rate:.3f} tx={tx_rate:.3f}")

        return format_network(interface, rx_rate, tx_rate, sample.rx_bytes, sample.tx_bytes, self.options)
