"""
Network monitor: per-interface byte counters through psutil.
"""
import time
from typing import Callable, Optional

import psutil

from genmon_info.core.samples import NetworkSample
from genmon_info.utils import get_logger

logger = get_logger(__name__)


class NetworkMonitor:
    """
    Samples the received/transmitted byte counters of one interface,
    stamped with the monotonic clock.
    """

    def __init__(self, interface: str, clock: Callable[[], int] = time.monotonic_ns):
        self.interface = interface
        self.clock = clock

    def sample(self) -> Optional[NetworkSample]:
        """
        :return: Counters of the interface, or None when the kernel does not
                 list it (interface absent / down)
        :rtype: Optional[NetworkSample]
        """
        counters = psutil.net_io_counters(pernic=True).get(self.interface)
        if counters is None:
            logger.debug(f"Interface {self.interface} not present in network statistics")
            return None

        sample = NetworkSample(rx_bytes=int(counters.bytes_recv), tx_bytes=int(counters.bytes_sent),
                               timestamp_ns=self.clock())
        logger.debug(f"Network sample for {self.interface}: {sample}")
        return sample
