"""
Base handler class providing common functionality for all monitor programs.
"""
from abc import ABC, abstractmethod
from typing import Optional

from genmon_info.config import ConfigManager, HardwareTopology, RunOptions
from genmon_info.core.cache_store import CacheStore
from genmon_info.ui.formatter import Fragment
from genmon_info.utils import get_logger

logger = get_logger(__name__)


class BaseInfoHandler(ABC):
    """
    Abstract base class for the monitor program handlers.

    A handler runs one sample/cache/delta cycle for its resource: take a
    sample, load the previous record, derive the metric, write the updated
    record and build the output fragment. All specific handlers (e.g.,
    CpuInfoHandler, NetInfoHandler) should inherit from this class.
    """

    program: str = ""

    def __init__(self, config: ConfigManager, options: RunOptions,
                 cache: Optional[CacheStore] = None,
                 topology: Optional[HardwareTopology] = None):
        """
        Initialize the base handler.

        :param config: The configuration manager instance
        :type config: ConfigManager
        :param options: Options of this invocation
        :type options: RunOptions
        :param cache: Cache store; built from ``cache.directory`` when omitted
        :type cache: Optional[CacheStore]
        :param topology: Hardware layout; built from the configuration when omitted
        :type topology: Optional[HardwareTopology]
        :raises ValueError: If the config parameter is None
        """
        if not config:
            raise ValueError("ConfigManager instance is required for BaseInfoHandler.")
        self.config = config
        self.options = options
        self.topology = topology or HardwareTopology.from_config(config)
        self.cache = cache or CacheStore(config.get('cache.directory'))
        logger.debug(f"{self.__class__.__name__} initialized.")

    @abstractmethod
    def execute(self) -> Fragment:
        """
        Run one monitoring cycle.

        :return: The fragment to print
        :rtype: Fragment
        :raises GenmonError: Any failure that ends the invocation; a
                             ResourceUnavailable may carry its own fragment
        """
        pass
