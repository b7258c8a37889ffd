"""
Memory monitor: kernel memory statistics through psutil.
"""
import psutil

from genmon_info.core.errors import PreconditionError
from genmon_info.core.samples import MemorySample
from genmon_info.utils import get_logger

logger = get_logger(__name__)

REQUIRED_FIELDS = ('total', 'free', 'buffers', 'cached')


class MemoryMonitor:
    """
    Reads total, free, buffers and page cache sizes (bytes).
    """

    def sample(self) -> MemorySample:
        """
        :return: Current memory statistics
        :rtype: MemorySample
        :raises PreconditionError: If the platform does not report buffers
                                   and page cache separately
        """
        stats = psutil.virtual_memory()
        missing = [field for field in REQUIRED_FIELDS if not hasattr(stats, field)]
        if missing:
            raise PreconditionError(f"Memory statistics lack required fields: {', '.join(missing)}")

        sample = MemorySample(total=int(stats.total), free=int(stats.free),
                              buffers=int(stats.buffers), cached=int(stats.cached))
        logger.debug(f"Memory sample: {sample}")
        return sample
