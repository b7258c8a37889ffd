"""
Handler for the meminfo program. Memory usage needs no previous sample,
so this handler never touches the cache.
"""
from genmon_info.command_handlers.base_handler import BaseInfoHandler
from genmon_info.monitoring import MemoryMonitor
from genmon_info.ui.formatter import Fragment, format_memory


class MemInfoHandler(BaseInfoHandler):

    program = "meminfo"

    def execute(self) -> Fragment:
        return format_memory(MemoryMonitor().sample(), self.options)
