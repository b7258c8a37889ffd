"""
Error taxonomy and process exit codes for the genmon-info utilities.

Every failure that ends an invocation is raised as a subclass of
GenmonError carrying the exit code of the process. ``main`` is the only
place these are caught.
"""
from typing import Optional

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FILESYSTEM_UNAVAILABLE = 2
EXIT_MOUNT_UNAVAILABLE = 3
EXIT_INTERFACE_DOWN = 3
EXIT_PRECONDITION = 4
EXIT_DATA_FORMAT = 5


class GenmonError(Exception):
    """Base class for all errors that end a monitor invocation."""

    exit_code = EXIT_PRECONDITION

    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code

    def __str__(self):
        return self.message


class UsageError(GenmonError):
    """Bad command line: unknown flag, missing positional argument."""

    exit_code = EXIT_USAGE


class PreconditionError(GenmonError):
    """
    The environment does not match what the monitor needs: unsupported
    hardware topology, missing HOME, missing or failing helper command,
    unreadable data source or configuration.
    """

    exit_code = EXIT_PRECONDITION


class DataFormatError(GenmonError):
    """A data source returned content that does not match its fixed layout."""

    exit_code = EXIT_DATA_FORMAT


class CacheFormatError(DataFormatError):
    """A cache record could not be parsed."""


class ResourceUnavailable(GenmonError):
    """
    The monitored resource (filesystem, network interface) is not there.

    Unlike the other errors this one may carry a minimal markup fragment
    that is still printed, so the panel shows the resource as unavailable.
    """

    def __init__(self, message: str, exit_code: int, fragment: Optional[str] = None):
        super().__init__(message, exit_code)
        self.fragment = fragment
