"""
Runs external sensor-query helpers (``sensors``, ``hddtemp``) using subprocess.
"""
import subprocess
from typing import Sequence

from genmon_info.core.errors import PreconditionError
from genmon_info.utils import get_logger

logger = get_logger(__name__)


def run_helper(command: Sequence[str], timeout: float) -> str:
    """
    Runs a helper command without a shell and returns its standard output.

    :param command: Program and arguments
    :type command: Sequence[str]
    :param timeout: Seconds to wait before the helper is killed
    :type timeout: float
    :return: Captured standard output
    :rtype: str
    :raises PreconditionError: If the helper is missing, not executable,
                               times out or exits with a non-zero status
    """
    command = list(command)
    logger.debug(f"Running helper: {' '.join(command)} (timeout={timeout}s)")

    try:
        process = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding='utf-8',
            errors='replace',
            timeout=timeout,
            check=False
        )
    except subprocess.TimeoutExpired as e:
        logger.error(f"Helper '{command[0]}' timed out after {timeout} seconds")
        raise PreconditionError(f"Command timed out after {timeout} seconds: {' '.join(command)}") from e
    except FileNotFoundError as e:
        logger.error(f"Helper not found: '{command[0]}'")
        raise PreconditionError(f"Command not found: '{command[0]}'. Ensure it's installed and in the PATH.") from e
    except PermissionError as e:
        logger.error(f"Permission denied executing helper '{command[0]}': {e}")
        raise PreconditionError(f"Permission denied to execute command: {e}") from e

    if process.returncode != 0:
        stderr = process.stderr.strip() if process.stderr else ""
        logger.error(f"Helper '{command[0]}' failed. ExitCode={process.returncode}, STDERR: {stderr}")
        raise PreconditionError(f"{' '.join(command)} failed with exit code {process.returncode}: {stderr}")

    return process.stdout or ""
