"""
Utility functions for the genmon-info utilities.
"""
import os
import tempfile
from typing import Optional

from genmon_info.core.errors import PreconditionError
from genmon_info.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ICON_DIR = "~/.genmon-icon"


def get_home_directory() -> str:
    """
    Returns the invoking user's home directory from ``$HOME``.

    :return: Home directory path
    :rtype: str
    :raises PreconditionError: If ``HOME`` is not set
    """
    home = os.environ.get("HOME")
    if not home:
        raise PreconditionError("HOME environment variable is not set")
    return home


def expand_home(path: str) -> str:
    """
    Expands a leading ``~`` using ``$HOME`` (never the password database).

    :param path: Path that may start with '~'
    :type path: str
    :return: Expanded path
    :rtype: str
    """
    if path == "~" or path.startswith("~/"):
        return get_home_directory() + path[1:]
    return path


def resolve_icon_path(program: str, icon: Optional[str] = None,
                      icon_dir: str = DEFAULT_ICON_DIR) -> str:
    """
    Resolves the icon shown in the panel for a monitor program.

    :param program: Monitor program name, used for the default icon name
    :type program: str
    :param icon: Icon given on the command line; absolute paths are used
                 as-is, relative names are looked up in the icon directory
    :type icon: Optional[str]
    :param icon_dir: Per-user icon directory
    :type icon_dir: str
    :return: Absolute icon path
    :rtype: str
    """
    if icon and icon.startswith("/"):
        return icon

    base_dir = expand_home(icon_dir)
    return os.path.join(base_dir, icon if icon else f"{program}.png")


def atomic_write_text(file_path: str, content: str) -> None:
    """
    Writes a text file by writing a temporary sibling and renaming it over
    the destination, so readers never see a half-written file.

    :param file_path: Destination path
    :type file_path: str
    :param content: Text to write
    :type content: str
    :raises OSError: If the file cannot be written
    """
    directory = os.path.dirname(file_path) or "."
    fd, temp_path = tempfile.mkstemp(prefix="." + os.path.basename(file_path) + ".", dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='ascii') as f:
            f.write(content)
        os.replace(temp_path, file_path)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise
    logger.debug(f"Wrote {len(content)} bytes to {file_path}")
