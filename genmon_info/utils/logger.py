"""
Logger setup module for the genmon-info utilities.
Provides functions to configure logging based on command-line flags and
the optional configuration file.

Standard output belongs to the panel markup fragment, so console logging
always goes to standard error.
"""
import os
import sys
import logging
import logging.handlers
from typing import Optional, Dict, Tuple

ROOT_LOGGER_NAME = 'genmon_info'
DEFAULT_CONSOLE_LEVEL_NAME = 'WARNING'
DEFAULT_FILE_LEVEL_NAME = 'DEBUG'
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_loggers: Dict[str, logging.Logger] = {}


class _StderrHandler(logging.StreamHandler):
    """
    Console handler bound to whatever ``sys.stderr`` is at emit time.
    """

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def _get_log_level(level_name: str, default_level: int = logging.INFO) -> int:
    """
    Convert log level string to logging level constant.

    :param level_name: Name of the log level (e.g., 'DEBUG')
    :type level_name: str
    :param default_level: Default level to use if level_name is invalid
    :type default_level: int
    :return: The corresponding logging level constant
    :rtype: int
    """
    level_name_upper = str(level_name).upper()
    level = logging.getLevelName(level_name_upper)
    if isinstance(level, int):
        return level
    else:
        logging.warning(f"Invalid log level name '{level_name}'. Using default level {logging.getLevelName(default_level)}.")
        return default_level


def _check_directory_writable(directory_path: str) -> Tuple[bool, str]:
    """
    Check if a directory exists (creating it if needed) and is writable.

    :param directory_path: Path to the directory to check
    :type directory_path: str
    :return: Tuple (is_writable, message)
    :rtype: Tuple[bool, str]
    """
    if not directory_path:
        return False, "Directory path is empty"

    try:
        os.makedirs(directory_path, exist_ok=True)
    except OSError as e:
        return False, f"Error creating directory {directory_path}: {e}"

    if not os.path.isdir(directory_path):
        return False, f"{directory_path} exists but is not a directory"

    if not os.access(directory_path, os.W_OK):
        return False, f"Permission denied writing to directory {directory_path}"

    return True, f"Directory {directory_path} is writable"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    log_format: str = DEFAULT_LOG_FORMAT,
    console_level_name: str = DEFAULT_CONSOLE_LEVEL_NAME,
    file_level_name: str = DEFAULT_FILE_LEVEL_NAME,
    log_file_path: Optional[str] = None,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3
) -> logging.Logger:
    """
    Sets up (or reconfigures) a logger instance.

    Module loggers are children of the package logger, so configuring
    ``genmon_info`` once per invocation covers every module.

    :param name: The name for the logger
    :type name: str
    :param log_format: The format string for log messages
    :type log_format: str
    :param console_level_name: Logging level for console (stderr) output
    :type console_level_name: str
    :param file_level_name: Logging level for file output
    :type file_level_name: str
    :param log_file_path: Path to the log file. If None, file logging is disabled
    :type log_file_path: Optional[str]
    :param max_bytes: Maximum size of the log file before rotation
    :type max_bytes: int
    :param backup_count: Number of backup log files to keep
    :type backup_count: int
    :return: The configured logger instance
    :rtype: logging.Logger
    """
    logger = logging.getLogger(name)
    console_level = _get_log_level(console_level_name, logging.WARNING)
    file_level = _get_log_level(file_level_name, logging.DEBUG)
    lowest_level = min(console_level, file_level) if log_file_path else console_level
    logger.setLevel(lowest_level)

    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)

    console_handler = _StderrHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_file_path = os.path.expanduser(log_file_path)
        log_dir = os.path.dirname(log_file_path) or os.getcwd()

        is_writable, msg = _check_directory_writable(log_dir)
        if not is_writable:
            logger.warning(f"Cannot use log directory: {msg}. Logging to console only.")
        else:
            try:
                file_handler = logging.handlers.RotatingFileHandler(
                    log_file_path,
                    maxBytes=max_bytes,
                    backupCount=backup_count,
                    encoding='utf-8'
                )
                file_handler.setLevel(file_level)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)
                logger.debug(f"File logging enabled to: {log_file_path}")
            except OSError as e:
                logger.warning(f"Failed to set up file logging to {log_file_path}: {e}. Logging to console only.")

    _loggers[name] = logger
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance by name.

    Loggers inside the package are left without handlers and propagate to
    the package logger, which is set up with default settings on first use.

    :param name: The name of the logger to retrieve
    :type name: str
    :return: The logger instance
    :rtype: logging.Logger
    """
    if ROOT_LOGGER_NAME not in _loggers:
        setup_logger(ROOT_LOGGER_NAME)

    if name == ROOT_LOGGER_NAME:
        return _loggers[ROOT_LOGGER_NAME]

    return logging.getLogger(name)
