"""
Command-line entry points for the genmon-info utilities.

Each program (cpuinfo, diskinfo, meminfo, netinfo) runs one monitoring
cycle, prints the markup fragment for the panel's generic monitor widget
and exits. Exit codes: 0 success, 1 usage error, 2/3 resource unavailable,
4 environment precondition failure, 5 malformed data or cache.
"""
import argparse
import sys
from typing import List, NoReturn, Optional

from genmon_info.command_handlers import HANDLERS
from genmon_info.config import ConfigManager, RunOptions
from genmon_info.core.errors import (
    EXIT_OK,
    GenmonError,
    ResourceUnavailable,
    UsageError
)
from genmon_info.utils import get_logger, setup_logger, resolve_icon_path
from genmon_info.utils.logger import DEFAULT_CONSOLE_LEVEL_NAME
from genmon_info.version import version_banner

logger = get_logger(__name__)

ICON_DISABLE_FLAGS = ("-i", "--icon")
# short flags without a value, any of which may precede -i in one cluster
SWITCH_LETTERS = "bcdFhmpv"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad command lines as UsageError."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def _split_icon_cluster(arg: str) -> Optional[List[str]]:
    """
    Splits a short-flag cluster that contains ``i`` after other switches:
    ``-bi`` becomes ``['-b', '--no-icon']`` and ``-dinet.png`` becomes
    ``['-d', '-inet.png']``.

    :param arg: One command-line argument
    :type arg: str
    :return: The replacement arguments, or None when ``arg`` is no such cluster
    :rtype: Optional[List[str]]
    """
    if not arg.startswith("-") or arg.startswith("--") or len(arg) < 3:
        return None

    letters = arg[1:]
    for index, letter in enumerate(letters):
        if letter == "i":
            if index == 0:
                return None
            icon = letters[index + 1:]
            switches = [f"-{switch}" for switch in letters[:index]]
            return switches + ([f"-i{icon}"] if icon else ["--no-icon"])
        if letter not in SWITCH_LETTERS:
            return None
    return None


def _normalize_icon_args(argv: List[str]) -> List[str]:
    """
    ``-i``/``--icon`` take an optional value that must be attached
    (``-iNAME``, ``--icon=NAME``). A bare flag disables the icon, so it is
    rewritten to the hidden ``--no-icon`` flag before parsing; this keeps a
    following positional argument from being taken as the icon name.
    Clusters such as ``-bi`` are split first.
    """
    normalized = []
    for index, arg in enumerate(argv):
        if arg == "--":
            return normalized + argv[index:]
        cluster = _split_icon_cluster(arg)
        if cluster:
            normalized.extend(cluster)
        else:
            normalized.append("--no-icon" if arg in ICON_DISABLE_FLAGS else arg)
    return normalized


def build_parser(program: str) -> argparse.ArgumentParser:
    """
    Builds the argument parser of one monitor program.

    :param program: One of 'cpuinfo', 'diskinfo', 'meminfo', 'netinfo'
    :type program: str
    :return: Configured parser
    :rtype: argparse.ArgumentParser
    """
    parser = _ArgumentParser(prog=program, description=f"{program}: generic monitor panel plugin output.",
                             formatter_class=argparse.RawDescriptionHelpFormatter)

    if program == "cpuinfo":
        parser.add_argument('-c', '--cpuusage', action='store_true', help='Display CPU usage.')
    if program == "netinfo":
        parser.add_argument('-b', '--bitspersec', action='store_true', help='Display rates in bits/second.')
    parser.add_argument('-d', '--debug', action='store_true', help='Display debugging output.')
    if program in ("cpuinfo", "diskinfo"):
        parser.add_argument('-F', '--farenheit', action='store_true', help='Display temperature in farenheit.')
    parser.add_argument('-i', '--icon', metavar='FILE',
                        help='Set the icon filename (-iFILE or --icon=FILE); a bare -i disables the icon.')
    parser.add_argument('--no-icon', action='store_true', help=argparse.SUPPRESS)
    if program == "cpuinfo":
        parser.add_argument('-m', '--markup', action='store_true',
                            help='Highlight values by severity using rich markup.')
    if program in ("diskinfo", "meminfo"):
        parser.add_argument('-p', '--percentbar', action='store_true', help='Display the percent bar.')
    if program == "diskinfo":
        parser.add_argument('-t', '--disktemp', metavar='DISK', help='Set the disk path to read temperature from.')
    parser.add_argument('-v', '--version', action='version', version=version_banner(program),
                        help='Display version information.')
    parser.add_argument('--config', metavar='PATH', help='Read configuration from PATH.')

    if program == "diskinfo":
        parser.add_argument('mountpath', help='Mount path of the filesystem to monitor.')
    if program == "netinfo":
        parser.add_argument('interface', help='Network interface to monitor.')

    return parser


def _options_from_args(program: str, args: argparse.Namespace, config: ConfigManager) -> RunOptions:
    icon_path = None
    if not args.no_icon:
        icon_path = resolve_icon_path(program, args.icon, config.get('icons.directory'))

    return RunOptions(
        program=program,
        debug=args.debug,
        icon_path=icon_path,
        fahrenheit=getattr(args, 'farenheit', False),
        cpu_usage=getattr(args, 'cpuusage', False),
        markup=getattr(args, 'markup', False),
        percent_bar=getattr(args, 'percentbar', False),
        disk_temp_device=getattr(args, 'disktemp', None),
        bits_per_sec=getattr(args, 'bitspersec', False),
        target=getattr(args, 'mountpath', None) or getattr(args, 'interface', None),
        config_path=args.config,
    )


def run(program: str, argv: Optional[List[str]] = None) -> int:
    """
    Runs one monitor program and returns its exit code.

    :param program: One of the names in HANDLERS
    :type program: str
    :param argv: Command-line arguments without the program name;
                 defaults to ``sys.argv[1:]``
    :type argv: Optional[List[str]]
    :return: Process exit code
    :rtype: int
    """
    if program not in HANDLERS:
        raise ValueError(f"Unknown monitor program: {program}")

    parser = build_parser(program)
    try:
        args = parser.parse_args(_normalize_icon_args(list(sys.argv[1:] if argv is None else argv)))
    except UsageError as e:
        sys.stderr.write(parser.format_usage())
        sys.stderr.write(f"{program}: error: {e}\n")
        return e.exit_code

    console_level = 'DEBUG' if args.debug else DEFAULT_CONSOLE_LEVEL_NAME
    setup_logger(console_level_name=console_level)

    try:
        config = ConfigManager(args.config, required=args.config is not None)
        log_file = config.get('logging.file')
        if log_file:
            setup_logger(console_level_name=console_level,
                         file_level_name=config.get('logging.file_level', 'DEBUG'),
                         log_file_path=log_file,
                         max_bytes=config.get('logging.max_bytes', 1024 * 1024),
                         backup_count=config.get('logging.backup_count', 3))

        options = _options_from_args(program, args, config)
        logger.debug(f"Running {program} with {options}")
        fragment = HANDLERS[program](config, options).execute()

    except ResourceUnavailable as e:
        logger.warning(f"{program}: {e}")
        if e.fragment:
            sys.stdout.write(e.fragment)
        return e.exit_code
    except UsageError as e:
        sys.stderr.write(parser.format_usage())
        sys.stderr.write(f"{program}: error: {e}\n")
        return e.exit_code
    except GenmonError as e:
        logger.error(f"{program}: {e}", exc_info=args.debug)
        return e.exit_code

    sys.stdout.write(fragment.render())
    return EXIT_OK


def cpuinfo_main():
    sys.exit(run("cpuinfo"))


def diskinfo_main():
    sys.exit(run("diskinfo"))


def meminfo_main():
    sys.exit(run("meminfo"))


def netinfo_main():
    sys.exit(run("netinfo"))


def main():
    """
    ``python -m genmon_info PROGRAM [options]``: dispatch on the first argument.
    """
    if len(sys.argv) < 2 or sys.argv[1] not in HANDLERS:
        sys.stderr.write(f"Usage: python -m genmon_info {{{','.join(sorted(HANDLERS))}}} [options]\n")
        sys.exit(1)
    sys.exit(run(sys.argv[1], sys.argv[2:]))


if __name__ == '__main__':
    main()
