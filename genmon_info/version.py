"""
Version information for the genmon-info utilities.

This file contains version information shared by the four monitor programs
(cpuinfo, diskinfo, meminfo, netinfo), including the primary version string
and the banner printed by ``--version``.
Version follows semantic versioning (https://semver.org/): MAJOR.MINOR.PATCH
"""

# Version components
MAJOR = 1
MINOR = 1
PATCH = 0

# Full version string
__version__ = f"{MAJOR}.{MINOR}.{PATCH}"
__app_name__ = "genmon-info"

COPYRIGHT = "(C) 2013 Digirium, see <https://github.com/Digirium>"
LICENSE_NOTE = "Released under the GNU GPL."


def version_banner(program: str) -> str:
    """
    Builds the text shown by the ``-v/--version`` flag of a monitor program.

    :param program: Name of the monitor program (e.g. 'cpuinfo')
    :type program: str
    :return: Two-line version banner
    :rtype: str
    """
    return f"{program} {__version__} - {COPYRIGHT}\n{LICENSE_NOTE}"
