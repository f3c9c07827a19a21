"""
Operating system detection for Ping Orchestrator.

Only the family matters: it decides which command template is used
and how an ICMP probe is evaluated.
"""

from __future__ import annotations

import platform
from typing import Optional

from config.constants import OperatingSystem
from exceptions.probes import OperatingSystemNotFoundError


WINDOWS_SYSTEMS = ("windows", "cygwin", "msys")
UNIX_SYSTEMS = ("linux", "darwin", "freebsd", "openbsd", "netbsd", "dragonfly", "sunos", "aix")


def current_operating_system(system_name: Optional[str] = None) -> OperatingSystem:
    """
    Classify the running platform.

    Args:
        system_name: Name to classify instead of ``platform.system()``

    Raises:
        OperatingSystemNotFoundError: if the platform is in neither family
    """
    name = system_name if system_name is not None else platform.system()
    lowered = name.strip().lower()

    if lowered.startswith(WINDOWS_SYSTEMS):
        return OperatingSystem.WINDOWS

    if lowered.startswith(UNIX_SYSTEMS):
        return OperatingSystem.UNIX

    raise OperatingSystemNotFoundError(name or "<unknown>")
