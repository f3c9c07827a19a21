"""
============================================================================
PING ORCHESTRATOR - PROBE EVALUATORS
============================================================================
Pure rules that turn raw evidence into a success flag, and the rule that
turns a host into a command line.

ICMP        Unix: exit code 0.  Windows: exit code 0 and zero packet loss
            in the output (Windows ping can exit 0 with every packet lost).
TCP         Any status code in [100, 599]. -1 means no response at all.
Traceroute  Exit code 0 on every OS.

A ":port" suffix on a host is dropped before it is put into a command,
so "example.com:8080" and "example.com" produce the same command.
============================================================================
"""

from config.constants import (
    HOST_PLACEHOLDER,
    SUCCESS_STATUS_RANGE,
    WINDOWS_INTERPRETER_PREFIX,
    WINDOWS_ZERO_LOSS_MARKER,
    OperatingSystem,
)
from config.settings import CommandTemplateSettings
from database.models import CommandExecution
from utils.validators import HostValidator


def strip_port(host: str) -> str:
    """Return *host* without anything from the first ':' on."""
    return HostValidator.split_host_port(host)[0]


def render_command(template: str, host: str) -> str:
    """Put the port-less host into *template* at the HOST placeholder."""
    return template.replace(HOST_PLACEHOLDER, strip_port(host))


# ============================================================================
# ICMP
# ============================================================================

class IcmpEvaluator:
    """Builds ping commands and decides whether a ping succeeded."""

    def __init__(self, templates: CommandTemplateSettings):
        self.templates = templates

    def command_for(self, host: str, operating_system: OperatingSystem) -> str:
        return render_command(self.templates.template_for(operating_system), host)

    @staticmethod
    def evaluate(operating_system: OperatingSystem, execution: CommandExecution) -> bool:
        if execution.exit_code != 0:
            return False
        if operating_system == OperatingSystem.WINDOWS:
            return WINDOWS_ZERO_LOSS_MARKER in execution.result
        return True


# ============================================================================
# TCP
# ============================================================================

class TcpEvaluator:
    """
    Decides whether a TCP/IP ping succeeded.

    Any well-formed HTTP status counts: the probe checks reachability,
    not application health.
    """

    @staticmethod
    def evaluate(status_code: int) -> bool:
        low, high = SUCCESS_STATUS_RANGE
        return low <= status_code <= high


# ============================================================================
# TRACEROUTE
# ============================================================================

class TraceRouteEvaluator:
    """Builds traceroute commands and decides whether one succeeded."""

    def __init__(self, templates: CommandTemplateSettings):
        self.templates = templates

    def command_for(self, host: str, operating_system: OperatingSystem) -> str:
        command = render_command(self.templates.template_for(operating_system), host)
        if operating_system == OperatingSystem.WINDOWS:
            return WINDOWS_INTERPRETER_PREFIX + command
        return command

    @staticmethod
    def evaluate(execution: CommandExecution) -> bool:
        return execution.exit_code == 0
