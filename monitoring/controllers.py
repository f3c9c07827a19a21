"""
============================================================================
PING ORCHESTRATOR - CONTROLLERS
============================================================================
The envelope boundary. Everything below a controller may raise; nothing
above it does. Each operation returns a Response:

    get_*(host)      OK with the latest result, or BAD_REQUEST when the
                     host has never been probed
    post_*(host)     run the probe now:
                       invalid host                  -> BAD_REQUEST
                       command / OS detection error  -> SERVICE_UNAVAILABLE
                       anything else                 -> INTERNAL_SERVER_ERROR
    post_report(r)   OK (no payload) on 200/201, SERVICE_UNAVAILABLE on
                     any other status or a failed delivery
============================================================================
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from config.constants import (
    PROBE_STORE_NAMES,
    REPORT_ACCEPTED_STATUSES,
    OperatingSystem,
    ProbeKind,
)
from exceptions.probes import (
    NetworkToolsError,
    OperatingSystemNotFoundError,
    ReportError,
    TerminalCommandError,
)
from exceptions.validation import InvalidHostError
from monitoring.reports import ReportService
from monitoring.response import Response
from monitoring.schemas import PingIcmpDto, PingTcpIpDto, ReportDto, TraceRouteDto
from monitoring.services import IcmpProbeService, TcpProbeService, TraceRouteProbeService
from utils.logger import error_stack, get_logger
from utils.system import current_operating_system
from utils.terminal import TerminalTools
from utils.validators import HostValidator


logger = get_logger("Controller")

T = TypeVar("T")


class ProbeController:
    """
    Runs probes and looks up their latest results for the job bodies.
    """

    def __init__(
        self,
        icmp_service: IcmpProbeService,
        tcp_service: TcpProbeService,
        trace_route_service: TraceRouteProbeService,
        terminal: TerminalTools,
        os_detector: Callable[[], OperatingSystem] = current_operating_system,
    ):
        self.icmp_service = icmp_service
        self.tcp_service = tcp_service
        self.trace_route_service = trace_route_service
        self.terminal = terminal
        self.os_detector = os_detector

    # ------------------------------------------------------------------
    # BOUNDARY HELPERS
    # ------------------------------------------------------------------

    @staticmethod
    def _lookup(kind: ProbeKind, host: str, lookup: Callable[[str], Optional[T]]) -> Response[T]:
        try:
            result = lookup(host)
        except NetworkToolsError as e:
            return Response.bad_request(e.message)
        except Exception as e:
            logger.error(f"[{kind.name}] Lookup for {host} failed: {' '.join(error_stack(e))}")
            return Response.internal_error(e)

        if result is None:
            return Response.bad_request(
                f"Host {host} not found on {PROBE_STORE_NAMES[kind]} database"
            )
        return Response.ok(result)

    @staticmethod
    def _run(kind: ProbeKind, host: str, probe: Callable[[], T]) -> Response[T]:
        try:
            HostValidator.validate_host(host)
            return Response.ok(probe())
        except (InvalidHostError, NetworkToolsError) as e:
            return Response.bad_request(e.message)
        except (TerminalCommandError, OperatingSystemNotFoundError) as e:
            return Response.service_unavailable(e.message, e)
        except Exception as e:
            logger.error(f"[{kind.name}] Probe of {host} failed: {' '.join(error_stack(e))}")
            return Response.internal_error(e)

    # ------------------------------------------------------------------
    # ICMP
    # ------------------------------------------------------------------

    def get_icmp(self, host: str) -> Response[PingIcmpDto]:
        return self._lookup(ProbeKind.ICMP, host, self.icmp_service.get_current)

    def post_icmp(self, host: str) -> Response[PingIcmpDto]:
        def probe() -> PingIcmpDto:
            operating_system = self.os_detector()
            command = self.icmp_service.build_command(host, operating_system)
            execution = self.terminal.execute(command)
            return self.icmp_service.create_or_update(host, execution, operating_system)

        return self._run(ProbeKind.ICMP, host, probe)

    # ------------------------------------------------------------------
    # TCP
    # ------------------------------------------------------------------

    def get_tcp(self, host: str) -> Response[PingTcpIpDto]:
        return self._lookup(ProbeKind.TCP, host, self.tcp_service.get_current)

    def post_tcp(self, host: str) -> Response[PingTcpIpDto]:
        return self._run(ProbeKind.TCP, host, lambda: self.tcp_service.create_or_update(host))

    # ------------------------------------------------------------------
    # TRACEROUTE
    # ------------------------------------------------------------------

    def get_traceroute(self, host: str) -> Response[TraceRouteDto]:
        return self._lookup(ProbeKind.TRACEROUTE, host, self.trace_route_service.get_current)

    def post_traceroute(self, host: str) -> Response[TraceRouteDto]:
        def probe() -> TraceRouteDto:
            operating_system = self.os_detector()
            command = self.trace_route_service.build_command(host, operating_system)
            execution = self.terminal.execute(command)
            return self.trace_route_service.create_or_update(host, execution, operating_system)

        return self._run(ProbeKind.TRACEROUTE, host, probe)


class ReportController:
    """Envelope boundary around report delivery."""

    def __init__(self, report_service: ReportService):
        self.report_service = report_service

    def post_report(self, report: ReportDto) -> Response[None]:
        try:
            status_code = self.report_service.send_report(report)
        except ReportError as e:
            return Response.service_unavailable(e.message, e)
        except Exception as e:
            logger.error(f"[Report] Delivery for {report.host} failed: {' '.join(error_stack(e))}")
            return Response.internal_error(e)

        if status_code in REPORT_ACCEPTED_STATUSES:
            return Response.ok()

        error = ReportError(
            f"Report endpoint answered {status_code} for host {report.host}",
            status_code=status_code
        )
        return Response.service_unavailable(error.message, error)
