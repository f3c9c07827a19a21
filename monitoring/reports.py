"""
============================================================================
PING ORCHESTRATOR - REPORTS
============================================================================
When a probe fails, the job asks the ReportAssembler for a snapshot of
all three probes for that host and hands it to the ReportService.

ReportAssembler
---------------
The three "get current" lookups run concurrently on a dedicated pool so
a job waiting on them never occupies one of the workers it waits for.
Each lookup returns a ProbeFetch: the value, or the error that stopped
it. A failed lookup is logged and leaves its section empty; it never
costs the other two sections. Only a join that cannot complete
(cancelled, pool shut down, or the assembly timeout elapsed) raises
AggregationError.

ReportService
-------------
POSTs the report as camelCase JSON and returns the status code.
============================================================================
"""

from __future__ import annotations

from concurrent.futures import CancelledError, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from config.constants import REPORT_REQUEST_HEADERS, HTTPMethods, ProbeKind
from config.settings import ReportSettings
from exceptions.orchestration import AggregationError
from exceptions.probes import ReportError, TransportError
from monitoring.schemas import ReportDto
from utils.logger import get_logger, log_execution_time
from utils.network import HttpTransport


logger = get_logger("Report")

T = TypeVar("T")


# ============================================================================
# FAN-OUT RESULT
# ============================================================================

@dataclass(frozen=True)
class ProbeFetch(Generic[T]):
    """
    Outcome of one concurrent lookup.

    ``value`` is None both when the probe has no result yet and when the
    lookup failed; ``error`` tells the two apart.
    """
    kind: ProbeKind
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


# ============================================================================
# ASSEMBLER
# ============================================================================

class ReportAssembler:
    """
    Builds a ReportDto from the three probe services.

    Parameters
    ----------
    icmp_service, tcp_service, trace_route_service
        Anything with a ``get_current(host)`` method.
    max_workers : int
        Size of the lookup pool.
    timeout : Optional[float]
        Seconds to wait for the three lookups. None waits indefinitely.
    """

    def __init__(
        self,
        icmp_service: Any,
        tcp_service: Any,
        trace_route_service: Any,
        max_workers: int = 3,
        timeout: Optional[float] = None,
    ):
        self._lookups: Dict[ProbeKind, Callable[[str], Any]] = {
            ProbeKind.ICMP: icmp_service.get_current,
            ProbeKind.TCP: tcp_service.get_current,
            ProbeKind.TRACEROUTE: trace_route_service.get_current,
        }
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="report-fetch",
        )

    @staticmethod
    def _fetch(kind: ProbeKind, lookup: Callable[[str], Any], host: str) -> ProbeFetch:
        try:
            return ProbeFetch(kind, value=lookup(host))
        except Exception as e:
            logger.warning(f"[Report] Can't get {kind.description} for host {host}: {e!r}")
            return ProbeFetch(kind, error=e)

    def fetch_all(self, host: str) -> Dict[ProbeKind, ProbeFetch]:
        """
        Run the three lookups concurrently and wait for all of them.

        Raises
        ------
        AggregationError
            If the lookups cannot be submitted or joined.
        """
        description = f"Report for host {host}"

        try:
            futures: Dict[ProbeKind, Future] = {
                kind: self._executor.submit(self._fetch, kind, lookup, host)
                for kind, lookup in self._lookups.items()
            }
        except RuntimeError as e:
            raise AggregationError(
                f"Can't start the probe lookups for {description}",
                host=host,
                job=description,
                cause=e
            ) from e

        _, not_done = wait(futures.values(), timeout=self.timeout)
        if not_done:
            for future in not_done:
                future.cancel()
            raise AggregationError(
                f"Probe lookups for {description} did not finish within {self.timeout}s",
                host=host,
                job=description
            )

        outcomes: Dict[ProbeKind, ProbeFetch] = {}
        for kind, future in futures.items():
            try:
                outcomes[kind] = future.result()
            except CancelledError as e:
                raise AggregationError(
                    f"Probe lookup {kind.description} was cancelled for {description}",
                    host=host,
                    job=description,
                    cause=e
                ) from e

        return outcomes

    @log_execution_time
    def assemble(self, host: str) -> ReportDto:
        outcomes = self.fetch_all(host)
        report = ReportDto(
            host=host,
            ping_icmp=outcomes[ProbeKind.ICMP].value,
            ping_tcp_ip=outcomes[ProbeKind.TCP].value,
            trace_route=outcomes[ProbeKind.TRACEROUTE].value,
        )

        failed = [o.kind.value for o in outcomes.values() if o.failed]
        if failed:
            logger.debug(f"[Report] {host} assembled without {', '.join(failed)}")
        return report

    def shutdown(self, wait_for_lookups: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_lookups, cancel_futures=True)


# ============================================================================
# DELIVERY
# ============================================================================

class ReportService:
    """Sends aggregate reports to the configured endpoint."""

    def __init__(self, transport: HttpTransport, settings: ReportSettings):
        self.transport = transport
        self.settings = settings

    def send_report(self, report: ReportDto) -> int:
        """
        POST *report* and return the response status code.

        Raises
        ------
        ReportError
            If the report cannot be serialized or the request fails.
        """
        try:
            body = report.to_json()
        except ValueError as e:
            raise ReportError(f"Can't serialize the report for host {report.host}", cause=e) from e

        try:
            response = self.transport.request(
                self.settings.api_url,
                headers=dict(REPORT_REQUEST_HEADERS),
                method=HTTPMethods.POST,
                body=body,
                timeout_ms=self.settings.request_timeout,
            )
        except TransportError as e:
            raise ReportError(
                f"Can't send the report for host {report.host} to {self.settings.api_url}",
                cause=e
            ) from e

        logger.info(f"[Report] {report.host} → {self.settings.api_url} status {response.status_code}")
        return response.status_code
