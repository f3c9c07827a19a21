"""Tests for report assembly and delivery."""

import json
import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from config.constants import ProbeKind
from exceptions.orchestration import AggregationError
from exceptions.probes import ReportError
from monitoring.reports import ReportAssembler, ReportService
from monitoring.schemas import PingIcmpDto, PingTcpIpDto, ReportDto, TerminalDto, TraceRouteDto


NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def terminal_dto(command: str = "ping -c 5 10.0.0.1", exit_code: int = 0) -> TerminalDto:
    return TerminalDto(command=command, exit_code=exit_code, result="", time=NOW)


def lookup_returning(value) -> MagicMock:
    service = MagicMock()
    service.get_current.return_value = value
    return service


@pytest.fixture
def icmp_dto() -> PingIcmpDto:
    return PingIcmpDto(host="10.0.0.1", terminal=terminal_dto(exit_code=1), success=False)


@pytest.fixture
def tcp_dto() -> PingTcpIpDto:
    return PingTcpIpDto(
        url="http://10.0.0.1", response_code=-1, response_time=500, time=NOW, success=False
    )


@pytest.fixture
def trace_route_dto() -> TraceRouteDto:
    return TraceRouteDto(host="10.0.0.1", terminal=terminal_dto("traceroute 10.0.0.1"), success=True)


class TestReportAssembler:
    """Tests for ReportAssembler."""

    def test_assemble_all_sections(self, icmp_dto, tcp_dto, trace_route_dto) -> None:
        """Test that every section comes from its own service."""
        assembler = ReportAssembler(
            lookup_returning(icmp_dto), lookup_returning(tcp_dto), lookup_returning(trace_route_dto)
        )
        try:
            report = assembler.assemble("10.0.0.1")
        finally:
            assembler.shutdown()

        assert report.host == "10.0.0.1"
        assert report.ping_icmp == icmp_dto
        assert report.ping_tcp_ip == tcp_dto
        assert report.trace_route == trace_route_dto

    def test_missing_results_are_empty(self) -> None:
        """Test that probes with no result yet leave their section null."""
        assembler = ReportAssembler(
            lookup_returning(None), lookup_returning(None), lookup_returning(None)
        )
        try:
            report = assembler.assemble("10.0.0.1")
        finally:
            assembler.shutdown()

        assert report == ReportDto(host="10.0.0.1")

    def test_failed_lookup_costs_only_its_section(self, icmp_dto, trace_route_dto) -> None:
        """Test that one raising lookup does not lose the other two."""
        tcp_service = MagicMock()
        tcp_service.get_current.side_effect = RuntimeError("store broken")

        assembler = ReportAssembler(
            lookup_returning(icmp_dto), tcp_service, lookup_returning(trace_route_dto)
        )
        try:
            outcomes = assembler.fetch_all("10.0.0.1")
            report = assembler.assemble("10.0.0.1")
        finally:
            assembler.shutdown()

        assert outcomes[ProbeKind.TCP].failed
        assert isinstance(outcomes[ProbeKind.TCP].error, RuntimeError)
        assert not outcomes[ProbeKind.ICMP].failed
        assert report.ping_tcp_ip is None
        assert report.ping_icmp == icmp_dto
        assert report.trace_route == trace_route_dto

    def test_lookups_run_concurrently(self) -> None:
        """Test that the three lookups are in flight at the same time."""
        barrier = threading.Barrier(3, timeout=2)

        def waiting_service() -> MagicMock:
            service = MagicMock()
            service.get_current.side_effect = lambda host: barrier.wait() and None
            return service

        assembler = ReportAssembler(waiting_service(), waiting_service(), waiting_service())
        try:
            outcomes = assembler.fetch_all("10.0.0.1")
        finally:
            assembler.shutdown()

        assert not any(outcome.failed for outcome in outcomes.values())

    def test_timeout_raises_aggregation_error(self) -> None:
        """Test that a lookup outliving the timeout fails the join."""
        release = threading.Event()
        slow_service = MagicMock()
        slow_service.get_current.side_effect = lambda host: release.wait(2)

        assembler = ReportAssembler(
            lookup_returning(None), slow_service, lookup_returning(None), timeout=0.05
        )
        try:
            with pytest.raises(AggregationError) as exc_info:
                assembler.assemble("10.0.0.1")
        finally:
            release.set()
            assembler.shutdown()

        assert exc_info.value.details["host"] == "10.0.0.1"

    def test_assemble_after_shutdown(self) -> None:
        """Test that a closed pool cannot assemble."""
        assembler = ReportAssembler(
            lookup_returning(None), lookup_returning(None), lookup_returning(None)
        )
        assembler.shutdown()

        with pytest.raises(AggregationError) as exc_info:
            assembler.assemble("10.0.0.1")

        assert isinstance(exc_info.value.cause, RuntimeError)


class TestReportService:
    """Tests for ReportService."""

    def test_posts_camel_case_json(self, mock_http, settings, icmp_dto, tcp_dto) -> None:
        """Test the request shape and the wire format."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201)

        service = ReportService(mock_http(handler), settings.report)
        report = ReportDto(host="10.0.0.1", ping_icmp=icmp_dto, ping_tcp_ip=tcp_dto)

        assert service.send_report(report) == 201

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://reports.test/report"
        assert request.headers["Content-Type"] == "application/json"

        payload = json.loads(request.content)
        assert payload["host"] == "10.0.0.1"
        assert payload["pingIcmp"]["terminal"]["exitCode"] == 1
        assert payload["pingTcpIp"]["responseCode"] == -1
        assert payload["pingTcpIp"]["responseTime"] == 500
        assert payload["traceRoute"] is None

    def test_returns_any_status(self, mock_http, settings) -> None:
        """Test that a rejected report still returns its status."""
        service = ReportService(mock_http(lambda request: httpx.Response(500)), settings.report)

        assert service.send_report(ReportDto(host="10.0.0.1")) == 500

    def test_transport_failure(self, mock_http, settings) -> None:
        """Test that an unreachable endpoint raises ReportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        service = ReportService(mock_http(handler), settings.report)

        with pytest.raises(ReportError) as exc_info:
            service.send_report(ReportDto(host="10.0.0.1"))

        assert "10.0.0.1" in exc_info.value.message
        assert exc_info.value.cause is not None
