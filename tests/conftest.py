"""Shared fixtures for the Ping Orchestrator test suite."""

from datetime import datetime, timezone
from typing import Callable, List

import httpx
import pytest
from loguru import logger

from config.settings import (
    IcmpSettings,
    JobSettings,
    ReportSettings,
    Settings,
    TcpSettings,
    TracerouteSettings,
)
from database.models import CommandExecution
from utils.network import HttpTransport


WINDOWS_PING_OK = """Pinging 10.0.0.1 with 32 bytes of data:
Reply from 10.0.0.1: bytes=32 time<1ms TTL=64

Ping statistics for 10.0.0.1:
    Packets: Sent = 5, Received = 5, Lost = 0 (0% loss),"""

WINDOWS_PING_UNREACHABLE = """Pinging 10.0.0.1 with 32 bytes of data:
Reply from 10.0.0.254: Destination host unreachable.

Ping statistics for 10.0.0.1:
    Packets: Sent = 5, Received = 5, Lost = 5 (100% loss),"""


@pytest.fixture
def make_execution() -> Callable[..., CommandExecution]:
    """Factory for CommandExecution records."""

    def _make(
        exit_code: int = 0,
        result: str = "",
        command: str = "ping -c 5 10.0.0.1",
    ) -> CommandExecution:
        return CommandExecution(
            command=command,
            exit_code=exit_code,
            result=result,
            time=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        )

    return _make


@pytest.fixture
def icmp_settings() -> IcmpSettings:
    return IcmpSettings(command_linux="ping -c 5 HOST", command_windows="ping -n 5 HOST")


@pytest.fixture
def traceroute_settings() -> TracerouteSettings:
    return TracerouteSettings(command_linux="traceroute HOST", command_windows="tracert HOST")


@pytest.fixture
def tcp_settings() -> TcpSettings:
    return TcpSettings(request_protocol="http", request_timeout=500)


@pytest.fixture
def settings(
    icmp_settings: IcmpSettings,
    tcp_settings: TcpSettings,
    traceroute_settings: TracerouteSettings,
) -> Settings:
    """Settings with one host and short delays."""
    return Settings(
        job=JobSettings(hosts=["10.0.0.1"], scheduled_thread_number=2, supervision_interval=0.05),
        icmp=icmp_settings.model_copy(update={"delay": 20}),
        tcp=tcp_settings.model_copy(update={"delay": 20}),
        traceroute=traceroute_settings.model_copy(update={"delay": 20}),
        report=ReportSettings(api_url="http://reports.test/report", request_timeout=500),
    )


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], HttpTransport]:
    """Build an HttpTransport whose requests are answered by a handler."""
    transports: List[HttpTransport] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> HttpTransport:
        transport = HttpTransport(transport=httpx.MockTransport(handler))
        transports.append(transport)
        return transport

    yield _make

    for transport in transports:
        transport.close()


@pytest.fixture
def log_records() -> List[dict]:
    """Capture loguru records emitted during the test."""
    records: List[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
