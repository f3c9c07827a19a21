"""Tests for the probe evaluators and command templating."""

import pytest

from config.constants import OperatingSystem
from monitoring.evaluators import (
    IcmpEvaluator,
    TcpEvaluator,
    TraceRouteEvaluator,
    render_command,
    strip_port,
)
from tests.conftest import WINDOWS_PING_OK, WINDOWS_PING_UNREACHABLE


class TestStripPort:
    """Tests for host port stripping."""

    @pytest.mark.parametrize(
        "host,expected",
        [
            ("example.com", "example.com"),
            ("example.com:8080", "example.com"),
            ("10.0.0.1:22", "10.0.0.1"),
            ("localhost", "localhost"),
        ],
    )
    def test_strip_port(self, host: str, expected: str) -> None:
        """Test that everything from the first colon is dropped."""
        assert strip_port(host) == expected

    def test_render_command(self) -> None:
        """Test that the placeholder is replaced with the bare host."""
        assert render_command("ping -c 5 HOST", "example.com:80") == "ping -c 5 example.com"


class TestIcmpEvaluator:
    """Tests for IcmpEvaluator."""

    def test_unix_command(self, icmp_settings) -> None:
        """Test the Unix ping command."""
        evaluator = IcmpEvaluator(icmp_settings)
        assert evaluator.command_for("10.0.0.1", OperatingSystem.UNIX) == "ping -c 5 10.0.0.1"

    def test_windows_command(self, icmp_settings) -> None:
        """Test the Windows ping command."""
        evaluator = IcmpEvaluator(icmp_settings)
        assert evaluator.command_for("10.0.0.1", OperatingSystem.WINDOWS) == "ping -n 5 10.0.0.1"

    @pytest.mark.parametrize("os_family", list(OperatingSystem))
    def test_port_does_not_change_command(self, icmp_settings, os_family) -> None:
        """Test that host and host:port produce the same command."""
        evaluator = IcmpEvaluator(icmp_settings)
        assert evaluator.command_for("example.com:8080", os_family) == evaluator.command_for(
            "example.com", os_family
        )

    def test_windows_success_needs_zero_loss(self, make_execution) -> None:
        """Test Windows: exit 0 with the zero-loss marker succeeds."""
        execution = make_execution(exit_code=0, result=WINDOWS_PING_OK)
        assert IcmpEvaluator.evaluate(OperatingSystem.WINDOWS, execution) is True

    def test_windows_exit_zero_with_loss_fails(self, make_execution) -> None:
        """Test Windows: exit 0 without the marker fails."""
        execution = make_execution(exit_code=0, result=WINDOWS_PING_UNREACHABLE)
        assert IcmpEvaluator.evaluate(OperatingSystem.WINDOWS, execution) is False

    def test_windows_nonzero_exit_fails(self, make_execution) -> None:
        """Test Windows: a non-zero exit fails whatever the output says."""
        execution = make_execution(exit_code=1, result=WINDOWS_PING_OK)
        assert IcmpEvaluator.evaluate(OperatingSystem.WINDOWS, execution) is False

    @pytest.mark.parametrize(
        "exit_code,result,expected",
        [
            (0, "", True),
            (0, "100% packet loss", True),
            (1, WINDOWS_PING_OK, False),
            (2, "", False),
        ],
    )
    def test_unix_depends_on_exit_code_only(self, make_execution, exit_code, result, expected) -> None:
        """Test Unix: success is exactly exit code 0."""
        execution = make_execution(exit_code=exit_code, result=result)
        assert IcmpEvaluator.evaluate(OperatingSystem.UNIX, execution) is expected


class TestTcpEvaluator:
    """Tests for TcpEvaluator."""

    @pytest.mark.parametrize("status_code", [100, 200, 302, 404, 500, 599])
    def test_any_http_status_succeeds(self, status_code: int) -> None:
        """Test that every well-formed status is a success."""
        assert TcpEvaluator.evaluate(status_code) is True

    @pytest.mark.parametrize("status_code", [-1, 0, 99, 600, 1000])
    def test_out_of_range_fails(self, status_code: int) -> None:
        """Test the sentinel and the boundaries outside [100, 599]."""
        assert TcpEvaluator.evaluate(status_code) is False


class TestTraceRouteEvaluator:
    """Tests for TraceRouteEvaluator."""

    def test_unix_command(self, traceroute_settings) -> None:
        """Test the Unix traceroute command."""
        evaluator = TraceRouteEvaluator(traceroute_settings)
        assert evaluator.command_for("example.com:443", OperatingSystem.UNIX) == "traceroute example.com"

    def test_windows_command_is_prefixed(self, traceroute_settings) -> None:
        """Test that Windows runs tracert through the command interpreter."""
        evaluator = TraceRouteEvaluator(traceroute_settings)
        assert (
            evaluator.command_for("example.com", OperatingSystem.WINDOWS)
            == "cmd.exe /c tracert example.com"
        )

    @pytest.mark.parametrize("os_family", list(OperatingSystem))
    def test_port_does_not_change_command(self, traceroute_settings, os_family) -> None:
        """Test that host and host:port produce the same command."""
        evaluator = TraceRouteEvaluator(traceroute_settings)
        assert evaluator.command_for("example.com:8080", os_family) == evaluator.command_for(
            "example.com", os_family
        )

    @pytest.mark.parametrize("exit_code,expected", [(0, True), (1, False), (127, False)])
    def test_exit_code_decides(self, make_execution, exit_code: int, expected: bool) -> None:
        """Test that success is exactly exit code 0."""
        assert TraceRouteEvaluator.evaluate(make_execution(exit_code=exit_code)) is expected
