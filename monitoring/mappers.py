"""
Entity to schema mapping for Ping Orchestrator.
"""

from database.models import CommandExecution, IcmpProbeResult, TcpProbeResult, TraceRouteResult
from monitoring.schemas import PingIcmpDto, PingTcpIpDto, TerminalDto, TraceRouteDto


def terminal_to_dto(execution: CommandExecution) -> TerminalDto:
    return TerminalDto(
        command=execution.command,
        exit_code=execution.exit_code,
        result=execution.result,
        time=execution.time,
    )


def icmp_to_dto(result: IcmpProbeResult) -> PingIcmpDto:
    return PingIcmpDto(
        host=result.host,
        terminal=terminal_to_dto(result.terminal),
        success=result.success,
    )


def tcp_to_dto(result: TcpProbeResult) -> PingTcpIpDto:
    return PingTcpIpDto(
        url=result.url,
        response_code=result.response_code,
        response_time=result.response_time,
        time=result.time,
        success=result.success,
    )


def trace_route_to_dto(result: TraceRouteResult) -> TraceRouteDto:
    return TraceRouteDto(
        host=result.host,
        terminal=terminal_to_dto(result.terminal),
        success=result.success,
    )
