"""
============================================================================
PING ORCHESTRATOR - OUTWARD SCHEMAS
============================================================================
Pydantic models returned by the probe services and posted to the
reporting endpoint.

Field names are snake_case in Python and camelCase on the wire:

    {
      "host": "10.0.0.1",
      "pingIcmp":   {"host": ..., "terminal": {...}, "success": false},
      "pingTcpIp":  {"url": ..., "responseCode": -1, "responseTime": 5003,
                     "time": "...", "success": false},
      "traceRoute": {"host": ..., "terminal": {...}, "success": true}
    }

A section is null when that probe has not produced a result yet or
could not be fetched.
============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SchemaBase(BaseModel):
    """Immutable, camelCase on the wire, constructible by field name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class TerminalDto(SchemaBase):
    command: str
    exit_code: int
    result: str
    time: datetime


class PingIcmpDto(SchemaBase):
    host: str
    terminal: TerminalDto
    success: bool


class PingTcpIpDto(SchemaBase):
    url: str
    response_code: int
    response_time: int
    time: datetime
    success: bool


class TraceRouteDto(SchemaBase):
    host: str
    terminal: TerminalDto
    success: bool


class ReportDto(SchemaBase):
    """Snapshot of all three probes for one host. Never stored."""

    host: str
    ping_icmp: Optional[PingIcmpDto] = None
    ping_tcp_ip: Optional[PingTcpIpDto] = None
    trace_route: Optional[TraceRouteDto] = None
