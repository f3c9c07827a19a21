"""
============================================================================
PING ORCHESTRATOR - MONITORING PACKAGE
============================================================================
The job-scheduling and result-aggregation engine.

File layout
-----------
monitoring/
├── __init__.py          ← this file
├── evaluators.py        ← success rules + host → command templating
├── schemas.py           ← pydantic models returned / reported
├── mappers.py           ← stored results → schemas
├── services.py          ← one facade per probe kind
├── response.py          ← Response envelope + unwrap()
├── controllers.py       ← envelope boundary for probes and reports
├── reports.py           ← ReportAssembler (fan-out) + ReportService
├── scheduler.py         ← fixed-delay RecurringScheduler
├── jobs.py              ← per-tick job bodies
└── orchestrator.py      ← JobOrchestrator (startup + supervision)

============================================================================
"""

from monitoring.evaluators import IcmpEvaluator, TcpEvaluator, TraceRouteEvaluator, strip_port
from monitoring.schemas import TerminalDto, PingIcmpDto, PingTcpIpDto, TraceRouteDto, ReportDto
from monitoring.services import IcmpProbeService, TcpProbeService, TraceRouteProbeService
from monitoring.response import Response, ResponseStatus, unwrap
from monitoring.controllers import ProbeController, ReportController
from monitoring.reports import ProbeFetch, ReportAssembler, ReportService
from monitoring.scheduler import RecurringScheduler, ScheduledJob
from monitoring.jobs import ProbeJobFactory
from monitoring.orchestrator import JobOrchestrator

__all__ = [
    # Evaluators
    "IcmpEvaluator",
    "TcpEvaluator",
    "TraceRouteEvaluator",
    "strip_port",

    # Schemas
    "TerminalDto",
    "PingIcmpDto",
    "PingTcpIpDto",
    "TraceRouteDto",
    "ReportDto",

    # Services
    "IcmpProbeService",
    "TcpProbeService",
    "TraceRouteProbeService",

    # Envelope
    "Response",
    "ResponseStatus",
    "unwrap",
    "ProbeController",
    "ReportController",

    # Reports
    "ProbeFetch",
    "ReportAssembler",
    "ReportService",

    # Scheduling
    "RecurringScheduler",
    "ScheduledJob",
    "ProbeJobFactory",
    "JobOrchestrator",
]
