"""
Configuration Package for Ping Orchestrator

This package contains all configuration-related modules including:
- Settings management with environment variable support
- Constants and enums used throughout the application
"""

from config.settings import (
    Settings,
    JobSettings,
    IcmpSettings,
    TcpSettings,
    TracerouteSettings,
    ReportSettings,
    LoggingSettings,
    get_settings,
    load_settings
)

from config.constants import (
    OperatingSystem,
    ProbeKind,
    HTTPMethods,
    JobState
)

__all__ = [
    # Settings
    "Settings",
    "JobSettings",
    "IcmpSettings",
    "TcpSettings",
    "TracerouteSettings",
    "ReportSettings",
    "LoggingSettings",
    "get_settings",
    "load_settings",

    # Constants
    "OperatingSystem",
    "ProbeKind",
    "HTTPMethods",
    "JobState"
]
