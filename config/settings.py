"""
Settings Module for Ping Orchestrator

Configuration management using Pydantic Settings.
Supports environment variables, .env files, and runtime configuration.
Includes validation, type checking, and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Dict, List, Optional
from enum import Enum

from pydantic import (
    Field,
    ValidationError,
    field_validator,
    model_validator
)
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from config.constants import HOST_PLACEHOLDER, SUPPORTED_PROTOCOLS, OperatingSystem
from exceptions.base import ConfigurationError
from utils.validators import BatchValidator


class Environment(str, Enum):
    """Application environment enumeration."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class BaseSettingsConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )


class JobSettings(BaseSettingsConfig):
    """
    Job Scheduling Settings

    The hosts to probe and the size of the worker pool that runs
    the recurring jobs.
    """

    model_config = SettingsConfigDict(
        env_prefix="JOB_",
        env_file=".env"
    )

    hosts: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Comma separated hosts, each a hostname or IP with an optional :port"
    )
    scheduled_thread_number: int = Field(
        default=0,
        ge=0,
        description="Worker pool size (0 = number of CPUs)"
    )
    supervision_interval: float = Field(
        default=1.0,
        gt=0,
        description="Upper bound in seconds between supervisor wake-ups"
    )
    command_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds before a ping/traceroute process is abandoned (None = wait forever)"
    )

    @field_validator("hosts", mode="before")
    @classmethod
    def parse_hosts(cls, v: Any) -> List[str]:
        """Parse hosts from a comma separated string or a list."""
        if v is None:
            return []

        if isinstance(v, str):
            return [x.strip() for x in v.split(",") if x.strip()]

        if isinstance(v, (list, set, tuple)):
            return [str(x).strip() for x in v if str(x).strip()]

        return v

    @field_validator("hosts")
    @classmethod
    def validate_hosts(cls, v: List[str]) -> List[str]:
        """Reject malformed hosts and drop duplicates."""
        result = BatchValidator.validate_host_list(v)

        if result["invalid"]:
            raise ValueError(f"Invalid hosts: {', '.join(result['invalid'])}")

        return BatchValidator.deduplicate_hosts(result["valid"])


class CommandTemplateSettings(BaseSettingsConfig):
    """
    Shared behaviour of the probes that shell out to an OS tool.

    Each template must contain the HOST placeholder.
    """

    delay: int = Field(
        default=5000,
        ge=1,
        description="Milliseconds between the end of one tick and the start of the next"
    )
    command_windows: str = Field(
        default="",
        description="Command template used on Windows"
    )
    command_linux: str = Field(
        default="",
        description="Command template used on Unix-like systems"
    )

    @field_validator("command_windows", "command_linux")
    @classmethod
    def validate_template(cls, v: str) -> str:
        """Ensure the template has somewhere to put the host."""
        if HOST_PLACEHOLDER not in v:
            raise ValueError(f"Command template {v!r} must contain the {HOST_PLACEHOLDER} placeholder")
        return v.strip()

    def template_for(self, operating_system: OperatingSystem) -> str:
        """Get the command template for an operating system family."""
        if operating_system == OperatingSystem.WINDOWS:
            return self.command_windows
        return self.command_linux

    @property
    def delay_seconds(self) -> float:
        return self.delay / 1000


class IcmpSettings(CommandTemplateSettings):
    """ICMP ping probe settings."""

    model_config = SettingsConfigDict(
        env_prefix="ICMP_",
        env_file=".env"
    )

    command_windows: str = Field(
        default="ping -n 5 HOST",
        description="Command template used on Windows"
    )
    command_linux: str = Field(
        default="ping -c 5 HOST",
        description="Command template used on Unix-like systems"
    )


class TracerouteSettings(CommandTemplateSettings):
    """Traceroute probe settings."""

    model_config = SettingsConfigDict(
        env_prefix="TRACEROUTE_",
        env_file=".env"
    )

    command_windows: str = Field(
        default="tracert HOST",
        description="Command template used on Windows"
    )
    command_linux: str = Field(
        default="traceroute HOST",
        description="Command template used on Unix-like systems"
    )


class TcpSettings(BaseSettingsConfig):
    """
    TCP/IP Ping Settings

    The TCP probe issues a GET request against protocol://host and
    records the status code it gets back.
    """

    model_config = SettingsConfigDict(
        env_prefix="TCP_",
        env_file=".env"
    )

    delay: int = Field(
        default=5000,
        ge=1,
        description="Milliseconds between the end of one tick and the start of the next"
    )
    request_timeout: int = Field(
        default=5000,
        ge=1,
        description="Request timeout in milliseconds"
    )
    request_protocol: str = Field(
        default="http",
        description="Protocol used to build the request URL"
    )

    @field_validator("request_protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        """Only protocols the transport can speak are allowed."""
        protocol = v.strip().lower()
        if protocol not in SUPPORTED_PROTOCOLS:
            raise ValueError(
                f"Unsupported protocol {v!r}, expected one of {', '.join(SUPPORTED_PROTOCOLS)}"
            )
        return protocol

    @property
    def delay_seconds(self) -> float:
        return self.delay / 1000


class ReportSettings(BaseSettingsConfig):
    """
    Reporting Endpoint Settings

    Where aggregate reports are posted when a probe fails.
    """

    model_config = SettingsConfigDict(
        env_prefix="REPORT_",
        env_file=".env"
    )

    api_url: str = Field(
        default="https://yourreporturl.com/report",
        description="URL the aggregate report is POSTed to"
    )
    request_timeout: int = Field(
        default=10000,
        ge=1,
        description="Request timeout in milliseconds"
    )
    assembly_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds to wait for the three report fetches (None = wait forever)"
    )
    assembly_workers: int = Field(
        default=3,
        ge=1,
        le=64,
        description="Threads in the pool that fetches report sections"
    )

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Ensure the report URL is absolute."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Report URL must start with http:// or https://")
        return v


class LoggingSettings(BaseSettingsConfig):
    """
    Logging Configuration Settings

    Console logging, optional rotated file logging and a separate
    error log.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env"
    )

    # General settings
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum logging level"
    )

    # Console logging
    console_enabled: bool = Field(
        default=True,
        description="Enable console logging"
    )
    console_colored: bool = Field(
        default=True,
        description="Enable colored console output"
    )

    # File logging
    file_enabled: bool = Field(
        default=False,
        description="Enable file logging"
    )
    file_path: Path = Field(
        default=Path("logs/ping_orchestrator.log"),
        description="Log file path"
    )
    file_rotation: str = Field(
        default="10 MB",
        description="Log rotation size (e.g., '10 MB', '1 day')"
    )
    file_retention: str = Field(
        default="30 days",
        description="Log retention period"
    )
    file_compression: str = Field(
        default="gz",
        description="Compression format for rotated logs"
    )
    json_enabled: bool = Field(
        default=False,
        description="Write the log file as JSON lines"
    )

    # Error logging (separate file for errors)
    error_file_enabled: bool = Field(
        default=False,
        description="Enable separate error log file"
    )
    error_file_path: Path = Field(
        default=Path("logs/errors.log"),
        description="Error log file path"
    )


class Settings(BaseSettingsConfig):
    """
    Main Settings Class

    Aggregates all settings sections and provides the main
    configuration interface for the application.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )

    # Environment
    environment: Environment = Field(
        default=Environment.PRODUCTION,
        description="Application environment"
    )

    # Application info
    app_name: str = Field(
        default="Ping Orchestrator",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # Nested settings
    job: JobSettings = Field(
        default_factory=JobSettings
    )
    icmp: IcmpSettings = Field(
        default_factory=IcmpSettings
    )
    tcp: TcpSettings = Field(
        default_factory=TcpSettings
    )
    traceroute: TracerouteSettings = Field(
        default_factory=TracerouteSettings
    )
    report: ReportSettings = Field(
        default_factory=ReportSettings
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    @model_validator(mode="after")
    def configure_for_environment(self) -> "Settings":
        """Apply environment-specific configuration."""
        if self.is_development and self.logging.level == LogLevel.INFO:
            self.logging.level = LogLevel.DEBUG

        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump(mode="json")


def load_settings(**overrides: Any) -> Settings:
    """
    Build a settings instance, turning validation failures into
    ConfigurationError.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        config_key = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s), first: {first.get('msg', e)}",
            config_key=config_key,
            cause=e
        ) from e


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This function is cached to ensure a single settings instance
    is used throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return load_settings()
