"""
============================================================================
PING ORCHESTRATOR - RESPONSE ENVELOPE
============================================================================
Every probe and report operation returns a Response instead of raising
past its own boundary. The job bodies branch on its status through
unwrap():

    OK                       payload returned as is (None included)
    BAD_REQUEST              BatchJobError("<message> for <job>")
    SERVICE_UNAVAILABLE      BatchJobError with the dependency error as cause
    INTERNAL_SERVER_ERROR    ResponseServerError with the error as cause
============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from exceptions.orchestration import BatchJobError, ResponseServerError


T = TypeVar("T")


class ResponseStatus(str, Enum):
    OK = "OK"
    BAD_REQUEST = "BAD_REQUEST"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


@dataclass(frozen=True)
class Response(Generic[T]):
    """
    Tagged result of a boundary operation.

    Only OK carries a payload. BAD_REQUEST carries a message,
    SERVICE_UNAVAILABLE a message and the error, and
    INTERNAL_SERVER_ERROR the error.
    """
    status: ResponseStatus
    response: Optional[T] = None
    message: Optional[str] = None
    exception: Optional[BaseException] = None

    @property
    def is_ok(self) -> bool:
        return self.status == ResponseStatus.OK

    @classmethod
    def ok(cls, response: Optional[T] = None) -> "Response[T]":
        return cls(ResponseStatus.OK, response=response)

    @classmethod
    def bad_request(cls, message: str) -> "Response[T]":
        return cls(ResponseStatus.BAD_REQUEST, message=message)

    @classmethod
    def service_unavailable(cls, message: str, exception: BaseException) -> "Response[T]":
        return cls(ResponseStatus.SERVICE_UNAVAILABLE, message=message, exception=exception)

    @classmethod
    def internal_error(cls, exception: BaseException) -> "Response[T]":
        return cls(
            ResponseStatus.INTERNAL_SERVER_ERROR,
            message=str(exception),
            exception=exception,
        )


def unwrap(response: Response[T], host: str, description: str) -> Optional[T]:
    """
    Return the payload of an OK response or raise the matching error.

    Args:
        response: Envelope returned by a controller
        host: Host the job is probing
        description: What the job was doing, e.g. "ICMP protocol Ping"

    Raises:
        BatchJobError: for BAD_REQUEST and SERVICE_UNAVAILABLE
        ResponseServerError: for INTERNAL_SERVER_ERROR
    """
    if response.status == ResponseStatus.OK:
        return response.response

    if response.status == ResponseStatus.BAD_REQUEST:
        raise BatchJobError(
            f"{response.message} for {description}",
            host=host,
            job=description,
        )

    if response.status == ResponseStatus.SERVICE_UNAVAILABLE:
        reason = f": {response.message}" if response.message else ""
        raise BatchJobError(
            f"{description}, service is unavailable, for host {host}{reason}",
            host=host,
            job=description,
            cause=response.exception,
        )

    raise ResponseServerError(
        f"Internal error for executing {description} for Host {host}",
        host=host,
        job=description,
        cause=response.exception,
    )
