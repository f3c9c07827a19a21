"""
============================================================================
PING ORCHESTRATOR - VALIDATORS UTILITY
============================================================================
Validation functions for the hosts the orchestrator probes.

A host is a hostname, a dotted IPv4 address or either of those
followed by ":port". IPv6 literals are not accepted because the
port separator is the first colon in the string.
============================================================================
"""

import ipaddress
import re
from typing import Dict, List, Optional, Tuple

import validators as external_validators

from exceptions.validation import InvalidHostError
from utils.logger import get_logger


logger = get_logger(__name__)

PORT_SEPARATOR = ":"


# ============================================================================
# HOST VALIDATORS
# ============================================================================

class HostValidator:
    """
    Host validation and parsing.
    """

    # Single-label names such as "localhost" or "router"
    LABEL_PATTERN = re.compile(r"^[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?$", re.IGNORECASE)

    @staticmethod
    def split_host_port(host: str) -> Tuple[str, Optional[str]]:
        """
        Split "name:port" at the first colon.

        Args:
            host: Raw host string

        Returns:
            Tuple of (name, port or None)
        """
        name, separator, port = host.partition(PORT_SEPARATOR)
        return name, (port if separator else None)

    @staticmethod
    def is_valid_domain(domain: str) -> bool:
        """
        Check if domain is valid.

        Args:
            domain: Domain to validate

        Returns:
            True if valid, False otherwise
        """
        if HostValidator.LABEL_PATTERN.match(domain):
            return True
        return external_validators.domain(domain) is True

    @staticmethod
    def is_valid_ip(ip: str) -> bool:
        """
        Check if IP address is valid.

        Args:
            ip: IP address to validate

        Returns:
            True if valid, False otherwise
        """
        try:
            ipaddress.ip_address(ip)
            return True
        except ValueError:
            return False

    @staticmethod
    def is_valid_port(port: Optional[str]) -> bool:
        """Check if port number is valid."""
        try:
            return 1 <= int(port) <= 65535
        except (ValueError, TypeError):
            return False

    @staticmethod
    def is_valid_host(host: Optional[str]) -> bool:
        """
        Check if host is valid.

        Args:
            host: Host, optionally with a ":port" suffix

        Returns:
            True if valid, False otherwise
        """
        if not host or not host.strip() or host != host.strip():
            return False

        name, port = HostValidator.split_host_port(host)
        if port is not None and not HostValidator.is_valid_port(port):
            return False

        return HostValidator.is_valid_ip(name) or HostValidator.is_valid_domain(name)

    @staticmethod
    def validate_host(host: Optional[str]) -> str:
        """
        Return the host unchanged or raise InvalidHostError.
        """
        if not HostValidator.is_valid_host(host):
            logger.debug(f"Rejected host {host!r}")
            raise InvalidHostError(host)
        return host


# ============================================================================
# BATCH VALIDATOR
# ============================================================================

class BatchValidator:
    """
    Validator for batch operations.
    """

    @staticmethod
    def validate_host_list(hosts: List[str]) -> Dict[str, List[str]]:
        """
        Validate a list of hosts.

        Args:
            hosts: List of hosts to validate

        Returns:
            Dictionary with 'valid' and 'invalid' hosts
        """
        valid = []
        invalid = []

        for host in hosts:
            if HostValidator.is_valid_host(host):
                valid.append(host)
            else:
                invalid.append(host)

        return {
            "valid": valid,
            "invalid": invalid
        }

    @staticmethod
    def deduplicate_hosts(hosts: List[str]) -> List[str]:
        """
        Remove duplicate hosts from list, keeping the first occurrence.

        Args:
            hosts: List of hosts

        Returns:
            List without duplicates
        """
        seen = set()
        unique = []

        for host in hosts:
            if host not in seen:
                seen.add(host)
                unique.append(host)

        return unique
