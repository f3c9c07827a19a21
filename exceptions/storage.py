"""
Storage Exception Classes for Ping Orchestrator

Raised by the in-memory keyed stores that keep the latest
probe result per host.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import ConfigurationError


class StoreIdentityError(ConfigurationError):
    """
    Store Identity Error

    Raised on save when an entity's identity cannot be resolved,
    either because the key extractor failed or because it produced
    an empty value. Always a defect in how the entity was built.
    """

    default_error_code = 1150

    def __init__(
        self,
        message: str,
        entity_name: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        """
        Initialize store identity error.

        Args:
            message: Error message
            entity_name: Name of the entity type being saved
            **kwargs: Additional arguments
        """
        super().__init__(message, **kwargs)

        if entity_name:
            self.details["entity"] = entity_name
