# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

"""
Custom exceptions for the ocm-oidc-config package.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ocm_oidc_config.models import OidcConfigState


class OidcConfigError(Exception):
    """
    Base exception for all ocm-oidc-config errors.

    Attributes:
        state (OidcConfigState | None): The last known-good local state of the entity when the
            error was raised, if one exists. Callers persist it so a later read or destroy can
            pick up where the failed operation stopped.
    """

    def __init__(self, message: str, state: "OidcConfigState | None" = None) -> None:
        super().__init__(message)
        self.state = state


class ConfigurationError(OidcConfigError):
    """Raised when the client configuration cannot be used (e.g. no credentials)."""


class ValidationError(OidcConfigError):
    """
    Raised when a declared intent mixes managed and self-hosted attributes.
    Always raised before any remote call is made.
    """


class RemoteCallError(OidcConfigError):
    """Raised when a single call to the clusters-management API fails (transport or non-2xx)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        state: "OidcConfigState | None" = None,
    ) -> None:
        super().__init__(message, state=state)
        self.status_code = status_code
        self.response_body = response_body

    def body_preview(self, limit: int = 1024) -> str | None:
        """Return a truncated preview of the response body for logging."""
        if self.response_body is None:
            return None
        if len(self.response_body) <= limit:
            return self.response_body
        return f"{self.response_body[:limit]}...<truncated>"


class NotFoundError(RemoteCallError):
    """Raised when the API answers 404 for the requested object."""


class MalformedResponseError(OidcConfigError):
    """Raised when a remote payload is missing required fields or cannot be parsed."""


class PreconditionCheckFailedError(OidcConfigError):
    """Raised when listing the clusters that use an OIDC config fails. No delete is attempted."""


class InUseError(OidcConfigError):
    """Raised when clusters still use the OIDC config. No delete is attempted."""


class DeletionFailedError(OidcConfigError):
    """Raised when the delete call itself fails. The config is presumed to still exist."""
