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
Data models for the ocm-oidc-config package.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LifecycleState(StrEnum):
    PENDING = "pending"
    CREATED = "created"
    READY = "ready"
    DELETING = "deleting"
    DELETED = "deleted"


class OidcConfigIntent(BaseModel):
    """
    The declared OIDC configuration, as written by the user of the declarative front end.

    Either `managed` is true and the self-hosted attributes are left empty, or `managed` is
    false and all three self-hosted attributes are provided.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "managed": False,
                "secret_arn": "arn:aws:secretsmanager:us-east-1:765374464689:secret:rosa-private-key-oidc-f3y4",
                "issuer_url": "https://oidc-f3y4.s3.us-east-1.amazonaws.com",
                "installer_role_arn": "arn:aws:iam::765374464689:role/account-Installer-Role",
            }
        },
    )

    managed: bool = Field(..., description="Whether the service hosts and rotates the issuer key material.")
    secret_arn: str | None = Field(
        default=None, description="Reference to the externally-owned private key secret (self-hosted only)."
    )
    issuer_url: str | None = Field(default=None, description="Caller-supplied issuer URL (self-hosted only).")
    installer_role_arn: str | None = Field(
        default=None, description="Installer role used to register the config (self-hosted only)."
    )


class OidcConfigState(BaseModel):
    """
    Local representation of an OIDC configuration, as stored by the declarative front end.

    This model is frozen: every operation returns a new state rather than mutating the old one,
    so a failed operation always leaves the caller holding its last known-good state.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., description="Identifier assigned by the service on creation.")
    issuer_url: str | None = None
    managed: bool
    secret_arn: str | None = None
    installer_role_arn: str | None = None
    thumbprint: str | None = None
    oidc_endpoint_url: str | None = None
    lifecycle: LifecycleState = LifecycleState.PENDING

    @property
    def is_ready(self) -> bool:
        return self.lifecycle == LifecycleState.READY

    def to_attributes(self) -> dict[str, Any]:
        """
        Returns the attribute set exposed to the declarative layer.
        """
        return self.model_dump(
            include={
                "id",
                "issuer_url",
                "managed",
                "secret_arn",
                "installer_role_arn",
                "thumbprint",
                "oidc_endpoint_url",
            }
        )
