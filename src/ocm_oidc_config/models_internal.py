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
Wire models for the clusters-management API.
These are not exposed in the public API.
"""

from pydantic import BaseModel, ConfigDict, Field


class OidcConfigRepresentation(BaseModel):
    """
    An OIDC config as returned by `/api/clusters_mgmt/v1/oidc_configs`.

    `id` and `issuer_url` are optional here; the projector decides whether a payload
    missing them is usable.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    href: str | None = None
    id: str | None = None
    issuer_url: str | None = None
    managed: bool = False
    reusable: bool | None = None
    secret_arn: str | None = None
    installer_role_arn: str | None = None


class OidcThumbprintRepresentation(BaseModel):
    """
    Answer of `/api/clusters_mgmt/v1/aws_inquiries/oidc_thumbprint`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    href: str | None = None
    thumbprint: str = Field(..., description="SHA-1 fingerprint of the issuer's TLS certificate.")
    oidc_config_id: str | None = None
    cluster_id: str | None = None


class ClusterReference(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    name: str | None = None
    href: str | None = None


class ClusterList(BaseModel):
    """
    A page of `/api/clusters_mgmt/v1/clusters`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    kind: str | None = None
    page: int = 0
    size: int = 0
    total: int = 0
    items: list[ClusterReference] = Field(default_factory=list)
