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
Lifecycle management of cluster OIDC configurations against the clusters-management API.
"""

__version__ = "0.1.0"

from .config import OcmConfig
from .exceptions import (
    DeletionFailedError,
    InUseError,
    MalformedResponseError,
    NotFoundError,
    OidcConfigError,
    PreconditionCheckFailedError,
    RemoteCallError,
    ValidationError,
)
from .models import LifecycleState, OidcConfigIntent, OidcConfigState
from .resource import OidcConfigResource, OidcConfigResourceAsync

__all__ = [
    "DeletionFailedError",
    "InUseError",
    "LifecycleState",
    "MalformedResponseError",
    "NotFoundError",
    "OcmConfig",
    "OidcConfigError",
    "OidcConfigIntent",
    "OidcConfigResource",
    "OidcConfigResourceAsync",
    "OidcConfigState",
    "PreconditionCheckFailedError",
    "RemoteCallError",
    "ValidationError",
]
