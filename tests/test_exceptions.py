# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

from ocm_oidc_config.exceptions import (
    ConfigurationError,
    DeletionFailedError,
    InUseError,
    MalformedResponseError,
    NotFoundError,
    OidcConfigError,
    PreconditionCheckFailedError,
    RemoteCallError,
    ValidationError,
)
from ocm_oidc_config.models import OidcConfigState


def test_exception_hierarchy() -> None:
    """Test that all custom exceptions inherit from OidcConfigError."""
    for error_cls in (
        ConfigurationError,
        ValidationError,
        RemoteCallError,
        MalformedResponseError,
        PreconditionCheckFailedError,
        InUseError,
        DeletionFailedError,
    ):
        assert issubclass(error_cls, OidcConfigError)
    assert issubclass(NotFoundError, RemoteCallError)


def test_exception_carries_state() -> None:
    state = OidcConfigState(id="abc", managed=True)
    err = InUseError("in use", state=state)
    assert str(err) == "in use"
    assert err.state is state


def test_remote_call_error_body_preview() -> None:
    err = RemoteCallError("failed", status_code=500, response_body="x" * 2000)
    preview = err.body_preview(limit=10)
    assert preview == "xxxxxxxxxx...<truncated>"
    assert RemoteCallError("failed", response_body="short").body_preview() == "short"
    assert RemoteCallError("failed").body_preview() is None
