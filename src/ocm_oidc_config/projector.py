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
Maps remote OIDC config representations onto the local attribute set.
"""

import re

from ocm_oidc_config.exceptions import MalformedResponseError
from ocm_oidc_config.models import LifecycleState, OidcConfigState
from ocm_oidc_config.models_internal import OidcConfigRepresentation

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def oidc_endpoint_url(issuer_url: str) -> str:
    """
    Returns the issuer URL without its scheme, e.g. `https://a.b/c` -> `a.b/c`.
    """
    return _SCHEME.sub("", issuer_url, count=1)


def project_state(
    remote: OidcConfigRepresentation,
    thumbprint: str | None,
    prior: OidcConfigState | None = None,
) -> OidcConfigState:
    """
    Builds the local state of an OIDC config from its remote representation.

    Pure function: the same inputs always give the same state. The result is `ready` when a
    thumbprint is known, `created` otherwise.

    Args:
        remote: The config as returned by the API.
        thumbprint: The thumbprint computed for its issuer URL.
        prior: The state held before this read, used for attributes the API does not echo
            (the installer role) and to keep a caller-supplied issuer URL verbatim.

    Raises:
        MalformedResponseError: If `id` or `issuer_url` is missing.
    """
    if not remote.id:
        raise MalformedResponseError("OIDC config representation does not contain 'id'")
    if not remote.issuer_url:
        raise MalformedResponseError(f"OIDC config '{remote.id}' does not contain 'issuer_url'")

    issuer_url = remote.issuer_url
    secret_arn = remote.secret_arn
    installer_role_arn = remote.installer_role_arn

    if not remote.managed and prior is not None:
        # The server may normalise case; the declared URL wins when it names the same issuer
        if prior.issuer_url and prior.issuer_url.lower() == issuer_url.lower():
            issuer_url = prior.issuer_url
        secret_arn = secret_arn or prior.secret_arn
        installer_role_arn = installer_role_arn or prior.installer_role_arn

    if remote.managed:
        secret_arn = None
        installer_role_arn = None

    return OidcConfigState(
        id=remote.id,
        issuer_url=issuer_url,
        managed=remote.managed,
        secret_arn=secret_arn,
        installer_role_arn=installer_role_arn,
        thumbprint=thumbprint,
        oidc_endpoint_url=oidc_endpoint_url(issuer_url),
        lifecycle=LifecycleState.READY if thumbprint else LifecycleState.CREATED,
    )
