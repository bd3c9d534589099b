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
Builds the authenticated HTTP client used to talk to the clusters-management API.
"""

import httpx
from authlib.integrations.httpx_client import AsyncOAuth2Client
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

from ocm_oidc_config.config import OcmConfig
from ocm_oidc_config.exceptions import ConfigurationError
from ocm_oidc_config.utils.logger import logger

USER_AGENT = "ocm-oidc-config"

# Any token whose expiry lies in the past is refreshed before the first request
_EXPIRED = 1


def build_http_client(config: OcmConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """
    Creates an async HTTP client carrying the credentials from the configuration.

    A static `access_token` is sent as a bearer header as is. An offline `token` is exchanged
    for access tokens at `token_url` using the refresh-token grant; authlib refreshes it again
    whenever the access token expires.

    Args:
        config: The connection settings.
        transport: Optional transport override (tests use `httpx.MockTransport`).

    Returns:
        httpx.AsyncClient: A client whose `base_url` is the API gateway URL.

    Raises:
        ConfigurationError: If the configuration carries no credentials.
    """
    common = {
        "base_url": config.url,
        "timeout": config.http_timeout,
        "verify": not config.insecure,
        "headers": {"User-Agent": USER_AGENT, "Accept": "application/json"},
        "transport": transport,
    }

    client: httpx.AsyncClient
    if config.access_token is not None:
        logger.debug("Using static bearer token for the clusters-management API")
        headers = dict(common.pop("headers"))  # type: ignore[call-overload]
        headers["Authorization"] = f"Bearer {config.access_token.get_secret_value()}"
        client = httpx.AsyncClient(headers=headers, **common)  # type: ignore[arg-type]
    elif config.token is not None:
        logger.debug(f"Using offline token exchanged at {config.token_url}")
        client = AsyncOAuth2Client(
            client_id=config.client_id,
            token_endpoint_auth_method="none",
            token={
                "token_type": "Bearer",
                "access_token": "",
                "refresh_token": config.token.get_secret_value(),
                "expires_at": _EXPIRED,
            },
            token_endpoint=config.token_url,
            **common,
        )
    else:
        # OcmConfig refuses this combination, but the config may have been built with model_construct
        raise ConfigurationError("No credentials configured for the clusters-management API")

    HTTPXClientInstrumentor().instrument_client(client)
    return client
