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
Typed client for the OIDC config, thumbprint inquiry and cluster listing endpoints
of the clusters-management API.
"""

from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ocm_oidc_config.exceptions import MalformedResponseError, NotFoundError, RemoteCallError
from ocm_oidc_config.models import OidcConfigIntent
from ocm_oidc_config.models_internal import (
    ClusterList,
    ClusterReference,
    OidcConfigRepresentation,
    OidcThumbprintRepresentation,
)
from ocm_oidc_config.utils.logger import logger

API_PREFIX = "/api/clusters_mgmt/v1"
OIDC_CONFIGS_PATH = f"{API_PREFIX}/oidc_configs"
OIDC_THUMBPRINT_PATH = f"{API_PREFIX}/aws_inquiries/oidc_thumbprint"
CLUSTERS_PATH = f"{API_PREFIX}/clusters"

ModelT = TypeVar("ModelT", bound=BaseModel)


class ClustersMgmtClient:
    """
    Thin, typed wrapper over the endpoints an OIDC config resource needs.

    Every method performs exactly one HTTP call; nothing is retried or cached here.

    Attributes:
        client (httpx.AsyncClient): The HTTP client. Its `base_url` must point at the API gateway
            and it must already carry credentials (see `ocm_oidc_config.session`).
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Performs a single request and maps failures onto the package's error taxonomy.

        Raises:
            NotFoundError: If the API answers 404.
            RemoteCallError: On any other non-2xx status or transport failure.
        """
        try:
            response = await self.client.request(method, path, json=json, params=params)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            body = e.response.text or "<no content>"
            error_cls = NotFoundError if status_code == 404 else RemoteCallError
            error = error_cls(
                f"{method} {path} failed with status {status_code}",
                status_code=status_code,
                response_body=body,
            )
            logger.error(f"Request failed: {method} {path} - HTTP {status_code}: {error.body_preview(256)}")
            raise error from e
        except httpx.HTTPError as e:
            logger.error(f"Request failed: {method} {path} - {e}")
            raise RemoteCallError(f"{method} {path} failed: {e}") from e

    @staticmethod
    def _parse(response: httpx.Response, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            # json.JSONDecodeError is a ValueError
            raise MalformedResponseError(f"Invalid {model.__name__} payload from {response.url.path}: {e}") from e

    async def create_oidc_config(self, intent: OidcConfigIntent) -> OidcConfigRepresentation:
        """
        Registers a new OIDC config.

        Args:
            intent: A validated intent.

        Returns:
            OidcConfigRepresentation: The config as created, with its `id` and `issuer_url`.
        """
        body: dict[str, Any] = {"managed": intent.managed}
        if not intent.managed:
            body["secret_arn"] = intent.secret_arn
            body["issuer_url"] = intent.issuer_url
            body["installer_role_arn"] = intent.installer_role_arn

        response = await self._request("POST", OIDC_CONFIGS_PATH, json=body)
        return self._parse(response, OidcConfigRepresentation)

    async def compute_thumbprint(
        self, issuer_url: str, oidc_config_id: str | None = None
    ) -> OidcThumbprintRepresentation:
        """
        Asks the service for the thumbprint of the issuer's TLS certificate.

        The computation is keyed on the issuer URL; the config id is passed along when known.
        """
        body: dict[str, Any] = {"issuer_url": issuer_url}
        if oidc_config_id:
            body["oidc_config_id"] = oidc_config_id

        response = await self._request("POST", OIDC_THUMBPRINT_PATH, json=body)
        return self._parse(response, OidcThumbprintRepresentation)

    async def get_oidc_config(self, oidc_config_id: str) -> OidcConfigRepresentation:
        """
        Fetches an OIDC config by id.

        Raises:
            NotFoundError: If the config does not exist.
        """
        response = await self._request("GET", f"{OIDC_CONFIGS_PATH}/{oidc_config_id}")
        return self._parse(response, OidcConfigRepresentation)

    async def list_clusters_using_oidc_config(self, oidc_config_id: str) -> list[ClusterReference]:
        """
        Lists the clusters whose STS configuration references the OIDC config.

        Only one item is requested: callers need to know whether the result is empty, not its size.
        An empty list means "no clusters"; failures raise instead.
        """
        params = {
            "search": f"aws.sts.oidc_config.id = '{oidc_config_id}'",
            "size": 1,
        }
        response = await self._request("GET", CLUSTERS_PATH, params=params)
        page = self._parse(response, ClusterList)
        if page.items:
            return list(page.items)
        if page.total > 0:
            # The page was truncated but the total still reports users
            return [ClusterReference()]
        return []

    async def delete_oidc_config(self, oidc_config_id: str) -> None:
        await self._request("DELETE", f"{OIDC_CONFIGS_PATH}/{oidc_config_id}")
