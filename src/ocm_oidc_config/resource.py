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
OIDC config resource: the create/read/import/delete/replace entry points used by a
declarative front end.
"""

from collections.abc import Awaitable, Callable
from contextlib import AbstractContextManager
from typing import Any, TypeVar

import httpx
from anyio.from_thread import BlockingPortal, start_blocking_portal

from ocm_oidc_config.client import ClustersMgmtClient
from ocm_oidc_config.config import OcmConfig
from ocm_oidc_config.deletion_guard import DeletionGuard
from ocm_oidc_config.exceptions import ConfigurationError, NotFoundError
from ocm_oidc_config.models import LifecycleState, OidcConfigIntent, OidcConfigState
from ocm_oidc_config.orchestrator import CreateOrchestrator
from ocm_oidc_config.session import build_http_client
from ocm_oidc_config.utils.logger import logger
from ocm_oidc_config.validator import requires_replace, validate_intent

T = TypeVar("T")


class OidcConfigResourceAsync:
    """
    Async implementation of the OIDC config resource (The Core).
    Handles the HTTP client via async context manager.
    """

    def __init__(self, config: OcmConfig | None = None, client: httpx.AsyncClient | None = None) -> None:
        """
        Initialize the resource.

        Args:
            config: Connection settings. Required unless `client` is given.
            client: External async client (optional), already pointing at the API and carrying
                credentials. If not provided, one is built from `config`.

        Raises:
            ConfigurationError: If neither a config nor a client is given.
        """
        self.config = config
        self._internal_client = client is None

        if client is not None:
            self._client = client
        elif config is not None:
            self._client = build_http_client(config)
        else:
            raise ConfigurationError("Either a configuration or an HTTP client is required")

        self.api = ClustersMgmtClient(self._client)
        self.orchestrator = CreateOrchestrator(self.api)
        self.guard = DeletionGuard(self.api)

    async def __aenter__(self) -> "OidcConfigResourceAsync":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._internal_client:
            await self._client.aclose()

    async def create(self, intent: OidcConfigIntent) -> OidcConfigState:
        """
        Validates the intent, then creates and reads back the OIDC config.

        Raises:
            ValidationError: If the intent is not well-formed. No remote call is made.
            RemoteCallError: If a remote step fails; `error.state` is set once the config exists.
            MalformedResponseError: If the API returns an unusable payload.
        """
        validated = validate_intent(intent)
        return await self.orchestrator.create(validated)

    async def read(self, state: OidcConfigState) -> OidcConfigState | None:
        """
        Refreshes a stored state, completing any step a partial create left undone.

        Returns:
            OidcConfigState | None: The `ready` state, or None when the config no longer exists
            remotely and should be dropped from the caller's state.
        """
        try:
            return await self.orchestrator.refresh(state)
        except NotFoundError:
            logger.warning(f"OIDC config '{state.id}' not found, removing it from state")
            return None

    async def import_state(self, oidc_config_id: str) -> OidcConfigState:
        """
        Adopts an existing OIDC config knowing only its id.

        Raises:
            NotFoundError: If no config has this id.
        """
        # `managed` is a placeholder until the read replaces it with the remote value
        stub = OidcConfigState(id=oidc_config_id, managed=False, lifecycle=LifecycleState.CREATED)
        return await self.orchestrator.refresh(stub)

    async def delete(self, state: OidcConfigState) -> OidcConfigState:
        """
        Deletes the config after checking that no cluster uses it.

        Raises:
            PreconditionCheckFailedError, InUseError, DeletionFailedError: See `DeletionGuard.delete`.
        """
        return await self.guard.delete(state)

    def plan(self, state: OidcConfigState, intent: OidcConfigIntent) -> list[str]:
        """
        Returns the attributes whose change forces a replacement. Empty means no-op.
        """
        return requires_replace(state, intent)

    async def replace(self, state: OidcConfigState, intent: OidcConfigIntent) -> OidcConfigState:
        """
        Destroys the stored config and creates a new one from the intent.

        The intent is validated before the destroy so an invalid change never deletes anything.
        """
        validated = validate_intent(intent)
        await self.guard.delete(state)
        return await self.orchestrator.create(validated)


class OidcConfigResource:
    """
    Sync facade for OidcConfigResourceAsync.

    Entering the facade starts one event loop in a worker thread (an anyio blocking portal);
    every call, and the final client close, runs on that loop. The pooled HTTP connections of
    the async client are bound to the loop that opened them, so they stay usable across calls.
    Each call blocks until the whole sequence of remote calls has completed.
    """

    def __init__(self, config: OcmConfig | None = None, client: httpx.AsyncClient | None = None) -> None:
        self._async = OidcConfigResourceAsync(config, client)
        self._portal_cm: AbstractContextManager[BlockingPortal] | None = None
        self._portal: BlockingPortal | None = None

    def __enter__(self) -> "OidcConfigResource":
        self._portal_cm = start_blocking_portal()
        self._portal = self._portal_cm.__enter__()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        portal_cm, portal = self._portal_cm, self._portal
        self._portal_cm = self._portal = None
        if portal_cm is None or portal is None:
            return
        try:
            portal.call(self._async.__aexit__, exc_type, exc_val, exc_tb)
        finally:
            portal_cm.__exit__(None, None, None)

    def _call(self, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        if self._portal is None:
            raise ConfigurationError("OidcConfigResource must be used inside a 'with' block")
        return self._portal.call(func, *args)

    def create(self, intent: OidcConfigIntent) -> OidcConfigState:
        return self._call(self._async.create, intent)

    def read(self, state: OidcConfigState) -> OidcConfigState | None:
        return self._call(self._async.read, state)

    def import_state(self, oidc_config_id: str) -> OidcConfigState:
        return self._call(self._async.import_state, oidc_config_id)

    def delete(self, state: OidcConfigState) -> OidcConfigState:
        return self._call(self._async.delete, state)

    def plan(self, state: OidcConfigState, intent: OidcConfigIntent) -> list[str]:
        return self._async.plan(state, intent)

    def replace(self, state: OidcConfigState, intent: OidcConfigIntent) -> OidcConfigState:
        return self._call(self._async.replace, state, intent)
