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
CreateOrchestrator component: the create saga and the refresh path it shares with reads.
"""

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ocm_oidc_config.client import ClustersMgmtClient
from ocm_oidc_config.exceptions import MalformedResponseError, OidcConfigError
from ocm_oidc_config.models import LifecycleState, OidcConfigIntent, OidcConfigState
from ocm_oidc_config.projector import oidc_endpoint_url, project_state
from ocm_oidc_config.utils.logger import logger

tracer = trace.get_tracer(__name__)


class CreateOrchestrator:
    """
    Turns a validated intent into a fully read OIDC config.

    The API spreads one logical config over three endpoints (create, thumbprint inquiry, read),
    so creation is a sequence of calls with an intermediate `created` state. When a step after
    the create call fails, the config already exists remotely: the error is re-raised with that
    `created` state attached so the caller can keep it and finish with a later `refresh`.

    Attributes:
        client (ClustersMgmtClient): The API client.
    """

    def __init__(self, client: ClustersMgmtClient) -> None:
        self.client = client

    async def create(self, intent: OidcConfigIntent) -> OidcConfigState:
        """
        Creates the config, computes its thumbprint and reads it back.

        Args:
            intent: An intent already accepted by `validate_intent`.

        Returns:
            OidcConfigState: The `ready` state.

        Raises:
            RemoteCallError: If the create call fails (nothing exists remotely), or a later step
                fails (`error.state` holds the `created` state).
            MalformedResponseError: If a payload misses `id` or `issuer_url`.
        """
        with tracer.start_as_current_span("oidc_config.create") as span:
            span.set_attribute("oidc_config.managed", intent.managed)
            try:
                remote = await self.client.create_oidc_config(intent)
            except OidcConfigError as e:
                logger.error(f"Failed to create OIDC config: {e}")
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            if not remote.id:
                # Without an id there is nothing we could ever read or delete
                e = MalformedResponseError("OIDC config creation response does not contain 'id'")
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise e

            created = OidcConfigState(
                id=remote.id,
                issuer_url=remote.issuer_url,
                managed=remote.managed,
                secret_arn=remote.secret_arn or intent.secret_arn,
                installer_role_arn=intent.installer_role_arn,
                oidc_endpoint_url=oidc_endpoint_url(remote.issuer_url) if remote.issuer_url else None,
                lifecycle=LifecycleState.CREATED,
            )
            span.set_attribute("oidc_config.id", created.id)
            logger.bind(oidc_config_id=created.id).info(
                f"Created OIDC config '{created.id}' (managed={created.managed})"
            )

            try:
                ready = await self.refresh(created)
            except OidcConfigError as e:
                logger.warning(f"OIDC config '{created.id}' was created but could not be fully read: {e}")
                e.state = created
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, str(e)))
                raise

            span.set_status(Status(StatusCode.OK))
            return ready

    async def refresh(self, state: OidcConfigState) -> OidcConfigState:
        """
        Reads an existing config and returns its projected state.

        The thumbprint is recomputed on every refresh so a rotated issuer certificate shows up
        as a changed attribute. When the issuer URL is known it is computed before the read
        (the order create uses); with only an id (import) it is computed from the fetched URL.

        Raises:
            NotFoundError: If the config no longer exists.
            RemoteCallError: If the thumbprint inquiry or the read fails.
            MalformedResponseError: If the read payload misses `id` or `issuer_url`.
        """
        with (
            tracer.start_as_current_span("oidc_config.refresh") as span,
            logger.contextualize(oidc_config_id=state.id),
        ):
            span.set_attribute("oidc_config.id", state.id)

            thumbprint = None
            if state.issuer_url:
                thumbprint = await self._thumbprint(state.issuer_url, state.id)

            remote = await self.client.get_oidc_config(state.id)

            if thumbprint is None:
                if not remote.issuer_url:
                    raise MalformedResponseError(f"OIDC config '{state.id}' does not contain 'issuer_url'")
                thumbprint = await self._thumbprint(remote.issuer_url, state.id)

            if state.thumbprint and state.thumbprint != thumbprint:
                logger.info(f"Thumbprint of OIDC config '{state.id}' changed")

            projected = project_state(remote, thumbprint, prior=state)
            logger.debug(f"Refreshed OIDC config '{projected.id}'")
            return projected

    async def _thumbprint(self, issuer_url: str, oidc_config_id: str) -> str:
        with tracer.start_as_current_span("oidc_config.thumbprint"):
            result = await self.client.compute_thumbprint(issuer_url, oidc_config_id)
            logger.debug(f"Computed thumbprint for OIDC config '{oidc_config_id}'")
            return result.thumbprint
