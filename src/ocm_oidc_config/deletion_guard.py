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
DeletionGuard component: deletes an OIDC config only when no cluster uses it.
"""

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ocm_oidc_config.client import ClustersMgmtClient
from ocm_oidc_config.exceptions import (
    DeletionFailedError,
    InUseError,
    OidcConfigError,
    PreconditionCheckFailedError,
)
from ocm_oidc_config.models import LifecycleState, OidcConfigState
from ocm_oidc_config.utils.logger import logger

tracer = trace.get_tracer(__name__)

CHECK_FAILED_MESSAGE = "There was a problem checking if any clusters are using OIDC config"
IN_USE_MESSAGE = "there are clusters using OIDC config"
DELETE_FAILED_MESSAGE = "There was a problem deleting the OIDC config"


class DeletionGuard:
    """
    Gates the delete call on a scoped listing of the clusters that reference the config.

    The listing and the delete are two separate calls and the API offers no compare-and-delete,
    so a cluster created in between is not detected. The service rejects deleting a config in use
    on its side as well; this check exists to fail early with an actionable message.

    Attributes:
        client (ClustersMgmtClient): The API client.
    """

    def __init__(self, client: ClustersMgmtClient) -> None:
        self.client = client

    async def delete(self, state: OidcConfigState) -> OidcConfigState:
        """
        Deletes the OIDC config described by `state`.

        Args:
            state: The stored state. Only `id` is used remotely.

        Returns:
            OidcConfigState: The same config with lifecycle `deleted`.

        Raises:
            PreconditionCheckFailedError: If listing the clusters fails. No delete is attempted.
            InUseError: If at least one cluster uses the config. No delete is attempted.
            DeletionFailedError: If the delete call fails.
            All three carry the unchanged input state in `error.state`.
        """
        oidc_config_id = state.id
        with (
            tracer.start_as_current_span("oidc_config.delete") as span,
            logger.contextualize(oidc_config_id=oidc_config_id),
        ):
            span.set_attribute("oidc_config.id", oidc_config_id)

            try:
                clusters = await self.client.list_clusters_using_oidc_config(oidc_config_id)
            except OidcConfigError as e:
                error: OidcConfigError = PreconditionCheckFailedError(
                    f"{CHECK_FAILED_MESSAGE} '{oidc_config_id}': {e}", state=state
                )
                self._fail(span, error)
                raise error from e

            if clusters:
                names = ", ".join(c.name or c.id or "<unknown>" for c in clusters)
                error = InUseError(
                    f"{IN_USE_MESSAGE} '{oidc_config_id}', can't delete the configuration (used by: {names})",
                    state=state,
                )
                self._fail(span, error)
                raise error

            deleting = state.model_copy(update={"lifecycle": LifecycleState.DELETING})
            logger.info(f"No cluster uses OIDC config '{oidc_config_id}', deleting it")

            try:
                await self.client.delete_oidc_config(deleting.id)
            except OidcConfigError as e:
                error = DeletionFailedError(f"{DELETE_FAILED_MESSAGE} '{oidc_config_id}': {e}", state=state)
                self._fail(span, error)
                raise error from e

            logger.info(f"Deleted OIDC config '{oidc_config_id}'")
            span.set_status(Status(StatusCode.OK))
            return deleting.model_copy(update={"lifecycle": LifecycleState.DELETED})

    @staticmethod
    def _fail(span: trace.Span, error: OidcConfigError) -> None:
        logger.error(str(error))
        span.record_exception(error)
        span.set_status(Status(StatusCode.ERROR, str(error)))
