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
Pre-flight validation of declared OIDC config intents.
"""

from ocm_oidc_config.exceptions import ValidationError
from ocm_oidc_config.models import OidcConfigIntent, OidcConfigState

SELF_HOSTED_ATTRIBUTES = ("secret_arn", "issuer_url", "installer_role_arn")

MANAGED_WITH_SELF_HOSTED_ATTRIBUTES = (
    "In order to create managed OIDC Configuration, "
    "the attributes' values of `secret_arn`, `issuer_url` and `installer_role_arn` should be empty"
)
UNMANAGED_MISSING_ATTRIBUTES = (
    "In order to create unmanaged OIDC Configuration, "
    "the attributes' values of `secret_arn`, `issuer_url` and `installer_role_arn` should be provided"
)


def _is_empty(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_intent(intent: OidcConfigIntent) -> OidcConfigIntent:
    """
    Enforces that managed and self-hosted attributes are mutually exclusive.

    Args:
        intent: The declared intent.

    Returns:
        OidcConfigIntent: The intent with blank self-hosted attributes normalised to None.

    Raises:
        ValidationError: If a managed intent carries self-hosted attributes, or an unmanaged
            intent is missing any of them.
    """
    values = {name: getattr(intent, name) for name in SELF_HOSTED_ATTRIBUTES}

    if intent.managed:
        if not all(_is_empty(v) for v in values.values()):
            raise ValidationError(MANAGED_WITH_SELF_HOSTED_ATTRIBUTES)
        return intent.model_copy(update=dict.fromkeys(SELF_HOSTED_ATTRIBUTES))

    missing = [name for name, value in values.items() if _is_empty(value)]
    if missing:
        raise ValidationError(f"{UNMANAGED_MISSING_ATTRIBUTES} (missing: {', '.join(missing)})")
    return intent


def requires_replace(state: OidcConfigState, intent: OidcConfigIntent) -> list[str]:
    """
    Lists the declared attributes that differ from the stored state.

    OIDC configs cannot be updated in place, so any difference means destroy then create.
    The issuer URL of a managed config is assigned by the service and is not compared.

    Returns:
        list[str]: Names of the attributes forcing replacement, empty when nothing changed.
    """
    changed: list[str] = []
    if state.managed != intent.managed:
        changed.append("managed")

    for name in SELF_HOSTED_ATTRIBUTES:
        if intent.managed and name == "issuer_url":
            continue
        declared = getattr(intent, name)
        stored = getattr(state, name)
        if (None if _is_empty(declared) else declared) != (None if _is_empty(stored) else stored):
            changed.append(name)
    return changed
