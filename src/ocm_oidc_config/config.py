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
Configuration for the ocm-oidc-config package.
"""

from pydantic import Field, SecretStr, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_URL = "https://api.openshift.com"
DEFAULT_TOKEN_URL = "https://sso.redhat.com/auth/realms/redhat-external/protocol/openid-connect/token"
DEFAULT_CLIENT_ID = "cloud-services"


class OcmConfig(BaseSettings):
    """
    Connection settings for the clusters-management API.

    Attributes:
        url (str): Base URL of the API gateway (e.g. https://api.openshift.com).
        access_token (SecretStr | None): A ready-to-use bearer token.
        token (SecretStr | None): An offline (refresh) token exchanged at `token_url` for access tokens.
        client_id (str): OAuth client used for the refresh-token grant.
        token_url (str): SSO token endpoint.
        http_timeout (float): Timeout in seconds applied to every API call.
        insecure (bool): Skip TLS certificate verification.
    """

    model_config = SettingsConfigDict(
        env_prefix="RHCS_",
        case_sensitive=False,
    )

    unsafe_local_dev: bool = False
    url: str = DEFAULT_URL
    access_token: SecretStr | None = None
    token: SecretStr | None = None
    client_id: str = DEFAULT_CLIENT_ID
    token_url: str = DEFAULT_TOKEN_URL
    http_timeout: float = Field(default=30.0, gt=0, description="Timeout in seconds for all API calls.")
    insecure: bool = False

    @field_validator("url", "token_url", mode="after")
    @classmethod
    def validate_https(cls, v: str, info: ValidationInfo) -> str:
        """
        Ensures that endpoints use HTTPS, unless strictly opted out for local dev.
        """
        v = v.strip().rstrip("/")
        if v.startswith("http://") and not info.data.get("unsafe_local_dev", False):
            raise ValueError("HTTPS is required. Set 'unsafe_local_dev=True' only for local testing.")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"'{v}' is not an absolute http(s) URL")
        return v

    @model_validator(mode="after")
    def require_credentials(self) -> "OcmConfig":
        """
        Exactly how the client authenticates is decided by the session factory,
        but at least one credential has to be present.
        """
        if self.access_token is None and self.token is None:
            raise ValueError("Either 'access_token' or 'token' must be provided.")
        return self
