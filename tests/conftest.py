# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_identity

import json
from collections import deque
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from ocm_oidc_config.client import ClustersMgmtClient

API_URL = "https://api.example.com"

OIDC_CONFIGS_URL = "/api/clusters_mgmt/v1/oidc_configs"
OIDC_CONFIG_URL = "/api/clusters_mgmt/v1/oidc_configs/23f6gk51qi5ng15mm095c90hhajbf7c5"
THUMBPRINT_URL = "/api/clusters_mgmt/v1/aws_inquiries/oidc_thumbprint"
CLUSTERS_URL = "/api/clusters_mgmt/v1/clusters"

ID = "23f6gk51qi5ng15mm095c90hhajbf7c5"
THUMBPRINT = "9e99a48a9960b14926bb7f3b02e22da2b0ab7280"
INSTALLER_ROLE_ARN = "arn:aws:iam::765374464689:role/terr-account2-Installer-Role"
SECRET_ARN = "arn:aws:secretsmanager:us-east-1:765374464689:secret:rosa-private-key-oidc-f3y4-fEqj4c"
MANAGED_ISSUER_URL = "https://d3gt1gce2zmg3d.cloudfront.net/23f6gk51qi5ng15mm095c90hhajbf7c5"
MANAGED_OIDC_ENDPOINT_URL = "d3gt1gce2zmg3d.cloudfront.net/23f6gk51qi5ng15mm095c90hhajbf7c5"
UNMANAGED_ISSUER_URL = "https://oidc-f3y4.s3.us-east-1.amazonaws.com"
UNMANAGED_OIDC_ENDPOINT_URL = "oidc-f3y4.s3.us-east-1.amazonaws.com"

MANAGED_OIDC_CONFIG = {
    "href": OIDC_CONFIG_URL,
    "id": ID,
    "issuer_url": MANAGED_ISSUER_URL,
    "managed": True,
    "reusable": True,
}

UNMANAGED_OIDC_CONFIG = {
    "href": OIDC_CONFIG_URL,
    "id": ID,
    "issuer_url": UNMANAGED_ISSUER_URL,
    "secret_arn": SECRET_ARN,
    "managed": False,
    "reusable": True,
}

OIDC_THUMBPRINT = {
    "href": f"{THUMBPRINT_URL}/{THUMBPRINT}",
    "thumbprint": THUMBPRINT,
    "oidc_config_id": ID,
    "cluster_id": "",
}

EMPTY_CLUSTER_LIST = {"kind": "ClusterList", "page": 0, "size": 0, "total": 0, "items": []}
CLUSTER_LIST = {"kind": "ClusterList", "page": 1, "size": 1, "total": 1, "items": [{"name": "cluster-name"}]}


@dataclass
class Expectation:
    method: str
    path: str
    status: int
    body: Any = None
    verify_json: dict[str, Any] | None = None
    error: Exception | None = None


@dataclass
class FakeClustersMgmtServer:
    """
    In-process stand-in for the clusters-management API.

    Requests must arrive in the order the expectations were appended; anything else is
    answered with a 500 and recorded in `failures`.
    """

    expectations: deque[Expectation] = field(default_factory=deque)
    requests: list[httpx.Request] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    def expect(
        self,
        method: str,
        path: str,
        status: int = 200,
        body: Any = None,
        verify_json: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> "FakeClustersMgmtServer":
        self.expectations.append(Expectation(method, path, status, body, verify_json, error))
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.expectations:
            self.failures.append(f"unexpected request {request.method} {request.url.path}")
            return httpx.Response(500, json={"reason": "unexpected request"})

        expected = self.expectations.popleft()
        if (request.method, request.url.path) != (expected.method, expected.path):
            self.failures.append(
                f"expected {expected.method} {expected.path}, got {request.method} {request.url.path}"
            )
            return httpx.Response(500, json={"reason": "unexpected request"})

        if expected.verify_json is not None:
            payload = json.loads(request.content)
            for key, value in expected.verify_json.items():
                if payload.get(key) != value:
                    self.failures.append(f"{request.method} {request.url.path}: .{key} = {payload.get(key)!r}")

        if expected.error is not None:
            raise expected.error
        if expected.body is None:
            return httpx.Response(expected.status)
        return httpx.Response(expected.status, json=expected.body)

    def calls(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)

    def verify(self) -> None:
        assert not self.failures, self.failures
        assert not self.expectations, f"expected requests never made: {list(self.expectations)}"


@pytest.fixture
def fake_server() -> FakeClustersMgmtServer:
    return FakeClustersMgmtServer()


@pytest.fixture
def http_client(fake_server: FakeClustersMgmtServer) -> httpx.AsyncClient:
    return httpx.AsyncClient(base_url=API_URL, transport=httpx.MockTransport(fake_server.handle))


@pytest.fixture
def api(http_client: httpx.AsyncClient) -> ClustersMgmtClient:
    return ClustersMgmtClient(http_client)
