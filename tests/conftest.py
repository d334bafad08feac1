"""Shared fixtures: a stub OpenStack cloud behind httpx.MockTransport."""

import json
from typing import Callable, Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from osproxy.common.config import Settings, get_settings
from osproxy.common.http import get_transport
from osproxy.main import app

IDENTITY_URL = "https://keystone.test/v3"

CATALOG = [
    {
        "type": "identity",
        "name": "keystone",
        "endpoints": [
            {"interface": "public", "region": "RegionOne", "url": IDENTITY_URL},
        ],
    },
    {
        "type": "compute",
        "name": "nova",
        "endpoints": [
            {"interface": "internal", "region": "RegionOne", "url": "http://nova.internal:8774/v2.1"},
            {"interface": "public", "region": "RegionOne", "url": "https://compute.test/v2.1"},
        ],
    },
    {
        "type": "network",
        "name": "neutron",
        "endpoints": [
            {"interface": "public", "region": "RegionOne", "url": "https://net/"},
        ],
    },
    {
        "type": "image",
        "name": "glance",
        "endpoints": [
            {"interface": "public", "region": "RegionOne", "url": "https://image.test"},
        ],
    },
    {
        "type": "load-balancer",
        "name": "octavia",
        "endpoints": [
            {"interface": "public", "region": "RegionOne", "url": "https://lb.test"},
        ],
    },
    {
        "type": "placement",
        "name": "placement",
        "endpoints": [
            {"interface": "public", "region": "RegionOne", "url": "https://placement.test"},
        ],
    },
    {
        "type": "volumev3",
        "name": "cinderv3",
        "endpoints": [
            {"interface": "public", "region": "RegionOne", "url": "https://volume.test/v3"},
        ],
    },
]

Handler = Callable[[httpx.Request], httpx.Response]


class StubCloud:
    """Routes (method, url) pairs to response factories and records traffic."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method.upper(), url)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, str(request.url)))
        if handler is None:
            return httpx.Response(404, json={"error": {"message": "no stub route", "code": 404}})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def bodies(self, method: str, url: str) -> List[dict]:
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == method and str(r.url) == url
        ]


def issue_token(token: str, token_body: dict, status_code: int = 201) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            status_code, json={"token": token_body}, headers={"X-Subject-Token": token}
        )

    return handler


def token_sequence(*tokens: str, token_body: dict) -> Handler:
    """Issue a new token per call, the way Keystone does."""
    remaining = list(tokens)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            201, json={"token": token_body}, headers={"X-Subject-Token": remaining.pop(0)}
        )

    return handler


def json_response(body, status_code: int = 200) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return handler


@pytest.fixture
def cloud():
    return StubCloud()


@pytest.fixture
def test_settings():
    return Settings(
        openstack_auth_url=IDENTITY_URL,
        openstack_region="RegionOne",
        openstack_interface="public",
        compute_project_suffix=False,
    )


@pytest.fixture
def client(cloud, test_settings):
    """Test client whose upstream calls all land on the stub cloud."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_transport] = lambda: cloud.transport
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
