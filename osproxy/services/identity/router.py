"""Identity API router: login, project listing and project scoping."""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends

from ...common.config import Settings, get_settings
from ...common.http import get_transport
from .auth import get_catalog_resolver, require_token
from .catalog import CatalogResolver
from .client import KeystoneClient
from .schemas import LoginRequest, ScopeRequest

router = APIRouter()
logger = logging.getLogger(__name__)


def get_keystone_client(
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.BaseTransport] = Depends(get_transport),
) -> KeystoneClient:
    """Get Keystone client instance."""
    return KeystoneClient(
        settings.openstack_auth_url,
        timeout=settings.identity_timeout,
        transport=transport,
        test_timeout=settings.connection_test_timeout,
    )


@router.get("/test")
def test_connection(keystone: KeystoneClient = Depends(get_keystone_client)):
    """Check that the identity service answers."""
    logger.info("Testing connection to %s", keystone.auth_url)
    version = keystone.check_connection()
    return {
        "success": True,
        "message": "Connected to OpenStack",
        "version": version.get("version", version),
    }


@router.post("/auth/login")
def login(
    login_request: LoginRequest,
    keystone: KeystoneClient = Depends(get_keystone_client),
):
    """Step one: password login for an unscoped token."""
    token, user = keystone.login_unscoped(
        login_request.username, login_request.password, login_request.domain_name
    )
    return {
        "success": True,
        "message": "Login successful",
        "unscopedToken": token,
        "user": user.model_dump(exclude_none=True) if user else None,
    }


@router.get("/auth/projects")
def list_projects(
    token: str = Depends(require_token),
    keystone: KeystoneClient = Depends(get_keystone_client),
):
    """Step two: projects the unscoped token may be scoped to."""
    projects = keystone.list_projects(token)
    return {
        "success": True,
        "projects": [project.model_dump(exclude_none=True) for project in projects],
    }


@router.post("/auth/scoped-token")
def scoped_token(
    scope_request: ScopeRequest,
    keystone: KeystoneClient = Depends(get_keystone_client),
    resolver: CatalogResolver = Depends(get_catalog_resolver),
):
    """Step three: project-scoped token plus the endpoints to use with it."""
    scoped = keystone.login_scoped(
        scope_request.username,
        scope_request.password,
        scope_request.domain_name,
        project_id=scope_request.project_id,
        project_name=scope_request.project_name,
        project_domain_name=scope_request.project_domain_name,
    )
    endpoints = resolver.resolve(scoped.catalog, project_id=scoped.project.id)

    return {
        "success": True,
        "message": "Scoped token received",
        "scopedToken": scoped.token,
        "project": scoped.project.model_dump(exclude_none=True),
        "user": scoped.user.model_dump(exclude_none=True) if scoped.user else None,
        "endpoints": endpoints.model_dump(),
        "catalog": [entry.model_dump(exclude_none=True) for entry in scoped.catalog],
    }
