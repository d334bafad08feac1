"""Compute API router."""

from typing import Optional

import httpx
from fastapi import APIRouter, Depends

from ...common.config import Settings, get_settings
from ...common.http import get_transport
from ...common.upstream import ServiceProxy
from ..identity.auth import compute_endpoint, require_token
from .schemas import InstanceCreateRequest
from .service import ComputeService

router = APIRouter()


def get_compute_service(
    token: str = Depends(require_token),
    endpoint: str = Depends(compute_endpoint),
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.BaseTransport] = Depends(get_transport),
) -> ComputeService:
    """Get compute service instance."""
    proxy = ServiceProxy(endpoint, token, timeout=settings.service_timeout, transport=transport)
    return ComputeService(proxy)


@router.get("/flavors")
def list_flavors(compute: ComputeService = Depends(get_compute_service)):
    """List flavors with details."""
    return {"success": True, "flavors": compute.list_flavors()}


@router.get("/keypairs")
def list_keypairs(compute: ComputeService = Depends(get_compute_service)):
    """List keypairs."""
    return {"success": True, "keypairs": compute.list_keypairs()}


@router.get("/instances")
def list_instances(compute: ComputeService = Depends(get_compute_service)):
    """List instances with details."""
    return {"success": True, "instances": compute.list_instances()}


@router.post("/instance")
def create_instance(
    instance_request: InstanceCreateRequest,
    compute: ComputeService = Depends(get_compute_service),
):
    """Boot a new instance."""
    instance = compute.create_instance(instance_request)
    return {
        "success": True,
        "message": "Instance created successfully",
        "instance": instance,
    }
