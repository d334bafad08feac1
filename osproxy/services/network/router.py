"""Network API router."""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends

from ...common.config import Settings, get_settings
from ...common.http import get_transport
from ...common.upstream import ServiceProxy
from ..identity.auth import network_endpoint, require_token
from .schemas import NetworkCreateRequest, PortCreateRequest, SubnetCreateRequest
from .service import NetworkService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_network_service(
    token: str = Depends(require_token),
    endpoint: str = Depends(network_endpoint),
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.BaseTransport] = Depends(get_transport),
) -> NetworkService:
    """Get network service instance."""
    logger.debug("Network base resolved to %s", endpoint)
    proxy = ServiceProxy(endpoint, token, timeout=settings.service_timeout, transport=transport)
    return NetworkService(proxy)


@router.get("/networks")
def list_networks(network: NetworkService = Depends(get_network_service)):
    """List networks."""
    return {"success": True, "networks": network.list_networks()}


@router.post("/network")
def create_network(
    network_request: NetworkCreateRequest,
    network: NetworkService = Depends(get_network_service),
):
    """Create a network."""
    return {
        "success": True,
        "message": "Network created successfully",
        "network": network.create_network(network_request),
    }


@router.post("/subnet")
def create_subnet(
    subnet_request: SubnetCreateRequest,
    network: NetworkService = Depends(get_network_service),
):
    """Create an IPv4 subnet."""
    return {
        "success": True,
        "message": "Subnet created successfully",
        "subnet": network.create_subnet(subnet_request),
    }


@router.post("/port")
def create_port(
    port_request: PortCreateRequest,
    network: NetworkService = Depends(get_network_service),
):
    """Create a port, optionally with a fixed IP."""
    return {
        "success": True,
        "message": "Port created successfully",
        "port": network.create_port(port_request),
    }


@router.delete("/port/{port_id}")
def delete_port(port_id: str, network: NetworkService = Depends(get_network_service)):
    """Delete a port."""
    return {
        "success": True,
        "message": "Port deleted successfully",
        "result": network.delete_port(port_id),
    }


@router.get("/security-groups")
def list_security_groups(network: NetworkService = Depends(get_network_service)):
    """List security groups."""
    return {"success": True, "securityGroups": network.list_security_groups()}
