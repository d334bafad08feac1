"""Network (Neutron) proxy operations."""

import logging
from typing import Any, List

from ...common.upstream import ServiceProxy
from .schemas import NetworkCreateRequest, PortCreateRequest, SubnetCreateRequest

logger = logging.getLogger(__name__)


class NetworkService:
    """Neutron calls made on behalf of the dashboard."""

    def __init__(self, proxy: ServiceProxy):
        self.proxy = proxy

    # Network operations
    def list_networks(self) -> List[dict]:
        body = self.proxy.get("networks", "Failed to get networks")
        return body.get("networks") or []

    def create_network(self, network_data: NetworkCreateRequest) -> dict:
        payload = {"network": {"name": network_data.name, "admin_state_up": True}}
        body = self.proxy.post("networks", payload, "Failed to create network")
        return body.get("network") or {}

    # Subnet operations
    def create_subnet(self, subnet_data: SubnetCreateRequest) -> dict:
        subnet = {
            "name": subnet_data.name,
            "network_id": subnet_data.network_id,
            "ip_version": 4,
            "cidr": subnet_data.cidr,
            "enable_dhcp": subnet_data.enable_dhcp,
        }
        if subnet_data.gateway_ip:
            subnet["gateway_ip"] = subnet_data.gateway_ip
        body = self.proxy.post("subnets", {"subnet": subnet}, "Failed to create subnet")
        return body.get("subnet") or {}

    # Port operations
    def create_port(self, port_data: PortCreateRequest) -> dict:
        port = {"network_id": port_data.network_id, "admin_state_up": True}
        if port_data.name:
            port["name"] = port_data.name
        if port_data.fixed_ip:
            port["fixed_ips"] = [{"ip_address": port_data.fixed_ip}]
        body = self.proxy.post("ports", {"port": port}, "Failed to create port")
        return body.get("port") or {}

    def delete_port(self, port_id: str) -> Any:
        logger.info("Deleting port %s", port_id)
        return self.proxy.delete(f"ports/{port_id}", "Failed to delete port")

    # Security group operations
    def list_security_groups(self) -> List[dict]:
        body = self.proxy.get("security-groups", "Failed to get security groups")
        return body.get("security_groups") or []
