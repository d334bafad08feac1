"""Compute (Nova) proxy operations."""

import base64
import logging
from typing import List

from ...common.upstream import ServiceProxy
from .schemas import InstanceCreateRequest

logger = logging.getLogger(__name__)


def build_server_payload(instance: InstanceCreateRequest) -> dict:
    """Translate the dashboard's instance form into a Nova `server` body."""
    server = {
        "name": instance.name,
        "imageRef": instance.image_id,
        "flavorRef": instance.flavor_id,
    }

    if instance.port_id:
        server["networks"] = [{"port": instance.port_id}]
    elif instance.network_id:
        server["networks"] = [{"uuid": instance.network_id}]

    if instance.key_name:
        server["key_name"] = instance.key_name

    if instance.security_groups:
        server["security_groups"] = [{"name": sg} for sg in instance.security_groups]

    if instance.custom_script:
        server["user_data"] = base64.b64encode(instance.custom_script.encode("utf-8")).decode("ascii")

    return {"server": server}


class ComputeService:
    """Nova calls made on behalf of the dashboard."""

    def __init__(self, proxy: ServiceProxy):
        self.proxy = proxy

    def list_flavors(self) -> List[dict]:
        body = self.proxy.get("flavors/detail", "Failed to get flavors")
        return body.get("flavors") or []

    def list_keypairs(self) -> List[dict]:
        body = self.proxy.get("os-keypairs", "Failed to get keypairs")
        return body.get("keypairs") or []

    def list_instances(self) -> List[dict]:
        body = self.proxy.get("servers/detail", "Failed to get instances")
        return body.get("servers") or []

    def create_instance(self, instance: InstanceCreateRequest) -> dict:
        payload = build_server_payload(instance)
        logger.info("Creating instance %s from image %s", instance.name, instance.image_id)
        body = self.proxy.post("servers", payload, "Failed to create instance")
        return body.get("server") or {}
