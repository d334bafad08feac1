"""Image (Glance) proxy operations."""

from typing import List

from ...common.upstream import ServiceProxy


class ImageService:
    def __init__(self, proxy: ServiceProxy):
        self.proxy = proxy

    def list_images(self) -> List[dict]:
        body = self.proxy.get("images", "Failed to get images")
        return body.get("images") or []
