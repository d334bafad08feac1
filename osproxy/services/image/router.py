"""Image API router."""

from typing import Optional

import httpx
from fastapi import APIRouter, Depends

from ...common.config import Settings, get_settings
from ...common.http import get_transport
from ...common.upstream import ServiceProxy
from ..identity.auth import image_endpoint, require_token
from .service import ImageService

router = APIRouter()


def get_image_service(
    token: str = Depends(require_token),
    endpoint: str = Depends(image_endpoint),
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.BaseTransport] = Depends(get_transport),
) -> ImageService:
    """Get image service instance."""
    proxy = ServiceProxy(endpoint, token, timeout=settings.service_timeout, transport=transport)
    return ImageService(proxy)


@router.get("/images")
def list_images(images: ImageService = Depends(get_image_service)):
    """List images visible to the project."""
    return {"success": True, "images": images.list_images()}
