"""Request-scoped dependencies: the caller's token and service endpoints.

The proxy keeps no session. The browser sends the token and the endpoint it
got from the scoped login on every call, as headers.
"""

from typing import Optional

from fastapi import Depends, Header, status

from ...common.config import Settings, get_settings
from ...common.errors import ValidationError
from .catalog import CatalogResolver, ResolverConfig


def get_catalog_resolver(settings: Settings = Depends(get_settings)) -> CatalogResolver:
    """Get a catalog resolver bound to the configured region and interface."""
    return CatalogResolver(ResolverConfig.from_settings(settings))


def require_token(x_auth_token: Optional[str] = Header(None, alias="X-Auth-Token")) -> str:
    if not x_auth_token:
        raise ValidationError(
            message="Token is required", status_code=status.HTTP_401_UNAUTHORIZED
        )
    return x_auth_token


def compute_endpoint(
    x_compute_endpoint: Optional[str] = Header(None, alias="X-Compute-Endpoint")
) -> str:
    """Compute URL from the scoped login; there is no fallback for it."""
    if not x_compute_endpoint:
        raise ValidationError(message="Compute endpoint is required")
    return x_compute_endpoint.rstrip("/")


def network_endpoint(
    x_network_endpoint: Optional[str] = Header(None, alias="X-Network-Endpoint"),
    resolver: CatalogResolver = Depends(get_catalog_resolver),
) -> str:
    base = resolver.network_base(x_network_endpoint)
    if not base:
        raise ValidationError(message="Network endpoint is required")
    return base


def image_endpoint(
    x_image_endpoint: Optional[str] = Header(None, alias="X-Image-Endpoint"),
    resolver: CatalogResolver = Depends(get_catalog_resolver),
) -> str:
    base = resolver.image_base(x_image_endpoint)
    if not base:
        raise ValidationError(message="Image endpoint is required")
    return base
