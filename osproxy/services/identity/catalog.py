"""Service catalog resolution.

Turns the catalog returned alongside a scoped token into an EndpointMap: one
base URL per logical service, picked by interface and region. Network URLs
are normalized to carry an API version segment. The resource proxies reuse the
same rules for caller supplied URLs and fall back to a URL derived from the
identity endpoint when the caller has none.
"""

import re
from typing import Dict, Iterable, Optional, Sequence, Tuple
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict

from ...common.config import Settings
from .schemas import CatalogEndpoint, CatalogEntry, EndpointMap

NETWORK_API_VERSION = "v2.0"
IMAGE_API_VERSION = "v2"

# Logical service -> catalog types, first match wins
SERVICE_TYPES: Dict[str, Tuple[str, ...]] = {
    "identity": ("identity",),
    "compute": ("compute",),
    "network": ("network",),
    "image": ("image",),
    "loadbalancer": ("load-balancer",),
    "placement": ("placement",),
    "volume": ("volumev3", "block-storage", "volumev2"),
}

PROJECT_TEMPLATES = ("%(tenant_id)s", "%(project_id)s", "$(tenant_id)s", "$(project_id)s")

_VERSION_SEGMENT = re.compile(r"^v\d+(\.\d+)*$", re.IGNORECASE)
_IDENTITY_SUFFIX = re.compile(r"(/identity)?(/v\d+(\.\d+)*)?/*$", re.IGNORECASE)


def has_version_segment(url: str) -> bool:
    """True when a path segment of `url` looks like `v2`, `v2.0`, `v3`..."""
    try:
        path = urlsplit(url).path
    except ValueError:
        # Unparseable URLs are rejected when the request is sent
        return False
    return any(_VERSION_SEGMENT.match(segment) for segment in path.split("/"))


def normalize_versioned_url(url: str, default_version: str) -> str:
    base = url.rstrip("/")
    if not has_version_segment(base):
        base = f"{base}/{default_version}"
    return base


def normalize_network_url(url: str) -> str:
    """`https://host/network` -> `https://host/network/v2.0`."""
    return normalize_versioned_url(url, NETWORK_API_VERSION)


def normalize_image_url(url: str) -> str:
    return normalize_versioned_url(url, IMAGE_API_VERSION)


def derive_service_url(identity_url: str, service_path: str) -> str:
    """Best-effort guess of a service root next to the identity endpoint.

    `https://cloud/identity/v3` + `network` -> `https://cloud/network`. Only
    deployments that publish services under path prefixes of a shared host
    fit this layout.
    """
    root = _IDENTITY_SUFFIX.sub("", identity_url.strip())
    return f"{root.rstrip('/')}/{service_path}"


def with_project(url: str, project_id: Optional[str], append_suffix: bool = False) -> str:
    """Fill Keystone `%(tenant_id)s` style templates, optionally append the id."""
    if not project_id:
        return url
    for template in PROJECT_TEMPLATES:
        url = url.replace(template, project_id)
    url = url.rstrip("/")
    if append_suffix and not url.endswith("/" + project_id):
        url = f"{url}/{project_id}"
    return url


class ResolverConfig(BaseModel):
    """Immutable selection rules for a CatalogResolver."""

    region: str = "RegionOne"
    interface: str = "public"
    identity_url: Optional[str] = None
    compute_project_suffix: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResolverConfig":
        return cls(
            region=settings.openstack_region,
            interface=settings.openstack_interface,
            identity_url=settings.openstack_auth_url,
            compute_project_suffix=settings.compute_project_suffix,
        )


class CatalogResolver:
    """Resolve base URLs from a Keystone service catalog. Never raises."""

    def __init__(self, config: ResolverConfig):
        self.config = config

    def find_endpoint(
        self,
        catalog: Sequence[CatalogEntry],
        service_types: Iterable[str],
        region: Optional[str] = None,
    ) -> Optional[str]:
        """URL of the first endpoint matching type, interface and region."""
        region = region or self.config.region
        for service_type in service_types:
            entry = next((e for e in catalog if e.type == service_type), None)
            if entry is None:
                continue
            endpoint = next(
                (ep for ep in entry.endpoints if self._matches(ep, region)), None
            )
            if endpoint is not None:
                return endpoint.url
        return None

    def _matches(self, endpoint: CatalogEndpoint, region: str) -> bool:
        endpoint_region = endpoint.region or endpoint.region_id
        return endpoint.interface == self.config.interface and endpoint_region == region

    def resolve(
        self,
        catalog: Sequence[CatalogEntry],
        region: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> EndpointMap:
        urls = {
            name: self.find_endpoint(catalog, types, region)
            for name, types in SERVICE_TYPES.items()
        }

        if urls["compute"]:
            urls["compute"] = with_project(
                urls["compute"], project_id, self.config.compute_project_suffix
            )
        if urls["network"]:
            urls["network"] = normalize_network_url(urls["network"])

        return EndpointMap(**urls)

    def network_base(self, url: Optional[str]) -> Optional[str]:
        """Normalize a caller supplied network URL, else derive one from identity."""
        if url:
            return normalize_network_url(url)
        if self.config.identity_url:
            return normalize_network_url(
                derive_service_url(self.config.identity_url, "network")
            )
        return None

    def image_base(self, url: Optional[str]) -> Optional[str]:
        if url:
            return normalize_image_url(url)
        if self.config.identity_url:
            return normalize_image_url(derive_service_url(self.config.identity_url, "image"))
        return None
