"""Unit tests for service catalog resolution."""

import pytest
from pydantic import ValidationError

from osproxy.services.identity.catalog import (
    CatalogResolver,
    ResolverConfig,
    derive_service_url,
    has_version_segment,
    normalize_image_url,
    normalize_network_url,
    with_project,
)
from osproxy.services.identity.schemas import CatalogEntry, EndpointMap
from tests.conftest import CATALOG, IDENTITY_URL


def parse(raw):
    return [CatalogEntry.model_validate(entry) for entry in raw]


@pytest.fixture
def resolver():
    return CatalogResolver(ResolverConfig(region="RegionOne", identity_url=IDENTITY_URL))


class TestNormalization:
    """Test version segment handling for network and image URLs."""

    def test_network_url_without_version_gets_v2_0(self):
        assert normalize_network_url("https://host/network") == "https://host/network/v2.0"

    def test_network_url_with_version_only_loses_trailing_slash(self):
        assert normalize_network_url("https://host/network/v2") == "https://host/network/v2"
        assert normalize_network_url("https://host/network/v2/") == "https://host/network/v2"
        assert normalize_network_url("https://host:9696/v2.0//") == "https://host:9696/v2.0"

    def test_bare_host(self):
        assert normalize_network_url("https://net/") == "https://net/v2.0"

    def test_version_must_be_a_whole_segment(self):
        # "v2net" and a host named v1 are not API versions
        assert not has_version_segment("https://host/v2net")
        assert not has_version_segment("https://v1.example.com/network")
        assert has_version_segment("https://host/network/V2.0/")

    def test_unparseable_url_is_not_an_error(self):
        assert not has_version_segment("http://[bad")
        assert normalize_network_url("http://[bad") == "http://[bad/v2.0"

    def test_image_url_gets_v2(self):
        assert normalize_image_url("https://image.test") == "https://image.test/v2"
        assert normalize_image_url("https://image.test/v2/") == "https://image.test/v2"


class TestDerivedFallback:
    @pytest.mark.parametrize(
        "identity_url,expected",
        [
            ("https://cloud.test/identity/v3", "https://cloud.test/network"),
            ("https://cloud.test/identity/v3/", "https://cloud.test/network"),
            ("https://cloud.test/identity", "https://cloud.test/network"),
            ("https://keystone.test:5000/v3", "https://keystone.test:5000/network"),
            ("https://cloud.test", "https://cloud.test/network"),
        ],
    )
    def test_derive_network(self, identity_url, expected):
        assert derive_service_url(identity_url, "network") == expected

    def test_network_base_prefers_caller_url(self, resolver):
        assert resolver.network_base("https://neutron.test:9696") == "https://neutron.test:9696/v2.0"

    def test_network_base_falls_back_to_identity(self, resolver):
        assert resolver.network_base(None) == "https://keystone.test/network/v2.0"

    def test_image_base_falls_back_to_identity(self, resolver):
        assert resolver.image_base("") == "https://keystone.test/image/v2"

    def test_no_identity_url_means_no_fallback(self):
        bare = CatalogResolver(ResolverConfig(region="RegionOne"))
        assert bare.network_base(None) is None
        assert bare.image_base(None) is None


class TestResolve:
    """Test EndpointMap derivation."""

    def test_resolves_public_endpoints_for_region(self, resolver):
        endpoints = resolver.resolve(parse(CATALOG))

        assert endpoints == EndpointMap(
            identity=IDENTITY_URL,
            compute="https://compute.test/v2.1",
            network="https://net/v2.0",
            image="https://image.test",
            loadbalancer="https://lb.test",
            placement="https://placement.test",
            volume="https://volume.test/v3",
        )

    def test_interface_is_configurable(self):
        internal = CatalogResolver(ResolverConfig(region="RegionOne", interface="internal"))
        endpoints = internal.resolve(parse(CATALOG))
        assert endpoints.compute == "http://nova.internal:8774/v2.1"
        assert endpoints.network is None

    def test_other_region_only_yields_absent_endpoints(self, resolver):
        catalog = parse(
            [
                {
                    "type": "network",
                    "endpoints": [
                        {"interface": "public", "region": "RegionTwo", "url": "https://net2"}
                    ],
                }
            ]
        )

        endpoints = resolver.resolve(catalog)

        assert endpoints.network is None
        assert "network" in endpoints.model_dump()

    def test_region_argument_overrides_config(self, resolver):
        catalog = parse(
            [
                {
                    "type": "network",
                    "endpoints": [
                        {"interface": "public", "region": "RegionTwo", "url": "https://net2"}
                    ],
                }
            ]
        )
        assert resolver.resolve(catalog, region="RegionTwo").network == "https://net2/v2.0"

    def test_region_id_used_when_region_missing(self, resolver):
        catalog = parse(
            [
                {
                    "type": "image",
                    "endpoints": [
                        {"interface": "public", "region_id": "RegionOne", "url": "https://img"}
                    ],
                }
            ]
        )
        assert resolver.resolve(catalog).image == "https://img"

    def test_empty_catalog(self, resolver):
        endpoints = resolver.resolve([])
        assert all(url is None for url in endpoints.model_dump().values())

    def test_volume_falls_back_to_block_storage(self, resolver):
        catalog = parse(
            [
                {
                    "type": "block-storage",
                    "endpoints": [
                        {"interface": "public", "region": "RegionOne", "url": "https://bs/v3"}
                    ],
                }
            ]
        )
        assert resolver.resolve(catalog).volume == "https://bs/v3"

    def test_resolution_is_idempotent(self, resolver):
        catalog = parse(CATALOG)
        first = resolver.resolve(catalog, project_id="p1")
        second = resolver.resolve(catalog, project_id="p1")
        assert first.model_dump_json() == second.model_dump_json()


class TestComputeProjectUrl:
    def test_template_is_filled(self):
        assert (
            with_project("https://nova/v2.1/%(tenant_id)s", "p1") == "https://nova/v2.1/p1"
        )
        assert (
            with_project("https://nova/v2.1/$(project_id)s", "p1") == "https://nova/v2.1/p1"
        )

    def test_suffix_appended_once(self):
        assert with_project("https://nova/v2.1/", "p1", append_suffix=True) == "https://nova/v2.1/p1"
        assert with_project("https://nova/v2.1/p1", "p1", append_suffix=True) == "https://nova/v2.1/p1"

    def test_without_project_id_url_is_untouched(self):
        assert with_project("https://nova/v2.1/%(tenant_id)s", None) == "https://nova/v2.1/%(tenant_id)s"

    def test_resolver_applies_suffix_setting(self):
        resolver = CatalogResolver(ResolverConfig(region="RegionOne", compute_project_suffix=True))
        endpoints = resolver.resolve(parse(CATALOG), project_id="p1")
        assert endpoints.compute == "https://compute.test/v2.1/p1"

    def test_config_is_immutable(self):
        config = ResolverConfig(region="RegionOne")
        with pytest.raises(ValidationError):
            config.region = "RegionTwo"
