"""Configuration management for osproxy."""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    debug: bool = False
    log_level: str = "INFO"

    # Listener
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = ["*"]

    # Identity service and catalog selection
    openstack_auth_url: str = "http://localhost:5000/v3"
    openstack_region: str = "RegionOne"
    openstack_interface: str = "public"
    compute_project_suffix: bool = False

    # Outbound timeouts in seconds
    identity_timeout: float = 15.0
    service_timeout: float = 10.0
    connection_test_timeout: float = 5.0

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()


def get_settings() -> Settings:
    """Return the process settings; overridden in tests."""
    return settings
