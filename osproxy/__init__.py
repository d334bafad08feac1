"""OpenStack proxy for browser-based dashboards."""

__version__ = "0.1.0"
