"""Outbound HTTP helpers shared by the identity client and the resource proxies."""

import logging
from typing import Any, Optional

import httpx

from .errors import MalformedUpstreamResponse, UpstreamUnavailable, ValidationError

logger = logging.getLogger(__name__)


def get_transport() -> Optional[httpx.BaseTransport]:
    """Transport used for upstream calls; tests swap in an httpx.MockTransport."""
    return None


def send(
    method: str,
    url: str,
    timeout: float,
    transport: Optional[httpx.BaseTransport] = None,
    **kwargs: Any,
) -> httpx.Response:
    """Perform exactly one upstream request, no retries.

    An unparseable URL is a ValidationError. Connection failures and
    timeouts become UpstreamUnavailable; the response
    is returned whatever its status so callers decide what a failure means.
    """
    headers = {"Accept": "application/json"}
    headers.update(kwargs.pop("headers", None) or {})

    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            return client.request(method, url, headers=headers, **kwargs)
    except httpx.InvalidURL as exc:
        raise ValidationError(
            message="Invalid endpoint URL",
            error=str(exc),
            details={"endpoint": url},
        ) from exc
    except httpx.TimeoutException as exc:
        logger.error("Timeout after %ss calling %s %s", timeout, method, url)
        raise UpstreamUnavailable(
            message="Connection timeout. The server is not responding.",
            error=str(exc) or type(exc).__name__,
            details={"endpoint": url},
        ) from exc
    except httpx.TransportError as exc:
        logger.error("Cannot reach %s %s: %s", method, url, exc)
        raise UpstreamUnavailable(
            message="Cannot connect to OpenStack server. Please check the endpoint URL.",
            error=str(exc) or type(exc).__name__,
            details={"endpoint": url},
        ) from exc


def json_body(response: httpx.Response) -> Any:
    """Decode a JSON body, or fall back to the raw text for error reporting."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def expect_json_object(response: httpx.Response) -> dict:
    """Decode a success body that must be a JSON object."""
    body = json_body(response)
    if not isinstance(body, dict):
        raise MalformedUpstreamResponse(
            message="Expected a JSON object from OpenStack",
            details={"status": response.status_code, "url": str(response.request.url)},
        )
    return body


def token_prefix(token: Optional[str]) -> str:
    """Shorten a token for log lines."""
    if not token:
        return "<none>"
    return token[:8] + "..."
