"""Token-carrying client for compute, network and image endpoints."""

import logging
from typing import Any, Optional

import httpx

from .errors import MalformedUpstreamResponse, UpstreamError, upstream_message
from .http import json_body, send

logger = logging.getLogger(__name__)


class ServiceProxy:
    """Forward one call at a time to a resolved service base URL."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def call(
        self,
        method: str,
        path: str,
        failure_message: str,
        json: Any = None,
    ) -> Any:
        """Send the request and return the decoded body.

        A non-success status raises UpstreamError carrying the upstream status
        and body.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)

        kwargs = {"headers": {"X-Auth-Token": self.token}}
        if json is not None:
            kwargs["json"] = json
        response = send(method, url, self.timeout, transport=self.transport, **kwargs)

        body = json_body(response)
        if not response.is_success:
            human = upstream_message(body)
            logger.warning("%s %s returned %d: %s", method, url, response.status_code, human)
            raise UpstreamError(
                message=f"{failure_message}: {human}" if human else failure_message,
                status_code=response.status_code,
                error=human,
                details=body,
            )
        return body if body is not None else {}

    def _object(self, body: Any, path: str) -> dict:
        if not isinstance(body, dict):
            raise MalformedUpstreamResponse(
                message="Expected a JSON object from OpenStack",
                details={"url": f"{self.base_url}/{path.lstrip('/')}"},
            )
        return body

    def get(self, path: str, failure_message: str) -> dict:
        return self._object(self.call("GET", path, failure_message), path)

    def post(self, path: str, payload: Any, failure_message: str) -> dict:
        return self._object(self.call("POST", path, failure_message, json=payload), path)

    def delete(self, path: str, failure_message: str) -> Any:
        return self.call("DELETE", path, failure_message)
