"""Keystone client: password logins and project enumeration.

Every method is a single round trip to the identity service. Nothing is
cached; tokens travel back to the caller and are supplied again on the next
request.
"""

import logging
from typing import List, Optional, Tuple

import httpx
from pydantic import ValidationError as SchemaError

from ...common.errors import (
    AuthError,
    MalformedUpstreamResponse,
    UpstreamError,
    ValidationError,
    upstream_message,
)
from ...common.http import expect_json_object, json_body, send, token_prefix
from .schemas import CatalogEntry, Project, ScopedLogin, User

logger = logging.getLogger(__name__)

SUBJECT_TOKEN_HEADER = "X-Subject-Token"
AUTH_TOKEN_HEADER = "X-Auth-Token"
DEFAULT_DOMAIN = "Default"


def password_identity(username: str, password: str, domain_name: Optional[str]) -> dict:
    """The `auth.identity` block of a Keystone v3 password login."""
    return {
        "methods": ["password"],
        "password": {
            "user": {
                "name": username,
                "domain": {"name": domain_name or DEFAULT_DOMAIN},
                "password": password,
            }
        },
    }


def project_scope(
    project_id: Optional[str] = None,
    project_name: Optional[str] = None,
    project_domain_name: Optional[str] = None,
) -> dict:
    """The `auth.scope` block; an id wins over a name."""
    if project_id:
        return {"project": {"id": project_id}}
    if project_name:
        return {
            "project": {
                "name": project_name,
                "domain": {"name": project_domain_name or DEFAULT_DOMAIN},
            }
        }
    raise ValidationError(message="Either projectId or projectName is required")


class KeystoneClient:
    """Identity v3 client used by the auth routes."""

    def __init__(
        self,
        auth_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
        test_timeout: float = 5.0,
    ):
        self.auth_url = auth_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.test_timeout = test_timeout

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        return send(
            method,
            f"{self.auth_url}{path}",
            self.timeout,
            transport=self.transport,
            **kwargs,
        )

    def _issue_token(self, payload: dict, failure_message: str) -> Tuple[str, dict]:
        """POST /auth/tokens and return (subject token, token body)."""
        response = self._request("POST", "/auth/tokens", json=payload)

        if not response.is_success:
            body = json_body(response)
            logger.warning("Keystone refused token request with status %d", response.status_code)
            raise AuthError(
                message=failure_message,
                status_code=response.status_code,
                error=upstream_message(body),
                details=body,
            )

        # The token only ever travels in the header, never in the body
        token = response.headers.get(SUBJECT_TOKEN_HEADER)
        if not token:
            raise MalformedUpstreamResponse(
                message="Token not found in response headers",
                details={"status": response.status_code},
            )

        body = expect_json_object(response)
        token_body = body.get("token")
        if not isinstance(token_body, dict):
            token_body = {}
        return token, token_body

    def login_unscoped(
        self, username: str, password: str, domain_name: Optional[str] = DEFAULT_DOMAIN
    ) -> Tuple[str, Optional[User]]:
        """Password login without scope.

        Returns the unscoped token and the user Keystone reports, if any.
        """
        logger.info("Login attempt for user %s in domain %s", username, domain_name or DEFAULT_DOMAIN)
        payload = {"auth": {"identity": password_identity(username, password, domain_name)}}
        token, token_body = self._issue_token(payload, "Authentication failed")

        user = None
        if isinstance(token_body.get("user"), dict):
            try:
                user = User.model_validate(token_body["user"])
            except SchemaError:
                logger.debug("Ignoring unparseable user block in token body")

        logger.info("Unscoped token issued for %s (%s)", username, token_prefix(token))
        return token, user

    def login_scoped(
        self,
        username: str,
        password: str,
        domain_name: Optional[str] = DEFAULT_DOMAIN,
        project_id: Optional[str] = None,
        project_name: Optional[str] = None,
        project_domain_name: Optional[str] = None,
    ) -> ScopedLogin:
        """Password login scoped to one project, identified by id or by name."""
        scope = project_scope(project_id, project_name, project_domain_name)
        logger.info("Scoped login for user %s on project %s", username, project_id or project_name)

        payload = {
            "auth": {
                "identity": password_identity(username, password, domain_name),
                "scope": scope,
            }
        }
        token, token_body = self._issue_token(payload, "Failed to get scoped token")

        if not isinstance(token_body.get("project"), dict):
            raise MalformedUpstreamResponse(message="Scoped token response carries no project")

        try:
            return ScopedLogin(
                token=token,
                project=Project.model_validate(token_body["project"]),
                user=token_body.get("user"),
                catalog=[CatalogEntry.model_validate(e) for e in token_body.get("catalog") or []],
            )
        except SchemaError as exc:
            raise MalformedUpstreamResponse(
                message="Unexpected token body from Keystone",
                error=str(exc),
            ) from exc

    def list_projects(self, token: str) -> List[Project]:
        """Projects visible to `token`, in the order Keystone returns them."""
        response = self._request("GET", "/auth/projects", headers={AUTH_TOKEN_HEADER: token})

        if not response.is_success:
            body = json_body(response)
            raise AuthError(
                message="Failed to get projects",
                status_code=response.status_code,
                error=upstream_message(body),
                details=body,
            )

        body = expect_json_object(response)
        projects = body.get("projects")
        if not isinstance(projects, list):
            raise MalformedUpstreamResponse(message="Project listing carries no projects")

        try:
            result = [Project.model_validate(p) for p in projects]
        except SchemaError as exc:
            raise MalformedUpstreamResponse(
                message="Unexpected project listing from Keystone",
                error=str(exc),
            ) from exc

        logger.info("Found %d projects for token %s", len(result), token_prefix(token))
        return result

    def check_connection(self) -> dict:
        """GET the identity root and return its version document."""
        response = send("GET", self.auth_url, self.test_timeout, transport=self.transport)
        body = json_body(response)
        if response.status_code >= 400:
            raise UpstreamError(
                message="Cannot connect to OpenStack",
                status_code=response.status_code,
                error=upstream_message(body),
                details=body,
            )
        return body if isinstance(body, dict) else {"raw": body}
