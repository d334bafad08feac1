"""Identity (Keystone) schemas using Pydantic."""

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Domain(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class User(BaseModel):
    id: str
    name: Optional[str] = None
    domain: Optional[Domain] = None

    model_config = ConfigDict(extra="allow")


class Project(BaseModel):
    """Project as Keystone reports it; unknown keys are kept verbatim."""

    id: str
    name: Optional[str] = None
    domain_id: Optional[str] = None
    domain: Optional[Domain] = None

    model_config = ConfigDict(extra="allow")


class CatalogEndpoint(BaseModel):
    url: str
    interface: Optional[str] = None
    region: Optional[str] = None
    region_id: Optional[str] = None
    id: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class CatalogEntry(BaseModel):
    type: str
    name: Optional[str] = None
    id: Optional[str] = None
    endpoints: List[CatalogEndpoint] = []

    model_config = ConfigDict(extra="allow")


class EndpointMap(BaseModel):
    """Base URL per logical service; `None` means the catalog had no match."""

    identity: Optional[str] = None
    compute: Optional[str] = None
    network: Optional[str] = None
    image: Optional[str] = None
    loadbalancer: Optional[str] = None
    placement: Optional[str] = None
    volume: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ScopedLogin(BaseModel):
    """Outcome of a project-scoped password login."""

    token: str
    project: Project
    user: Optional[User] = None
    catalog: List[CatalogEntry] = []


# Request bodies sent by the browser
class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    domain_name: str = Field(
        default="Default",
        min_length=1,
        validation_alias=AliasChoices("domainName", "userDomainName", "domain_name"),
    )


class ScopeRequest(LoginRequest):
    project_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("projectId", "project_id")
    )
    project_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("projectName", "project_name")
    )
    project_domain_name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("projectDomainName", "project_domain_name"),
    )
