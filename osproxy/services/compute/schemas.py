"""Compute request schemas."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class InstanceCreateRequest(BaseModel):
    """Instance creation request as the dashboard sends it."""

    name: str = Field(min_length=1, description="Server name (required)")
    image_id: str = Field(min_length=1, alias="imageId")
    flavor_id: str = Field(min_length=1, alias="flavorId")
    port_id: Optional[str] = Field(default=None, alias="portId")
    network_id: Optional[str] = Field(default=None, alias="networkId")
    key_name: Optional[str] = Field(default=None, alias="keyName")
    security_groups: List[str] = Field(default_factory=list, alias="securityGroups")
    custom_script: Optional[str] = Field(default=None, alias="customScript")

    model_config = ConfigDict(populate_by_name=True)
