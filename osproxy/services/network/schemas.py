"""Network request schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NetworkCreateRequest(BaseModel):
    name: str = Field(min_length=1)


class SubnetCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    network_id: str = Field(min_length=1, alias="networkId")
    cidr: str = Field(min_length=1, description="IPv4 range, e.g. 10.0.0.0/24")
    gateway_ip: Optional[str] = Field(default=None, alias="gatewayIp")
    enable_dhcp: bool = Field(default=True, alias="enableDhcp")

    model_config = ConfigDict(populate_by_name=True)


class PortCreateRequest(BaseModel):
    network_id: str = Field(min_length=1, alias="networkId")
    name: Optional[str] = None
    fixed_ip: Optional[str] = Field(default=None, alias="fixedIp")

    model_config = ConfigDict(populate_by_name=True)
