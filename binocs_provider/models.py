from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from binocs_provider.resource_data import ResourceData

HttpProtocol = Literal["HTTP", "HTTPS"]


class CheckSpec(BaseModel):
    """Declared check configuration; ``None`` marks an unset optional field."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    resource: str
    method: Optional[str] = None
    interval: int = 60
    target: float = 1.2
    regions: List[str] = Field(default_factory=list)
    up_codes: Optional[str] = None
    up_confirmations_threshold: int = 2
    down_confirmations_threshold: int = 2

    @classmethod
    def from_resource_data(cls, d: "ResourceData") -> "CheckSpec":
        values: dict[str, Any] = {}
        for key in cls.model_fields:
            value, ok = d.get_ok(key)
            if ok:
                values[key] = sorted(value) if isinstance(value, set) else value
        values.setdefault("resource", "")
        return cls(**values)


class CheckPayloadBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    resource: str
    interval: Optional[int] = None
    target: Optional[float] = None
    regions: List[str] = Field(default_factory=list)
    up_confirmations_threshold: Optional[int] = None
    down_confirmations_threshold: Optional[int] = None


class HttpCheckPayload(CheckPayloadBase):
    protocol: HttpProtocol
    method: str
    up_codes: str


class TcpCheckPayload(CheckPayloadBase):
    protocol: Literal["TCP"]


CheckPayload = HttpCheckPayload | TcpCheckPayload


class Check(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ident: str = Field(..., min_length=1)
    name: str = ""
    resource: str = ""
    protocol: str = ""
    method: str = ""
    interval: int = 0
    target: float = 0.0
    regions: List[str] = Field(default_factory=list)
    up_codes: str = ""
    up_confirmations_threshold: int = 0
    down_confirmations_threshold: int = 0

    @field_validator("name", "resource", "protocol", "method", "up_codes", mode="before")
    @classmethod
    def _none_as_empty_string(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("regions", mode="before")
    @classmethod
    def _none_as_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v


class ChannelSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    handle: str
    alias: str = ""
    checks: List[str] = Field(default_factory=list)

    @classmethod
    def from_resource_data(cls, d: "ResourceData") -> "ChannelSpec":
        return cls(
            type=d.get("type"),
            handle=d.get("handle"),
            alias=d.get("alias"),
            checks=sorted(d.get("checks")),
        )


class ChannelPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: str
    handle: str
    alias: Optional[str] = None


class Channel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ident: str = Field(..., min_length=1)
    type: str = ""
    handle: str = ""
    alias: str = ""
    checks: List[str] = Field(default_factory=list)

    @field_validator("type", "handle", "alias", mode="before")
    @classmethod
    def _none_as_empty_string(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("checks", mode="before")
    @classmethod
    def _none_as_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v
