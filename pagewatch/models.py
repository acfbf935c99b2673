from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, ValidationError, field_validator

from pagewatch.errors import InvalidArgument


def _strip_url(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("url must not be empty")
    return value


def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("target must contain a non-empty string")
    return value


class PollRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    url: AnyHttpUrl
    timeout_s: int = Field(..., ge=0)
    target: str
    measure_latency: bool = False
    poll_interval_s: Optional[float] = Field(default=None, gt=0)
    connect_timeout_s: Optional[float] = Field(default=None, gt=0)
    read_timeout_s: Optional[float] = Field(default=None, gt=0)

    @field_validator("url", mode="before")
    @classmethod
    def check_url(cls, value: Any) -> Any:
        return _strip_url(value)

    @field_validator("target")
    @classmethod
    def check_target(cls, value: str) -> str:
        return _require_text(value)

    @classmethod
    def create(cls, **fields: Any) -> "PollRequest":
        try:
            return cls.model_validate(fields)
        except ValidationError as exc:
            raise InvalidArgument(str(exc)) from exc


class Defaults(BaseModel):
    timeout_s: int = Field(default=60, ge=0)
    measure_latency: bool = False
    poll_interval_s: Optional[float] = Field(default=None, gt=0)
    connect_timeout_s: Optional[float] = Field(default=None, gt=0)
    read_timeout_s: Optional[float] = Field(default=None, gt=0)


class PageCheck(BaseModel):
    id: str = Field(..., min_length=1)
    url: AnyHttpUrl
    target: str
    timeout_s: Optional[int] = Field(default=None, ge=0)
    measure_latency: Optional[bool] = None
    poll_interval_s: Optional[float] = Field(default=None, gt=0)
    connect_timeout_s: Optional[float] = Field(default=None, gt=0)
    read_timeout_s: Optional[float] = Field(default=None, gt=0)

    @field_validator("url", mode="before")
    @classmethod
    def check_url(cls, value: Any) -> Any:
        return _strip_url(value)

    @field_validator("target")
    @classmethod
    def check_target(cls, value: str) -> str:
        return _require_text(value)


class WaitPlan(BaseModel):
    defaults: Defaults = Defaults()
    pages: List[PageCheck]
