"""Convention results. Any field may be None; defaults are filled later."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class EndpointDescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    comments: str | None = None
    request_comments: str | None = None
    response_comments: str | None = None


class TypeDescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    comments: str | None = None


class MemberDescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    comments: str | None = None
    default_value: Any = None
    required: bool | None = None
    array_item_name: str | None = None


class OptionDescription(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    comments: str | None = None
