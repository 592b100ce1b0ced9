"""Base model and enum for shop API responses.

Every response model inherits from :class:`StorefrontModel` which
provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` values so the
  field default is used (the API sends explicit nulls for unset
  relations).
* A ``raw`` dict that captures the original payload.

String enums inherit from :class:`StorefrontEnum` which resolves unmapped
values to ``UNKNOWN`` instead of raising.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class StorefrontEnum(enum.StrEnum):
    """Base for API string enums.

    Every subclass **must** define ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> StorefrontEnum:
        if hasattr(cls, "UNKNOWN"):
            unknown: StorefrontEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class StorefrontModel(BaseModel):
    """Base for shop API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop explicit nulls and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        # Only auto-stash raw when not explicitly provided (model_validate from
        # an API dict). Keyword construction keeps the caller's value.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned


class InputModel(BaseModel):
    """Base for mutation inputs; dumps to the camelCase API shape."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )

    def to_variables(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
