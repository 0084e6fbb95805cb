"""Evaluation session records."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .alerts import StrategicAlert

BinaryValue = Literal[0, 1]


class Evaluation(BaseModel):
    """A saved evaluation: responses plus their side data.

    ``scores`` is a cached copy for consumers of the stored record; the engine
    always recomputes from ``responses``.
    """

    id: int | None = None
    title: str
    model: str
    exercise_code: str | None = None
    group_code: str | None = None
    country: str | None = None
    territory: str | None = None
    responses: dict[str, BinaryValue] = Field(default_factory=dict)
    justifications: dict[str, str] = Field(default_factory=dict)
    scores: dict[str, Any] | None = None
    custom_alerts: list[StrategicAlert] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("responses", mode="before")
    @classmethod
    def _coerce_booleans(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            key: int(item) if isinstance(item, bool) else item
            for key, item in value.items()
        }
