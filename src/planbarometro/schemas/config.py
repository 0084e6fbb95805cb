"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class AlertsSection(BaseModel):
    """Overrides for the built-in alert threshold table."""

    strong_threshold: float | None = None
    weak_threshold: float | None = None
    imbalance_gap: float | None = None
    insufficient_average: float | None = None
    honor_custom_thresholds: bool | None = None

    model_config = ConfigDict(extra="forbid")


class WeakCriteriaSection(BaseModel):
    threshold: float | None = None

    model_config = ConfigDict(extra="forbid")


class PolicySection(BaseModel):
    min_similarity: float | None = None
    max_results: int | None = None
    suggestions_endpoint: str | None = None
    suggestions_api_key: str | None = None
    suggestions_timeout: float | None = None

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    alerts: AlertsSection = Field(default_factory=AlertsSection)
    weak_criteria: WeakCriteriaSection = Field(default_factory=WeakCriteriaSection)
    policy: PolicySection = Field(default_factory=PolicySection)
    models_dir: str | None = None

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for section in ("alerts", "weak_criteria", "policy"):
            values = getattr(self, section).model_dump(exclude_none=True)
            if values:
                settings[section] = values
        if self.models_dir:
            settings["models_dir"] = self.models_dir
        return settings


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
