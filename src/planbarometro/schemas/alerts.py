"""Strategic alert payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["high", "medium", "low"]
SEVERITIES: tuple[str, ...] = ("high", "medium", "low")

DEFAULT_METRIC_LEVEL = 50
DEFAULT_CRITERIA_THRESHOLD = 50


class AlertMetrics(BaseModel):
    """Display-only gauges attached to a custom alert."""

    risk_level: int = Field(default=DEFAULT_METRIC_LEVEL, ge=0, le=100)
    impact_level: int = Field(default=DEFAULT_METRIC_LEVEL, ge=0, le=100)
    urgency_level: int = Field(default=DEFAULT_METRIC_LEVEL, ge=0, le=100)

    model_config = ConfigDict(extra="forbid")


class StrategicAlert(BaseModel):
    """Triggered warning tied to one or more criteria."""

    id: str
    title: str
    description: str
    severity: Severity
    criteria: list[str] = Field(default_factory=list)
    recommendation: str | None = None
    metrics: AlertMetrics | None = None
    threshold: int | None = Field(default=None, ge=0, le=100)

    model_config = ConfigDict(extra="forbid")

    @property
    def is_custom(self) -> bool:
        return self.id.startswith("custom-")


class CustomAlertForm(BaseModel):
    """Raw authoring input for a custom alert, before validation.

    Values arrive untrusted from a form, so the numeric fields accept anything
    and are coerced by the editor.
    """

    title: str = ""
    description: str = ""
    severity: str = "medium"
    recommendation: str = ""
    criteria_threshold: Any = DEFAULT_CRITERIA_THRESHOLD
    selected_criteria: list[str] = Field(default_factory=list)
    risk_level: Any = DEFAULT_METRIC_LEVEL
    impact_level: Any = DEFAULT_METRIC_LEVEL
    urgency_level: Any = DEFAULT_METRIC_LEVEL

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_alert(cls, alert: StrategicAlert) -> "CustomAlertForm":
        """Prefill a form from a stored alert for editing."""
        metrics = alert.metrics or AlertMetrics()
        return cls(
            title=alert.title,
            description=alert.description,
            severity=alert.severity,
            recommendation=alert.recommendation or "",
            criteria_threshold=(
                alert.threshold if alert.threshold is not None else DEFAULT_CRITERIA_THRESHOLD
            ),
            selected_criteria=list(alert.criteria),
            risk_level=metrics.risk_level,
            impact_level=metrics.impact_level,
            urgency_level=metrics.urgency_level,
        )
