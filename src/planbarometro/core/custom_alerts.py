"""Validation and list editing for user-authored alerts."""

from __future__ import annotations

import math
import uuid
from typing import Any, Callable, Iterable

import structlog

from ..schemas import SEVERITIES, AlertMetrics, CustomAlertForm, StrategicAlert

AlertListCallback = Callable[[list[StrategicAlert]], None]


class CustomAlertValidationError(ValueError):
    """Raised when a custom alert form cannot be saved."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


def coerce_level(value: Any) -> int:
    """Clamp a form value to an integer 0-100; non-numeric input reads as 0."""
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    except OverflowError:
        number = math.inf if value > 0 else -math.inf
    if math.isnan(number):
        return 0
    return int(min(max(number, 0.0), 100.0))


def build_custom_alert(form: CustomAlertForm, *, alert_id: str | None = None) -> StrategicAlert:
    """Validate ``form`` and turn it into a stored alert."""
    title = form.title.strip()
    description = form.description.strip()
    if not title:
        raise CustomAlertValidationError("title", "El título es obligatorio")
    if not description:
        raise CustomAlertValidationError("description", "La descripción es obligatoria")
    if not form.selected_criteria:
        raise CustomAlertValidationError(
            "selected_criteria", "Debe seleccionar al menos un criterio"
        )
    if form.severity not in SEVERITIES:
        raise CustomAlertValidationError(
            "severity", f"Severidad no válida: {form.severity!r}"
        )

    return StrategicAlert(
        id=alert_id or new_alert_id(),
        title=title,
        description=description,
        severity=form.severity,
        criteria=list(dict.fromkeys(form.selected_criteria)),
        recommendation=form.recommendation.strip(),
        metrics=AlertMetrics(
            risk_level=coerce_level(form.risk_level),
            impact_level=coerce_level(form.impact_level),
            urgency_level=coerce_level(form.urgency_level),
        ),
        threshold=coerce_level(form.criteria_threshold),
    )


def new_alert_id() -> str:
    return f"custom-{uuid.uuid4().hex}"


class CustomAlertEditor:
    """Create, replace and delete alerts in a caller-owned list.

    The editor never keeps its own copy as the source of truth: every
    successful change hands the complete new list to ``on_update``.
    """

    def __init__(
        self,
        alerts: Iterable[StrategicAlert],
        on_update: AlertListCallback | None = None,
    ) -> None:
        self._alerts = list(alerts)
        self._on_update = on_update
        self._logger = structlog.get_logger(__name__)

    @property
    def alerts(self) -> list[StrategicAlert]:
        return list(self._alerts)

    def create(self, form: CustomAlertForm) -> StrategicAlert:
        alert = build_custom_alert(form)
        self._commit([*self._alerts, alert])
        self._logger.info("custom_alert.created", alert_id=alert.id)
        return alert

    def update(self, alert_id: str, form: CustomAlertForm) -> StrategicAlert:
        index = self._index_of(alert_id)
        alert = build_custom_alert(form, alert_id=alert_id)
        updated = list(self._alerts)
        updated[index] = alert
        self._commit(updated)
        self._logger.info("custom_alert.updated", alert_id=alert_id)
        return alert

    def delete(self, alert_id: str) -> None:
        self._index_of(alert_id)
        self._commit([alert for alert in self._alerts if alert.id != alert_id])
        self._logger.info("custom_alert.deleted", alert_id=alert_id)

    def _index_of(self, alert_id: str) -> int:
        for index, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                return index
        raise KeyError(f"Unknown custom alert: {alert_id!r}")

    def _commit(self, alerts: list[StrategicAlert]) -> None:
        self._alerts = alerts
        if self._on_update is not None:
            self._on_update(list(alerts))
