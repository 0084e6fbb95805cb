from __future__ import annotations

from typing import Any

import pytest

from planbarometro.core import CustomAlertEditor, CustomAlertValidationError, build_custom_alert
from planbarometro.schemas import CustomAlertForm, StrategicAlert

LABEL = "Capacidad Técnica: Diagnóstico basado en evidencia"


def build_form(**kwargs: Any) -> CustomAlertForm:
    defaults: dict[str, Any] = {
        "title": "Diagnóstico débil",
        "description": "Falta evidencia territorializada.",
        "selected_criteria": [LABEL],
    }
    defaults.update(kwargs)
    return CustomAlertForm(**defaults)


class Recorder:
    def __init__(self) -> None:
        self.calls: list[list[StrategicAlert]] = []

    def __call__(self, alerts: list[StrategicAlert]) -> None:
        self.calls.append(alerts)


def test_build_custom_alert_applies_defaults_and_trims():
    alert = build_custom_alert(build_form(title="  Diagnóstico  ", recommendation=" Revisar "))

    assert alert.id.startswith("custom-")
    assert alert.title == "Diagnóstico"
    assert alert.recommendation == "Revisar"
    assert alert.severity == "medium"
    assert alert.threshold == 50
    assert alert.metrics is not None
    assert alert.metrics.risk_level == 50
    assert alert.is_custom


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (150, 100),
        (-3, 0),
        ("abc", 0),
        ("72", 72),
        (33.9, 33),
        (None, 0),
        ("inf", 100),
        ("-inf", 0),
        ("nan", 0),
        (10**400, 100),
    ],
)
def test_metric_levels_are_coerced_and_clamped(raw, expected):
    alert = build_custom_alert(build_form(risk_level=raw, urgency_level=raw))

    assert alert.metrics.risk_level == expected
    assert alert.metrics.urgency_level == expected
    assert alert.metrics.impact_level == 50


@pytest.mark.parametrize(
    ("changes", "field"),
    [
        ({"title": "   "}, "title"),
        ({"description": ""}, "description"),
        ({"selected_criteria": []}, "selected_criteria"),
        ({"severity": "critical"}, "severity"),
    ],
)
def test_invalid_forms_are_rejected_with_field(changes, field):
    with pytest.raises(CustomAlertValidationError) as exc:
        build_custom_alert(build_form(**changes))

    assert exc.value.field == field


def test_create_appends_and_publishes_full_list():
    recorder = Recorder()
    existing = build_custom_alert(build_form(title="Existente"))
    editor = CustomAlertEditor([existing], recorder)

    created = editor.create(build_form(title="Nueva", severity="high"))

    assert [alert.title for alert in recorder.calls[-1]] == ["Existente", "Nueva"]
    assert created.id != existing.id
    assert editor.alerts == recorder.calls[-1]


def test_rejected_save_leaves_list_untouched():
    recorder = Recorder()
    existing = build_custom_alert(build_form())
    editor = CustomAlertEditor([existing], recorder)

    with pytest.raises(CustomAlertValidationError):
        editor.create(build_form(title=""))
    with pytest.raises(CustomAlertValidationError):
        editor.update(existing.id, build_form(selected_criteria=[]))

    assert recorder.calls == []
    assert editor.alerts == [existing]


def test_update_replaces_in_place_keeping_id_and_position():
    recorder = Recorder()
    first = build_custom_alert(build_form(title="Primera"))
    second = build_custom_alert(build_form(title="Segunda"))
    third = build_custom_alert(build_form(title="Tercera"))
    editor = CustomAlertEditor([first, second, third], recorder)

    form = CustomAlertForm.from_alert(second)
    form.title = "Segunda editada"
    updated = editor.update(second.id, form)

    assert updated.id == second.id
    assert [alert.title for alert in recorder.calls[-1]] == [
        "Primera",
        "Segunda editada",
        "Tercera",
    ]


def test_delete_removes_by_id_and_unknown_ids_raise():
    recorder = Recorder()
    first = build_custom_alert(build_form(title="Primera"))
    second = build_custom_alert(build_form(title="Segunda"))
    editor = CustomAlertEditor([first, second], recorder)

    editor.delete(first.id)

    assert recorder.calls[-1] == [second]
    with pytest.raises(KeyError):
        editor.delete(first.id)
    with pytest.raises(KeyError):
        editor.update("custom-missing", build_form())
