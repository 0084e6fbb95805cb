from __future__ import annotations

import itertools

import pendulum

from planbarometro.core import CustomAlertEditor
from planbarometro.schemas import CustomAlertForm, Evaluation
from planbarometro.storage import EvaluationStore


def ticking_clock():
    start = pendulum.datetime(2024, 5, 1, 12, 0, 0)
    counter = itertools.count()
    return lambda: start.add(minutes=next(counter))


def build_evaluation(title: str = "Ejercicio Cusco") -> Evaluation:
    return Evaluation(title=title, model="topp", responses={"t1_1_1": 1})


def test_create_assigns_ids_and_timestamps():
    store = EvaluationStore(now_provider=ticking_clock())

    first = store.create(build_evaluation())
    second = store.create(build_evaluation("Ejercicio Lima"))

    assert (first.id, second.id) == (1, 2)
    assert first.created_at == "2024-05-01T12:00:00Z"
    assert store.get(1) == first


def test_update_is_last_writer_wins_and_reorders():
    store = EvaluationStore(now_provider=ticking_clock())
    first = store.create(build_evaluation())
    store.create(build_evaluation("Ejercicio Lima"))

    store.update(first.id, responses={"t1_1_1": 0})
    updated = store.update(first.id, responses={"t1_1_1": 1, "t1_1_2": 0})

    assert updated is not None
    assert updated.responses == {"t1_1_1": 1, "t1_1_2": 0}
    assert [item.id for item in store.all()] == [first.id, 2]
    assert store.update(42, title="x") is None


def test_delete():
    store = EvaluationStore()
    stored = store.create(build_evaluation())

    assert store.delete(stored.id)
    assert not store.delete(stored.id)
    assert store.get(stored.id) is None


def test_custom_alert_editor_persists_through_whole_list_replacement():
    store = EvaluationStore()
    stored = store.create(build_evaluation())
    editor = CustomAlertEditor(
        stored.custom_alerts,
        lambda alerts: store.replace_custom_alerts(stored.id, alerts),
    )

    alert = editor.create(
        CustomAlertForm(
            title="Sin datos",
            description="Datos desactualizados",
            selected_criteria=["Capacidad Técnica: Calidad y disponibilidad de datos"],
        )
    )

    assert store.get(stored.id).custom_alerts == [alert]

    editor.delete(alert.id)
    assert store.get(stored.id).custom_alerts == []


def test_boolean_responses_are_normalised():
    evaluation = Evaluation(title="t", model="topp", responses={"a": True, "b": False})

    assert evaluation.responses == {"a": 1, "b": 0}
