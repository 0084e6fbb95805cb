from __future__ import annotations

import pytest

from planbarometro.catalog import TOPP_DEFINITION
from planbarometro.core import (
    AlertRuleEvaluator,
    AlertRulesConfig,
    calculate_scores,
    criterion_labels,
    generate_strategic_alerts,
)
from planbarometro.schemas import AssessmentModel, StrategicAlert

TOPP = AssessmentModel.model_validate(TOPP_DEFINITION)


def responses_for(levels: dict[str, int]) -> dict[str, int]:
    """Answer every element of each TOPP dimension with the given value."""
    responses: dict[str, int] = {}
    for dimension in TOPP.dimensions:
        value = levels.get(dimension.id)
        if value is None:
            continue
        for criterion in dimension.criteria:
            for element in criterion.elements:
                responses[element.id] = value
    return responses


def custom_alert(*labels: str, threshold: int | None = None) -> StrategicAlert:
    return StrategicAlert(
        id="custom-1",
        title="Diagnóstico débil",
        description="El diagnóstico técnico necesita evidencia.",
        severity="medium",
        criteria=list(labels),
        threshold=threshold,
    )


def alert_ids(alerts: list[StrategicAlert]) -> list[str]:
    return [alert.id for alert in alerts]


def test_design_without_political_traction():
    scores = calculate_scores(
        responses_for({"technical": 1, "operational": 1, "political": 0, "prospective": 1}),
        TOPP,
    )

    alerts = generate_strategic_alerts(scores, TOPP)

    assert "design_without_political_traction" in alert_ids(alerts)
    assert "general_imbalance" in alert_ids(alerts)
    assert "insufficient_capabilities" not in alert_ids(alerts)


def test_government_without_governance_and_low_average():
    scores = calculate_scores(
        responses_for({"technical": 0, "operational": 0, "political": 1, "prospective": 0}),
        TOPP,
    )

    alerts = generate_strategic_alerts(scores, TOPP)

    assert alert_ids(alerts) == [
        "government_without_governance",
        "general_imbalance",
        "insufficient_capabilities",
    ]
    assert {alert.severity for alert in alerts} == {"high", "medium"}


def test_no_responses_only_flags_insufficient_capabilities():
    scores = calculate_scores({}, TOPP)

    alerts = generate_strategic_alerts(scores, TOPP)

    assert alert_ids(alerts) == ["insufficient_capabilities"]


def test_balanced_strong_profile_has_no_builtin_alerts():
    scores = calculate_scores(
        responses_for({"technical": 1, "operational": 1, "political": 1, "prospective": 1}),
        TOPP,
    )

    assert generate_strategic_alerts(scores, TOPP) == []


def test_builtin_rules_only_apply_to_capability_model():
    other = AssessmentModel.model_validate({**TOPP_DEFINITION, "id": "nacional"})
    scores = calculate_scores({}, other)

    assert generate_strategic_alerts(scores, other) == []


def test_thresholds_can_be_overridden():
    scores = calculate_scores({}, TOPP)
    evaluator = AlertRuleEvaluator(config=AlertRulesConfig(insufficient_average=0))

    assert evaluator.evaluate(scores, TOPP) == []


def test_criterion_labels_flatten_dimension_and_criterion_names():
    scores = calculate_scores({"t1_1_1": 1, "t1_1_2": 0}, TOPP)

    labels = criterion_labels(TOPP, scores)

    assert labels["Capacidad Técnica: Diagnóstico basado en evidencia"] == 50
    assert len(labels) == 16


def test_custom_alert_at_exact_threshold_is_not_triggered():
    responses = responses_for({"technical": 1, "operational": 1, "political": 1, "prospective": 1})
    responses.update({"t1_1_1": 1, "t1_1_2": 0})
    scores = calculate_scores(responses, TOPP)
    alert = custom_alert("Capacidad Técnica: Diagnóstico basado en evidencia")

    assert generate_strategic_alerts(scores, TOPP, [alert]) == []


def test_custom_alert_triggers_when_any_criterion_is_below_threshold():
    responses = responses_for({"technical": 1, "operational": 1, "political": 1, "prospective": 1})
    responses["t2_1_1"] = 0
    scores = calculate_scores(responses, TOPP)
    alert = custom_alert(
        "Capacidad Técnica: Diagnóstico basado en evidencia",
        "Capacidad Operativa: Claridad de roles y mandatos",
    )

    alerts = generate_strategic_alerts(scores, TOPP, [alert])

    assert alerts == [alert]


def test_custom_alert_with_unknown_label_never_triggers():
    scores = calculate_scores({}, TOPP)
    alert = custom_alert("Capacidad Técnica: No existe")

    evaluator = AlertRuleEvaluator()

    assert evaluator.triggered_custom_alerts(scores, TOPP, [alert]) == []


@pytest.mark.parametrize(
    ("threshold", "honor", "expected"),
    [
        (60, True, True),
        (60, False, False),
        (40, True, False),
        (None, True, False),
    ],
)
def test_custom_alert_threshold_handling(threshold, honor, expected):
    scores = calculate_scores({"t1_3_1": 1, "t1_3_2": 0}, TOPP)
    alert = custom_alert("Capacidad Técnica: Calidad y disponibilidad de datos", threshold=threshold)
    evaluator = AlertRuleEvaluator(config=AlertRulesConfig(honor_custom_thresholds=honor))

    triggered = evaluator.triggered_custom_alerts(scores, TOPP, [alert])

    assert bool(triggered) is expected
