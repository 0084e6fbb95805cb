"""Core scoring and alerting components."""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

# NOTE: keep imports explicit for export clarity.
from ..schemas import AssessmentModel, StrategicAlert
from .alerts import (
    AlertRuleEvaluator,
    AlertRulesConfig,
    criterion_labels,
    generate_strategic_alerts,
    is_custom_alert_triggered,
)
from .custom_alerts import (
    CustomAlertEditor,
    CustomAlertValidationError,
    build_custom_alert,
)
from .scoring import (
    CriterionScore,
    DimensionScore,
    EvaluationScores,
    ScoringEngine,
    answered_count,
    calculate_scores,
    score_status,
)
from .weak_criteria import (
    DimensionInterpretation,
    interpret_dimension,
    select_weak_criteria,
)


@runtime_checkable
class AlertEvaluator(Protocol):
    """Contract shared by alert evaluators."""

    def evaluate(
        self,
        scores: EvaluationScores,
        model: AssessmentModel,
        custom_alerts: Iterable[StrategicAlert] | None = None,
    ) -> list[StrategicAlert]:
        """Return the alerts triggered by ``scores``."""


__all__ = [
    "AlertEvaluator",
    "AlertRuleEvaluator",
    "AlertRulesConfig",
    "CriterionScore",
    "CustomAlertEditor",
    "CustomAlertValidationError",
    "DimensionInterpretation",
    "DimensionScore",
    "EvaluationScores",
    "ScoringEngine",
    "answered_count",
    "build_custom_alert",
    "calculate_scores",
    "criterion_labels",
    "generate_strategic_alerts",
    "interpret_dimension",
    "is_custom_alert_triggered",
    "score_status",
    "select_weak_criteria",
]
