"""Strategic alert derivation from score trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

import structlog

from ..catalog import TOPP_MODEL_ID
from ..schemas import AssessmentModel, StrategicAlert
from ..schemas.alerts import DEFAULT_CRITERIA_THRESHOLD, Severity
from .scoring import EvaluationScores

CAPABILITY_DIMENSIONS: tuple[str, ...] = ("technical", "operational", "political", "prospective")


@dataclass
class AlertRulesConfig:
    """Threshold table for the built-in capability rules."""

    strong_threshold: float = 60.0
    weak_threshold: float = 40.0
    imbalance_gap: float = 50.0
    insufficient_average: float = 30.0
    honor_custom_thresholds: bool = True


Capabilities = Mapping[str, int]


@dataclass(frozen=True)
class BuiltinAlertRule:
    id: str
    title: str
    description: str
    severity: Severity
    criteria: tuple[str, ...]
    recommendation: str
    condition: Callable[[Capabilities, AlertRulesConfig], bool]

    def to_alert(self) -> StrategicAlert:
        return StrategicAlert(
            id=self.id,
            title=self.title,
            description=self.description,
            severity=self.severity,
            criteria=list(self.criteria),
            recommendation=self.recommendation,
        )


def _design_without_traction(c: Capabilities, cfg: AlertRulesConfig) -> bool:
    return c["technical"] >= cfg.strong_threshold and c["political"] < cfg.weak_threshold


def _implementation_without_direction(c: Capabilities, cfg: AlertRulesConfig) -> bool:
    return c["operational"] >= cfg.strong_threshold and c["prospective"] < cfg.weak_threshold


def _government_without_governance(c: Capabilities, cfg: AlertRulesConfig) -> bool:
    return (
        c["political"] >= cfg.strong_threshold
        and c["technical"] < cfg.weak_threshold
        and c["operational"] < cfg.weak_threshold
    )


def _general_imbalance(c: Capabilities, cfg: AlertRulesConfig) -> bool:
    values = list(c.values())
    return max(values) - min(values) > cfg.imbalance_gap


def _insufficient_capabilities(c: Capabilities, cfg: AlertRulesConfig) -> bool:
    values = list(c.values())
    return sum(values) / len(values) < cfg.insufficient_average


BUILTIN_RULES: tuple[BuiltinAlertRule, ...] = (
    BuiltinAlertRule(
        id="design_without_political_traction",
        title="Diseño sin tracción política",
        description=(
            "Alta capacidad técnica pero sin apoyo político suficiente. Esto puede "
            "generar planes sofisticados que no se implementan efectivamente."
        ),
        severity="high",
        criteria=("Capacidad técnica", "Liderazgo político"),
        recommendation=(
            "Fortalecer mecanismos de diálogo político y construcción de alianzas "
            "para respaldar las propuestas técnicas."
        ),
        condition=_design_without_traction,
    ),
    BuiltinAlertRule(
        id="implementation_without_strategic_direction",
        title="Implementación sin dirección estratégica",
        description=(
            "Alta capacidad operativa pero sin visión prospectiva clara. Puede "
            "conducir a acciones fragmentadas sin coherencia estratégica."
        ),
        severity="medium",
        criteria=("Capacidad operativa", "Visión prospectiva"),
        recommendation=(
            "Desarrollar procesos de planificación estratégica y construcción de "
            "visión compartida a largo plazo."
        ),
        condition=_implementation_without_direction,
    ),
    BuiltinAlertRule(
        id="government_without_governance",
        title="Gobierno sin gobierno",
        description=(
            "Alta capacidad política formal pero sin capacidades técnicas ni "
            "operativas suficientes para transformar."
        ),
        severity="high",
        criteria=("Capacidad política", "Capacidad técnica", "Capacidad operativa"),
        recommendation=(
            "Invertir en fortalecimiento de capacidades técnicas y estructuras "
            "operativas para materializar el respaldo político."
        ),
        condition=_government_without_governance,
    ),
    BuiltinAlertRule(
        id="general_imbalance",
        title="Desequilibrio entre capacidades",
        description=(
            "Existe una gran disparidad entre las diferentes capacidades "
            "institucionales, lo que puede generar ineficiencias y conflictos internos."
        ),
        severity="medium",
        criteria=("Todas las dimensiones",),
        recommendation=(
            "Desarrollar un plan integral de fortalecimiento institucional que "
            "equilibre todas las capacidades."
        ),
        condition=_general_imbalance,
    ),
    BuiltinAlertRule(
        id="insufficient_capabilities",
        title="Capacidades institucionales insuficientes",
        description=(
            "Las capacidades generales están por debajo del nivel mínimo requerido "
            "para una gestión efectiva de transformaciones."
        ),
        severity="high",
        criteria=("Todas las dimensiones",),
        recommendation=(
            "Implementar un programa integral de fortalecimiento institucional como "
            "prioridad estratégica."
        ),
        condition=_insufficient_capabilities,
    ),
)


def criterion_labels(model: AssessmentModel, scores: EvaluationScores) -> dict[str, int]:
    """Map ``"Dimension: Criterion"`` labels to current percentages.

    Scores are matched to the model by position; a criterion without a
    matching score entry reads as 0.
    """
    labels: dict[str, int] = {}
    for dim_index, dimension in enumerate(model.dimensions):
        dimension_score = (
            scores.dimensions[dim_index] if dim_index < len(scores.dimensions) else None
        )
        for crit_index, criterion in enumerate(dimension.criteria):
            value = 0
            if dimension_score is not None and crit_index < len(dimension_score.criteria):
                value = dimension_score.criteria[crit_index].percentage
            labels[dimension.label_for(criterion)] = value
    return labels


def is_custom_alert_triggered(
    alert: StrategicAlert,
    labels: Mapping[str, int],
    *,
    threshold: float = DEFAULT_CRITERIA_THRESHOLD,
) -> bool:
    """True when any referenced criterion scores strictly below ``threshold``."""
    return any(
        name in labels and labels[name] < threshold
        for name in alert.criteria
    )


class AlertRuleEvaluator:
    """Evaluate built-in capability rules and user-authored alerts."""

    def __init__(
        self,
        *,
        config: AlertRulesConfig | None = None,
        rules: Iterable[BuiltinAlertRule] = BUILTIN_RULES,
    ) -> None:
        self._config = config or AlertRulesConfig()
        self._rules = tuple(rules)
        self._logger = structlog.get_logger(__name__)

    def evaluate(
        self,
        scores: EvaluationScores,
        model: AssessmentModel,
        custom_alerts: Iterable[StrategicAlert] | None = None,
    ) -> list[StrategicAlert]:
        alerts = self.builtin_alerts(scores, model)
        alerts.extend(self.triggered_custom_alerts(scores, model, custom_alerts or []))
        self._logger.debug(
            "alerts.evaluated",
            model_id=model.id,
            triggered=[alert.id for alert in alerts],
        )
        return alerts

    def builtin_alerts(
        self,
        scores: EvaluationScores,
        model: AssessmentModel,
    ) -> list[StrategicAlert]:
        capabilities = self._capabilities(scores, model)
        if capabilities is None:
            return []
        return [
            rule.to_alert()
            for rule in self._rules
            if rule.condition(capabilities, self._config)
        ]

    def triggered_custom_alerts(
        self,
        scores: EvaluationScores,
        model: AssessmentModel,
        custom_alerts: Iterable[StrategicAlert],
    ) -> list[StrategicAlert]:
        labels = criterion_labels(model, scores)
        triggered: list[StrategicAlert] = []
        for alert in custom_alerts:
            threshold = DEFAULT_CRITERIA_THRESHOLD
            if self._config.honor_custom_thresholds and alert.threshold is not None:
                threshold = alert.threshold
            if is_custom_alert_triggered(alert, labels, threshold=threshold):
                triggered.append(alert)
        return triggered

    @staticmethod
    def _capabilities(
        scores: EvaluationScores,
        model: AssessmentModel,
    ) -> dict[str, int] | None:
        if model.id != TOPP_MODEL_ID or len(scores.dimensions) < len(CAPABILITY_DIMENSIONS):
            return None
        by_id = {
            dimension.id: scores.dimensions[index].percentage
            for index, dimension in enumerate(model.dimensions)
            if index < len(scores.dimensions)
        }
        if not all(dimension_id in by_id for dimension_id in CAPABILITY_DIMENSIONS):
            return None
        return {dimension_id: by_id[dimension_id] for dimension_id in CAPABILITY_DIMENSIONS}


def generate_strategic_alerts(
    scores: EvaluationScores,
    model: AssessmentModel,
    custom_alerts: Iterable[StrategicAlert] | None = None,
    *,
    config: AlertRulesConfig | None = None,
) -> list[StrategicAlert]:
    """Return built-in alerts followed by the custom alerts currently triggered."""
    return AlertRuleEvaluator(config=config).evaluate(scores, model, custom_alerts)
