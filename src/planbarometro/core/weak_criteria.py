"""Weak-criteria selection and per-dimension interpretation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from ..schemas import Criterion, Dimension
from .scoring import EvaluationResponse, percentage

WEAK_THRESHOLD = 50
STRONG_THRESHOLD = 75

PerformanceLevel = Literal["excellent", "good", "moderate", "poor"]


@dataclass(slots=True)
class CriterionStanding:
    criterion: Criterion
    percentage: int


@dataclass(slots=True)
class DimensionInterpretation:
    """Strong / moderate / weak grouping of a dimension's criteria."""

    dimension_id: str
    percentage: int
    level: PerformanceLevel
    strong: list[str] = field(default_factory=list)
    moderate: list[str] = field(default_factory=list)
    weak: list[str] = field(default_factory=list)

    @property
    def needs_improvement(self) -> bool:
        return len(self.weak) > len(self.strong)


def criterion_percentage(criterion: Criterion, responses: EvaluationResponse) -> int:
    total = 0
    answered = 0
    for element in criterion.elements:
        value = responses.get(element.id)
        if value is None:
            continue
        total += int(value)
        answered += 1
    return percentage(total, answered)


def criterion_standings(
    dimension: Dimension,
    responses: EvaluationResponse | None,
) -> list[CriterionStanding]:
    responses = responses or {}
    return [
        CriterionStanding(criterion, criterion_percentage(criterion, responses))
        for criterion in dimension.criteria
    ]


def select_weak_criteria(
    dimension: Dimension,
    responses: EvaluationResponse | None,
    *,
    threshold: float = WEAK_THRESHOLD,
) -> list[Criterion]:
    """Criteria of ``dimension`` scoring strictly below ``threshold``, in model order."""
    return [
        standing.criterion
        for standing in criterion_standings(dimension, responses)
        if standing.percentage < threshold
    ]


def performance_level(value: int) -> PerformanceLevel:
    if value >= STRONG_THRESHOLD:
        return "excellent"
    if value >= WEAK_THRESHOLD:
        return "good"
    if value >= 25:
        return "moderate"
    return "poor"


def interpret_dimension(
    dimension: Dimension,
    responses: EvaluationResponse | None,
) -> DimensionInterpretation:
    responses = responses or {}
    answers = [
        int(responses[element.id])
        for criterion in dimension.criteria
        for element in criterion.elements
        if responses.get(element.id) is not None
    ]
    dimension_percentage = percentage(sum(answers), len(answers))

    interpretation = DimensionInterpretation(
        dimension_id=dimension.id,
        percentage=dimension_percentage,
        level=performance_level(dimension_percentage),
    )
    for standing in criterion_standings(dimension, responses):
        name = standing.criterion.name
        if standing.percentage >= STRONG_THRESHOLD:
            interpretation.strong.append(name)
        elif standing.percentage >= WEAK_THRESHOLD:
            interpretation.moderate.append(name)
        else:
            interpretation.weak.append(name)
    return interpretation
