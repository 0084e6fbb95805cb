"""Hierarchical scoring of binary evaluation responses."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

import structlog

from ..schemas import AssessmentModel

EvaluationResponse = Mapping[str, int]


@dataclass(frozen=True, slots=True)
class CriterionScore:
    """Score of one criterion; ``score`` is the count of present answers."""

    criterion_id: str
    score: int
    answered: int
    percentage: int


@dataclass(frozen=True, slots=True)
class DimensionScore:
    dimension_id: str
    score: int
    answered: int
    percentage: int
    criteria: tuple[CriterionScore, ...]


@dataclass(frozen=True, slots=True)
class EvaluationScores:
    """Score tree aligned positionally with the model's dimensions."""

    overall: int
    answered: int
    dimensions: tuple[DimensionScore, ...]

    def dimension(self, dimension_id: str) -> DimensionScore:
        for dimension in self.dimensions:
            if dimension.dimension_id == dimension_id:
                return dimension
        raise KeyError(f"Unknown dimension: {dimension_id!r}")


def percentage(total: int, count: int) -> int:
    """Integer percentage rounded half up; zero answers score 0."""
    if count <= 0:
        return 0
    return int(math.floor(total / count * 100 + 0.5))


def calculate_scores(
    responses: EvaluationResponse | None,
    model: AssessmentModel | None,
) -> EvaluationScores:
    """Aggregate recorded answers into criterion, dimension and overall scores.

    Only elements reachable from the model are visited, so stray response keys
    are ignored. Unanswered elements are left out of every count.
    """
    responses = responses or {}
    if model is None:
        return EvaluationScores(overall=0, answered=0, dimensions=())

    dimension_scores: list[DimensionScore] = []
    total_score = 0
    total_answered = 0

    for dimension in model.dimensions:
        criteria_scores: list[CriterionScore] = []
        dimension_score = 0
        dimension_answered = 0

        for criterion in dimension.criteria:
            criterion_score = 0
            criterion_answered = 0
            for element in criterion.elements:
                value = responses.get(element.id)
                if value is None:
                    continue
                value = int(value)
                criterion_score += value
                criterion_answered += 1

            dimension_score += criterion_score
            dimension_answered += criterion_answered
            criteria_scores.append(
                CriterionScore(
                    criterion_id=criterion.id,
                    score=criterion_score,
                    answered=criterion_answered,
                    percentage=percentage(criterion_score, criterion_answered),
                )
            )

        total_score += dimension_score
        total_answered += dimension_answered
        dimension_scores.append(
            DimensionScore(
                dimension_id=dimension.id,
                score=dimension_score,
                answered=dimension_answered,
                percentage=percentage(dimension_score, dimension_answered),
                criteria=tuple(criteria_scores),
            )
        )

    return EvaluationScores(
        overall=percentage(total_score, total_answered),
        answered=total_answered,
        dimensions=tuple(dimension_scores),
    )


def answered_count(responses: EvaluationResponse | None, model: AssessmentModel) -> int:
    """Number of model elements that carry a recorded answer."""
    responses = responses or {}
    return sum(1 for element_id in model.element_ids() if element_id in responses)


def score_status(value: int) -> str:
    if value >= 75:
        return "Excelente"
    if value >= 50:
        return "Bueno"
    if value >= 25:
        return "Regular"
    return "Deficiente"


class ScoringEngine:
    """Memoizing front for :func:`calculate_scores`.

    Entries are keyed by model identity and response content; the model is
    held in the entry so its identity cannot be recycled while cached.
    """

    def __init__(self, *, max_entries: int = 256) -> None:
        self._max_entries = max_entries
        self._cache: dict[tuple[int, frozenset], tuple[AssessmentModel, EvaluationScores]] = {}
        self._logger = structlog.get_logger(__name__)

    def score(
        self,
        responses: EvaluationResponse | None,
        model: AssessmentModel,
    ) -> EvaluationScores:
        key = (id(model), frozenset((responses or {}).items()))
        cached = self._cache.get(key)
        if cached is not None and cached[0] is model:
            return cached[1]

        scores = calculate_scores(responses, model)
        if len(self._cache) >= self._max_entries:
            self._cache.pop(next(iter(self._cache)))
        self._cache[key] = (model, scores)
        self._logger.debug(
            "scores.calculated",
            model_id=model.id,
            overall=scores.overall,
            answered=scores.answered,
        )
        return scores

    def clear(self) -> None:
        self._cache.clear()
