"""In-memory best-practice repository with criterion matching."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

import structlog
from rapidfuzz import fuzz

from ..schemas import BestPractice, PolicyExample
from .base import PolicyExampleRequest

RELATED_TERMS: dict[str, tuple[str, ...]] = {
    "coordinación": ("coordinacion", "coordination", "intersectorial", "institutional"),
    "coordinacion": ("coordinación", "coordination", "intersectorial", "institutional"),
    "coordination": ("coordinación", "coordinacion", "intersectorial", "institutional"),
    "planificación": ("planificacion", "planning", "plan", "estratégica", "estrategica"),
    "planificacion": ("planificación", "planning", "plan", "estratégica", "estrategica"),
    "planning": ("planificación", "planificacion", "plan", "estratégica", "estrategica"),
    "gestión": ("gestion", "management", "administración", "administracion"),
    "gestion": ("gestión", "management", "administración", "administracion"),
    "management": ("gestión", "gestion", "administración", "administracion"),
    "monitoreo": ("monitoring", "seguimiento", "evaluación", "evaluacion"),
    "monitoring": ("monitoreo", "seguimiento", "evaluación", "evaluacion"),
    "evidencia": ("evidence", "datos", "data", "diagnóstico", "diagnostico"),
    "participación": ("participacion", "participation", "actores", "stakeholders"),
    "prospectiva": ("foresight", "escenarios", "scenarios", "anticipación"),
}


@dataclass
class BestPracticeMatcherConfig:
    """Matching thresholds for criterion lookups."""

    min_similarity: float = 80.0
    max_results: int = 6


class BestPracticeRepository:
    """Store curated practices and match them against weak criteria."""

    name = "best_practices"

    def __init__(
        self,
        practices: Iterable[BestPractice] | None = None,
        *,
        config: BestPracticeMatcherConfig | None = None,
    ) -> None:
        self._config = config or BestPracticeMatcherConfig()
        self._practices: dict[int, BestPractice] = {}
        self._next_id = 1
        self._logger = structlog.get_logger(__name__)
        for practice in practices or []:
            self.add(practice)

    @classmethod
    def from_json(
        cls,
        path: Path,
        *,
        config: BestPracticeMatcherConfig | None = None,
    ) -> "BestPracticeRepository":
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid best-practices JSON: {exc}") from exc
        if isinstance(data, dict):
            data = data.get("practices", [])
        return cls(
            (BestPractice.model_validate(item) for item in data),
            config=config,
        )

    def add(self, practice: BestPractice) -> BestPractice:
        if practice.id is None:
            practice = practice.model_copy(update={"id": self._next_id})
        self._practices[practice.id] = practice
        self._next_id = max(self._next_id, practice.id + 1)
        return practice

    def update(self, practice_id: int, **changes: object) -> BestPractice | None:
        current = self._practices.get(practice_id)
        if current is None:
            return None
        updated = BestPractice.model_validate(
            {**current.model_dump(), **changes, "id": practice_id}
        )
        self._practices[practice_id] = updated
        return updated

    def delete(self, practice_id: int) -> bool:
        return self._practices.pop(practice_id, None) is not None

    def all(self) -> list[BestPractice]:
        return [practice for practice in self._practices.values() if practice.is_active]

    def find_by_criteria(self, criteria: Sequence[str]) -> list[BestPractice]:
        needles = [criterion.lower().strip() for criterion in criteria if criterion.strip()]
        matched = [
            practice
            for practice in self.all()
            if any(self._matches(practice, needle) for needle in needles)
        ]
        self._logger.debug(
            "best_practices.matched",
            criteria=list(criteria),
            available=len(self._practices),
            matched=len(matched),
        )
        return matched

    def lookup(self, request: PolicyExampleRequest) -> list[PolicyExample]:
        practices = self.find_by_criteria(request.weak_criteria or request.criteria)
        return [practice.to_example() for practice in practices[: self._config.max_results]]

    def _matches(self, practice: BestPractice, needle: str) -> bool:
        for target in practice.target_criteria:
            target = target.lower().strip()
            if needle in target or target in needle:
                return True
            if related_terms(needle, target):
                return True
            if fuzz.token_set_ratio(needle, target) >= self._config.min_similarity:
                return True
        if needle in practice.title.lower() or needle in practice.description.lower():
            return True
        return any(
            tag.lower() in needle or needle in tag.lower()
            for tag in practice.tags
        )


def related_terms(first: str, second: str) -> bool:
    """True when a known synonym of a word in ``first`` appears in ``second``."""
    for word in first.split():
        for synonym in RELATED_TERMS.get(word, ()):
            if synonym in second:
                return True
    return False
