"""Assessment report assembly and execution."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import pendulum
import structlog
from pydantic import ValidationError

from . import __version__
from .catalog import ModelCatalog
from .core import (
    AlertEvaluator,
    EvaluationScores,
    ScoringEngine,
    interpret_dimension,
    score_status,
    select_weak_criteria,
)
from .core.weak_criteria import WEAK_THRESHOLD
from .policy import PolicyExampleService
from .schemas import AssessmentModel, Criterion, Dimension, Evaluation


class EvaluationLoadError(ValueError):
    """Raised when an evaluation document cannot be read."""


class EvaluationLoader:
    """Load evaluation documents from JSON."""

    def load(self, path: Path) -> Evaluation:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise EvaluationLoadError(f"Invalid evaluation JSON: {exc}") from exc
        try:
            return Evaluation.model_validate(data)
        except ValidationError as exc:
            raise EvaluationLoadError(f"Invalid evaluation document: {exc}") from exc


class OutputWriter:
    """Persist assessment reports."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


class AuditLogger:
    """Append-only audit logger writing JSON lines."""

    def __init__(self, path: Path):
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, ensure_ascii=False))
            handle.write("\n")


class AssessmentPipeline:
    """Score an evaluation, derive alerts and attach policy examples."""

    def __init__(
        self,
        *,
        catalog: ModelCatalog,
        scoring: ScoringEngine,
        alerts: AlertEvaluator,
        policy: PolicyExampleService | None = None,
        weak_threshold: float | None = None,
        loader: EvaluationLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._catalog = catalog
        self._scoring = scoring
        self._alerts = alerts
        self._policy = policy
        self._weak_threshold = WEAK_THRESHOLD if weak_threshold is None else weak_threshold
        self._loader = loader or EvaluationLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def build_report(self, evaluation: Evaluation) -> dict[str, Any]:
        model = self._catalog.get(evaluation.model)
        scores = self._scoring.score(evaluation.responses, model)
        alerts = self._alerts.evaluate(scores, model, evaluation.custom_alerts)

        self._logger.info(
            "assessment.scored",
            title=evaluation.title,
            model_id=model.id,
            overall=scores.overall,
            answered=scores.answered,
            alerts=[alert.id for alert in alerts],
        )

        return {
            "evaluation": {
                "id": evaluation.id,
                "title": evaluation.title,
                "model": model.id,
                "exercise_code": evaluation.exercise_code,
                "group_code": evaluation.group_code,
                "country": evaluation.country,
                "territory": evaluation.territory,
            },
            "progress": {
                "answered": scores.answered,
                "total": len(model.element_ids()),
            },
            "overall": {
                "percentage": scores.overall,
                "status": score_status(scores.overall),
            },
            "scores": asdict(scores),
            "dimensions": self._dimension_sections(evaluation, model, scores),
            "alerts": [alert.model_dump(exclude_none=True) for alert in alerts],
        }

    def run(
        self,
        *,
        evaluation_path: Path,
        output_path: Path,
        audit_logger: AuditLogger | None = None,
    ) -> dict[str, Any]:
        evaluation = self._loader.load(evaluation_path)
        report = self.build_report(evaluation)
        report["metadata"] = {
            "source": str(evaluation_path),
            "timestamp": pendulum.now().to_iso8601_string(),
            "app_version": __version__,
        }

        if audit_logger:
            audit_logger.append(
                {
                    "title": evaluation.title,
                    "model": evaluation.model,
                    "overall": report["overall"]["percentage"],
                    "answered": report["progress"]["answered"],
                    "alerts": [alert["id"] for alert in report["alerts"]],
                    "timestamp": report["metadata"]["timestamp"],
                }
            )

        self._writer.write(output_path, report)
        return report

    def _dimension_sections(
        self,
        evaluation: Evaluation,
        model: AssessmentModel,
        scores: EvaluationScores,
    ) -> list[dict[str, Any]]:
        sections: list[dict[str, Any]] = []
        for dimension, dimension_score in zip(model.dimensions, scores.dimensions):
            weak = select_weak_criteria(
                dimension, evaluation.responses, threshold=self._weak_threshold
            )
            interpretation = interpret_dimension(dimension, evaluation.responses)
            section: dict[str, Any] = {
                "id": dimension.id,
                "name": dimension.name,
                "percentage": dimension_score.percentage,
                "status": score_status(dimension_score.percentage),
                "criteria": [
                    {
                        "id": criterion.id,
                        "name": criterion.name,
                        "percentage": criterion_score.percentage,
                        "answered": criterion_score.answered,
                    }
                    for criterion, criterion_score in zip(
                        dimension.criteria, dimension_score.criteria
                    )
                ],
                "interpretation": asdict(interpretation),
                "weak_criteria": [criterion.name for criterion in weak],
                "policy_examples": None,
            }
            if (
                self._policy is not None
                and dimension.criteria
                and dimension_score.percentage < self._weak_threshold
            ):
                section["policy_examples"] = self._policy_section(dimension, weak)
            sections.append(section)
        return sections

    def _policy_section(
        self,
        dimension: Dimension,
        weak: list[Criterion],
    ) -> dict[str, Any] | None:
        ticket = self._policy.begin(dimension.id)
        result = self._policy.load(
            dimension.id, dimension.name, dimension.criteria, weak, ticket=ticket
        )
        if result is None:
            self._logger.info("policy_examples.superseded", dimension_id=dimension.id)
            return None
        if result.error:
            self._logger.warning(
                "policy_examples.degraded",
                dimension_id=dimension.id,
                fallback=result.is_fallback,
                error=result.error,
            )
        return {
            "examples": [example.model_dump() for example in result.examples],
            "is_fallback": result.is_fallback,
            "error": result.error,
        }
