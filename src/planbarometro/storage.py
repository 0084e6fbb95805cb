"""In-memory persistence for evaluations."""

from __future__ import annotations

from typing import Any

import pendulum
import structlog

from .schemas import Evaluation, StrategicAlert


class EvaluationStore:
    """Keeps saved evaluations; the last write for an id wins."""

    def __init__(self, *, now_provider: Any | None = None) -> None:
        self._evaluations: dict[int, Evaluation] = {}
        self._next_id = 1
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def create(self, evaluation: Evaluation) -> Evaluation:
        now = self._timestamp()
        stored = evaluation.model_copy(
            update={"id": self._next_id, "created_at": now, "updated_at": now},
            deep=True,
        )
        self._evaluations[stored.id] = stored
        self._next_id += 1
        self._logger.info("evaluation.created", evaluation_id=stored.id, model=stored.model)
        return stored

    def get(self, evaluation_id: int) -> Evaluation | None:
        return self._evaluations.get(evaluation_id)

    def all(self) -> list[Evaluation]:
        """Most recently updated first."""
        return sorted(
            self._evaluations.values(),
            key=lambda item: item.updated_at or item.created_at or "",
            reverse=True,
        )

    def update(self, evaluation_id: int, **changes: Any) -> Evaluation | None:
        current = self._evaluations.get(evaluation_id)
        if current is None:
            return None
        payload = current.model_dump()
        payload.update(changes)
        payload["id"] = evaluation_id
        payload["updated_at"] = self._timestamp()
        updated = Evaluation.model_validate(payload)
        self._evaluations[evaluation_id] = updated
        self._logger.info("evaluation.updated", evaluation_id=evaluation_id, fields=sorted(changes))
        return updated

    def delete(self, evaluation_id: int) -> bool:
        deleted = self._evaluations.pop(evaluation_id, None) is not None
        if deleted:
            self._logger.info("evaluation.deleted", evaluation_id=evaluation_id)
        return deleted

    def replace_custom_alerts(self, evaluation_id: int, alerts: list[StrategicAlert]) -> Evaluation:
        """Whole-list replacement used as the custom alert editor callback."""
        updated = self.update(
            evaluation_id,
            custom_alerts=[alert.model_dump() for alert in alerts],
        )
        if updated is None:
            raise KeyError(f"Unknown evaluation: {evaluation_id}")
        return updated

    def _timestamp(self) -> str:
        return self._now_provider().to_iso8601_string()
