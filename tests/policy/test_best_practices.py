from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from planbarometro.policy import (
    BestPracticeMatcherConfig,
    BestPracticeRepository,
    PolicyExampleRequest,
)
from planbarometro.schemas import BestPractice


def build_practice(**kwargs: Any) -> BestPractice:
    defaults: dict[str, Any] = {
        "title": "Sistema Nacional de Información Municipal",
        "description": "Indicadores estandarizados para municipios",
        "country": "Chile",
        "institution": "SUBDERE",
        "year": 2015,
        "target_criteria": ["Calidad y disponibilidad de datos"],
    }
    defaults.update(kwargs)
    return BestPractice(**defaults)


def test_matches_on_target_criteria_substring():
    repository = BestPracticeRepository([build_practice()])

    matched = repository.find_by_criteria(["calidad y disponibilidad de datos"])

    assert [practice.country for practice in matched] == ["Chile"]
    assert matched[0].id == 1


def test_matches_related_terms_and_tags():
    repository = BestPracticeRepository(
        [
            build_practice(
                title="Mesa intersectorial",
                description="Articulación de ministerios",
                target_criteria=["Intersectorial institutional alignment"],
            ),
            build_practice(
                title="Tablero",
                description="Seguimiento",
                target_criteria=["Otro"],
                tags=["presupuesto"],
            ),
        ]
    )

    by_synonym = repository.find_by_criteria(["coordinación"])
    near_miss = repository.find_by_criteria(["Capacidad presupuestaria"])

    assert [practice.title for practice in by_synonym] == ["Mesa intersectorial"]
    assert near_miss == []
    assert [p.title for p in repository.find_by_criteria(["presupuesto"])] == ["Tablero"]


def test_inactive_practices_are_skipped():
    repository = BestPracticeRepository([build_practice(is_active=False)])

    assert repository.find_by_criteria(["Calidad y disponibilidad de datos"]) == []


def test_lookup_converts_and_limits_results():
    practices = [build_practice(title=f"Práctica {n}") for n in range(5)]
    repository = BestPracticeRepository(
        practices, config=BestPracticeMatcherConfig(max_results=2)
    )
    request = PolicyExampleRequest(
        "technical",
        "Capacidad Técnica",
        weak_criteria=("Calidad y disponibilidad de datos",),
    )

    examples = repository.lookup(request)

    assert len(examples) == 2
    assert examples[0].policy == "Práctica 0"
    assert examples[0].year == "2015"
    assert examples[0].source == "SUBDERE"


def test_crud_operations():
    repository = BestPracticeRepository()
    stored = repository.add(build_practice())

    updated = repository.update(stored.id, results="345 municipios")

    assert updated is not None and updated.results == "345 municipios"
    assert repository.update(99, results="x") is None
    assert repository.delete(stored.id)
    assert not repository.delete(stored.id)


def test_from_json(tmp_path: Path):
    path = tmp_path / "practices.json"
    path.write_text(
        json.dumps({"practices": [build_practice().model_dump(exclude_none=True)]}, ensure_ascii=False),
        encoding="utf-8",
    )

    repository = BestPracticeRepository.from_json(path)

    assert len(repository.all()) == 1

    path.write_text("{invalid", encoding="utf-8")
    with pytest.raises(ValueError):
        BestPracticeRepository.from_json(path)
