"""Assessment model reference data."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Element(BaseModel):
    """Atomic present/absent question."""

    id: str
    text: str = ""

    model_config = ConfigDict(extra="forbid", frozen=True)


class Criterion(BaseModel):
    """Named group of elements; unit of percentage reporting."""

    id: str
    name: str
    description: str | None = None
    elements: list[Element] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)


class Dimension(BaseModel):
    """Top-level capability axis of a model."""

    id: str
    name: str
    description: str = ""
    color: str | None = None
    icon: str | None = None
    criteria: list[Criterion] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)

    def label_for(self, criterion: Criterion) -> str:
        """Return the flattened ``"Dimension: Criterion"`` label."""
        return f"{self.name}: {criterion.name}"


class AssessmentModel(BaseModel):
    """Full framework definition with ordered dimensions."""

    id: str
    name: str
    description: str = ""
    dimensions: list[Dimension] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid", frozen=True)

    def element_ids(self) -> list[str]:
        return [
            element.id
            for dimension in self.dimensions
            for criterion in dimension.criteria
            for element in criterion.elements
        ]

    def dimension(self, dimension_id: str) -> Dimension:
        for dimension in self.dimensions:
            if dimension.id == dimension_id:
                return dimension
        raise KeyError(f"Unknown dimension: {dimension_id!r}")
