"""Policy example and best-practice records."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PolicyExample(BaseModel):
    """Documented public policy shown next to a weak dimension."""

    country: str
    policy: str
    description: str
    results: str = ""
    year: str = ""
    source: str | None = None

    model_config = ConfigDict(extra="forbid")


class BestPractice(BaseModel):
    """Curated practice record used as the primary policy-example lookup."""

    id: int | None = None
    title: str
    description: str
    country: str
    institution: str | None = None
    year: int | None = None
    source_url: str | None = None
    source_type: Literal["pdf", "web", "academic", "case_study"] = "case_study"
    target_criteria: list[str] = Field(default_factory=list)
    results: str | None = None
    key_lessons: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    is_active: bool = True

    model_config = ConfigDict(extra="forbid")

    def to_example(self) -> PolicyExample:
        return PolicyExample(
            country=self.country,
            policy=self.title,
            description=self.description,
            results=self.results or "",
            year=str(self.year) if self.year is not None else "",
            source=self.institution or self.source_url,
        )
