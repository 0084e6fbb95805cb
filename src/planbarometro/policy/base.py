"""Shared types for policy-example sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ..schemas import PolicyExample


class PolicyFetchError(RuntimeError):
    """Raised when no policy-example source could be reached."""


@dataclass(frozen=True, slots=True)
class PolicyExampleRequest:
    """Lookup key for examples addressing one dimension's weak criteria."""

    dimension_id: str
    dimension_name: str
    criteria: tuple[str, ...] = field(default_factory=tuple)
    weak_criteria: tuple[str, ...] = field(default_factory=tuple)

    @property
    def cache_key(self) -> str:
        return f"{self.dimension_id}|{','.join(sorted(self.weak_criteria))}"


@runtime_checkable
class PolicyExampleSource(Protocol):
    """Primary lookup contract for policy examples."""

    name: str

    def lookup(self, request: PolicyExampleRequest) -> list[PolicyExample]:
        """Return examples for ``request`` or raise on transport failure."""
