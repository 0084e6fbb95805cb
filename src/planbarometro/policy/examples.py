"""Policy-example lookup with caching and static fallbacks."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import structlog

from ..schemas import Criterion, PolicyExample
from .base import PolicyExampleRequest, PolicyExampleSource, PolicyFetchError

FETCH_ERROR_MESSAGE = "No se pudieron obtener ejemplos de políticas públicas"


def _example(country: str, policy: str, description: str, results: str, year: str, source: str) -> PolicyExample:
    return PolicyExample(
        country=country,
        policy=policy,
        description=description,
        results=results,
        year=year,
        source=source,
    )


FALLBACK_EXAMPLES: dict[str, tuple[PolicyExample, ...]] = {
    "technical": (
        _example(
            "Chile",
            "Sistema Nacional de Información Municipal (SINIM)",
            "Plataforma integrada para la gestión municipal con indicadores estandarizados",
            "Mejoró la transparencia y eficiencia en 345 municipios",
            "2015",
            "SUBDERE Chile",
        ),
        _example(
            "Colombia",
            "SINERGIA - Sistema Nacional de Evaluación de Resultados",
            "Sistema de monitoreo y evaluación de políticas públicas",
            "Evaluó más de 400 programas gubernamentales con metodología estandarizada",
            "2018",
            "DNP Colombia",
        ),
    ),
    "operational": (
        _example(
            "Brasil",
            "Programa de Modernización de la Gestión Pública",
            "Reforma administrativa para mejorar procesos y coordinación institucional",
            "Redujo 30% el tiempo de trámites y mejoró satisfacción ciudadana",
            "2019",
            "Ministerio de Economía Brasil",
        ),
        _example(
            "México",
            "Modelo Integral de Evaluación del Desempeño (MIDE)",
            "Sistema integrado de gestión por resultados en el sector público",
            "Implementado en 32 estados con mejoras en eficiencia operativa",
            "2017",
            "CONEVAL México",
        ),
    ),
    "political": (
        _example(
            "Uruguay",
            "Espacios de Diálogo Social Tripartito",
            "Mecanismos institucionalizados de negociación entre gobierno, empresarios y trabajadores",
            "Logró consensos en 85% de las negociaciones laborales y sociales",
            "2016",
            "Ministerio de Trabajo Uruguay",
        ),
        _example(
            "Costa Rica",
            "Consejos Territoriales de Desarrollo Rural",
            "Instancias participativas para la planificación del desarrollo local",
            "Involucró 25,000 personas en procesos de planificación territorial",
            "2020",
            "INDER Costa Rica",
        ),
    ),
    "prospective": (
        _example(
            "Argentina",
            "Sistema de Alerta Temprana para Emergencias",
            "Red nacional de monitoreo y anticipación de crisis climáticas y sociales",
            "Redujo 40% el impacto de desastres naturales con alertas preventivas",
            "2021",
            "SINAGIR Argentina",
        ),
        _example(
            "Perú",
            "Centro Nacional de Planeamiento Estratégico (CEPLAN)",
            "Sistema nacional de prospectiva y planificación estratégica",
            "Desarrolló escenarios futuros para 25 sectores prioritarios",
            "2018",
            "CEPLAN Perú",
        ),
    ),
}


class PolicyExampleCache:
    """Process-lifetime cache; entries only leave through :meth:`clear`."""

    def __init__(self) -> None:
        self._entries: dict[str, list[PolicyExample]] = {}

    def get(self, key: str) -> list[PolicyExample] | None:
        cached = self._entries.get(key)
        return list(cached) if cached is not None else None

    def set(self, key: str, examples: Sequence[PolicyExample]) -> None:
        self._entries[key] = list(examples)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(slots=True)
class PolicyExampleResult:
    """Outcome shown next to a weak dimension, including fallback state."""

    dimension_id: str
    examples: list[PolicyExample] = field(default_factory=list)
    is_fallback: bool = False
    error: str | None = None

    @property
    def retryable(self) -> bool:
        return self.error is not None


class PolicyExampleRequests:
    """Track the latest request per slot so superseded results are dropped."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: dict[str, int] = {}

    def begin(self, slot: str) -> tuple[str, int]:
        token = next(self._counter)
        self._latest[slot] = token
        return slot, token

    def is_current(self, ticket: tuple[str, int]) -> bool:
        slot, token = ticket
        return self._latest.get(slot) == token

    def resolve(
        self,
        ticket: tuple[str, int],
        result: PolicyExampleResult,
    ) -> PolicyExampleResult | None:
        """Return ``result`` if ``ticket`` is still the newest, otherwise None."""
        if not self.is_current(ticket):
            return None
        return result


class PolicyExampleService:
    """Look up examples from configured sources, falling back to static data."""

    def __init__(
        self,
        sources: Iterable[PolicyExampleSource],
        *,
        cache: PolicyExampleCache | None = None,
        fallback: dict[str, Sequence[PolicyExample]] | None = None,
        requests: PolicyExampleRequests | None = None,
    ) -> None:
        self._sources = list(sources)
        self._cache = cache if cache is not None else PolicyExampleCache()
        self._requests = requests if requests is not None else PolicyExampleRequests()
        self._fallback = FALLBACK_EXAMPLES if fallback is None else fallback
        self._logger = structlog.get_logger(__name__)

    @property
    def cache(self) -> PolicyExampleCache:
        return self._cache

    def begin(self, dimension_id: str) -> tuple[str, int]:
        """Start a lookup for ``dimension_id``, superseding any pending one."""
        return self._requests.begin(dimension_id)

    def fetch_policy_examples(
        self,
        dimension_id: str,
        dimension_name: str,
        criteria: Sequence[Criterion | str],
        weak_criteria: Sequence[Criterion | str],
    ) -> list[PolicyExample]:
        """Query sources in order and cache the first answer.

        An empty answer is cached only when no source failed. Raises
        :class:`PolicyFetchError` when a source failed and none returned
        examples.
        """
        lookup = PolicyExampleRequest(
            dimension_id=dimension_id,
            dimension_name=dimension_name,
            criteria=tuple(_names(criteria)),
            weak_criteria=tuple(_names(weak_criteria)),
        )
        cached = self._cache.get(lookup.cache_key)
        if cached is not None:
            return cached

        failures: list[str] = []
        examples: list[PolicyExample] = []
        for source in self._sources:
            try:
                examples = source.lookup(lookup)
            except PolicyFetchError as exc:
                failures.append(f"{source.name}: {exc}")
                continue
            if examples:
                break

        if failures and not examples:
            self._logger.warning(
                "policy_examples.fetch_failed",
                dimension_id=dimension_id,
                errors=failures,
            )
            raise PolicyFetchError(FETCH_ERROR_MESSAGE)

        self._cache.set(lookup.cache_key, examples)
        return list(examples)

    def load(
        self,
        dimension_id: str,
        dimension_name: str,
        criteria: Sequence[Criterion | str],
        weak_criteria: Sequence[Criterion | str],
        *,
        ticket: tuple[str, int] | None = None,
    ) -> PolicyExampleResult | None:
        """Fetch examples, degrading to the fallback table on failure.

        With a ``ticket`` from :meth:`begin`, returns None when a newer
        lookup for the same dimension has started in the meantime.
        """
        try:
            examples = self.fetch_policy_examples(
                dimension_id, dimension_name, criteria, weak_criteria
            )
        except PolicyFetchError as exc:
            fallback = list(self._fallback.get(dimension_id, ()))
            result = PolicyExampleResult(
                dimension_id=dimension_id,
                examples=fallback,
                is_fallback=bool(fallback),
                error=str(exc),
            )
        else:
            result = PolicyExampleResult(dimension_id=dimension_id, examples=examples)
        if ticket is None:
            return result
        return self._requests.resolve(ticket, result)

    def clear_cache(self) -> None:
        self._cache.clear()


def _names(items: Sequence[Criterion | str]) -> list[str]:
    return [item if isinstance(item, str) else item.name for item in items]
