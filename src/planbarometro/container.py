"""Dependency injection container for the assessment engine."""

from __future__ import annotations

from dependency_injector import containers, providers

from .access import GroupDirectory
from .catalog import build_catalog
from .core import AlertRuleEvaluator, AlertRulesConfig, ScoringEngine
from .pipeline import AssessmentPipeline
from .policy import (
    BestPracticeMatcherConfig,
    BestPracticeRepository,
    HTTPSuggestionSource,
    PolicyExampleCache,
    PolicyExampleRequests,
    PolicyExampleService,
)
from .storage import EvaluationStore


class AssessmentContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    catalog = providers.Singleton(
        build_catalog,
        models_dir=config.models_dir,
    )

    scoring_engine = providers.Singleton(ScoringEngine)
    alert_evaluator = providers.Singleton(AlertRuleEvaluator)

    best_practices = providers.Singleton(BestPracticeRepository)
    policy_sources = providers.List(best_practices)
    policy_cache = providers.Singleton(PolicyExampleCache)
    policy_requests = providers.Singleton(PolicyExampleRequests)

    policy_service = providers.Singleton(
        PolicyExampleService,
        sources=policy_sources,
        cache=policy_cache,
        requests=policy_requests,
    )

    evaluation_store = providers.Singleton(EvaluationStore)
    group_directory = providers.Singleton(GroupDirectory)

    pipeline = providers.Factory(
        AssessmentPipeline,
        catalog=catalog,
        scoring=scoring_engine,
        alerts=alert_evaluator,
        policy=policy_service,
        weak_threshold=config.weak_criteria.threshold,
    )


def create_container(
    *,
    settings: dict | None = None,
    best_practices: BestPracticeRepository | None = None,
) -> AssessmentContainer:
    """Instantiate container with optional overrides."""

    container = AssessmentContainer()
    settings = settings if isinstance(settings, dict) else {}

    if settings:
        container.config.from_dict(settings)

    alert_settings = dict(settings.get("alerts", {}))
    if alert_settings:
        container.alert_evaluator.override(
            providers.Singleton(AlertRuleEvaluator, config=AlertRulesConfig(**alert_settings))
        )

    policy_settings = dict(settings.get("policy", {}))
    matcher_settings = {
        key: policy_settings[key]
        for key in ("min_similarity", "max_results")
        if key in policy_settings
    }
    if best_practices is not None:
        container.best_practices.override(providers.Object(best_practices))
    elif matcher_settings:
        container.best_practices.override(
            providers.Singleton(
                BestPracticeRepository,
                config=BestPracticeMatcherConfig(**matcher_settings),
            )
        )

    endpoint = policy_settings.get("suggestions_endpoint")
    if endpoint:
        suggestions = providers.Singleton(
            HTTPSuggestionSource,
            endpoint,
            policy_settings.get("suggestions_api_key"),
            timeout=policy_settings.get("suggestions_timeout", 10.0),
        )
        container.policy_sources.override(
            providers.List(container.best_practices, suggestions)
        )

    return container
