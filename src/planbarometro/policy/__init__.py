"""Example-policy lookup for weak dimensions."""

from .base import PolicyExampleRequest, PolicyExampleSource, PolicyFetchError
from .best_practices import BestPracticeMatcherConfig, BestPracticeRepository
from .examples import (
    FALLBACK_EXAMPLES,
    PolicyExampleCache,
    PolicyExampleRequests,
    PolicyExampleResult,
    PolicyExampleService,
)
from .http_source import HTTPSuggestionSource

__all__ = [
    "BestPracticeMatcherConfig",
    "BestPracticeRepository",
    "FALLBACK_EXAMPLES",
    "HTTPSuggestionSource",
    "PolicyExampleCache",
    "PolicyExampleRequest",
    "PolicyExampleRequests",
    "PolicyExampleResult",
    "PolicyExampleService",
    "PolicyExampleSource",
    "PolicyFetchError",
]
