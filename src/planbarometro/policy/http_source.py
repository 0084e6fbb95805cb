"""HTTP client for an external policy suggestion service."""

from __future__ import annotations

import json
from http import client
from typing import Any
from urllib import error, request

import structlog
from pydantic import ValidationError

from ..schemas import PolicyExample
from .base import PolicyExampleRequest, PolicyFetchError


def build_suggestion_payload(lookup: PolicyExampleRequest) -> dict[str, Any]:
    """Construct the body expected by the suggestion endpoint."""
    return {
        "dimensionId": lookup.dimension_id,
        "dimensionName": lookup.dimension_name,
        "criteria": [{"name": name} for name in lookup.criteria],
        "weakCriteria": list(lookup.weak_criteria),
    }


class HTTPSuggestionSource:
    """POST weak-criteria context to an endpoint that answers with examples.

    The endpoint is typically backed by an LLM; it must reply with
    ``{"examples": [...]}``.
    """

    name = "suggestions"

    def __init__(self, endpoint: str, api_key: str | None = None, *, timeout: float = 10.0):
        self._endpoint = endpoint
        self._api_key = api_key
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def lookup(self, lookup: PolicyExampleRequest) -> list[PolicyExample]:
        data = json.dumps(build_suggestion_payload(lookup), ensure_ascii=False).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"

        req = request.Request(self._endpoint, data=data, headers=headers, method="POST")
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
        except (error.URLError, OSError, TimeoutError, client.HTTPException) as exc:
            self._logger.warning("suggestions.request_failed", error=str(exc))
            raise PolicyFetchError(f"Suggestion service unavailable: {exc}") from exc

        try:
            body = raw.decode("utf-8")
            payload = json.loads(body) if body else {}
            items = payload.get("examples", [])
            if not isinstance(items, list):
                raise TypeError(f"'examples' must be a list, got {type(items).__name__}")
            return [PolicyExample.model_validate(item) for item in items]
        except (
            UnicodeDecodeError,
            json.JSONDecodeError,
            AttributeError,
            TypeError,
            ValidationError,
        ) as exc:
            self._logger.warning("suggestions.invalid_payload", error=str(exc))
            raise PolicyFetchError(f"Invalid suggestion payload: {exc}") from exc
