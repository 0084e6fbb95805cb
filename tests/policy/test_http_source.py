from __future__ import annotations

import io
import json
from urllib import error

import pytest

from planbarometro.policy import HTTPSuggestionSource, PolicyExampleRequest, PolicyFetchError
from planbarometro.policy import http_source

REQUEST = PolicyExampleRequest(
    "prospective",
    "Capacidad Prospectiva",
    criteria=("Construcción de visión compartida", "Escenarios futuros y anticipación"),
    weak_criteria=("Escenarios futuros y anticipación",),
)


class FakeResponse(io.BytesIO):
    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def test_posts_context_and_parses_examples(monkeypatch: pytest.MonkeyPatch):
    captured = {}

    def fake_urlopen(req, timeout):
        captured["body"] = json.loads(req.data.decode("utf-8"))
        captured["auth"] = req.get_header("Authorization")
        captured["timeout"] = timeout
        payload = {
            "examples": [
                {
                    "country": "Perú",
                    "policy": "CEPLAN",
                    "description": "Prospectiva nacional",
                    "results": "25 sectores",
                    "year": "2018",
                }
            ]
        }
        return FakeResponse(json.dumps(payload).encode("utf-8"))

    monkeypatch.setattr(http_source.request, "urlopen", fake_urlopen)
    source = HTTPSuggestionSource("http://suggest.local/examples", "secret", timeout=3.0)

    examples = source.lookup(REQUEST)

    assert [item.policy for item in examples] == ["CEPLAN"]
    assert captured["body"]["dimensionId"] == "prospective"
    assert captured["body"]["weakCriteria"] == ["Escenarios futuros y anticipación"]
    assert captured["auth"] == "Bearer secret"
    assert captured["timeout"] == 3.0


def test_transport_errors_become_fetch_errors(monkeypatch: pytest.MonkeyPatch):
    def failing_urlopen(req, timeout):
        raise error.URLError("connection refused")

    monkeypatch.setattr(http_source.request, "urlopen", failing_urlopen)
    source = HTTPSuggestionSource("http://suggest.local/examples")

    with pytest.raises(PolicyFetchError):
        source.lookup(REQUEST)


def test_malformed_payload_becomes_fetch_error(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        http_source.request,
        "urlopen",
        lambda req, timeout: FakeResponse(b'{"examples": [{"country": "X"}]}'),
    )
    source = HTTPSuggestionSource("http://suggest.local/examples")

    with pytest.raises(PolicyFetchError):
        source.lookup(REQUEST)


@pytest.mark.parametrize(
    "exc",
    [
        ConnectionResetError("reset by peer"),
        TimeoutError("timed out"),
        http_source.client.IncompleteRead(b"{"),
    ],
)
def test_connection_failures_become_fetch_errors(monkeypatch: pytest.MonkeyPatch, exc):
    def failing_urlopen(req, timeout):
        raise exc

    monkeypatch.setattr(http_source.request, "urlopen", failing_urlopen)
    source = HTTPSuggestionSource("http://suggest.local/examples")

    with pytest.raises(PolicyFetchError, match="unavailable"):
        source.lookup(REQUEST)


@pytest.mark.parametrize(
    "body",
    [
        b'{"examples": null}',
        b'{"examples": {"country": "X"}}',
        b"\xff\xfe{",
        b"[1, 2]",
        b"not json",
    ],
)
def test_unusable_bodies_become_fetch_errors(monkeypatch: pytest.MonkeyPatch, body: bytes):
    monkeypatch.setattr(
        http_source.request,
        "urlopen",
        lambda req, timeout: FakeResponse(body),
    )
    source = HTTPSuggestionSource("http://suggest.local/examples")

    with pytest.raises(PolicyFetchError, match="Invalid suggestion payload"):
        source.lookup(REQUEST)


def test_empty_body_means_no_examples(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(http_source.request, "urlopen", lambda req, timeout: FakeResponse(b""))

    assert HTTPSuggestionSource("http://suggest.local/examples").lookup(REQUEST) == []
