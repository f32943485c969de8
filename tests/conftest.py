"""Shared pytest fixtures for all test suites."""

import json
from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from manuscript.app.db.inmemory import InMemoryChangeStore
from manuscript.app.llm.gateway import ProviderGateway
from manuscript.app.llm.providers import CompletionOptions
from manuscript.app.main import create_app
from manuscript.app.models.common import ProviderId


class StubProvider:
    """Completion provider that replays scripted responses and records calls.

    Scripted dicts/lists are serialized to JSON, strings are returned as is and
    exceptions are raised. An exhausted script fails like a dead vendor.
    """

    def __init__(self, name: ProviderId, responses: list[Any] | None = None):
        self.name = name
        self.model = f"{name.value}-stub"
        self.api_key = "test-key"
        self.responses = list(responses or [])
        self.calls: list[tuple[str, CompletionOptions]] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    @property
    def prompts(self) -> list[str]:
        return [prompt for prompt, _ in self.calls]

    async def complete(self, prompt: str, options: CompletionOptions) -> str:
        self.calls.append((prompt, options))
        if not self.responses:
            raise ConnectionError(f"{self.name.value} stub has no scripted response")

        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if not isinstance(response, str):
            response = json.dumps(response)
        return response


@pytest.fixture
def providers() -> dict[ProviderId, StubProvider]:
    """One empty stub per vendor; tests queue the responses they need."""
    return {provider_id: StubProvider(provider_id) for provider_id in ProviderId}


@pytest.fixture
def gateway(providers: dict[ProviderId, StubProvider]) -> ProviderGateway:
    """Gateway over the stubs with fallback disabled."""
    return ProviderGateway(providers)


@pytest.fixture
def store() -> InMemoryChangeStore:
    """Fresh store per test."""
    return InMemoryChangeStore()


@pytest.fixture
def client(store: InMemoryChangeStore, gateway: ProviderGateway) -> Iterator[TestClient]:
    """Test client for an app wired to the test store and stub gateway."""
    app = create_app(store=store, gateway=gateway)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_document(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Create a document through the API and return its JSON body."""

    def _make(content: str = "line1\nline2\nline3", name: str = "a.txt") -> dict[str, Any]:
        response = client.post("/api/documents", json={"name": name, "content": content})
        assert response.status_code == 201
        document: dict[str, Any] = response.json()
        return document

    return _make
