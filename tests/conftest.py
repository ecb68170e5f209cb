"""
Test configuration and fixtures for the PageSpeed checker API.

Environment is set before the app is imported so the settings object, the
database engine and the orchestrator all pick up the test values.
"""

import os
import tempfile
from typing import Any, Callable, Generator, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

test_db_path = tempfile.mktemp(suffix=".db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{test_db_path}"
os.environ["GOOGLE_PAGESPEED_API_KEY"] = "test-api-key"
os.environ["CACHE_BACKEND"] = "memory"
os.environ["PAGESPEED_RETRY_DELAY"] = "0"

from app.features.pagespeed.dependencies import get_orchestrator  # noqa: E402
from app.features.pagespeed.services.orchestrator import ScoreOrchestrator  # noqa: E402
from app.features.pagespeed.services.pagespeed_client import PageSpeedClient  # noqa: E402
from app.platform.cache.memory import InMemoryCache  # noqa: E402
from app.platform.config import Settings  # noqa: E402

TEST_API_URL = "https://pagespeed.test/runPagespeed"


def build_lighthouse_payload(
    scores: Optional[dict[str, Optional[float]]] = None,
    audits: Optional[dict[str, dict[str, Any]]] = None,
    audit_refs: Optional[dict[str, list[str]]] = None,
    loading_experience: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Minimal runPagespeed body. `scores` maps category key to 0-1 score."""
    if scores is None:
        scores = {"performance": 0.9, "seo": 0.95, "accessibility": 0.8, "best-practices": 1.0}
    audit_refs = audit_refs or {}

    categories = {
        key: {
            "id": key,
            "title": key.replace("-", " ").title(),
            "description": f"{key} description",
            "score": score,
            "auditRefs": [{"id": ref, "weight": 1} for ref in audit_refs.get(key, [])],
        }
        for key, score in scores.items()
    }
    payload: dict[str, Any] = {
        "lighthouseResult": {"categories": categories, "audits": audits or {}},
    }
    if loading_experience is not None:
        payload["loadingExperience"] = loading_experience
    return payload


@pytest.fixture
def lighthouse_payload() -> Callable[..., dict[str, Any]]:
    return build_lighthouse_payload


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        GOOGLE_PAGESPEED_API_KEY="test-api-key",
        PAGESPEED_API_URL=TEST_API_URL,
        PAGESPEED_RETRY_DELAY=0,
        DETAILS_CACHE_TTL=300,
    )


class UpstreamStub:
    """Scripted PageSpeed upstream; records every request it receives."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list[Any] = []
        self.default: Any = httpx.Response(200, json=build_lighthouse_payload())

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if self.responses else self.default
        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response(request)
        # hand out a copy so one scripted response can serve many requests
        return httpx.Response(response.status_code, headers=response.headers, content=response.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def orchestrator(upstream, cache, test_settings) -> ScoreOrchestrator:
    client = PageSpeedClient(
        api_key=test_settings.GOOGLE_PAGESPEED_API_KEY,
        api_url=test_settings.PAGESPEED_API_URL,
        transport=upstream.transport,
    )
    return ScoreOrchestrator(client=client, cache=cache, settings=test_settings)


@pytest.fixture(scope="session")
def test_app():
    """Create FastAPI test application."""
    from app.main import app

    return app


@pytest.fixture(scope="function")
def client(test_app, orchestrator) -> Generator[TestClient, None, None]:
    """
    Test client whose orchestrator talks to the scripted upstream instead of
    the real PageSpeed API.
    """
    test_app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    with TestClient(test_app) as test_client:
        yield test_client
    test_app.dependency_overrides.pop(get_orchestrator, None)
