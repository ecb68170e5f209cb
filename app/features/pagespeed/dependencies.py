from fastapi import Request

from app.features.pagespeed.services.orchestrator import ScoreOrchestrator
from app.features.pagespeed.services.pagespeed_client import PageSpeedClient
from app.platform.cache.base import ResultCache
from app.platform.config import Settings


def build_orchestrator(settings: Settings, cache: ResultCache) -> ScoreOrchestrator:
    return ScoreOrchestrator(
        client=PageSpeedClient.from_settings(settings),
        cache=cache,
        settings=settings,
    )


def get_orchestrator(request: Request) -> ScoreOrchestrator:
    """The orchestrator is created once at startup so its cache and
    in-flight tracking are shared across requests."""
    return request.app.state.orchestrator
