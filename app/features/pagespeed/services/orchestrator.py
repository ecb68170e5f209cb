import asyncio
from functools import partial
from typing import Optional

from app.features.pagespeed.schemas.pagespeed import (
    DetailPayload,
    DualState,
    DualStrategyReport,
    ScoreReport,
    Strategy,
)
from app.features.pagespeed.services.lifecycle import RequestTracker
from app.features.pagespeed.services.pagespeed_client import PageSpeedClient
from app.features.pagespeed.services.scoring import derive_scores
from app.platform.cache.base import ResultCache
from app.platform.config import Settings
from app.platform.exceptions import AppError, UpstreamError
from app.platform.logger import get_logger

logger = get_logger(__name__)


def cache_key(url: str, strategy: Strategy, details: bool) -> str:
    return f"check:{url}:{strategy.value}:{'details' if details else 'summary'}"


class ScoreOrchestrator:
    """
    Turns a canonical URL into a ScoreReport.

    Summary checks always go upstream. Detailed checks are cached per
    (url, strategy) for DETAILS_CACHE_TTL seconds, retried once after a
    short delay on upstream failure, and skip the cache on force_refresh.
    Concurrent checks for the same key share one upstream call; a
    force_refresh check cancels the one in flight.
    """

    def __init__(
        self,
        client: PageSpeedClient,
        cache: ResultCache,
        settings: Settings,
        tracker: Optional[RequestTracker] = None,
    ):
        self.client = client
        self.cache = cache
        self.settings = settings
        self.tracker = tracker or RequestTracker()

    async def check(
        self,
        url: str,
        strategy: Strategy = Strategy.DESKTOP,
        details: bool = False,
        force_refresh: bool = False,
    ) -> ScoreReport:
        key = cache_key(url, strategy, details)

        if details and not force_refresh:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.info(f"Cache hit for {key}")
                return ScoreReport.from_cache(cached)

        report = await self.tracker.run(
            key, partial(self._fetch, url, strategy, details), supersede=force_refresh
        )

        if details:
            await self.cache.set(key, report.to_cache(), self.settings.DETAILS_CACHE_TTL)
        return report

    async def _fetch(self, url: str, strategy: Strategy, details: bool) -> ScoreReport:
        if not details:
            return await self._fetch_once(url, strategy, details, self.settings.PAGESPEED_SUMMARY_TIMEOUT)

        timeout = self.settings.PAGESPEED_DETAILS_TIMEOUT
        try:
            return await self._fetch_once(url, strategy, details, timeout)
        except UpstreamError as e:
            logger.warning(
                f"Detailed check failed for {url} ({strategy.value}): {e}; "
                f"retrying in {self.settings.PAGESPEED_RETRY_DELAY}s"
            )
            await asyncio.sleep(self.settings.PAGESPEED_RETRY_DELAY)
            return await self._fetch_once(url, strategy, details, timeout)

    async def _fetch_once(self, url: str, strategy: Strategy, details: bool, timeout: float) -> ScoreReport:
        payload = await self.client.run(url, strategy, timeout)
        result = payload.lighthouse_result

        detail_payload = None
        if details:
            detail_payload = DetailPayload(
                categories=result.categories,
                audits=result.audits,
                loading_experience=payload.loading_experience,
            )
        return ScoreReport(
            url=url,
            scores=derive_scores(result.categories),
            strategy=strategy,
            details=detail_payload,
        )

    async def check_both(
        self, url: str, details: bool = False, force_refresh: bool = False
    ) -> DualStrategyReport:
        """Check mobile and desktop concurrently; either may fail independently."""
        strategies = (Strategy.MOBILE, Strategy.DESKTOP)
        results = await asyncio.gather(
            *(self.check(url, strategy, details, force_refresh) for strategy in strategies),
            return_exceptions=True,
        )

        reports: dict[Strategy, ScoreReport] = {}
        errors: dict[Strategy, str] = {}
        for strategy, result in zip(strategies, results):
            if isinstance(result, AppError):
                logger.warning(f"{strategy.value} check failed for {url}: {result}")
                errors[strategy] = result.message
            elif isinstance(result, BaseException):
                raise result
            else:
                reports[strategy] = result

        if not errors:
            state = DualState.SUCCEEDED
        elif reports:
            state = DualState.PARTIAL
        else:
            state = DualState.FAILED

        return DualStrategyReport(
            url=url,
            state=state,
            mobile=reports.get(Strategy.MOBILE),
            desktop=reports.get(Strategy.DESKTOP),
            errors=errors,
        )
