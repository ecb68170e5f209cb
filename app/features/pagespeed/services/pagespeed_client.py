from typing import Optional

import httpx
from pydantic import ValidationError

from app.features.pagespeed.schemas.pagespeed import PageSpeedPayload, Strategy
from app.platform.config import Settings
from app.platform.exceptions import ConfigurationError, UpstreamError, UpstreamTimeoutError
from app.platform.logger import get_logger

logger = get_logger(__name__)

CATEGORIES = ("performance", "seo", "accessibility", "best-practices")

# Upstream bodies can be large; this much is enough to diagnose from logs.
_LOGGED_BODY_LIMIT = 500


class PageSpeedClient:
    """Thin async wrapper around the PageSpeed Insights runPagespeed endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "PageSpeedClient":
        return cls(api_key=settings.GOOGLE_PAGESPEED_API_KEY, api_url=settings.PAGESPEED_API_URL)

    def build_params(self, url: str, strategy: Strategy) -> list[tuple[str, str]]:
        params = [("url", url)]
        params.extend(("category", category) for category in CATEGORIES)
        params.append(("strategy", strategy.value))
        params.append(("key", self.api_key or ""))
        return params

    async def run(self, url: str, strategy: Strategy, timeout: float) -> PageSpeedPayload:
        if not self.api_key:
            raise ConfigurationError()

        logger.info(f"Requesting PageSpeed scores for {url} (strategy={strategy.value})")
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self.transport) as client:
                response = await client.get(self.api_url, params=self.build_params(url, strategy))
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"timed out after {timeout}s for {url}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise UpstreamError(response.text[:_LOGGED_BODY_LIMIT], upstream_status=response.status_code)

        try:
            return PageSpeedPayload.model_validate_json(response.content)
        except ValidationError as e:
            raise UpstreamError(f"malformed payload: {e.error_count()} validation errors") from e
