from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status

from app.features.pagespeed.dependencies import get_orchestrator
from app.features.pagespeed.schemas.pagespeed import DualState, Strategy
from app.features.pagespeed.services.orchestrator import ScoreOrchestrator
from app.features.pagespeed.services.partitioner import partition_audits
from app.features.pagespeed.services.scoring import needs_help, score_statuses
from app.features.submissions.services.submission_service import record_url_submission
from app.platform.config import settings
from app.platform.exceptions import UPSTREAM_FAILURE_MESSAGE, InvalidInputError
from app.platform.logger import get_logger
from app.platform.response import message_response
from app.platform.utils.url_validator import validate_url

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["PageSpeed"])


def _canonical_url(url: Optional[str]) -> str:
    is_valid, normalized, error = validate_url(url)
    if not is_valid:
        logger.info(f"Rejected check for {url!r}: {error}")
        raise InvalidInputError(error)
    return normalized


def _flag(value: Optional[str]) -> bool:
    return value == "true"


@router.get("/check")
async def check_website(
    background_tasks: BackgroundTasks,
    url: Optional[str] = None,
    details: Optional[str] = None,
    strategy: Optional[str] = None,
    refresh: Optional[str] = None,
    orchestrator: ScoreOrchestrator = Depends(get_orchestrator),
):
    canonical = _canonical_url(url)
    report = await orchestrator.check(
        canonical,
        strategy=Strategy.parse(strategy),
        details=_flag(details),
        force_refresh=_flag(refresh),
    )
    background_tasks.add_task(record_url_submission, canonical)
    return report.to_response()


@router.get("/check/both")
async def check_both_strategies(
    background_tasks: BackgroundTasks,
    url: Optional[str] = None,
    details: Optional[str] = None,
    refresh: Optional[str] = None,
    orchestrator: ScoreOrchestrator = Depends(get_orchestrator),
):
    canonical = _canonical_url(url)
    result = await orchestrator.check_both(canonical, details=_flag(details), force_refresh=_flag(refresh))

    if result.state is not DualState.SUCCEEDED:
        return message_response(
            UPSTREAM_FAILURE_MESSAGE,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            state=result.state.value,
            strategies=result.strategy_states(),
        )

    background_tasks.add_task(record_url_submission, canonical)
    threshold = settings.LEAD_CAPTURE_THRESHOLD
    return {
        "url": canonical,
        "state": result.state.value,
        "mobile": {**result.mobile.to_response(), "statuses": score_statuses(result.mobile.scores)},
        "desktop": {**result.desktop.to_response(), "statuses": score_statuses(result.desktop.scores)},
        "needsHelp": needs_help(result.mobile.scores, threshold) or needs_help(result.desktop.scores, threshold),
    }


@router.get("/check/audits")
async def category_audits(
    category: str,
    url: Optional[str] = None,
    strategy: Optional[str] = None,
    refresh: Optional[str] = None,
    orchestrator: ScoreOrchestrator = Depends(get_orchestrator),
):
    """Opportunities, diagnostics and passed audits for one expanded category."""
    canonical = _canonical_url(url)
    report = await orchestrator.check(
        canonical,
        strategy=Strategy.parse(strategy),
        details=True,
        force_refresh=_flag(refresh),
    )

    found = report.details.categories.get(category)
    if found is None:
        return message_response("Category not found", status.HTTP_404_NOT_FOUND)

    buckets = partition_audits(found, report.details.audits)
    return {
        "url": canonical,
        "strategy": report.strategy.value,
        "category": {"id": found.id or category, "title": found.title, "score": found.score},
        **buckets.to_json(),
    }
