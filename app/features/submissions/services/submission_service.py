from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.features.submissions.models.url_submission import UrlSubmission
from app.platform.config import settings
from app.platform.db.session import SessionLocal
from app.platform.logger import get_logger

logger = get_logger(__name__)


async def create_url_submission(db: AsyncSession, url: str) -> UrlSubmission:
    submission = UrlSubmission(url=url)
    db.add(submission)
    await db.commit()
    await db.refresh(submission)
    return submission


async def record_url_submission(
    url: str, session_factory: Optional[async_sessionmaker] = None
) -> None:
    """Background task: store a checked URL. Never raises."""
    if not settings.RECORD_SUBMISSIONS:
        return
    factory = session_factory or SessionLocal
    try:
        async with factory() as db:
            await create_url_submission(db, url)
    except Exception as e:
        logger.error(f"Failed to record URL submission for {url}: {e}")
