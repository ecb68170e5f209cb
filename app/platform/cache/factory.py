from app.platform.cache.base import NullCache, ResultCache
from app.platform.cache.memory import InMemoryCache
from app.platform.cache.redis import RedisCache
from app.platform.config import Settings
from app.platform.logger import get_logger

logger = get_logger(__name__)


def build_cache(settings: Settings) -> ResultCache:
    backend = settings.CACHE_BACKEND
    if backend == "redis":
        logger.info(f"Using Redis result cache at {settings.REDIS_URL}")
        return RedisCache.from_url(settings.REDIS_URL)
    if backend == "none":
        logger.info("Result cache disabled")
        return NullCache()
    return InMemoryCache()
