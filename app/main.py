import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.features.contact.routes.contact import router as contact_router
from app.features.health.routes.health import router as health_router
from app.features.pagespeed.dependencies import build_orchestrator
from app.features.pagespeed.routes.check import router as check_router
from app.platform.cache.factory import build_cache
from app.platform.config import settings
from app.platform.db.session import init_db
from app.platform.exceptions import add_exception_handlers
from app.platform.logger import get_logger

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
# httpx logs full request URLs at INFO, which would include the API key.
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.GOOGLE_PAGESPEED_API_KEY:
        logger.warning("GOOGLE_PAGESPEED_API_KEY is not set; checks will fail until it is configured")

    await init_db()
    cache = build_cache(settings)
    app.state.cache = cache
    app.state.orchestrator = build_orchestrator(settings, cache)
    try:
        yield
    finally:
        await cache.close()


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Website performance, SEO, accessibility and best-practices scores",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)


@app.get("/", tags=["Info"])
def root():
    return {
        "app_name": f"{settings.APP_NAME} API",
        "description": "Check a website's PageSpeed scores and get expert help when they are poor.",
        "version": "1.0.0",
        "docs_url": "/docs",
        "api_base": "/api",
    }


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)

app.include_router(health_router)
app.include_router(check_router)
app.include_router(contact_router)
