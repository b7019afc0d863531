import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from quickurl.config import settings
from quickurl.api.v1 import urls, redirect
from quickurl.dependencies import get_url_store
from quickurl.exceptions import StorageUnavailableError
from quickurl.schemas.url import HealthResponse
from quickurl.utils.logging import setup_logging
from quickurl.workers.sweeper import SweepWorker

logger = logging.getLogger("quickurl")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, open the store and run the expiry sweeper when enabled"""
    setup_logging()
    logger.info("Starting %s %s (%s)", settings.app_name, settings.app_version, settings.environment)

    # Opening the store applies migrations before the first request
    store = app.dependency_overrides.get(get_url_store, get_url_store)()

    worker = None
    task = None
    if settings.sweep_interval_seconds > 0:
        worker = SweepWorker(store=store, interval=settings.sweep_interval_seconds)
        task = asyncio.create_task(worker.start())

    yield

    if worker is not None:
        worker.stop()
        await task


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener with expiring links and click counting",
    debug=settings.debug,
    lifespan=lifespan
)


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    """Storage failures are retryable for the client"""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc), "error_code": exc.error_code}
    )


@app.get("/", response_model=HealthResponse)
@app.get("/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(status="healthy", service=settings.app_name, version=settings.app_version)


######## Include routers
app.include_router(urls.router, prefix="/api/v1")
app.include_router(redirect.router)
