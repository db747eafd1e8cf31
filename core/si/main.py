"""Si Core - FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from si import __version__
from si.api.routes import models
from si.api.schemas import HealthResponse
from si.config import API_PREFIX, HF_CACHE_DIR, HOST, MODELS_DIR, PORT
from si.utils.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(f"Si Core v{__version__} starting...")
    logger.info(f"Catalog: {MODELS_DIR}, hub cache: {HF_CACHE_DIR}")
    yield
    logger.info("Si Core stopped")


app = FastAPI(
    title="Si Core",
    description="Local model catalog kept in sync with the Hugging Face cache",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(models.router, prefix=API_PREFIX)


@app.get(f"{API_PREFIX}/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok", version=__version__)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
