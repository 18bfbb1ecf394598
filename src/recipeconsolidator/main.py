"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from recipeconsolidator.config import settings
from recipeconsolidator.database import SessionLocal, engine, init_db
from recipeconsolidator.logging_config import LoggingContext, configure_logging, get_logger
from recipeconsolidator.routers import (
    preferences_router,
    recipes_router,
    shopping_list_router,
)
from recipeconsolidator.state import RecipeBook
from recipeconsolidator.storage import SqlStore

# Configure logging on module load
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Recipe Consolidator API")

    if getattr(app.state, "recipe_book", None) is None:
        init_db()
        logger.info("Database tables initialized")
        app.state.recipe_book = RecipeBook.from_store(SqlStore(SessionLocal))

    yield

    logger.info("Shutting down Recipe Consolidator API")
    engine.dispose()


app = FastAPI(
    title="Recipe Consolidator API",
    description="Turn pasted recipes into one consolidated shopping list",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag every log line of a request with its request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Include routers
app.include_router(recipes_router)
app.include_router(shopping_list_router)
app.include_router(preferences_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "recipeconsolidator-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Recipe Consolidator API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
