"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pantryplanner import __version__
from pantryplanner.config import get_settings
from pantryplanner.database import Base, async_engine
from pantryplanner.errors import ErrorKind, PlannerError
from pantryplanner.logging_config import LoggingContext, configure_logging, get_logger
from pantryplanner.routers import catalog_router, meal_plans_router, shopping_list_router

settings = get_settings()

# Configure logging on module load
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Pantry Planner API")

    # Create database tables if they don't exist
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized")

    yield

    logger.info("Shutting down Pantry Planner API")
    await async_engine.dispose()


app = FastAPI(
    title="Pantry Planner API",
    description="Meal planning around what is already in the pantry",
    version=__version__,
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
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line of a request with its request id."""
    request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    return response


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    """Translate a planner failure into a status code chosen by its kind."""
    if exc.kind is ErrorKind.INTERNAL:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(
            f"{request.method} {request.url.path} rejected ({exc.kind.value}): {exc.message}"
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(meal_plans_router)
app.include_router(shopping_list_router)
app.include_router(catalog_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "pantryplanner-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Pantry Planner API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }
