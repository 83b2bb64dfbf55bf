import logging
import time
import traceback
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ✅ Import All API Routes
from content_agent.api.routes import auth, projects, workspaces, usage, content, health

from content_agent.core import config
from content_agent.core.exceptions import AppError
from content_agent.core.logging_config import setup_logging, sanitize_log_data
from content_agent.core.rate_limit import RateLimiter
from content_agent.db.init_db import init_db
from content_agent.db.session import build_engine, build_session_factory
from content_agent.llm.provider import LLMProvider
from content_agent.llm.router import build_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the schema before serving."""
    if app.state.run_migrations:
        from content_agent.db.migrate import run_migrations
        run_migrations(app.state.database_url)
    else:
        init_db(app.state.engine)

    logger.info(
        f"Application starting: env={config.APP_ENV}, provider={app.state.llm_provider.name}, "
        f"api_prefix={config.API_PREFIX}"
    )
    yield
    logger.info("Application stopped")


# ============================================
# ✅ ERROR HANDLERS
# ============================================

async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    if isinstance(exc.body, (dict, list)):
        logger.info(f"Validation failed: {request.method} {request.url.path}: body={sanitize_log_data(exc.body)}")
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "detail": "Validation failed", "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error: {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    body = {"error": "internal_error", "detail": "Internal server error"}
    if not config.is_production():
        body["traceback"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=500, content=body)


# ============================================
# ✅ FASTAPI APP FACTORY
# ============================================

def create_app(
    database_url: Optional[str] = None,
    llm_provider: Optional[LLMProvider] = None,
    run_migrations: Optional[bool] = None,
) -> FastAPI:
    """
    Build the application with its own engine, session factory, provider
    and auth rate limiter on app.state.
    """
    app = FastAPI(
        title="AI Content Agent API",
        version="1.0.0",
        description="Auth, projects, usage metering and AI content generation",
        lifespan=lifespan,
    )

    app.state.database_url = database_url or config.DATABASE_URL
    app.state.run_migrations = config.RUN_MIGRATIONS if run_migrations is None else run_migrations
    app.state.engine = build_engine(app.state.database_url)
    app.state.SessionLocal = build_session_factory(app.state.engine)
    app.state.llm_provider = llm_provider or build_provider()
    app.state.auth_rate_limiter = RateLimiter(
        max_requests=config.AUTH_RATE_LIMIT_REQUESTS,
        window_seconds=config.AUTH_RATE_LIMIT_WINDOW_SECONDS,
    )

    # ✅ CORS: only the dashboard origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f}ms)")
        return response

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ✅ Register all routers
    app.include_router(auth.router, prefix=config.API_PREFIX)
    app.include_router(projects.router, prefix=config.API_PREFIX)
    app.include_router(workspaces.router, prefix=config.API_PREFIX)
    app.include_router(usage.router, prefix=config.API_PREFIX)
    app.include_router(content.router, prefix=config.API_PREFIX)
    app.include_router(health.router)

    return app


setup_logging(config.LOG_LEVEL, config.LOG_DIR)
app = create_app()


if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
