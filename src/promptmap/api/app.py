"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..mapping import SessionPersistence, SQLiteKeyValueStore
from ..validation import ExpressionEvaluator, HttpExpressionEvaluator, UnavailableEvaluator
from .routes import router

# Global session persistence instance
_sessions: Optional[SessionPersistence] = None


def get_sessions() -> SessionPersistence:
    """Get the global session persistence instance."""
    global _sessions
    if _sessions is None:
        _sessions = SessionPersistence(SQLiteKeyValueStore())
    return _sessions


def get_evaluator() -> ExpressionEvaluator:
    """Evaluator for validation requests, based on settings."""
    if settings.evaluator_url:
        return HttpExpressionEvaluator(
            settings.evaluator_url, timeout=settings.evaluator_timeout_seconds
        )
    return UnavailableEvaluator()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    sessions = get_sessions()
    await sessions.store.initialize()
    await sessions.sweep()
    yield
    # Shutdown
    await sessions.store.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="promptmap",
        description="Prompt placeholder mapping and selection validation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(router, prefix="/api")

    return app
