"""Welfare Center API application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import (
    admin,
    assignments,
    auth,
    categories,
    dashboard,
    files,
    groups,
    health,
    institutions,
    questions,
    responses,
    system,
    user_questions,
    users,
)
from app.api.middleware import AuthenticationMiddleware
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="Welfare Center API",
        version=settings.APP_VERSION,
        description="Multi-tenant backend for welfare centers: institutions, admins, users, questions and responses.",
    )

    register_exception_handlers(app)

    # Added first so CORS wraps it and 401/403 answers still carry CORS headers
    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module in (
        auth,
        system,
        institutions,
        admin,
        users,
        user_questions,
        groups,
        categories,
        questions,
        assignments,
        responses,
        files,
        dashboard,
        health,
    ):
        app.include_router(module.router, prefix="/api")
    app.include_router(user_questions.uploads_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    def liveness():
        return {"status": "healthy"}

    logger.info("Welfare Center API %s started (%s)", settings.APP_VERSION, settings.ENVIRONMENT)
    return app


app = create_app()
