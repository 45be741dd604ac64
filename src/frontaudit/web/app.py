"""FastAPI application factory for the frontaudit HTTP API."""

from __future__ import annotations

from fastapi import FastAPI

from frontaudit import __version__
from frontaudit.config import AuditConfig
from frontaudit.tools import ToolContext


def create_app(config: AuditConfig | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    config = config or AuditConfig.load()

    app = FastAPI(
        title="frontaudit",
        version=__version__,
        docs_url="/api/docs",
    )

    # Profile and rule sets are cached for the lifetime of the app
    app.state.config = config
    app.state.context = ToolContext(config=config)

    from frontaudit.web.api.checks import router as checks_router
    from frontaudit.web.api.project import router as project_router
    from frontaudit.web.api.review import router as review_router
    from frontaudit.web.api.rules import router as rules_router

    app.include_router(checks_router, prefix="/api")
    app.include_router(rules_router, prefix="/api")
    app.include_router(project_router, prefix="/api")
    app.include_router(review_router, prefix="/api")

    return app
