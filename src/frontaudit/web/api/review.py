"""REST API for code quality and migration readiness reports."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from frontaudit.tools import handle_check_migration, handle_review_quality, run_tool
from frontaudit.web.api.checks import CheckRequest

router = APIRouter(tags=["review"])


def _respond(report: dict):
    if report.get("isError"):
        return JSONResponse(status_code=400, content={"detail": report["error"]})
    return report


@router.post("/quality")
def review_quality(request: Request, body: CheckRequest | None = None):
    body = body or CheckRequest()
    return _respond(
        run_tool(
            handle_review_quality,
            file_path=body.file_path,
            context=request.app.state.context,
            include_tests=body.include_tests,
        )
    )


@router.post("/migration")
def check_migration(request: Request, body: CheckRequest | None = None):
    body = body or CheckRequest()
    return _respond(
        run_tool(
            handle_check_migration,
            file_path=body.file_path,
            context=request.app.state.context,
        )
    )
