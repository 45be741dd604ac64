"""REST API for running checks."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from frontaudit.rules.models import CHECK_CATEGORIES
from frontaudit.tools import handle_analyze, handle_check, run_tool

router = APIRouter(tags=["checks"])

_CATEGORIES = {c.value for c in CHECK_CATEGORIES}


class CheckRequest(BaseModel):
    file_path: str | None = Field(default=None, alias="filePath")
    include_tests: bool | None = Field(default=None, alias="includeTests")


@router.post("/check/{category}")
def run_check(category: str, request: Request, body: CheckRequest | None = None):
    body = body or CheckRequest()
    context = request.app.state.context

    if category == "all":
        report = run_tool(
            handle_analyze,
            file_path=body.file_path,
            context=context,
            include_tests=body.include_tests,
        )
    elif category in _CATEGORIES:
        report = run_tool(
            handle_check,
            category=category,
            file_path=body.file_path,
            context=context,
            include_tests=body.include_tests,
        )
    else:
        return JSONResponse(
            status_code=404,
            content={"detail": f"Unknown check category: {category}"},
        )

    if report.get("isError"):
        return JSONResponse(status_code=400, content={"detail": report["error"]})
    return report
