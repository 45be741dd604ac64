"""REST API for the project's framework profile."""

from __future__ import annotations

from fastapi import APIRouter, Request

from frontaudit.tools import handle_project_info

router = APIRouter(tags=["project"])


@router.get("/project")
def project_info(request: Request):
    return handle_project_info(context=request.app.state.context)
