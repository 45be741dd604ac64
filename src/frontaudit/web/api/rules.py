"""REST API for rule management."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from frontaudit.rules.models import CHECK_CATEGORIES
from frontaudit.tools import handle_manage_rules

router = APIRouter(tags=["rules"])

_CATEGORIES = {c.value for c in CHECK_CATEGORIES}


class RuleToggle(BaseModel):
    enabled: bool


def _unknown_category(category: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"detail": f"Unknown check category: {category}"},
    )


@router.get("/rules/{category}")
def list_rules(category: str, request: Request):
    if category not in _CATEGORIES:
        return _unknown_category(category)
    return handle_manage_rules(category, "list", context=request.app.state.context)


@router.get("/rules/{category}/config")
def get_rules_config(category: str, request: Request):
    if category not in _CATEGORIES:
        return _unknown_category(category)
    return handle_manage_rules(
        category, "get-config", context=request.app.state.context
    )


@router.put("/rules/{category}/{rule_id}")
def update_rule(category: str, rule_id: str, body: RuleToggle, request: Request):
    if category not in _CATEGORIES:
        return _unknown_category(category)

    action = "enable" if body.enabled else "disable"
    result = handle_manage_rules(
        category, action, rule_id, context=request.app.state.context
    )
    if not result["success"]:
        return JSONResponse(status_code=404, content={"detail": result["error"]})
    return result
