# app/routes/health/router.py
import json
import logging
from typing import Any, Awaitable, Callable, Dict, NamedTuple, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import BadRequestError
from app.core.middleware import get_current_user, get_db
from app.routes.health import services

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Dict[str, Any]]]


class Action(NamedTuple):
    method: str
    handler: Handler


ACTIONS: Dict[str, Action] = {
    "me": Action("GET", services.me),
    "profile.get": Action("GET", services.get_profile),
    "profile.upsert": Action("POST", services.save_profile),
    "habits.upsert": Action("POST", services.save_habits),
    "habits.fetch": Action("GET", services.get_habits),
    "vitals.upsert": Action("POST", services.save_vitals),
    "vitals.fetch": Action("GET", services.get_vitals),
    "doctors.list": Action("GET", services.get_doctors),
    "link.select": Action("POST", services.select_link),
    "link.list": Action("GET", services.get_links),
}

router = APIRouter(prefix="/api", tags=["health"])


async def _json_body(request: Request) -> Dict[str, Any]:
    """Request body as a dict; anything that isn't a JSON object counts as empty."""
    if request.method != "POST":
        return {}
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        logger.info("Ignoring request body that is not valid JSON")
        return {}
    return body if isinstance(body, dict) else {}


@router.api_route("/health", methods=["GET", "POST"])
async def dispatch(
    request: Request,
    action: Optional[str] = Query(None),
    user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Single entry point; `?action=` selects the operation."""
    entry = ACTIONS.get(action or "")
    if entry is None:
        raise BadRequestError("Unknown action")
    if request.method != entry.method:
        raise BadRequestError(f"{action} requires {entry.method}")

    params = dict(request.query_params)
    body = await _json_body(request)
    logger.debug(f"Dispatching {action} for user {user['user_id']}")
    return await entry.handler(db, user, params, body)
