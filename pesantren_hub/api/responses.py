"""
api/responses.py
----------------
Helpers shared by the route modules.

respond() turns a facade envelope into a JSONResponse:
  status "success" → 200 (or the route's success code)
  status "error"   → 400, message unchanged
"""

from typing import Any, Optional

from fastapi import Query, status
from fastapi.responses import JSONResponse
from pydantic import Field

from pesantren_hub.schemas.common import CamelModel, Envelope, ErrorEnvelope


def respond(envelope: Envelope, success_code: int = status.HTTP_200_OK) -> JSONResponse:
    code = status.HTTP_400_BAD_REQUEST if isinstance(envelope, ErrorEnvelope) else success_code
    return JSONResponse(status_code=code, content=envelope.model_dump(mode="json"))


def list_options(
    page: int = Query(1, description="1-based page number"),
    limit: Optional[int] = Query(None, description="Page size; 0 returns counts only"),
    query: str = Query("", description="Case-insensitive search text"),
    status: Optional[str] = Query(None, description="Status filter; 'all' disables it"),
) -> dict[str, Any]:
    options: dict[str, Any] = {"page": page, "query": query, "status": status}
    if limit is not None:
        options["limit"] = limit
    return options


# ── Small request bodies ──────────────────────────────────────────────────────

class ReasonBody(CamelModel):
    reason: Optional[str] = None


class WithdrawalDecisionBody(CamelModel):
    status: str
    reason: str = ""


class FeaturedBody(CamelModel):
    featured: bool = Field(...)
