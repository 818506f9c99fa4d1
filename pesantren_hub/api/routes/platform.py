"""
api/routes/platform.py
----------------------
Platform-admin endpoints. Every route requires role 'platform_admin'.

GET    /platform/summary                    — Dashboard counters
GET    /platform/financials                 — Platform transactions + totals
GET    /platform/pesantren                  — Paginated pesantren list
POST   /platform/pesantren/{id}/approve     — Activate a pesantren
POST   /platform/pesantren/{id}/reject      — Reject with a reason
GET    /platform/monetization               — Fee settings
PUT    /platform/monetization               — Save fee settings
GET    /platform/withdrawals                — Requests + stats (?tenantId=)
PATCH  /platform/withdrawals/{id}           — Complete or reject a request
GET    /platform/content-categories         — Category list
POST   /platform/content-categories         — Create / rename a category
DELETE /platform/content-categories/{id}
GET    /platform/content                    — Moderation queue
POST   /platform/content/{id}/approve
POST   /platform/content/{id}/reject
PUT    /platform/content/{id}/featured
GET    /platform/ads  POST /platform/ads  PUT|DELETE /platform/ads/{id}
"""

from typing import Annotated, Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from pesantren_hub.api.responses import (
    FeaturedBody,
    ReasonBody,
    WithdrawalDecisionBody,
    list_options,
    respond,
)
from pesantren_hub.dependencies import FacadeDep, get_platform_admin

router = APIRouter(
    prefix="/platform",
    tags=["Platform"],
    dependencies=[Depends(get_platform_admin)],
)

Options = Annotated[dict[str, Any], Depends(list_options)]


# ── Dashboard ─────────────────────────────────────────────────────────────────

@router.get("/summary", summary="Platform dashboard counters")
async def platform_summary(facade: FacadeDep) -> JSONResponse:
    return respond(await facade.get_platform_summary())


@router.get("/financials", summary="Platform transactions and totals")
async def platform_financials(facade: FacadeDep, options: Options) -> JSONResponse:
    return respond(await facade.get_platform_financials(options))


# ── Pesantren approval ────────────────────────────────────────────────────────

@router.get("/pesantren", summary="List registered pesantren")
async def list_pesantren(facade: FacadeDep, options: Options) -> JSONResponse:
    return respond(await facade.get_pesantren_list(options))


@router.post("/pesantren/{pesantren_id}/approve", summary="Approve a pesantren")
async def approve_pesantren(pesantren_id: str, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.approve_pesantren(pesantren_id))


@router.post("/pesantren/{pesantren_id}/reject", summary="Reject a pesantren")
async def reject_pesantren(
    pesantren_id: str, body: ReasonBody, facade: FacadeDep
) -> JSONResponse:
    return respond(await facade.reject_pesantren(pesantren_id, body.reason))


# ── Monetization ──────────────────────────────────────────────────────────────

@router.get("/monetization", summary="Get fee settings")
async def get_monetization(facade: FacadeDep) -> JSONResponse:
    return respond(await facade.get_monetization_settings())


@router.put("/monetization", summary="Save fee settings")
async def save_monetization(
    facade: FacadeDep, body: dict[str, Any] = Body(...)
) -> JSONResponse:
    return respond(await facade.save_monetization_settings(body))


# ── Withdrawals ───────────────────────────────────────────────────────────────

@router.get("/withdrawals", summary="List withdrawal requests")
async def list_withdrawals(
    facade: FacadeDep,
    options: Options,
    tenant_id: Optional[str] = Query(None, alias="tenantId"),
) -> JSONResponse:
    return respond(await facade.get_withdrawal_requests({**options, "tenant_id": tenant_id}))


@router.patch("/withdrawals/{request_id}", summary="Complete or reject a withdrawal")
async def decide_withdrawal(
    request_id: str, body: WithdrawalDecisionBody, facade: FacadeDep
) -> JSONResponse:
    return respond(
        await facade.update_withdrawal_request_status(request_id, body.status, body.reason)
    )


# ── Content ───────────────────────────────────────────────────────────────────

@router.get("/content-categories", summary="List content categories")
async def list_categories(facade: FacadeDep) -> JSONResponse:
    return respond(await facade.get_content_categories())


@router.post("/content-categories", summary="Create or rename a content category")
async def save_category(
    facade: FacadeDep, body: dict[str, Any] = Body(...)
) -> JSONResponse:
    return respond(await facade.save_content_category(body))


@router.delete("/content-categories/{category_id}", summary="Delete a content category")
async def delete_category(category_id: str, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.delete_content_category(category_id))


@router.get("/content", summary="List submitted content")
async def list_content(facade: FacadeDep, options: Options) -> JSONResponse:
    return respond(await facade.get_global_content_list(options))


@router.post("/content/{content_id}/approve", summary="Approve content")
async def approve_content(content_id: str, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.approve_content(content_id))


@router.post("/content/{content_id}/reject", summary="Reject content")
async def reject_content(
    content_id: str, body: ReasonBody, facade: FacadeDep
) -> JSONResponse:
    return respond(await facade.reject_content(content_id, body.reason))


@router.put("/content/{content_id}/featured", summary="Feature or unfeature content")
async def feature_content(
    content_id: str, body: FeaturedBody, facade: FacadeDep
) -> JSONResponse:
    return respond(await facade.set_featured_content(content_id, body.featured))


# ── Ads ───────────────────────────────────────────────────────────────────────

@router.get("/ads", summary="List ads")
async def list_ads(facade: FacadeDep, options: Options) -> JSONResponse:
    return respond(await facade.get_ads_list(options))


@router.post("/ads", summary="Create an ad")
async def add_ad(facade: FacadeDep, body: dict[str, Any] = Body(...)) -> JSONResponse:
    return respond(await facade.add_ad(body), success_code=201)


@router.put("/ads/{ad_id}", summary="Update an ad")
async def update_ad(
    ad_id: str, facade: FacadeDep, body: dict[str, Any] = Body(...)
) -> JSONResponse:
    return respond(await facade.update_ad(ad_id, body))


@router.delete("/ads/{ad_id}", summary="Delete an ad")
async def delete_ad(ad_id: str, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.delete_ad(ad_id))
