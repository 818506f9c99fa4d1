"""
api/routes/pesantren.py
-----------------------
Endpoints for members of one pesantren.

The tenant id is always the caller's profile.tenant_id. Reads are open to
every member (pesantren admin or ustadz); writes and finance need the
pesantren admin role.

GET  /pesantren/summary                 — Tenant dashboard
GET  /pesantren/financials              — Balances, bank accounts, ledger
GET|POST /pesantren/withdrawals         — Own withdrawal requests
/pesantren/santri, /pesantren/ustadz, /pesantren/tagihan   — CRUD
/pesantren/master-data/{type}           — kelas | mapel | ruangan | grupPilihan
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from pesantren_hub.api.responses import list_options, respond
from pesantren_hub.dependencies import FacadeDep, TenantAdmin, TenantMember

router = APIRouter(prefix="/pesantren", tags=["Pesantren"])

Options = Annotated[dict[str, Any], Depends(list_options)]
Payload = Annotated[dict[str, Any], Body()]


# ── Dashboard & finance ───────────────────────────────────────────────────────

@router.get("/summary", summary="Pesantren dashboard")
async def pesantren_summary(member: TenantMember, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.get_pesantren_summary(member.tenant_id))


@router.get("/financials", summary="Balances, bank accounts and transactions")
async def pesantren_financials(
    admin: TenantAdmin, facade: FacadeDep, options: Options
) -> JSONResponse:
    return respond(await facade.get_pesantren_financials(admin.tenant_id, options))


@router.get("/withdrawals", summary="Own withdrawal requests")
async def list_withdrawals(
    admin: TenantAdmin, facade: FacadeDep, options: Options
) -> JSONResponse:
    return respond(
        await facade.get_withdrawal_requests({**options, "tenant_id": admin.tenant_id})
    )


@router.post("/withdrawals", summary="Request a withdrawal")
async def request_withdrawal(
    admin: TenantAdmin, facade: FacadeDep, body: Payload
) -> JSONResponse:
    return respond(await facade.request_withdrawal(admin.tenant_id, body), success_code=201)


# ── Santri ────────────────────────────────────────────────────────────────────

@router.get("/santri", summary="List santri")
async def list_santri(member: TenantMember, facade: FacadeDep, options: Options) -> JSONResponse:
    return respond(await facade.get_santri_for_pesantren(member.tenant_id, options))


@router.post("/santri", summary="Add a santri")
async def add_santri(admin: TenantAdmin, facade: FacadeDep, body: Payload) -> JSONResponse:
    return respond(
        await facade.add_santri_to_pesantren(admin.tenant_id, body), success_code=201
    )


@router.put("/santri/{santri_id}", summary="Update a santri")
async def update_santri(
    santri_id: str, admin: TenantAdmin, facade: FacadeDep, body: Payload
) -> JSONResponse:
    return respond(await facade.update_santri(admin.tenant_id, santri_id, body))


@router.delete("/santri/{santri_id}", summary="Delete a santri")
async def delete_santri(santri_id: str, admin: TenantAdmin, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.delete_santri(admin.tenant_id, santri_id))


# ── Master data ───────────────────────────────────────────────────────────────

@router.get("/master-data/{kind}", summary="List master data items")
async def list_master_data(kind: str, member: TenantMember, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.get_master_data(member.tenant_id, kind))


@router.post("/master-data/{kind}", summary="Create or rename a master data item")
async def save_master_data(
    kind: str, admin: TenantAdmin, facade: FacadeDep, body: Payload
) -> JSONResponse:
    return respond(await facade.save_master_data_item(admin.tenant_id, kind, body))


@router.delete("/master-data/{kind}/{item_id}", summary="Delete a master data item")
async def delete_master_data(
    kind: str, item_id: str, admin: TenantAdmin, facade: FacadeDep
) -> JSONResponse:
    return respond(await facade.delete_master_data_item(admin.tenant_id, kind, item_id))


# ── Ustadz ────────────────────────────────────────────────────────────────────

@router.get("/ustadz", summary="List ustadz")
async def list_ustadz(member: TenantMember, facade: FacadeDep, options: Options) -> JSONResponse:
    return respond(await facade.get_ustadz_for_pesantren(member.tenant_id, options))


@router.post("/ustadz", summary="Add an ustadz with a login account")
async def add_ustadz(admin: TenantAdmin, facade: FacadeDep, body: Payload) -> JSONResponse:
    return respond(
        await facade.add_ustadz_to_pesantren(admin.tenant_id, body), success_code=201
    )


@router.put("/ustadz/{ustadz_id}", summary="Update an ustadz")
async def update_ustadz(
    ustadz_id: str, admin: TenantAdmin, facade: FacadeDep, body: Payload
) -> JSONResponse:
    return respond(await facade.update_ustadz(admin.tenant_id, ustadz_id, body))


@router.delete("/ustadz/{ustadz_id}", summary="Delete an ustadz")
async def delete_ustadz(ustadz_id: str, admin: TenantAdmin, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.delete_ustadz(admin.tenant_id, ustadz_id))


# ── Tagihan ───────────────────────────────────────────────────────────────────

@router.get("/tagihan", summary="List tagihan")
async def list_tagihan(member: TenantMember, facade: FacadeDep, options: Options) -> JSONResponse:
    return respond(await facade.get_tagihan_for_pesantren(member.tenant_id, options))


@router.post("/tagihan", summary="Create a tagihan")
async def add_tagihan(admin: TenantAdmin, facade: FacadeDep, body: Payload) -> JSONResponse:
    return respond(
        await facade.add_tagihan_to_pesantren(admin.tenant_id, body), success_code=201
    )


@router.put("/tagihan/{tagihan_id}", summary="Update a tagihan")
async def update_tagihan(
    tagihan_id: str, admin: TenantAdmin, facade: FacadeDep, body: Payload
) -> JSONResponse:
    return respond(await facade.update_tagihan(admin.tenant_id, tagihan_id, body))


@router.delete("/tagihan/{tagihan_id}", summary="Delete a tagihan")
async def delete_tagihan(tagihan_id: str, admin: TenantAdmin, facade: FacadeDep) -> JSONResponse:
    return respond(await facade.delete_tagihan(admin.tenant_id, tagihan_id))
