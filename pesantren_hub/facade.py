"""
facade.py
---------
The data-access facade: one coroutine per business operation.

Every public method returns an envelope and never raises:
    {"status": "success", "data": <payload>}
    {"status": "error",   "message": <user-facing text>}

Failure conversion (see `enveloped`):
  - FacadeError           → its own message, shown verbatim
  - pydantic errors       → "Data tidak valid: <field>: <reason>"
  - anything else         → the operation's fallback message; the original
                            error is logged with its traceback

The session factory and identity provider are injected once at
construction; each call opens its own unit of work, so concurrent calls
share no state.
"""

from functools import wraps
from typing import Any, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pesantren_hub.core.exceptions import DEFAULT_ERROR_MESSAGE, FacadeError
from pesantren_hub.core.logging import get_logger, operation_context
from pesantren_hub.db.session import unit_of_work
from pesantren_hub.schemas.account import PesantrenRegistration
from pesantren_hub.schemas.academic import (
    MasterDataItemSave,
    SantriCreate,
    SantriUpdate,
    UstadzCreate,
    UstadzUpdate,
)
from pesantren_hub.schemas.common import Envelope, ErrorEnvelope, ListParams, SuccessEnvelope
from pesantren_hub.schemas.content import AdSave, ContentCategorySave
from pesantren_hub.schemas.finance import (
    MonetizationSettingsSave,
    TagihanCreate,
    TagihanUpdate,
    WithdrawalCreate,
)
from pesantren_hub.services.account_service import AccountService
from pesantren_hub.services.ad_service import AdService
from pesantren_hub.services.content_service import ContentService
from pesantren_hub.services.dashboard_service import DashboardService
from pesantren_hub.services.identity import DatabaseIdentityProvider, IdentityProvider
from pesantren_hub.services.master_data_service import MasterDataService, MasterDataType
from pesantren_hub.services.monetization_service import MonetizationService
from pesantren_hub.services.pesantren_service import PesantrenService
from pesantren_hub.services.santri_service import SantriService
from pesantren_hub.services.tagihan_service import TagihanService
from pesantren_hub.services.ustadz_service import UstadzService
from pesantren_hub.services.withdrawal_service import WithdrawalService

logger = get_logger(__name__)


def to_payload(value: Any) -> Any:
    """JSON-ready, camelCase representation of a service result."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [to_payload(item) for item in value]
    return value


def describe_validation_error(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    reason = first.get("msg", "")
    return f"Data tidak valid: {field}: {reason}" if field else f"Data tidak valid: {reason}"


def enveloped(fallback: str = DEFAULT_ERROR_MESSAGE):
    """Wrap a facade coroutine so it always returns an Envelope."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Envelope:
            with operation_context(func.__name__):
                try:
                    result = await func(*args, **kwargs)
                except FacadeError as exc:
                    logger.warning("Operation refused", error=exc.message)
                    return ErrorEnvelope(message=exc.message)
                except PydanticValidationError as exc:
                    message = describe_validation_error(exc)
                    logger.warning("Operation input invalid", error=message)
                    return ErrorEnvelope(message=message)
                except Exception as exc:
                    logger.error("Operation failed", error=str(exc), exc_info=True)
                    return ErrorEnvelope(message=fallback)
                return SuccessEnvelope(data=to_payload(result))

        return wrapper

    return decorator


class PesantrenHubFacade:

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        identity: Optional[IdentityProvider] = None,
    ) -> None:
        self._sessions = sessions
        self._identity = identity or DatabaseIdentityProvider(sessions)

    def _unit(self):
        return unit_of_work(self._sessions)

    # ── Accounts ─────────────────────────────────────────────────────────────

    @enveloped("Email atau kata sandi salah.")
    async def login(self, email: str, password: str):
        async with self._unit() as db:
            return await AccountService.login(db, self._identity, email, password)

    @enveloped("Gagal melakukan registrasi")
    async def register_pesantren(self, data):
        form = PesantrenRegistration.model_validate(data)
        return await AccountService.register_pesantren(self._sessions, self._identity, form)

    # ── Platform ─────────────────────────────────────────────────────────────

    @enveloped()
    async def get_platform_summary(self):
        async with self._unit() as db:
            return await DashboardService.platform_summary(db)

    @enveloped()
    async def get_platform_financials(self, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await DashboardService.platform_financials(db, params)

    @enveloped()
    async def get_pesantren_list(self, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await PesantrenService.list_pesantren(db, params)

    @enveloped()
    async def approve_pesantren(self, pesantren_id: str):
        async with self._unit() as db:
            return await PesantrenService.approve(db, pesantren_id)

    @enveloped()
    async def reject_pesantren(self, pesantren_id: str, reason: Optional[str] = None):
        async with self._unit() as db:
            return await PesantrenService.reject(db, pesantren_id, reason)

    # ── Pesantren dashboard ──────────────────────────────────────────────────

    @enveloped()
    async def get_pesantren_summary(self, tenant_id: str):
        async with self._unit() as db:
            return await DashboardService.pesantren_summary(db, tenant_id)

    @enveloped()
    async def get_pesantren_financials(self, tenant_id: str, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await DashboardService.pesantren_financials(db, tenant_id, params)

    # ── Santri ───────────────────────────────────────────────────────────────

    @enveloped()
    async def get_santri_for_pesantren(self, tenant_id: str, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await SantriService.list_for_pesantren(db, tenant_id, params)

    @enveloped()
    async def add_santri_to_pesantren(self, tenant_id: str, data):
        form = SantriCreate.model_validate(data)
        async with self._unit() as db:
            return await SantriService.add(db, tenant_id, form)

    @enveloped()
    async def update_santri(self, tenant_id: str, santri_id: str, data):
        form = SantriUpdate.model_validate(data)
        async with self._unit() as db:
            return await SantriService.update(db, tenant_id, santri_id, form)

    @enveloped()
    async def delete_santri(self, tenant_id: str, santri_id: str):
        async with self._unit() as db:
            return await SantriService.delete(db, tenant_id, santri_id)

    # ── Master data ──────────────────────────────────────────────────────────

    @enveloped()
    async def get_master_data(self, tenant_id: str, type: str):
        kind = MasterDataType.parse(type)
        async with self._unit() as db:
            return await MasterDataService.list_items(db, tenant_id, kind)

    @enveloped()
    async def save_master_data_item(self, tenant_id: str, type: str, item):
        kind = MasterDataType.parse(type, for_write=True)
        form = MasterDataItemSave.model_validate(item)
        async with self._unit() as db:
            return await MasterDataService.save_item(db, tenant_id, kind, form)

    @enveloped()
    async def delete_master_data_item(self, tenant_id: str, type: str, item_id: str):
        kind = MasterDataType.parse(type, for_write=True)
        async with self._unit() as db:
            return await MasterDataService.delete_item(db, tenant_id, kind, item_id)

    # ── Ustadz ───────────────────────────────────────────────────────────────

    @enveloped()
    async def get_ustadz_for_pesantren(self, tenant_id: str, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await UstadzService.list_for_pesantren(db, tenant_id, params)

    @enveloped("Email sudah terdaftar atau gagal menambahkan ustadz")
    async def add_ustadz_to_pesantren(self, tenant_id: str, data):
        form = UstadzCreate.model_validate(data)
        return await UstadzService.add(self._sessions, self._identity, tenant_id, form)

    @enveloped()
    async def update_ustadz(self, tenant_id: str, ustadz_id: str, data):
        form = UstadzUpdate.model_validate(data)
        async with self._unit() as db:
            return await UstadzService.update(db, tenant_id, ustadz_id, form)

    @enveloped()
    async def delete_ustadz(self, tenant_id: str, ustadz_id: str):
        async with self._unit() as db:
            return await UstadzService.delete(db, tenant_id, ustadz_id)

    # ── Tagihan ──────────────────────────────────────────────────────────────

    @enveloped()
    async def get_tagihan_for_pesantren(self, tenant_id: str, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await TagihanService.list_for_pesantren(db, tenant_id, params)

    @enveloped()
    async def add_tagihan_to_pesantren(self, tenant_id: str, data):
        form = TagihanCreate.model_validate(data)
        async with self._unit() as db:
            return await TagihanService.add(db, tenant_id, form)

    @enveloped()
    async def update_tagihan(self, tenant_id: str, tagihan_id: str, data):
        form = TagihanUpdate.model_validate(data)
        async with self._unit() as db:
            return await TagihanService.update(db, tenant_id, tagihan_id, form)

    @enveloped()
    async def delete_tagihan(self, tenant_id: str, tagihan_id: str):
        async with self._unit() as db:
            return await TagihanService.delete(db, tenant_id, tagihan_id)

    # ── Monetization ─────────────────────────────────────────────────────────

    @enveloped()
    async def get_monetization_settings(self):
        async with self._unit() as db:
            return await MonetizationService.get(db)

    @enveloped()
    async def save_monetization_settings(self, data):
        form = MonetizationSettingsSave.model_validate(data)
        async with self._unit() as db:
            return await MonetizationService.save(db, form)

    # ── Withdrawals ──────────────────────────────────────────────────────────

    @enveloped()
    async def get_withdrawal_requests(self, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await WithdrawalService.list_requests(db, params)

    @enveloped()
    async def update_withdrawal_request_status(
        self, request_id: str, status: str, reason: str = ""
    ):
        decision = WithdrawalService.parse_decision(status, reason)
        async with self._unit() as db:
            return await WithdrawalService.update_status(db, request_id, decision, reason)

    @enveloped()
    async def request_withdrawal(self, tenant_id: str, data):
        form = WithdrawalCreate.model_validate(data)
        async with self._unit() as db:
            return await WithdrawalService.request(db, tenant_id, form)

    # ── Content ──────────────────────────────────────────────────────────────

    @enveloped()
    async def get_content_categories(self):
        async with self._unit() as db:
            return await ContentService.list_categories(db)

    @enveloped()
    async def save_content_category(self, data):
        form = ContentCategorySave.model_validate(data)
        async with self._unit() as db:
            return await ContentService.save_category(db, form)

    @enveloped()
    async def delete_content_category(self, category_id: str):
        async with self._unit() as db:
            return await ContentService.delete_category(db, category_id)

    @enveloped()
    async def get_global_content_list(self, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await ContentService.list_content(db, params)

    @enveloped()
    async def approve_content(self, content_id: str):
        async with self._unit() as db:
            return await ContentService.approve(db, content_id)

    @enveloped()
    async def reject_content(self, content_id: str, reason: Optional[str] = None):
        async with self._unit() as db:
            return await ContentService.reject(db, content_id, reason)

    @enveloped()
    async def set_featured_content(self, content_id: str, featured: bool):
        async with self._unit() as db:
            return await ContentService.set_featured(db, content_id, featured)

    # ── Ads ──────────────────────────────────────────────────────────────────

    @enveloped()
    async def get_ads_list(self, options: Optional[dict] = None):
        params = ListParams.from_options(options)
        async with self._unit() as db:
            return await AdService.list_ads(db, params)

    @enveloped()
    async def add_ad(self, data):
        form = AdSave.model_validate(data)
        async with self._unit() as db:
            return await AdService.add(db, form)

    @enveloped()
    async def update_ad(self, ad_id: str, data):
        form = AdSave.model_validate(data)
        async with self._unit() as db:
            return await AdService.update(db, ad_id, form)

    @enveloped()
    async def delete_ad(self, ad_id: str):
        async with self._unit() as db:
            return await AdService.delete(db, ad_id)
