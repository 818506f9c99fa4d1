"""
services/withdrawal_service.py
------------------------------
Withdrawal requests: pesantren create them, the platform admin completes or
rejects them.

Completion is an orchestrated write inside one transaction:
  1. mark the request completed (only while it is still pending)
  2. decrement the pesantren's available balance by the request amount
A rejection stores the mandatory reason and leaves balances untouched.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.exceptions import BusinessRuleViolation, NotFound, ValidationFailed
from pesantren_hub.core.logging import get_logger
from pesantren_hub.models import (
    Pesantren,
    PesantrenBankAccount,
    PesantrenFinancials,
    WithdrawalRequest,
    WithdrawalStatus,
)
from pesantren_hub.schemas.common import ListParams
from pesantren_hub.schemas.finance import (
    WithdrawalCreate,
    WithdrawalPage,
    WithdrawalRequestRead,
    WithdrawalStats,
)
from pesantren_hub.services.normalize import withdrawal_read
from pesantren_hub.services.query import fetch_page, get_one, require_tenant
from pesantren_hub.services.summary import now_local, start_of_day, total

logger = get_logger(__name__)

WITHDRAWAL_NOT_FOUND = "Permintaan penarikan tidak ditemukan"
INSUFFICIENT_BALANCE = "Saldo tidak mencukupi"

_READ_COLUMNS = (
    Pesantren.name,
    PesantrenBankAccount.bank_name,
    PesantrenBankAccount.account_holder,
    PesantrenBankAccount.account_number,
)
_READ_JOINS = (
    (Pesantren, Pesantren.id == WithdrawalRequest.pesantren_id),
    (PesantrenBankAccount, PesantrenBankAccount.id == WithdrawalRequest.bank_account_id),
)


class WithdrawalService:

    @staticmethod
    def parse_decision(status: str, reason: Optional[str]) -> WithdrawalStatus:
        """Validate an admin decision before any store call is made."""
        if status not in (WithdrawalStatus.completed.value, WithdrawalStatus.rejected.value):
            raise ValidationFailed("Status penarikan tidak valid")
        decision = WithdrawalStatus(status)
        if decision is WithdrawalStatus.rejected and not (reason or "").strip():
            raise ValidationFailed("Alasan penolakan wajib diisi")
        return decision

    @staticmethod
    async def list_requests(db: AsyncSession, params: ListParams) -> WithdrawalPage:
        """
        Paginated requests across all pesantren, or one pesantren when
        params.tenant_id is set. Stats follow the same tenant scope.
        """
        tenant_column = WithdrawalRequest.pesantren_id if params.tenant_id else None
        pagination, rows = await fetch_page(
            db,
            params,
            model=WithdrawalRequest,
            columns=_READ_COLUMNS,
            joins=_READ_JOINS,
            tenant_column=tenant_column,
            tenant_id=params.tenant_id,
            search_columns=(Pesantren.name, WithdrawalRequest.id),
            status_column=WithdrawalRequest.status,
            order_by=WithdrawalRequest.requested_at.desc(),
        )

        scope = []
        if params.tenant_id:
            scope.append(WithdrawalRequest.pesantren_id == params.tenant_id)

        pending_amounts = (
            await db.execute(
                select(WithdrawalRequest.amount).where(
                    WithdrawalRequest.status == WithdrawalStatus.pending.value, *scope
                )
            )
        ).scalars().all()
        processed_today = (
            await db.execute(
                select(WithdrawalRequest.amount).where(
                    WithdrawalRequest.status == WithdrawalStatus.completed.value,
                    WithdrawalRequest.processed_at >= start_of_day(),
                    *scope,
                )
            )
        ).scalars().all()

        return WithdrawalPage(
            data=[withdrawal_read(*row) for row in rows],
            pagination=pagination,
            stats=WithdrawalStats(
                pending_count=len(pending_amounts),
                pending_amount=total(pending_amounts),
                processed_today=total(processed_today),
            ),
        )

    @staticmethod
    async def update_status(
        db: AsyncSession,
        request_id: str,
        decision: WithdrawalStatus,
        reason: Optional[str] = None,
    ) -> WithdrawalRequestRead:
        values = {"status": decision.value, "processed_at": now_local()}
        if decision is WithdrawalStatus.rejected:
            values["reason"] = reason

        result = await db.execute(
            update(WithdrawalRequest)
            .where(
                WithdrawalRequest.id == request_id,
                WithdrawalRequest.status == WithdrawalStatus.pending.value,
            )
            .values(**values)
        )
        if result.rowcount == 0:
            exists = await db.scalar(
                select(WithdrawalRequest.id).where(WithdrawalRequest.id == request_id)
            )
            if exists is None:
                raise NotFound(WITHDRAWAL_NOT_FOUND)
            raise BusinessRuleViolation("Permintaan penarikan sudah diproses")

        request = await get_one(db, WithdrawalRequest, request_id, message=WITHDRAWAL_NOT_FOUND)

        if decision is WithdrawalStatus.completed:
            # Balance check and decrement in one statement, so concurrent
            # completions cannot overdraw.
            debited = await db.execute(
                update(PesantrenFinancials)
                .where(
                    PesantrenFinancials.pesantren_id == request.pesantren_id,
                    PesantrenFinancials.available_balance >= request.amount,
                )
                .values(
                    available_balance=PesantrenFinancials.available_balance - request.amount,
                    last_withdrawal=request.amount,
                )
            )
            if debited.rowcount == 0:
                has_financials = await db.scalar(
                    select(PesantrenFinancials.pesantren_id).where(
                        PesantrenFinancials.pesantren_id == request.pesantren_id
                    )
                )
                if has_financials is None:
                    raise NotFound("Data keuangan pesantren tidak ditemukan")
                raise BusinessRuleViolation(INSUFFICIENT_BALANCE)

        logger.info(
            "Withdrawal request processed",
            request_id=request_id,
            tenant_id=request.pesantren_id,
            status=decision.value,
            amount=request.amount,
        )
        return await WithdrawalService._read(db, request_id)

    @staticmethod
    async def request(
        db: AsyncSession, tenant_id: str, data: WithdrawalCreate
    ) -> WithdrawalRequestRead:
        tenant_id = require_tenant(tenant_id)
        await get_one(
            db,
            PesantrenBankAccount,
            data.bank_account_id,
            tenant_column=PesantrenBankAccount.pesantren_id,
            tenant_id=tenant_id,
            message="Rekening bank tidak ditemukan",
        )

        available = await db.scalar(
            select(PesantrenFinancials.available_balance).where(
                PesantrenFinancials.pesantren_id == tenant_id
            )
        )
        if available is None:
            raise NotFound("Data keuangan pesantren tidak ditemukan")
        if data.amount > available:
            raise BusinessRuleViolation(INSUFFICIENT_BALANCE)

        request = WithdrawalRequest(
            pesantren_id=tenant_id,
            bank_account_id=data.bank_account_id,
            amount=data.amount,
            status=WithdrawalStatus.pending.value,
        )
        db.add(request)
        await db.flush()

        logger.info(
            "Withdrawal requested",
            request_id=request.id,
            tenant_id=tenant_id,
            amount=data.amount,
        )
        return await WithdrawalService._read(db, request.id)

    @staticmethod
    async def _read(db: AsyncSession, request_id: str) -> WithdrawalRequestRead:
        stmt = select(WithdrawalRequest, *_READ_COLUMNS)
        for target, onclause in _READ_JOINS:
            stmt = stmt.outerjoin(target, onclause)
        row = (
            await db.execute(
                stmt.where(WithdrawalRequest.id == request_id).execution_options(
                    populate_existing=True
                )
            )
        ).one_or_none()
        if row is None:
            raise NotFound(WITHDRAWAL_NOT_FOUND)
        return withdrawal_read(*row)
