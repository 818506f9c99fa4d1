"""
services/dashboard_service.py
-----------------------------
Read-only dashboards for the platform admin and for a single pesantren.

Rows are fetched with narrow selects; every derived figure is computed in
Python by the calculators in services/summary.py.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.exceptions import NotFound
from pesantren_hub.models import (
    Koperasi,
    KoperasiTransaction,
    Pesantren,
    PesantrenBankAccount,
    PesantrenFinancials,
    PlatformTransaction,
    Tagihan,
    Transaction,
)
from pesantren_hub.schemas.common import ListParams, Page
from pesantren_hub.schemas.finance import (
    BankAccountRead,
    FinancialSummary,
    PesantrenFinancialsRead,
    PlatformFinancialSummary,
    PlatformFinancialsRead,
    PlatformTransactionRead,
    TransactionRead,
)
from pesantren_hub.schemas.pesantren import ActivityRead, PesantrenSummary, PlatformSummary
from pesantren_hub.services.normalize import platform_transaction_read, transaction_read
from pesantren_hub.services.query import fetch_page, require_tenant
from pesantren_hub.services.summary import count_active, start_of_month, total, total_of, total_unpaid

RECENT_ACTIVITY_LIMIT = 5


class DashboardService:

    # ── Platform ─────────────────────────────────────────────────────────────

    @staticmethod
    async def platform_summary(db: AsyncSession) -> PlatformSummary:
        pesantren_rows = (
            await db.execute(select(Pesantren.status, Pesantren.santri_count))
        ).all()

        month_start = start_of_month()
        monthly_tx = (
            await db.execute(
                select(PlatformTransaction.amount, PlatformTransaction.fee_amount).where(
                    PlatformTransaction.created_at >= month_start
                )
            )
        ).all()

        return PlatformSummary(
            total_pesantren=count_active(pesantren_rows),
            total_santri=total_of(pesantren_rows, "santri_count"),
            total_transaksi_bulanan=total_of(monthly_tx, "amount"),
            pendapatan_platform=total_of(monthly_tx, "fee_amount"),
        )

    @staticmethod
    async def platform_financials(db: AsyncSession, params: ListParams) -> PlatformFinancialsRead:
        pagination, rows = await fetch_page(
            db,
            params,
            model=PlatformTransaction,
            columns=(Pesantren.name,),
            joins=((Pesantren, Pesantren.id == PlatformTransaction.pesantren_id),),
            order_by=PlatformTransaction.created_at.desc(),
        )

        all_tx = (
            await db.execute(select(PlatformTransaction.amount, PlatformTransaction.fee_amount))
        ).all()
        this_month = (
            await db.execute(
                select(PlatformTransaction.type, PlatformTransaction.amount).where(
                    PlatformTransaction.created_at >= start_of_month()
                )
            )
        ).all()

        summary = PlatformFinancialSummary(
            total_volume=total_of(all_tx, "amount"),
            total_pendapatan=total_of(all_tx, "fee_amount"),
            total_top_up_bulanan=total(tx.amount for tx in this_month if tx.type == "topup"),
            total_withdraw_bulanan=total(tx.amount for tx in this_month if tx.type == "withdrawal"),
        )
        return PlatformFinancialsRead(
            summary=summary,
            transactions=Page[PlatformTransactionRead](
                data=[platform_transaction_read(tx, name) for tx, name in rows],
                pagination=pagination,
            ),
        )

    # ── Pesantren ────────────────────────────────────────────────────────────

    @staticmethod
    async def pesantren_summary(db: AsyncSession, tenant_id: str) -> PesantrenSummary:
        tenant_id = require_tenant(tenant_id)

        counts = (
            await db.execute(
                select(Pesantren.santri_count, Pesantren.ustadz_count).where(
                    Pesantren.id == tenant_id
                )
            )
        ).one_or_none()
        if counts is None:
            raise NotFound("Pesantren tidak ditemukan")

        tagihan = (
            await db.execute(
                select(Tagihan.amount, Tagihan.total_targets, Tagihan.paid_count).where(
                    Tagihan.pesantren_id == tenant_id
                )
            )
        ).all()

        koperasi_totals = (
            await db.execute(
                select(KoperasiTransaction.total)
                .join(Koperasi, Koperasi.id == KoperasiTransaction.koperasi_id)
                .where(
                    Koperasi.pesantren_id == tenant_id,
                    KoperasiTransaction.created_at >= start_of_month(),
                )
            )
        ).scalars().all()

        recent = (
            await db.execute(
                select(Transaction.type, Transaction.description, Transaction.created_at)
                .where(Transaction.pesantren_id == tenant_id)
                .order_by(Transaction.created_at.desc())
                .limit(RECENT_ACTIVITY_LIMIT)
            )
        ).all()

        return PesantrenSummary(
            jumlah_santri=counts.santri_count or 0,
            jumlah_ustadz=counts.ustadz_count or 0,
            total_tagihan_belum_lunas=total_unpaid(tagihan),
            pendapatan_koperasi_bulanan=total(koperasi_totals),
            aktivitas_terbaru=[
                ActivityRead(
                    type=row.type,
                    description=row.description,
                    timestamp=row.created_at,
                )
                for row in recent
            ],
        )

    @staticmethod
    async def pesantren_financials(
        db: AsyncSession, tenant_id: str, params: ListParams
    ) -> PesantrenFinancialsRead:
        tenant_id = require_tenant(tenant_id)

        financials = (
            await db.execute(
                select(PesantrenFinancials).where(PesantrenFinancials.pesantren_id == tenant_id)
            )
        ).scalar_one_or_none()
        if financials is None:
            raise NotFound("Data keuangan pesantren tidak ditemukan")

        bank_accounts = (
            await db.execute(
                select(PesantrenBankAccount)
                .where(PesantrenBankAccount.pesantren_id == tenant_id)
                .order_by(PesantrenBankAccount.created_at)
            )
        ).scalars().all()

        pagination, rows = await fetch_page(
            db,
            params,
            model=Transaction,
            tenant_column=Transaction.pesantren_id,
            tenant_id=tenant_id,
            order_by=Transaction.created_at.desc(),
        )

        return PesantrenFinancialsRead(
            summary=FinancialSummary.model_validate(financials),
            bank_accounts=[BankAccountRead.model_validate(a) for a in bank_accounts],
            transactions=Page[TransactionRead](
                data=[transaction_read(tx) for (tx,) in rows],
                pagination=pagination,
            ),
        )
