"""
services/normalize.py
---------------------
Reshape storage rows into the camelCase payloads the UI consumes.

Joined relations are flattened into named fields with fixed placeholders
when the relation is missing. Columns that only exist to link rows
(transaction_pin, raw join objects) never reach the caller.
"""

from typing import Optional

from pesantren_hub.models import (
    GlobalContent,
    Pesantren,
    PlatformTransaction,
    Santri,
    Tagihan,
    Transaction,
    WithdrawalRequest,
)
from pesantren_hub.schemas.academic import NO_CLASS_PLACEHOLDER, SantriRead
from pesantren_hub.schemas.content import GlobalContentRead
from pesantren_hub.schemas.finance import (
    PlatformTransactionRead,
    TagihanRead,
    TransactionRead,
    WithdrawalBankAccount,
    WithdrawalRequestRead,
)
from pesantren_hub.schemas.pesantren import AdminInfo, PesantrenRead
from pesantren_hub.services.summary import unpaid_amount


def santri_read(santri: Santri, class_name: Optional[str]) -> SantriRead:
    return SantriRead(
        id=santri.id,
        nis=santri.nis,
        name=santri.name,
        class_id=santri.class_id,
        class_name=class_name or NO_CLASS_PLACEHOLDER,
        balance=santri.balance or 0,
        status=santri.status,
        photo_url=santri.photo_url or "",
        created_at=santri.created_at,
    )


def pesantren_read(
    pesantren: Pesantren,
    admin_name: Optional[str] = None,
    admin_email: Optional[str] = None,
) -> PesantrenRead:
    payload = PesantrenRead.model_validate(pesantren)
    payload.admin = AdminInfo(
        name=admin_name or "Unknown",
        email=admin_email or "Unknown",
    )
    return payload


def tagihan_read(tagihan: Tagihan) -> TagihanRead:
    return TagihanRead(
        id=tagihan.id,
        title=tagihan.title,
        amount=tagihan.amount,
        total_targets=tagihan.total_targets,
        paid_count=tagihan.paid_count,
        unpaid_amount=unpaid_amount(tagihan),
        due_date=tagihan.due_date,
        created_at=tagihan.created_at,
    )


def transaction_read(tx: Transaction) -> TransactionRead:
    return TransactionRead(
        id=tx.id,
        date=tx.created_at,
        description=tx.description,
        type=tx.type,
        amount=tx.amount,
    )


def platform_transaction_read(
    tx: PlatformTransaction, pesantren_name: Optional[str]
) -> PlatformTransactionRead:
    return PlatformTransactionRead(
        id=tx.id,
        pesantren_name=pesantren_name or "Unknown",
        type=tx.type,
        amount=tx.amount,
        timestamp=tx.created_at,
    )


def withdrawal_read(
    request: WithdrawalRequest,
    tenant_name: Optional[str],
    bank_name: Optional[str],
    account_holder: Optional[str],
    account_number: Optional[str],
) -> WithdrawalRequestRead:
    return WithdrawalRequestRead(
        id=request.id,
        tenant_id=request.pesantren_id,
        tenant_name=tenant_name or "Unknown",
        request_date=request.requested_at,
        amount=request.amount,
        status=request.status,
        reason=request.reason,
        processed_at=request.processed_at,
        bank_account=WithdrawalBankAccount(
            bank_name=bank_name or "",
            account_holder=account_holder or "",
            account_number=account_number or "",
        ),
    )


def content_read(content: GlobalContent, pesantren_name: Optional[str]) -> GlobalContentRead:
    payload = GlobalContentRead.model_validate(content)
    payload.pesantren_name = pesantren_name or "Platform"
    return payload
