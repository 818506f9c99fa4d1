"""
services/query.py
-----------------
Composition of filtered, paginated reads.

Every list endpoint goes through fetch_page so the conventions stay uniform:
  - tenant-scoped collections always filter on the tenant column
  - free-text search is a case-insensitive substring match, OR-combined
    across the configured columns
  - status filters apply unless the status is missing or "all"
  - the count reflects the filtered set, before offset/limit
"""

from typing import Any, Optional, Sequence

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pesantren_hub.core.exceptions import NotFound, ValidationFailed
from pesantren_hub.schemas.common import ListParams, Pagination


def require_tenant(tenant_id: Optional[str]) -> str:
    if not tenant_id:
        raise ValidationFailed("Pesantren tidak valid")
    return tenant_id


def build_conditions(
    params: ListParams,
    *,
    tenant_column=None,
    tenant_id: Optional[str] = None,
    search_columns: Sequence = (),
    status_column=None,
) -> list:
    conditions = []
    if tenant_column is not None:
        conditions.append(tenant_column == require_tenant(tenant_id))
    if params.query and search_columns:
        conditions.append(
            or_(*(col.icontains(params.query, autoescape=True) for col in search_columns))
        )
    if status_column is not None and params.status_filter is not None:
        conditions.append(status_column == params.status_filter)
    return conditions


async def fetch_page(
    db: AsyncSession,
    params: ListParams,
    *,
    model,
    order_by,
    columns: Sequence = (),
    joins: Sequence[tuple[Any, Any]] = (),
    tenant_column=None,
    tenant_id: Optional[str] = None,
    search_columns: Sequence = (),
    status_column=None,
) -> tuple[Pagination, list]:
    """
    Run the count and the page query for one collection.

    Returns:
        (pagination, rows) where each row is a tuple of (model, *columns).
    """
    conditions = build_conditions(
        params,
        tenant_column=tenant_column,
        tenant_id=tenant_id,
        search_columns=search_columns,
        status_column=status_column,
    )

    count_stmt = select(func.count()).select_from(model)
    data_stmt = select(model, *columns)
    for target, onclause in joins:
        count_stmt = count_stmt.outerjoin(target, onclause)
        data_stmt = data_stmt.outerjoin(target, onclause)

    total = await db.scalar(count_stmt.where(*conditions)) or 0

    rows: list = []
    if params.limit > 0:
        result = await db.execute(
            data_stmt.where(*conditions)
            .order_by(order_by, model.id)
            .offset(params.offset)
            .limit(params.limit)
        )
        rows = list(result.all())

    return Pagination.build(total, params.page, params.limit), rows


async def get_one(
    db: AsyncSession,
    model,
    row_id: str,
    *,
    tenant_column=None,
    tenant_id: Optional[str] = None,
    message: str = "Data tidak ditemukan",
):
    """Load one row by id, optionally restricted to a tenant. Raises NotFound."""
    stmt = select(model).where(model.id == row_id)
    if tenant_column is not None:
        stmt = stmt.where(tenant_column == require_tenant(tenant_id))
    row = (await db.execute(stmt)).scalar_one_or_none()
    if row is None:
        raise NotFound(message)
    return row


async def delete_one(
    db: AsyncSession,
    model,
    row_id: str,
    *,
    tenant_column=None,
    tenant_id: Optional[str] = None,
    message: str = "Data tidak ditemukan",
) -> None:
    stmt = delete(model).where(model.id == row_id)
    if tenant_column is not None:
        stmt = stmt.where(tenant_column == require_tenant(tenant_id))
    result = await db.execute(stmt)
    if result.rowcount == 0:
        raise NotFound(message)
