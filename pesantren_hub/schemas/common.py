"""
schemas/common.py
-----------------
Shared Pydantic models: the response envelope, pagination, list parameters.

Naming convention:
  *Read   → outbound payloads, serialised with camelCase keys
  *Create / *Update / *Save → inbound payloads, accept camelCase or snake_case
"""

from math import ceil
from typing import Any, ClassVar, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from pesantren_hub.core.config import settings

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PartialUpdate(CamelModel):
    """
    Base for *Update payloads: omitted fields are left alone, but a field
    that is sent must carry a value, since the columns behind it are NOT NULL.
    Subclasses list optional-in-store fields in NULLABLE.
    """

    NULLABLE: ClassVar[frozenset] = frozenset()

    @field_validator("*")
    @classmethod
    def refuse_explicit_null(cls, v, info: ValidationInfo):
        if v is None and info.field_name not in cls.NULLABLE:
            raise ValueError("tidak boleh kosong")
        return v


# ── Envelope ──────────────────────────────────────────────────────────────────

class SuccessEnvelope(BaseModel):
    status: Literal["success"] = "success"
    data: Any = None


class ErrorEnvelope(BaseModel):
    status: Literal["error"] = "error"
    message: str


Envelope = Union[SuccessEnvelope, ErrorEnvelope]


# ── Pagination ────────────────────────────────────────────────────────────────

class Pagination(CamelModel):
    total_items: int
    total_pages: int
    current_page: int
    limit: int

    @classmethod
    def build(cls, total_items: int, page: int, limit: int) -> "Pagination":
        total_pages = ceil(total_items / limit) if limit > 0 else 0
        return cls(
            total_items=total_items,
            total_pages=total_pages,
            current_page=page,
            limit=limit,
        )


class Page(CamelModel, Generic[T]):
    data: List[T]
    pagination: Pagination


class ListParams(CamelModel):
    """Options accepted by every paginated read."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE, ge=0)
    query: str = ""
    status: Optional[str] = None
    tenant_id: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("query", mode="before")
    @classmethod
    def normalise_query(cls, v):
        return (v or "").strip()

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, v: int) -> int:
        return min(v, settings.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def status_filter(self) -> Optional[str]:
        """The status to filter on, or None when absent or 'all'."""
        if not self.status or self.status == "all":
            return None
        return self.status

    @classmethod
    def from_options(cls, options: Optional[dict] = None) -> "ListParams":
        if isinstance(options, cls):
            return options
        return cls.model_validate(options or {})


class DeletedRead(BaseModel):
    id: str
