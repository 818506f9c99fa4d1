from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from pesantren_hub.schemas.common import ListParams, Pagination
from pesantren_hub.schemas.finance import MonetizationSettingsSave
from pesantren_hub.services.summary import (
    add_years,
    count_active,
    start_of_day,
    start_of_month,
    total,
    total_of,
    total_unpaid,
    unpaid_amount,
)


def tagihan(amount, total_targets, paid_count):
    return SimpleNamespace(amount=amount, total_targets=total_targets, paid_count=paid_count)


class TestCalculators:

    def test_unpaid_amount_is_amount_times_outstanding_targets(self):
        assert unpaid_amount(tagihan(50_000, 10, 3)) == 350_000

    def test_unpaid_amount_never_negative(self):
        assert unpaid_amount(tagihan(50_000, 2, 5)) == 0

    def test_total_unpaid_sums_items(self):
        items = [tagihan(50_000, 10, 3), tagihan(25_000, 4, 0)]
        assert total_unpaid(items) == 450_000

    def test_empty_inputs_sum_to_zero(self):
        assert total([]) == 0
        assert total_unpaid([]) == 0
        assert total_of([], "amount") == 0
        assert count_active([]) == 0

    def test_missing_values_count_as_zero(self):
        assert total([None, 5, 0, 10]) == 15

    def test_count_active(self):
        rows = [SimpleNamespace(status=s) for s in ("active", "pending", "active", "rejected")]
        assert count_active(rows) == 2


class TestTimeBoundaries:

    def test_start_of_month_is_midnight_on_the_first(self):
        now = datetime(2024, 3, 17, 15, 42, 9, tzinfo=timezone(timedelta(hours=7)))
        boundary = start_of_month(now)
        assert boundary == datetime(2024, 3, 1, tzinfo=timezone(timedelta(hours=7)))

    def test_start_of_day(self):
        now = datetime(2024, 3, 17, 15, 42, 9)
        assert start_of_day(now) == datetime(2024, 3, 17)

    def test_add_years(self):
        assert add_years(date(2024, 5, 1), 1) == date(2025, 5, 1)

    def test_add_years_from_leap_day(self):
        assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)


class TestPagination:

    @pytest.mark.parametrize(
        "total_items, limit, expected_pages",
        [(25, 10, 3), (20, 10, 2), (0, 10, 0), (1, 10, 1), (5, 0, 0)],
    )
    def test_total_pages(self, total_items, limit, expected_pages):
        assert Pagination.build(total_items, 1, limit).total_pages == expected_pages

    def test_serialises_with_camel_case_keys(self):
        dumped = Pagination.build(25, 2, 10).model_dump(by_alias=True)
        assert dumped == {"totalItems": 25, "totalPages": 3, "currentPage": 2, "limit": 10}


class TestListParams:

    def test_defaults(self):
        params = ListParams.from_options(None)
        assert params.page == 1
        assert params.limit == 10
        assert params.query == ""
        assert params.status_filter is None
        assert params.offset == 0

    def test_offset(self):
        assert ListParams.from_options({"page": 3, "limit": 10}).offset == 20

    def test_query_is_stripped_and_none_becomes_empty(self):
        assert ListParams.from_options({"query": "  falah "}).query == "falah"
        assert ListParams.from_options({"query": None}).query == ""

    def test_status_all_disables_filter(self):
        assert ListParams.from_options({"status": "all"}).status_filter is None
        assert ListParams.from_options({"status": "pending"}).status_filter == "pending"

    def test_limit_is_capped(self):
        assert ListParams.from_options({"limit": 5000}).limit == 100

    def test_accepts_camel_case_tenant_id_and_ignores_unknown_keys(self):
        params = ListParams.from_options({"tenantId": "abc", "sortBy": "name"})
        assert params.tenant_id == "abc"


class TestMonetizationCoercion:

    def test_non_numeric_values_become_zero(self):
        form = MonetizationSettingsSave.model_validate(
            {"tagihanFee": "abc", "topupFee": "2.5", "koperasiCommission": None}
        )
        assert form.tagihan_fee == 0
        assert form.topup_fee == 2.5
        assert form.koperasi_commission == 0

    def test_non_finite_values_become_zero(self):
        form = MonetizationSettingsSave.model_validate({"tagihanFee": float("nan")})
        assert form.tagihan_fee == 0
