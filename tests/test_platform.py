from datetime import date, timedelta

from pesantren_hub.models import (
    AccountRole,
    AccountStatus,
    MonetizationSettings,
    Pesantren,
    PlatformTransaction,
    Profile,
)
from pesantren_hub.services.summary import add_years, now_local, start_of_month


def last_month():
    return start_of_month() - timedelta(days=1)


class TestPlatformSummary:

    async def test_counts_and_monthly_totals(self, facade, seed):
        alfalah = await seed.pesantren("Pondok Al-Falah", santri_count=100)
        await seed.pesantren("Pondok An-Nur", santri_count=50)
        await seed.pesantren("Pondok Baru", status="pending", santri_count=30)
        await seed.add(
            PlatformTransaction(
                pesantren_id=alfalah, type="topup", amount=100_000, fee_amount=1_000,
                created_at=now_local(),
            ),
            PlatformTransaction(
                pesantren_id=alfalah, type="tagihan", amount=200_000, fee_amount=2_000,
                created_at=now_local(),
            ),
            PlatformTransaction(
                pesantren_id=alfalah, type="topup", amount=500_000, fee_amount=5_000,
                created_at=last_month(),
            ),
        )

        result = await facade.get_platform_summary()

        assert result.data == {
            "totalPesantren": 2,
            "totalSantri": 180,
            "totalTransaksiBulanan": 300_000,
            "pendapatanPlatform": 3_000,
        }

    async def test_empty_platform(self, facade):
        result = await facade.get_platform_summary()
        assert result.data == {
            "totalPesantren": 0,
            "totalSantri": 0,
            "totalTransaksiBulanan": 0,
            "pendapatanPlatform": 0,
        }


class TestPlatformFinancials:

    async def test_summary_and_transactions(self, facade, seed):
        alfalah = await seed.pesantren("Pondok Al-Falah")
        await seed.add(
            PlatformTransaction(
                pesantren_id=alfalah, type="topup", amount=100_000, fee_amount=1_000,
                created_at=now_local(),
            ),
            PlatformTransaction(
                pesantren_id=alfalah, type="withdrawal", amount=40_000, fee_amount=0,
                created_at=now_local() - timedelta(seconds=5),
            ),
            PlatformTransaction(
                pesantren_id=None, type="topup", amount=500_000, fee_amount=5_000,
                created_at=last_month(),
            ),
        )

        result = await facade.get_platform_financials({"limit": 2})

        assert result.data["summary"] == {
            "totalVolume": 640_000,
            "totalPendapatan": 6_000,
            "totalTopUpBulanan": 100_000,
            "totalWithdrawBulanan": 40_000,
        }
        page = result.data["transactions"]
        assert page["pagination"] == {
            "totalItems": 3, "totalPages": 2, "currentPage": 1, "limit": 2,
        }
        assert [tx["amount"] for tx in page["data"]] == [100_000, 40_000]
        assert page["data"][0]["pesantrenName"] == "Pondok Al-Falah"
        assert page["data"][0]["status"] == "completed"

        second = await facade.get_platform_financials({"page": 2, "limit": 2})
        assert second.data["transactions"]["data"][0]["pesantrenName"] == "Unknown"


class TestPesantrenList:

    async def test_admin_info_and_placeholders(self, facade, seed):
        admin_id = await seed.account(
            "admin@alfalah.sch.id", role=AccountRole.pesantren_admin, name="Kyai Ahmad"
        )
        await seed.pesantren("Pondok Al-Falah", admin_id=admin_id)
        await seed.pesantren("Pondok Tanpa Admin")

        result = await facade.get_pesantren_list({"query": "al-falah"})

        assert result.data["pagination"]["totalItems"] == 1
        row = result.data["data"][0]
        assert row["name"] == "Pondok Al-Falah"
        assert row["admin"] == {"name": "Kyai Ahmad", "email": "admin@alfalah.sch.id"}

        orphan = await facade.get_pesantren_list({"query": "tanpa"})
        assert orphan.data["data"][0]["admin"] == {"name": "Unknown", "email": "Unknown"}

    async def test_status_filter(self, facade, seed):
        await seed.pesantren("Pondok Aktif")
        await seed.pesantren("Pondok Menunggu", status="pending")

        pending = await facade.get_pesantren_list({"status": "pending"})
        everyone = await facade.get_pesantren_list({"status": "all"})

        assert [p["name"] for p in pending.data["data"]] == ["Pondok Menunggu"]
        assert everyone.data["pagination"]["totalItems"] == 2

    async def test_search_treats_wildcards_literally(self, facade, seed):
        await seed.pesantren("Pondok Al-Falah")
        result = await facade.get_pesantren_list({"query": "%"})
        assert result.data["pagination"]["totalItems"] == 0

    async def test_limit_zero_returns_counts_only(self, facade, seed):
        await seed.pesantren("Pondok Al-Falah")
        await seed.pesantren("Pondok An-Nur")

        result = await facade.get_pesantren_list({"limit": 0})

        assert result.data["data"] == []
        assert result.data["pagination"] == {
            "totalItems": 2, "totalPages": 0, "currentPage": 1, "limit": 0,
        }

    async def test_page_past_the_end(self, facade, seed):
        await seed.pesantren("Pondok Al-Falah")
        result = await facade.get_pesantren_list({"page": 5, "limit": 10})
        assert result.data["data"] == []
        assert result.data["pagination"]["totalItems"] == 1


class TestApproval:

    async def test_approve_activates_pesantren_and_admin(self, facade, seed):
        admin_id = await seed.account(
            "admin@alfalah.sch.id",
            role=AccountRole.pesantren_admin,
            status=AccountStatus.pending,
        )
        pesantren_id = await seed.pesantren("Pondok Al-Falah", status="pending", admin_id=admin_id)

        result = await facade.approve_pesantren(pesantren_id)

        assert result.data == {"success": True}
        pesantren = await seed.get(Pesantren, pesantren_id)
        assert pesantren.status == "active"
        assert pesantren.subscription_until == add_years(date.today(), 1)
        assert (await seed.get(Profile, admin_id)).status == "active"

    async def test_reject_stores_reason(self, facade, seed):
        admin_id = await seed.account(
            "admin@alfalah.sch.id",
            role=AccountRole.pesantren_admin,
            status=AccountStatus.pending,
        )
        pesantren_id = await seed.pesantren("Pondok Al-Falah", status="pending", admin_id=admin_id)

        await facade.reject_pesantren(pesantren_id, "Dokumen izin tidak valid")

        pesantren = await seed.get(Pesantren, pesantren_id)
        assert pesantren.status == "rejected"
        assert pesantren.rejection_reason == "Dokumen izin tidak valid"
        assert (await seed.get(Profile, admin_id)).status == "rejected"

    async def test_unknown_pesantren(self, facade):
        result = await facade.approve_pesantren("does-not-exist")
        assert result.model_dump() == {"status": "error", "message": "Pesantren tidak ditemukan"}


class TestMonetization:

    async def test_missing_settings(self, facade):
        result = await facade.get_monetization_settings()
        assert result.message == "Pengaturan monetisasi belum tersedia"

    async def test_save_then_get_keeps_a_single_row(self, facade, seed):
        await facade.save_monetization_settings(
            {"tagihanFee": 2500, "topupFee": "abc", "koperasiCommission": 1.5}
        )
        await facade.save_monetization_settings(
            {"tagihanFee": 3000, "topupFee": 1000, "koperasiCommission": 2}
        )

        result = await facade.get_monetization_settings()

        assert result.data == {"tagihanFee": 3000.0, "topupFee": 1000.0, "koperasiCommission": 2.0}
        assert await seed.count(MonetizationSettings) == 1
