from sqlalchemy import select

from pesantren_hub.models import PesantrenFinancials, WithdrawalRequest


async def financials_of(seed, tenant_id):
    async with seed.sessions() as db:
        return (
            await db.execute(
                select(PesantrenFinancials).where(PesantrenFinancials.pesantren_id == tenant_id)
            )
        ).scalar_one()


async def request(facade, tenant_id, account_id, amount):
    result = await facade.request_withdrawal(
        tenant_id, {"amount": amount, "bankAccountId": account_id}
    )
    assert result.status == "success", result
    return result.data


class TestRequestWithdrawal:

    async def test_creates_pending_request(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        account_id = await seed.bank_account(alfalah)

        created = await request(facade, alfalah, account_id, 200_000)

        assert created["status"] == "pending"
        assert created["tenantId"] == alfalah
        assert created["tenantName"] == "Pondok Al-Falah"
        assert created["bankAccount"] == {
            "bankName": "BSI",
            "accountHolder": "Yayasan Al-Falah",
            "accountNumber": "7001234567",
        }
        assert (await financials_of(seed, alfalah)).available_balance == 1_000_000

    async def test_amount_above_balance(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        account_id = await seed.bank_account(alfalah)

        result = await facade.request_withdrawal(
            alfalah, {"amount": 2_000_000, "bankAccountId": account_id}
        )

        assert result.message == "Saldo tidak mencukupi"
        assert await seed.count(WithdrawalRequest) == 0

    async def test_bank_account_of_another_tenant(self, facade, seed, two_tenants):
        alfalah, annur = two_tenants
        foreign_account = await seed.bank_account(annur)

        result = await facade.request_withdrawal(
            alfalah, {"amount": 1_000, "bankAccountId": foreign_account}
        )

        assert result.message == "Rekening bank tidak ditemukan"

    async def test_amount_must_be_positive(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        account_id = await seed.bank_account(alfalah)
        result = await facade.request_withdrawal(alfalah, {"amount": 0, "bankAccountId": account_id})
        assert result.message.startswith("Data tidak valid: amount")


class TestDecideWithdrawal:

    async def test_completion_decrements_balance(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        account_id = await seed.bank_account(alfalah)
        created = await request(facade, alfalah, account_id, 200_000)

        result = await facade.update_withdrawal_request_status(created["id"], "completed")

        assert result.data["status"] == "completed"
        assert result.data["processedAt"] is not None
        financials = await financials_of(seed, alfalah)
        assert financials.available_balance == 800_000
        assert financials.last_withdrawal == 200_000

    async def test_request_can_only_be_decided_once(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        account_id = await seed.bank_account(alfalah)
        created = await request(facade, alfalah, account_id, 200_000)
        await facade.update_withdrawal_request_status(created["id"], "completed")

        again = await facade.update_withdrawal_request_status(created["id"], "completed")

        assert again.message == "Permintaan penarikan sudah diproses"
        assert (await financials_of(seed, alfalah)).available_balance == 800_000

    async def test_rejection_keeps_balance_and_stores_reason(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        account_id = await seed.bank_account(alfalah)
        created = await request(facade, alfalah, account_id, 200_000)

        result = await facade.update_withdrawal_request_status(
            created["id"], "rejected", "Rekening tidak sesuai"
        )

        assert result.data["status"] == "rejected"
        assert result.data["reason"] == "Rekening tidak sesuai"
        assert (await financials_of(seed, alfalah)).available_balance == 1_000_000

    async def test_completion_with_insufficient_balance_rolls_back(self, facade, seed, two_tenants):
        _, annur = two_tenants
        account_id = await seed.bank_account(annur)
        (pending,) = await seed.add(
            WithdrawalRequest(
                pesantren_id=annur, bank_account_id=account_id, amount=50_000, status="pending"
            )
        )

        result = await facade.update_withdrawal_request_status(pending.id, "completed")

        assert result.message == "Saldo tidak mencukupi"
        assert (await seed.get(WithdrawalRequest, pending.id)).status == "pending"
        assert (await financials_of(seed, annur)).available_balance == 0

    async def test_second_completion_cannot_overdraw(self, facade, seed, two_tenants):
        alfalah, _ = two_tenants
        account_id = await seed.bank_account(alfalah)
        first, second = await seed.add(
            WithdrawalRequest(
                pesantren_id=alfalah, bank_account_id=account_id, amount=600_000, status="pending"
            ),
            WithdrawalRequest(
                pesantren_id=alfalah, bank_account_id=account_id, amount=600_000, status="pending"
            ),
        )

        done = await facade.update_withdrawal_request_status(first.id, "completed")
        refused = await facade.update_withdrawal_request_status(second.id, "completed")

        assert done.status == "success"
        assert refused.message == "Saldo tidak mencukupi"
        assert (await seed.get(WithdrawalRequest, second.id)).status == "pending"
        assert (await financials_of(seed, alfalah)).available_balance == 400_000

    async def test_unknown_request(self, facade):
        result = await facade.update_withdrawal_request_status("missing", "completed")
        assert result.message == "Permintaan penarikan tidak ditemukan"


class TestListWithdrawals:

    async def test_stats_and_tenant_scope(self, facade, seed, two_tenants):
        alfalah, annur = two_tenants
        alfalah_account = await seed.bank_account(alfalah)
        annur_account = await seed.bank_account(annur)
        first = await request(facade, alfalah, alfalah_account, 100_000)
        await request(facade, alfalah, alfalah_account, 250_000)
        await seed.add(
            WithdrawalRequest(
                pesantren_id=annur, bank_account_id=annur_account, amount=40_000, status="pending"
            )
        )
        await facade.update_withdrawal_request_status(first["id"], "completed")

        everything = await facade.get_withdrawal_requests()
        assert everything.data["pagination"]["totalItems"] == 3
        assert everything.data["stats"] == {
            "pendingCount": 2,
            "pendingAmount": 290_000,
            "processedToday": 100_000,
        }

        scoped = await facade.get_withdrawal_requests({"tenantId": alfalah, "status": "pending"})
        assert [r["amount"] for r in scoped.data["data"]] == [250_000]
        assert scoped.data["stats"]["pendingCount"] == 1
        assert scoped.data["stats"]["pendingAmount"] == 250_000

    async def test_search_by_pesantren_name(self, facade, seed, two_tenants):
        alfalah, annur = two_tenants
        await request(facade, alfalah, await seed.bank_account(alfalah), 1_000)

        result = await facade.get_withdrawal_requests({"query": "an-nur"})

        assert result.data["data"] == []
        assert result.data["pagination"]["totalItems"] == 0
