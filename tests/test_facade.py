"""Envelope boundary and pre-store validation."""

import pytest

from pesantren_hub.core.exceptions import NotFound
from pesantren_hub.facade import PesantrenHubFacade, enveloped
from pesantren_hub.schemas.common import ErrorEnvelope, Pagination, SuccessEnvelope
from pesantren_hub.services.compensation import CompensationStack


class CountingSessions:
    """Session factory stand-in that records whether the store was touched."""

    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        raise AssertionError("store must not be reached")


@pytest.fixture
def untouched():
    sessions = CountingSessions()
    return sessions, PesantrenHubFacade(sessions, identity=object())


class TestEnveloped:

    async def test_success_wraps_camel_case_payload(self):
        @enveloped()
        async def op():
            return Pagination.build(3, 1, 2)

        result = await op()
        assert isinstance(result, SuccessEnvelope)
        assert result.model_dump() == {
            "status": "success",
            "data": {"totalItems": 3, "totalPages": 2, "currentPage": 1, "limit": 2},
        }

    async def test_facade_error_message_passes_through(self):
        @enveloped("fallback")
        async def op():
            raise NotFound("Santri tidak ditemukan")

        result = await op()
        assert isinstance(result, ErrorEnvelope)
        assert result.message == "Santri tidak ditemukan"

    async def test_unexpected_error_uses_fallback(self):
        @enveloped("Gagal memuat data")
        async def op():
            raise RuntimeError("connection reset by peer")

        result = await op()
        assert result.model_dump() == {"status": "error", "message": "Gagal memuat data"}

    async def test_default_fallback(self):
        @enveloped()
        async def op():
            raise KeyError("boom")

        assert (await op()).message == "Terjadi kesalahan"


class TestValidationBeforeStore:

    @pytest.mark.parametrize("kind", ["guru", "", "KELAS"])
    async def test_unknown_master_data_type_never_reaches_store(self, untouched, kind):
        sessions, facade = untouched
        result = await facade.get_master_data("tenant-1", kind)
        assert result.model_dump() == {"status": "error", "message": "Invalid master data type"}
        assert sessions.calls == 0

    async def test_grup_pilihan_is_read_only(self, untouched):
        sessions, facade = untouched
        saved = await facade.save_master_data_item("tenant-1", "grupPilihan", {"name": "A"})
        deleted = await facade.delete_master_data_item("tenant-1", "grupPilihan", "x")
        assert saved.message == "Invalid master data type"
        assert deleted.message == "Invalid master data type"
        assert sessions.calls == 0

    async def test_withdrawal_rejection_requires_reason(self, untouched):
        sessions, facade = untouched
        result = await facade.update_withdrawal_request_status("req-1", "rejected", "   ")
        assert result.message == "Alasan penolakan wajib diisi"
        assert sessions.calls == 0

    async def test_withdrawal_status_must_be_a_decision(self, untouched):
        sessions, facade = untouched
        result = await facade.update_withdrawal_request_status("req-1", "pending")
        assert result.status == "error"
        assert sessions.calls == 0

    async def test_invalid_payload_reports_field(self, untouched):
        sessions, facade = untouched
        result = await facade.add_santri_to_pesantren("tenant-1", {"name": "Ahmad"})
        assert result.status == "error"
        assert result.message.startswith("Data tidak valid: nis")
        assert sessions.calls == 0


class TestCompensationStack:

    async def test_undo_runs_in_reverse_and_error_propagates(self):
        undone = []

        async def undo(step):
            undone.append(step)

        with pytest.raises(RuntimeError):
            async with CompensationStack("test") as stack:
                stack.push("first", lambda: undo("first"))
                stack.push("second", lambda: undo("second"))
                raise RuntimeError("step three failed")

        assert undone == ["second", "first"]

    async def test_failing_undo_does_not_stop_unwinding(self):
        undone = []

        async def broken():
            raise ValueError("identity service down")

        async def ok():
            undone.append("ok")

        with pytest.raises(RuntimeError, match="original"):
            async with CompensationStack("test") as stack:
                stack.push("ok", ok)
                stack.push("broken", broken)
                raise RuntimeError("original")

        assert undone == ["ok"]

    async def test_nothing_undone_on_success(self):
        undone = []

        async def undo():
            undone.append("x")

        async with CompensationStack("test") as stack:
            stack.push("x", undo)

        assert undone == []
