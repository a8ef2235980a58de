"""submit_ticket: ordering, rollback and keeping database work off the event loop."""

from __future__ import annotations

import io
import threading

import pytest
from fastapi import UploadFile

from backpack.core.errors import InvalidCode
from backpack.services.intake import TicketForm, submit_ticket
from backpack.services.record_store import RecordStore
from backpack.services.uploads import UploadManager


def make_form(code: str, **overrides) -> TicketForm:
    fields = dict(
        name="Marco",
        phone="393400000002",
        email="marco@example.com",
        referralCode=code,
        originCity="Milan",
        travelDate="2026-11-02",
    )
    fields.update(overrides)
    return TicketForm(**fields)


def make_upload() -> UploadFile:
    return UploadFile(file=io.BytesIO(b"%PDF-1.4 ticket"), filename="ticket.pdf")


@pytest.fixture
def code(store: RecordStore) -> str:
    store.insert_local(
        name="Asha",
        phone="919800000001",
        email="asha@example.com",
        pincode="560001",
        referral_code="BP-INTAKE",
    )
    return "BP-INTAKE"


@pytest.mark.asyncio
async def test_records_visitor_with_stored_ticket(
    store: RecordStore, uploads: UploadManager, upload_dir, code: str
) -> None:
    visitor = await submit_ticket(store, uploads, make_upload(), make_form(code))

    assert visitor.verification_status == "pending"
    assert (upload_dir / visitor.ticket_filename).read_bytes() == b"%PDF-1.4 ticket"


@pytest.mark.asyncio
async def test_store_calls_run_in_worker_threads(
    store: RecordStore, uploads: UploadManager, monkeypatch: pytest.MonkeyPatch, code: str
) -> None:
    loop_thread = threading.get_ident()
    seen = []
    original_find = RecordStore.find_local_by_code
    original_insert = RecordStore.insert_visitor

    def find(self, referral_code):
        seen.append(threading.get_ident())
        return original_find(self, referral_code)

    def insert(self, **fields):
        seen.append(threading.get_ident())
        return original_insert(self, **fields)

    monkeypatch.setattr(RecordStore, "find_local_by_code", find)
    monkeypatch.setattr(RecordStore, "insert_visitor", insert)

    await submit_ticket(store, uploads, make_upload(), make_form(code))

    assert len(seen) == 2
    assert loop_thread not in seen


@pytest.mark.asyncio
async def test_invalid_code_discards_ticket(store: RecordStore, uploads: UploadManager, upload_dir) -> None:
    with pytest.raises(InvalidCode):
        await submit_ticket(store, uploads, make_upload(), make_form("BP-NOPE00"))

    assert list(upload_dir.iterdir()) == []
