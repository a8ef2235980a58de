import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from backpack.core.errors import InvalidCode, ValidationError
from backpack.models.visitor import Visitor
from backpack.services.record_store import RecordStore
from backpack.services.uploads import UploadManager

logger = logging.getLogger(__name__)


@dataclass
class TicketForm:
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    referralCode: Optional[str] = None
    originCity: Optional[str] = None
    travelDate: Optional[str] = None
    returnDate: Optional[str] = None

    REQUIRED = ("name", "phone", "email", "referralCode", "originCity", "travelDate")

    def missing_fields(self):
        return [f for f in self.REQUIRED if not getattr(self, f)]


async def submit_ticket(
    store: RecordStore,
    uploads: UploadManager,
    upload: Optional[UploadFile],
    form: TicketForm,
) -> Visitor:
    """
    Store the ticket first, then validate the request and record the visitor.

    Every failure after the file hits the disk discards it again, so a rejected
    request leaves nothing behind in the upload directory.
    """
    if upload is None or not upload.filename:
        logger.info("No file in request")
        raise ValidationError("No file uploaded.")

    filename = await uploads.store(upload)
    logger.info(f"Validating code {form.referralCode} for {form.name}")

    try:
        missing = form.missing_fields()
        if missing:
            logger.info(f"Validation failed (missing fields: {', '.join(missing)})")
            raise ValidationError("Missing fields.")

        local = await run_in_threadpool(store.find_local_by_code, form.referralCode)
        if local is None:
            logger.info(f"Invalid code result for {form.referralCode}")
            raise InvalidCode()

        visitor = await run_in_threadpool(
            store.insert_visitor,
            name=form.name,
            phone=form.phone,
            email=form.email,
            referral_code_used=form.referralCode,
            origin_city=form.originCity,
            travel_date=form.travelDate,
            return_date=form.returnDate,
            ticket_filename=filename,
        )
    except Exception:
        uploads.discard(filename)
        raise

    logger.info(f"✅ Visitor {visitor.id} recorded with ticket {filename}")
    return visitor
