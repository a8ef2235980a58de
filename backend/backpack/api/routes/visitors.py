import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import FormData, UploadFile

from backpack.api.deps import get_record_store, get_upload_manager
from backpack.schemas import TicketUploadResponse
from backpack.services.intake import TicketForm, submit_ticket
from backpack.services.record_store import RecordStore
from backpack.services.uploads import UploadManager

router = APIRouter()
logger = logging.getLogger(__name__)


def _text_field(form: FormData, key: str) -> Optional[str]:
    value = form.get(key)
    if isinstance(value, str) and value:
        return value
    return None


@router.post("/visitors/upload", response_model=TicketUploadResponse)
async def upload_ticket(
    request: Request,
    store: RecordStore = Depends(get_record_store),
    uploads: UploadManager = Depends(get_upload_manager),
):
    """
    Claim a referral code by uploading a travel ticket (multipart: ticketFile
    plus name, phone, email, referralCode, originCity, travelDate, returnDate).
    The visitor starts out pending until an admin reviews the ticket.

    The body is read through UploadManager.receive_form, bounded by the upload
    timeout.
    """
    logger.info("POST /api/visitors/upload: Request received")

    form_data = await uploads.receive_form(request)
    try:
        ticket_file = form_data.get("ticketFile")
        if not isinstance(ticket_file, UploadFile):
            ticket_file = None

        form = TicketForm(
            name=_text_field(form_data, "name"),
            phone=_text_field(form_data, "phone"),
            email=_text_field(form_data, "email"),
            referralCode=_text_field(form_data, "referralCode"),
            originCity=_text_field(form_data, "originCity"),
            travelDate=_text_field(form_data, "travelDate"),
            returnDate=_text_field(form_data, "returnDate"),
        )
        visitor = await submit_ticket(store, uploads, ticket_file, form)
    finally:
        await form_data.close()

    logger.info(f"POST /api/visitors/upload: Success! ID: {visitor.id}")
    return TicketUploadResponse()
