import logging

from fastapi import APIRouter, Depends

from backpack.api.deps import get_record_store
from backpack.schemas import LocalRegisterRequest, LocalRegisterResponse
from backpack.services.record_store import RecordStore
from backpack.services.registration import register_local

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/locals/register", response_model=LocalRegisterResponse)
def register(payload: LocalRegisterRequest, store: RecordStore = Depends(get_record_store)):
    """
    Register a local resident and hand back their referral code.
    The pincode must fall inside one of the eligible ranges.
    """
    local = register_local(
        store,
        name=payload.name,
        phone=payload.phone,
        email=payload.email,
        pincode=payload.pincode,
    )
    return LocalRegisterResponse(referral_code=local.referral_code)
