import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from backpack.api.deps import get_record_store
from backpack.core.errors import StorageError
from backpack.schemas import ValidateCodeRequest, ValidateCodeResponse
from backpack.services.record_store import RecordStore

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/validate-code", response_model=ValidateCodeResponse)
def validate_code(payload: ValidateCodeRequest, store: RecordStore = Depends(get_record_store)):
    """Exact, case-sensitive check of a referral code"""
    try:
        local = store.find_local_by_code(payload.code)
    except StorageError as e:
        return JSONResponse(status_code=500, content={"error": e.message})

    return ValidateCodeResponse(valid=local is not None)
