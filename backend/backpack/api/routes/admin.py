import logging
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from backpack.api.deps import get_record_store, get_verification_workflow
from backpack.core.errors import StorageError
from backpack.core.security import verify_admin_credentials
from backpack.schemas import (
    AdminLoginRequest,
    CodeLookupResponse,
    LocalResult,
    VerifyActionRequest,
    VerifyActionResponse,
    VisitorResult,
)
from backpack.services.record_store import RecordStore
from backpack.services.verification import VerificationWorkflow

router = APIRouter()
logger = logging.getLogger(__name__)


# ==============================================================================
# 1. LOGIN (fixed credential pair from settings, no session issued)
# ==============================================================================
@router.post("/login")
def login(payload: AdminLoginRequest):
    if verify_admin_credentials(payload.username, payload.password):
        logger.info(f"Admin login success ({payload.username})")
        return {"success": True}

    logger.warning(f"Admin login failed ({payload.username})")
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"success": False, "error": "Invalid credentials"},
    )


# ==============================================================================
# 2. REVIEW QUEUE (newest first)
# ==============================================================================
@router.get("/verifications", response_model=List[VisitorResult])
def get_verifications(store: RecordStore = Depends(get_record_store)):
    try:
        return store.list_visitors()
    except StorageError as e:
        return JSONResponse(status_code=500, content={"error": e.message})


@router.get("/locals", response_model=List[LocalResult])
def get_locals(store: RecordStore = Depends(get_record_store)):
    try:
        return store.list_locals()
    except StorageError as e:
        return JSONResponse(status_code=500, content={"error": e.message})


# ==============================================================================
# 3. APPROVE / REJECT
# ==============================================================================
@router.post("/verify-action", response_model=VerifyActionResponse)
def verify_action(
    payload: VerifyActionRequest,
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
):
    """
    Move a visitor to approved or rejected.
    The visitor is notified out of band by the admin, using the phone on record.
    """
    result = workflow.apply(payload.visitorId, payload.action)
    return VerifyActionResponse(
        visitor_msg=result.message,
        status=result.status.value,
        notify_phone=result.phone if result.should_notify else None,
    )


# ==============================================================================
# 4. CODE DIAGNOSTICS
# ==============================================================================
@router.get("/codes/{code}", response_model=CodeLookupResponse)
def lookup_code(code: str, store: RecordStore = Depends(get_record_store)):
    """
    Explain why a code does or does not validate: exact match, a match that
    only differs in case, codes containing it, and the visitors that already
    cited it.
    Redemption itself only ever accepts the exact match.
    """
    try:
        return CodeLookupResponse(
            code=code,
            exact_match=store.find_local_by_code(code),
            case_insensitive_match=store.find_local_by_code_insensitive(code),
            similar_codes=[local.referral_code for local in store.find_locals_containing(code)],
            visitors_using_code=store.visitors_using_code(code),
        )
    except StorageError as e:
        return JSONResponse(status_code=500, content={"error": e.message})
