from fastapi import Depends, Request
from sqlalchemy.orm import Session

from backpack.core.logging import RecentLogBuffer
from backpack.db.session import get_db
from backpack.services.record_store import RecordStore
from backpack.services.uploads import UploadManager, upload_manager
from backpack.services.verification import VerificationWorkflow


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    return RecordStore(db)


def get_upload_manager() -> UploadManager:
    return upload_manager


def get_verification_workflow(store: RecordStore = Depends(get_record_store)) -> VerificationWorkflow:
    return VerificationWorkflow(store)


def get_log_buffer(request: Request) -> RecentLogBuffer:
    return request.app.state.log_buffer
