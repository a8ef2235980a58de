import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from backpack.api.deps import get_log_buffer, get_record_store, get_upload_manager
from backpack.core.errors import StorageError
from backpack.core.logging import RecentLogBuffer
from backpack.services.record_store import RecordStore
from backpack.services.uploads import UploadManager

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
def health_check(
    request: Request,
    store: RecordStore = Depends(get_record_store),
    uploads: UploadManager = Depends(get_upload_manager),
    log_buffer: RecentLogBuffer = Depends(get_log_buffer),
):
    """Health check: database, upload directory and the last few log lines"""
    logger.info("Health check requested")

    try:
        database = f"OK ({store.count_locals()} locals)"
    except StorageError as e:
        logger.error(f"Health check failed: {e.message}")
        database = f"Error: {e.message}"

    return {
        "status": "Online",
        "start_time": request.app.state.start_time,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "database": database,
            "upload_dir": str(uploads.directory),
            "disk_write": uploads.check_writable(),
        },
        "logs": log_buffer.tail(10),
    }
