from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from backpack.api.deps import get_upload_manager
from backpack.core.errors import UploadError
from backpack.services.uploads import UploadManager

router = APIRouter()


@router.get("/uploads/{filename}")
def get_ticket(filename: str, uploads: UploadManager = Depends(get_upload_manager)):
    """Serve a stored ticket so the admin can review it"""
    # Security: prevent directory traversal
    try:
        file_path = uploads.path_for(filename)
    except UploadError:
        raise HTTPException(status_code=403, detail="Access denied")

    if file_path.is_file():
        return FileResponse(file_path)

    raise HTTPException(status_code=404, detail="File not found")
