"""Image upload API for location photos."""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from api.deps import get_blob_store, require_admin
from explorer_core.blob_store import LocalBlobStore
from explorer_core.entities import UserProfile
from explorer_core.errors import InvalidImage, StorageFailure
from schemas.locations import LOCATION_ID_PATTERN
from schemas.uploads import UploadResponse

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/images", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    location_id: str | None = Form(default=None, pattern=LOCATION_ID_PATTERN),
    blob_store: LocalBlobStore = Depends(get_blob_store),
    admin: UserProfile = Depends(require_admin),
) -> UploadResponse:
    """Store a JPEG/PNG/WebP/GIF (max 5MB) and return its public URL (admin)."""
    content = await file.read()
    try:
        result = blob_store.upload(content, file.content_type, file.filename, location_id=location_id)
    except InvalidImage as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except StorageFailure as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    return UploadResponse(
        download_url=result.download_url,
        file_name=result.file_name,
        full_path=result.full_path,
        size=result.size,
        content_type=result.content_type,
    )
