"""Pydantic schemas for image uploads."""
from pydantic import BaseModel


class UploadResponse(BaseModel):
    download_url: str
    file_name: str
    full_path: str
    size: int
    content_type: str
