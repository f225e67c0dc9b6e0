from pydantic import BaseModel


class AssetCreate(BaseModel):
    user_id: int
    filename: str
    original_name: str
    mime_type: str
    size_bytes: int
    storage_path: str


class UploadResponse(BaseModel):
    url: str
