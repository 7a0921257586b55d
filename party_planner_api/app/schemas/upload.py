"""Signed upload parameters handed to clients uploading media."""

from pydantic import BaseModel


class UploadSignature(BaseModel):
    signature: str
    timestamp: int
    upload_preset: str
    api_key: str
    cloud_name: str
