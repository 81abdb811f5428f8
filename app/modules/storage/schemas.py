from pydantic import BaseModel
from typing import List


class RecipeImageUploadResponse(BaseModel):
    url: str
    path: str


class UserFileUploadResponse(BaseModel):
    path: str


class SignedUrlResponse(BaseModel):
    signed_url: str
    expires_in: int


class FileListResponse(BaseModel):
    files: List[str]


class StorageUsageResponse(BaseModel):
    used: int
    limit: int
    percentage: float
