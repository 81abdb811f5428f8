from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from app.database.supabase_client import get_supabase
from app.modules.storage.schemas import (
    RecipeImageUploadResponse, UserFileUploadResponse, SignedUrlResponse,
    FileListResponse, StorageUsageResponse
)
from app.modules.storage.service import StorageService
from app.core.dependencies import get_request_user_id
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/storage", tags=["storage"])


def get_storage_service(supabase: Client = Depends(get_supabase)) -> StorageService:
    return StorageService(supabase)


@router.post("/recipe-images", response_model=RecipeImageUploadResponse, status_code=201)
async def upload_recipe_image(
    file: UploadFile = File(...),
    recipe_name: str = Form(...),
    user_id: str = Depends(get_request_user_id),
    service: StorageService = Depends(get_storage_service)
):
    """Upload a recipe photo and get its public URL"""
    url, path = await service.upload_recipe_image(file, recipe_name, user_id)
    return RecipeImageUploadResponse(url=url, path=path)


@router.post("/uploads", response_model=UserFileUploadResponse, status_code=201)
async def upload_user_file(
    file: UploadFile = File(...),
    folder: str = Form("misc"),
    user_id: str = Depends(get_request_user_id),
    service: StorageService = Depends(get_storage_service)
):
    """Upload a private file"""
    path = await service.upload_user_file(file, user_id, folder)
    return UserFileUploadResponse(path=path)


@router.get("/signed-url", response_model=SignedUrlResponse)
async def get_signed_url(
    path: str,
    expires_in: int = 3600,
    user_id: str = Depends(get_request_user_id),
    service: StorageService = Depends(get_storage_service)
):
    """Temporary URL for one of the user's private files"""
    if expires_in <= 0 or expires_in > 7 * 24 * 3600:
        raise HTTPException(status_code=400, detail="expires_in must be between 1 second and 7 days")
    return SignedUrlResponse(signed_url=service.get_signed_url(path, user_id, expires_in), expires_in=expires_in)


@router.get("/usage", response_model=StorageUsageResponse)
async def get_usage(
    user_id: str = Depends(get_request_user_id),
    service: StorageService = Depends(get_storage_service)
):
    """Storage used by the user across both buckets"""
    return service.get_usage(user_id)


@router.get("/{bucket}", response_model=FileListResponse)
async def list_files(
    bucket: str,
    folder: Optional[str] = None,
    user_id: str = Depends(get_request_user_id),
    service: StorageService = Depends(get_storage_service)
):
    """List the user's files in a bucket"""
    return FileListResponse(files=service.list_files(bucket, user_id, folder))


@router.delete("/{bucket}")
async def delete_file(
    bucket: str,
    path: str,
    user_id: str = Depends(get_request_user_id),
    service: StorageService = Depends(get_storage_service)
):
    """Delete one of the user's files"""
    service.delete_file(bucket, path, user_id)
    return {"success": True}
