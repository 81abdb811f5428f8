from supabase import Client
from app.config import settings
from app.modules.storage.s3_storage import S3Storage
from app.core.dependencies import check_path_owner
from typing import List, Optional, Tuple
from fastapi import HTTPException, UploadFile
import re
import time
import logging

logger = logging.getLogger(__name__)

RECIPE_IMAGES_BUCKET = "recipe-images"
USER_UPLOADS_BUCKET = "user-uploads"
BUCKETS = (RECIPE_IMAGES_BUCKET, USER_UPLOADS_BUCKET)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
STORAGE_LIMIT_BYTES = 8 * 1024 * 1024 * 1024
CACHE_CONTROL = "3600"
IMAGE_CONTENT_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


def slugify(value: str) -> str:
    """Lower-case, whitespace runs to dashes, drop anything that is not path safe."""
    slug = re.sub(r"\s+", "-", value.strip().lower())
    return re.sub(r"[^a-z0-9\-_]", "", slug) or "recipe"


def file_extension(filename: Optional[str], default: str = "bin") -> str:
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[-1].lower()
        if re.fullmatch(r"[a-z0-9]{1,8}", ext):
            return ext
    return default


def _millis() -> int:
    return int(time.time() * 1000)


class StorageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

        # S3 takes over the public recipe image bucket when configured
        self.s3_storage = None
        if settings.s3_configured:
            try:
                self.s3_storage = S3Storage()
            except Exception as e:
                logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
                self.s3_storage = None

    @staticmethod
    def _check_bucket(bucket: str) -> None:
        if bucket not in BUCKETS:
            raise HTTPException(status_code=400, detail=f"Unknown bucket: {bucket}")

    async def _read_upload(self, file: UploadFile) -> bytes:
        content = await file.read()
        if not content:
            raise HTTPException(status_code=400, detail="File is empty")
        if len(content) > MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=400, detail="File exceeds the 10 MB upload limit")
        return content

    def _upload(self, bucket: str, path: str, content: bytes, content_type: str) -> None:
        self.supabase.storage.from_(bucket).upload(
            path,
            content,
            file_options={"content-type": content_type, "cache-control": CACHE_CONTROL, "upsert": "true"},
        )

    async def upload_recipe_image(self, file: UploadFile, recipe_name: str, user_id: str) -> Tuple[str, str]:
        """Store a recipe photo; returns (public_url, path)."""
        content_type = file.content_type or ""
        if content_type not in IMAGE_CONTENT_TYPES:
            raise HTTPException(status_code=400, detail="Only JPEG, PNG, GIF or WebP images are accepted")
        content = await self._read_upload(file)
        path = f"{user_id}/{slugify(recipe_name)}-{_millis()}.{file_extension(file.filename, 'jpg')}"
        try:
            if self.s3_storage:
                return self.s3_storage.upload_file(content, path, content_type), path
            self._upload(RECIPE_IMAGES_BUCKET, path, content, content_type)
            public_url = self.supabase.storage.from_(RECIPE_IMAGES_BUCKET).get_public_url(path)
            return public_url, path
        except Exception as e:
            logger.error(f"Error uploading recipe image: {e}")
            raise HTTPException(status_code=500, detail="Failed to upload recipe image")

    async def upload_user_file(self, file: UploadFile, user_id: str, folder: str = "misc") -> str:
        """Store a private file; returns its path inside the user-uploads bucket."""
        folder = slugify(folder) if folder else "misc"
        content = await self._read_upload(file)
        path = f"{user_id}/{folder}/{_millis()}.{file_extension(file.filename)}"
        try:
            self._upload(USER_UPLOADS_BUCKET, path, content, file.content_type or "application/octet-stream")
            return path
        except Exception as e:
            logger.error(f"Error uploading user file: {e}")
            raise HTTPException(status_code=500, detail="Failed to upload file")

    def get_signed_url(self, path: str, user_id: str, expires_in: int = 3600) -> str:
        check_path_owner(path, user_id)
        try:
            data = self.supabase.storage.from_(USER_UPLOADS_BUCKET).create_signed_url(path, expires_in)
            signed_url = data.get("signedURL") or data.get("signedUrl")
            if not signed_url:
                raise HTTPException(status_code=404, detail="File not found")
            return signed_url
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error getting signed URL: {e}")
            raise HTTPException(status_code=500, detail="Failed to create signed URL")

    def delete_file(self, bucket: str, path: str, user_id: str) -> bool:
        self._check_bucket(bucket)
        check_path_owner(path, user_id)
        try:
            if bucket == RECIPE_IMAGES_BUCKET and self.s3_storage:
                if not self.s3_storage.delete_file(path):
                    raise HTTPException(status_code=500, detail="Failed to delete file")
                return True
            self.supabase.storage.from_(bucket).remove([path])
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting file: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete file")

    def _list_with_sizes(self, bucket: str, prefix: str) -> List[Tuple[str, int]]:
        if bucket == RECIPE_IMAGES_BUCKET and self.s3_storage:
            return self.s3_storage.list_keys(f"{prefix}/")
        entries = self.supabase.storage.from_(bucket).list(prefix) or []
        return [
            (f"{prefix}/{entry['name']}", int((entry.get("metadata") or {}).get("size") or 0))
            for entry in entries
        ]

    def list_files(self, bucket: str, user_id: str, folder: Optional[str] = None) -> List[str]:
        self._check_bucket(bucket)
        prefix = f"{user_id}/{slugify(folder)}" if folder else user_id
        try:
            return [path for path, _ in self._list_with_sizes(bucket, prefix)]
        except Exception as e:
            logger.error(f"Error listing files: {e}")
            raise HTTPException(status_code=500, detail="Failed to list files")

    def get_usage(self, user_id: str) -> dict:
        """Bytes stored directly under the user's prefix in both buckets."""
        try:
            used = sum(
                size
                for bucket in BUCKETS
                for _, size in self._list_with_sizes(bucket, user_id)
            )
        except Exception as e:
            logger.error(f"Error computing storage usage: {e}")
            raise HTTPException(status_code=500, detail="Failed to compute storage usage")
        return {
            "used": used,
            "limit": STORAGE_LIMIT_BYTES,
            "percentage": used / STORAGE_LIMIT_BYTES * 100,
        }
