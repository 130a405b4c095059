"""Avatar upload / fetch / delete API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from models.avatar import AvatarUploadResponse, AvatarView
from services.errors import FileTooLarge, InvalidImageType, StorageTooLargeAfterOptimization
from services.registry import get_registry

router = APIRouter()


@router.post("/users/{user_id}/avatar", response_model=AvatarUploadResponse)
async def upload_avatar(user_id: str, avatar: UploadFile = File(...)) -> AvatarUploadResponse:
    """Optimize and store a user's avatar"""
    data = await avatar.read()
    mime_type = avatar.content_type or ""
    print(f"[Backend] Received avatar: {avatar.filename}, size: {len(data)} bytes, type: {mime_type}")

    try:
        record = get_registry().avatars.store_avatar(user_id, data, mime_type)
    except InvalidImageType as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (FileTooLarge, StorageTooLargeAfterOptimization) as e:
        raise HTTPException(status_code=413, detail=str(e))

    return AvatarUploadResponse(
        user_id=user_id,
        storage_type=record.storage_type,
        mime_type=record.mime_type,
        size=record.size,
        url=record.url,
        optimization=record.optimization,
    )


@router.get("/users/{user_id}/avatar", response_model=AvatarView)
async def get_avatar(user_id: str) -> AvatarView:
    return get_registry().avatars.get_avatar(user_id)


@router.delete("/users/{user_id}/avatar")
async def delete_avatar(user_id: str) -> dict[str, Any]:
    deleted = get_registry().avatars.delete_avatar(user_id)
    return {"success": True, "deleted": deleted}


@router.get("/avatars/stats")
async def avatar_stats() -> dict[str, Any]:
    return get_registry().avatars.storage_stats()


@router.get("/avatars/files/{filename}")
async def avatar_file(filename: str) -> FileResponse:
    """Serve an externally stored avatar"""
    path = get_registry().avatars.external_path(filename)
    if path is None:
        raise HTTPException(status_code=404, detail="Avatar not found")
    return FileResponse(path)
