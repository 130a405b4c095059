"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from models.diff import Granularity
from services.config_manager import ConfigManager

router = APIRouter()


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    storage: dict | None = None
    versions: dict | None = None
    diff: dict | None = None
    avatar: dict | None = None
    server: dict | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    storage: dict
    versions: dict
    diff: dict
    avatar: dict
    server: dict


@router.get("", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current configuration"""
    config = ConfigManager.get_instance().get_config()
    return ConfigResponse(
        storage=config.get("storage", {}),
        versions=config.get("versions", {}),
        diff=config.get("diff", {}),
        avatar=config.get("avatar", {}),
        server=config.get("server", {}),
    )


@router.put("")
async def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update configuration; sections are merged into the stored config.

    Storage and version backend changes apply on the next restart.
    """
    updates = request.model_dump(exclude_none=True)

    granularity = updates.get("diff", {}).get("default_granularity")
    if granularity is not None and granularity not in {g.value for g in Granularity}:
        raise HTTPException(status_code=400, detail=f"Unknown granularity: {granularity}")

    backend = updates.get("versions", {}).get("backend")
    if backend is not None and backend not in ("memory", "json"):
        raise HTTPException(status_code=400, detail=f"Unknown version backend: {backend}")

    try:
        ConfigManager.get_instance().save_config(updates)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "message": "Configuration updated"}
