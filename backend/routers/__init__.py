"""Routers module - FastAPI route handlers"""

from . import avatar, config, diff, knowledge, versions

__all__ = ["avatar", "config", "diff", "knowledge", "versions"]
