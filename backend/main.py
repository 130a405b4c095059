"""
BlueDevil Backend - FastAPI Application Entry Point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import avatar, config, diff, knowledge, versions
from services.config_manager import ConfigManager
from services.registry import get_registry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - startup and shutdown logic"""
    print("[Backend] Starting BlueDevil Backend...")
    config_manager = ConfigManager.get_instance()
    print(f"[Backend] ConfigManager initialized ({config_manager.config_file})")

    registry = get_registry(config_manager)
    print(f"[Backend] Services initialized, avatars in {registry.avatars.avatar_dir}")

    yield
    print("[Backend] Shutting down BlueDevil Backend...")


app = FastAPI(
    title="BlueDevil Backend",
    description="Versioned text diff/merge, knowledge documents and avatars",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(diff.router, prefix="/api", tags=["diff"])
app.include_router(versions.router, prefix="/api", tags=["versions"])
app.include_router(knowledge.router, prefix="/api/knowledge", tags=["knowledge"])
app.include_router(avatar.router, prefix="/api", tags=["avatar"])
app.include_router(config.router, prefix="/api/config", tags=["config"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "bluedevil-backend"}


if __name__ == "__main__":
    import uvicorn

    server = ConfigManager.get_instance().get("server", {})
    uvicorn.run(app, host=server.get("host", "0.0.0.0"), port=server.get("port", 8000))
