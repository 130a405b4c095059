"""
Service Registry - Process-wide service instances built from configuration
"""

from __future__ import annotations

from pathlib import Path

from .avatar_service import AvatarPolicy, AvatarService
from .config_manager import ConfigManager
from .document_service import DocumentService
from .merge_session import MergeSessionManager
from .similarity import SemanticDiffer, WordOverlapScorer
from .version_store import InMemoryVersionStore, JsonFileVersionStore, VersionStore

_registry = None


class ServiceRegistry:
    """Holds the stateful services shared by all routers"""

    def __init__(self, config_manager: ConfigManager):
        config = config_manager.get_config()
        storage = config["storage"]

        self.version_store = self._build_version_store(config)
        self.merge_sessions = MergeSessionManager(self.version_store)
        self.documents = DocumentService(Path(storage["upload_dir"]), self.version_store)
        self.avatars = AvatarService(
            Path(storage["avatar_dir"]),
            AvatarPolicy.from_config(config.get("avatar", {})),
            url_prefix="/api/avatars/files",
        )

        diff_config = config.get("diff", {})
        self.scorer = WordOverlapScorer()
        self.semantic_differ = SemanticDiffer(
            self.scorer,
            match_threshold=diff_config.get("match_threshold", 0.7),
            partial_threshold=diff_config.get("partial_threshold", 0.3),
        )

    @staticmethod
    def _build_version_store(config: dict) -> VersionStore:
        backend = config.get("versions", {}).get("backend", "memory")
        if backend == "json":
            path = Path(config["storage"]["data_dir"]) / "versions.json"
            print(f"[Registry] Using JSON version store at {path}")
            return JsonFileVersionStore(path)
        return InMemoryVersionStore()


def get_registry(config_manager: ConfigManager | None = None) -> ServiceRegistry:
    """Get (or lazily build) the process-wide registry"""
    global _registry
    if _registry is None:
        _registry = ServiceRegistry(config_manager or ConfigManager.get_instance())
    return _registry


def reset_registry():
    """Discard all service state; the next get_registry() rebuilds from config"""
    global _registry
    _registry = None
