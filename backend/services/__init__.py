"""Services module - Business logic layer"""

from .config_manager import ConfigManager
from .conflict_classifier import ConflictClassifier
from .diff_engine import DiffEngine, diff_texts
from .merge_compositor import MergeCompositor
from .merge_session import MergeSession, MergeSessionManager
from .resolution_store import ResolutionStore
from .similarity import SemanticDiffer, SimilarityScorer, WordOverlapScorer
from .tokenizer import tokenize
from .version_store import InMemoryVersionStore, JsonFileVersionStore, VersionStore

__all__ = [
    "ConfigManager",
    "ConflictClassifier",
    "DiffEngine",
    "diff_texts",
    "MergeCompositor",
    "MergeSession",
    "MergeSessionManager",
    "ResolutionStore",
    "SemanticDiffer",
    "SimilarityScorer",
    "WordOverlapScorer",
    "tokenize",
    "InMemoryVersionStore",
    "JsonFileVersionStore",
    "VersionStore",
]
