"""Domain errors raised by the service layer"""

from __future__ import annotations


class BlueDevilError(Exception):
    """Base class for all service errors"""


class PreconditionNotMet(BlueDevilError):
    """Compose was called while changed hunks are still unresolved"""

    def __init__(self, unresolved: list[str]):
        self.unresolved = unresolved
        super().__init__(f"{len(unresolved)} hunk(s) still unresolved: {', '.join(unresolved)}")


class NotFoundError(BlueDevilError):
    """Lookup of an unknown id"""


class VersionNotFound(NotFoundError):
    pass


class SessionNotFound(NotFoundError):
    pass


class HunkNotFound(NotFoundError):
    pass


class FolderNotFound(NotFoundError):
    pass


class DocumentNotFound(NotFoundError):
    pass


class ConflictError(BlueDevilError):
    """Operation clashes with existing state"""


class FolderExists(ConflictError):
    pass


class DuplicateDocument(ConflictError):
    pass


# ========== Avatar pipeline ==========


class AvatarError(BlueDevilError):
    pass


class InvalidImageType(AvatarError):
    pass


class FileTooLarge(AvatarError):
    pass


class OptimizationFailure(AvatarError):
    """Image could not be re-encoded; callers fall back to the original bytes"""


class StorageTooLargeAfterOptimization(AvatarError):
    pass
