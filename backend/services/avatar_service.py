"""
Avatar Service - Validate, optimize and store user avatar images
"""

from __future__ import annotations

import base64
import io
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError

from models.avatar import AvatarRecord, AvatarView, OptimizationInfo, StorageType

from .errors import FileTooLarge, InvalidImageType, OptimizationFailure, StorageTooLargeAfterOptimization

VALID_MIME_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}

# 1x1 transparent PNG
FALLBACK_AVATAR = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@dataclass
class AvatarPolicy:
    """Size and encoding limits for avatars"""

    max_file_size: int = 5 * 1024 * 1024
    max_inline_size: int = 100 * 1024
    max_external_size: int = 500 * 1024
    max_dimension: int = 512
    quality: int = 85

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "AvatarPolicy":
        fields = cls.__dataclass_fields__
        return cls(**{key: value for key, value in config.items() if key in fields})


@dataclass
class OptimizedImage:
    data: bytes
    mime_type: str
    original_size: int

    @property
    def reduction(self) -> float:
        if not self.original_size:
            return 0.0
        return round((1 - len(self.data) / self.original_size) * 100, 1)


class AvatarService:
    """Avatar pipeline: validate -> optimize -> inline or external storage"""

    def __init__(self, avatar_dir: Path, policy: AvatarPolicy | None = None, url_prefix: str = "/avatars"):
        self.avatar_dir = Path(avatar_dir)
        self.policy = policy or AvatarPolicy()
        self.url_prefix = url_prefix
        self._records: dict[str, AvatarRecord] = {}
        self.avatar_dir.mkdir(parents=True, exist_ok=True)

    # ========== Validation ==========

    def validate(self, size: int, mime_type: str):
        """Raise if the upload is not an accepted image or is too large"""
        if mime_type.lower() not in VALID_MIME_TYPES:
            raise InvalidImageType("Invalid image type. Only PNG, JPEG, GIF, and WebP are supported.")
        if size > self.policy.max_file_size:
            raise FileTooLarge(f"File too large. Maximum size is {self.policy.max_file_size // (1024 * 1024)}MB.")

    # ========== Optimization ==========

    def optimize_image(self, data: bytes) -> OptimizedImage:
        """Cover-crop to the maximum dimensions and re-encode as WebP"""
        try:
            with Image.open(io.BytesIO(data)) as image:
                print(f"[AvatarService] Original dimensions: {image.width}x{image.height}, mode: {image.mode}")
                image.load()

                has_alpha = image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info)
                converted = image.convert("RGBA" if has_alpha else "RGB")

                limit = self.policy.max_dimension
                if converted.width > limit or converted.height > limit:
                    converted = ImageOps.fit(converted, (limit, limit), method=Image.LANCZOS, centering=(0.5, 0.5))
                    print(f"[AvatarService] Resized to: {limit}x{limit}")

                output = io.BytesIO()
                converted.save(output, format="WEBP", quality=self.policy.quality, method=6)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise OptimizationFailure(f"Could not optimize image: {e}") from e

        optimized = OptimizedImage(data=output.getvalue(), mime_type="image/webp", original_size=len(data))
        print(
            f"[AvatarService] Optimized image: {len(optimized.data)} bytes "
            f"({optimized.reduction}% reduction)"
        )
        return optimized

    # ========== Storage ==========

    def generate_filename(self, user_id: str, mime_type: str) -> str:
        extension = VALID_MIME_TYPES.get(mime_type.lower(), "webp")
        safe_user = re.sub(r"[^A-Za-z0-9_-]", "_", user_id)
        return f"{safe_user}_{int(time.time() * 1000)}_{secrets.token_hex(8)}.{extension}"

    def store_avatar(self, user_id: str, data: bytes, mime_type: str) -> AvatarRecord:
        """Validate, optimize and store an avatar, replacing any existing one"""
        self.validate(len(data), mime_type)
        print(f"[AvatarService] Processing avatar for user {user_id}: {len(data)} bytes, type: {mime_type}")

        try:
            optimized = self.optimize_image(data)
        except OptimizationFailure as e:
            print(f"[AvatarService] {e}; storing original")
            optimized = OptimizedImage(data=data, mime_type=mime_type.lower(), original_size=len(data))

        size = len(optimized.data)
        if size <= self.policy.max_inline_size:
            storage_type = StorageType.INLINE
        elif size <= self.policy.max_external_size:
            storage_type = StorageType.EXTERNAL
        else:
            raise StorageTooLargeAfterOptimization(
                f"Image too large even after optimization ({size} bytes). Please try a smaller image."
            )
        print(f"[AvatarService] Storage decision: {storage_type.value} ({size} bytes)")

        record = AvatarRecord(
            user_id=user_id,
            storage_type=storage_type,
            mime_type=optimized.mime_type,
            size=size,
            optimization=OptimizationInfo(
                original_size=optimized.original_size,
                optimized_size=size,
                reduction=optimized.reduction,
                format=optimized.mime_type,
            ),
        )

        if storage_type == StorageType.INLINE:
            record.data = optimized.data
        else:
            filename = self.generate_filename(user_id, optimized.mime_type)
            (self.avatar_dir / filename).write_bytes(optimized.data)
            record.url = f"{self.url_prefix}/{filename}"
            print(f"[AvatarService] Stored avatar externally: {self.avatar_dir / filename}")

        # Replace: remove the previous external file only after the new one is stored
        previous = self._records.get(user_id)
        self._records[user_id] = record
        if previous is not None:
            self._remove_file(previous)
        return record

    def update_avatar(self, user_id: str, data: bytes, mime_type: str) -> AvatarRecord:
        """Delete the old avatar, then store the new one"""
        self.delete_avatar(user_id)
        return self.store_avatar(user_id, data, mime_type)

    def get_record(self, user_id: str) -> AvatarRecord | None:
        return self._records.get(user_id)

    def get_avatar(self, user_id: str) -> AvatarView:
        """Avatar as a data URI or URL, falling back to a transparent pixel"""
        record = self._records.get(user_id)
        if record is not None and record.storage_type == StorageType.INLINE and record.data:
            encoded = base64.b64encode(record.data).decode("ascii")
            return AvatarView(src=f"data:{record.mime_type};base64,{encoded}", type="base64", size=len(record.data))
        if record is not None and record.storage_type == StorageType.EXTERNAL and record.url:
            return AvatarView(src=record.url, type="url")
        return AvatarView(src=FALLBACK_AVATAR, type="fallback", size=0)

    def delete_avatar(self, user_id: str) -> bool:
        record = self._records.pop(user_id, None)
        if record is None:
            return False
        self._remove_file(record)
        return True

    def _remove_file(self, record: AvatarRecord):
        if record.storage_type != StorageType.EXTERNAL or not record.url:
            return
        file_path = self.avatar_dir / Path(record.url).name
        if file_path.exists():
            file_path.unlink()
            print(f"[AvatarService] Deleted external avatar: {file_path}")
        else:
            print(f"[AvatarService] External avatar file not found: {file_path}")

    def external_path(self, filename: str) -> Path | None:
        """Resolve a served avatar file name, refusing anything outside the avatar directory"""
        candidate = self.avatar_dir / Path(filename).name
        return candidate if candidate.is_file() else None

    def storage_stats(self) -> dict[str, Any]:
        return {
            "external_files": sum(1 for p in self.avatar_dir.iterdir() if p.is_file()),
            "external_path": str(self.avatar_dir),
            "inline_avatars": sum(1 for r in self._records.values() if r.storage_type == StorageType.INLINE),
            "max_inline_size": self.policy.max_inline_size,
            "max_external_size": self.policy.max_external_size,
            "max_file_size": self.policy.max_file_size,
        }
