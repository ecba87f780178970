"""
Card File Management Service for Para Sports ID Card System
Handles naming, writing, serving, and cleanup of generated ID card PDFs
"""

import os
import re
import time
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Any, Optional, Tuple, BinaryIO

from app.core.config import Settings, get_settings
from app.services.errors import CardFileError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")
_CARD_FILENAME = re.compile(r"^idcard_[A-Za-z0-9_-]+_\d+\.pdf$")


class CardFileManager:
    """
    Manages ID card file storage and lifecycle

    File Structure:
    <FILE_STORAGE_PATH>/
    ├── idcards/
    │   └── idcard_<playerId>_<epoch-ms>.pdf
    └── uploads/ (profile photos, written by the registration layer)
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.base_path = self.settings.get_file_storage_path()
        self.cards_path = self.settings.get_idcards_path()

    def ensure_cards_directory(self) -> Path:
        """Create the cards directory if absent (safe to race across processes)"""
        self.cards_path.mkdir(parents=True, exist_ok=True)
        return self.cards_path

    def build_filename(self, player_id: str, timestamp_ms: int) -> str:
        safe_id = _UNSAFE_CHARS.sub("_", player_id).strip("_") or "player"
        return f"idcard_{safe_id}_{timestamp_ms}.pdf"

    def storage_path(self, file_path: Path) -> str:
        """Storage-relative path handed back to callers, e.g. /idcards/<file>.pdf"""
        return f"/{self.settings.IDCARDS_DIR_NAME}/{file_path.name}"

    def _open_exclusive(self, player_id: str) -> Tuple[Path, BinaryIO]:
        self.ensure_cards_directory()
        timestamp_ms = int(time.time() * 1000)
        while True:
            file_path = self.cards_path / self.build_filename(player_id, timestamp_ms)
            try:
                return file_path, open(file_path, "xb")
            except FileExistsError:
                # Same player within the same millisecond
                timestamp_ms += 1

    def _discard(self, file_path: Path) -> None:
        try:
            file_path.unlink()
            logger.info(f"Removed partial card file {file_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove partial card file {file_path}: {e}")

    @contextmanager
    def create_card_file(self, player_id: str):
        """
        Open a new, uniquely named card file for writing.

        Yields (path, handle). The handle is closed when the block exits;
        on any error the partial file is deleted.
        """
        file_path, handle = self._open_exclusive(player_id)
        logger.info(f"Opened card file {file_path}")
        try:
            with handle:
                yield file_path, handle
        except BaseException:
            self._discard(file_path)
            raise

    def sync_card_file(self, handle: BinaryIO) -> None:
        """Block until the written bytes are on disk"""
        handle.flush()
        os.fsync(handle.fileno())

    def resolve_card_file(self, filename: str) -> Path:
        """Map a card file name to its path, rejecting anything outside the cards directory"""
        if not _CARD_FILENAME.match(filename or ""):
            raise CardFileError(f"Invalid card file name: {filename}")
        return self.cards_path / filename

    def get_file_content(self, filename: str) -> Optional[bytes]:
        """
        Get the content of a card file

        Returns:
            File content as bytes or None if file doesn't exist
        """
        file_path = self.resolve_card_file(filename)
        if not file_path.exists():
            return None
        with open(file_path, "rb") as f:
            return f.read()

    def delete_card_file(self, filename: str) -> Dict[str, Any]:
        """Delete a card once the caller has delivered it"""
        file_path = self.resolve_card_file(filename)
        if not file_path.exists():
            logger.info(f"Card file {file_path} does not exist - already cleaned up")
            return {"filename": filename, "deleted": False, "bytes_freed": 0}

        size = file_path.stat().st_size
        file_path.unlink()
        logger.info(f"Deleted card file {file_path} ({size:,} bytes)")
        return {"filename": filename, "deleted": True, "bytes_freed": size}

    def resolve_photo_path(self, photo_ref: Optional[str]) -> Optional[Path]:
        """
        Resolve a stored profile photo reference to an existing file.

        Absolute paths are used as-is when they exist; anything else is
        taken relative to the storage root ("/uploads/x.jpg" included).
        """
        if not photo_ref:
            return None

        candidate = Path(photo_ref)
        if candidate.is_absolute() and candidate.is_file():
            return candidate

        relative = self.base_path / photo_ref.lstrip("/\\")
        if relative.is_file():
            return relative

        logger.warning(f"Profile photo not found: {photo_ref}")
        return None


# Service instance for dependency injection
card_file_manager = CardFileManager()
