"""Content-addressed persistence of uploads and their structured results.

Each fingerprint owns two files under the store root: the raw image
(``<fingerprint>.png``) and the validated result (``<fingerprint>.json``).
A lookup is a plain existence check and read of the JSON file.
"""

import json
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from bill_extract.utils.logger import get_logger

from .errors import StorageFailure
from .models import StructuredResult

logger = get_logger(__name__)


class ResultStore(Protocol):
    """Capability interface for cache backends."""

    def lookup(self, fingerprint: str) -> StructuredResult | None: ...

    def put(
        self, fingerprint: str, raw_bytes: bytes, result: StructuredResult
    ) -> None: ...


class FileResultStore:
    """Local-filesystem result store keyed by content fingerprint.

    Args:
        root: Directory holding the stored artifacts. Created on first write.
        image_suffix: File suffix used for the raw upload.
    """

    def __init__(self, root: Path | str, image_suffix: str = ".png") -> None:
        self.root = Path(root).expanduser()
        self.image_suffix = image_suffix

    def image_path(self, fingerprint: str) -> Path:
        return self.root / f"{fingerprint}{self.image_suffix}"

    def result_path(self, fingerprint: str) -> Path:
        return self.root / f"{fingerprint}.json"

    def lookup(self, fingerprint: str) -> StructuredResult | None:
        """Return the stored result for ``fingerprint``, if any.

        An artifact that can no longer be read or validated counts as a miss.
        """
        path = self.result_path(fingerprint)
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return StructuredResult.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable cache entry %s: %s", path, exc)
            return None

    def put(
        self, fingerprint: str, raw_bytes: bytes, result: StructuredResult
    ) -> None:
        """Persist the raw upload and its result under ``fingerprint``.

        Raises:
            StorageFailure: If either artifact could not be written.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self.image_path(fingerprint).write_bytes(raw_bytes)
            self.result_path(fingerprint).write_text(
                result.to_json(), encoding="utf-8"
            )
        except OSError as exc:
            raise StorageFailure(
                f"Failed to store result for {fingerprint}",
                {"root": str(self.root), "error": str(exc)},
            ) from exc
        logger.debug("Stored result for %s under %s", fingerprint, self.root)
