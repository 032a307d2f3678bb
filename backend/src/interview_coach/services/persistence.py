"""JSON file persistence for users and session history."""

import json
import logging
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class PersistenceService:
    """Manages JSON documents under ``data_dir``.

    Document names are relative paths such as ``users.json`` or
    ``history/{user_id}.json``.
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path(self, name: str) -> Path:
        dest = self._data_dir / name
        dest.parent.mkdir(parents=True, exist_ok=True)
        return dest

    # -- JSON read / write ---------------------------------------------------

    def load_json(self, name: str) -> Any | None:
        path = self._data_dir / name
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text("utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to load %s: %s", name, e)
            return None

    def save_json(self, name: str, data: Any) -> None:
        self._atomic_write(self.path(name), json.dumps(data, ensure_ascii=False, indent=2))
        logger.info("Persisted %s", name)

    def delete(self, name: str) -> None:
        path = self._data_dir / name
        if path.exists():
            path.unlink()
            logger.info("Deleted %s", name)

    # -- internal ------------------------------------------------------------

    @staticmethod
    def _atomic_write(dest: Path, content: str) -> None:
        """Write via temp file + rename to avoid partial writes."""
        tmp_fd, tmp_path = tempfile.mkstemp(
            dir=str(dest.parent), suffix=".tmp"
        )
        try:
            with open(tmp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            Path(tmp_path).replace(dest)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
