"""Persistent grid document store.

Grids are saved as JSON documents under ``local_db/grids/`` wrapping the
output of :meth:`Grid.to_jsonable` with an id, a timestamp and a name.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..core.exceptions import GridFormatError
from ..utils.logger import get_logger
from .grid import Grid


LOGGER = get_logger(__name__)

DEFAULT_STORE_DIR = Path("local_db/grids")


class GridStore:
    """Save and reload grids as structured JSON documents."""

    def __init__(self, store_dir: Path | str = DEFAULT_STORE_DIR) -> None:
        self.store_dir = Path(store_dir)
        self.store_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def save(self, grid: Grid, name: Optional[str] = None) -> str:
        """Persist ``grid`` and return its document ID."""
        doc_id = self._new_id()
        doc = {
            "id": doc_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "name": name or "",
            "grid": grid.to_jsonable(),
        }
        self._path(doc_id).write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
        LOGGER.info("Grid saved: %s", doc_id)
        return doc_id

    def load(self, doc_id: str) -> Grid:
        path = self._path(doc_id)
        if not path.exists():
            raise FileNotFoundError(f"No stored grid {doc_id} in {self.store_dir}")
        try:
            doc = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise GridFormatError(f"Stored grid {doc_id} is not valid JSON: {exc}") from exc
        if not isinstance(doc, dict) or "grid" not in doc:
            raise GridFormatError(f"Stored grid {doc_id} has no 'grid' section")
        return Grid.deserialize(doc["grid"])

    def list_ids(self) -> List[str]:
        return sorted(path.stem for path in self.store_dir.glob("*.json"))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _path(self, doc_id: str) -> Path:
        return self.store_dir / f"{doc_id}.json"

    @staticmethod
    def _new_id() -> str:
        ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
        short_uuid = uuid.uuid4().hex[:8]
        return f"{ts}_{short_uuid}"
