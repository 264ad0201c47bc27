"""SQLite-backed archive of generated resumes, plus user settings."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from resume_customizer.errors import ArchiveError
from resume_customizer.models.archive import ArchiveItem
from resume_customizer.models.customization import DisplayConfig
from resume_customizer.models.resume import ResumeDocument

DEFAULT_DB_PATH = Path.home() / ".resume-customizer" / "resume.db"
DEFAULT_TARGET_PAGES = 2


class ArchiveStore:
    """Archived resume variants, at most one of them marked current.

    Each operation opens its own connection; concurrent writers are not
    coordinated and the last one wins.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS archive (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    label TEXT NOT NULL,
                    data TEXT NOT NULL,
                    config TEXT NOT NULL,
                    is_current INTEGER NOT NULL DEFAULT 0,
                    date TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS settings (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

    # --- archive ---

    def save(
        self,
        label: str,
        document: ResumeDocument,
        config: DisplayConfig | None = None,
    ) -> ArchiveItem:
        """Archive a resume under a non-blank label. New items are not current."""
        label = (label or "").strip()
        if not label:
            raise ArchiveError("Archive label must not be blank")
        config = config or DisplayConfig()
        date = datetime.now()
        with self._connect() as conn:
            cur = conn.execute(
                "INSERT INTO archive (label, data, config, is_current, date) VALUES (?, ?, ?, 0, ?)",
                (
                    label,
                    document.to_json(indent=None),
                    json.dumps(config.model_dump(by_alias=True)),
                    date.isoformat(),
                ),
            )
            item_id = cur.lastrowid
        return ArchiveItem(id=item_id, label=label, data=document, config=config, date=date)

    def list(self) -> list[ArchiveItem]:
        """All items in insertion order."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, label, data, config, is_current, date FROM archive ORDER BY id"
            ).fetchall()
        return [self._row_to_item(row) for row in rows]

    def get(self, item_id: int) -> ArchiveItem:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, label, data, config, is_current, date FROM archive WHERE id = ?",
                (item_id,),
            ).fetchone()
        if row is None:
            raise ArchiveError(f"Archive item {item_id} not found")
        return self._row_to_item(row)

    def set_current(self, item_id: int) -> ArchiveItem:
        """Mark one item current and clear the flag on all others."""
        with self._connect() as conn:
            exists = conn.execute("SELECT 1 FROM archive WHERE id = ?", (item_id,)).fetchone()
            if exists is None:
                raise ArchiveError(f"Archive item {item_id} not found")
            conn.execute(
                "UPDATE archive SET is_current = CASE WHEN id = ? THEN 1 ELSE 0 END",
                (item_id,),
            )
        return self.get(item_id)

    def get_current(self) -> ArchiveItem | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, label, data, config, is_current, date FROM archive "
                "WHERE is_current = 1 ORDER BY id LIMIT 1"
            ).fetchone()
        return self._row_to_item(row) if row else None

    def delete(self, item_id: int) -> None:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM archive WHERE id = ?", (item_id,))
        if cur.rowcount == 0:
            raise ArchiveError(f"Archive item {item_id} not found")

    # --- settings ---

    def get_target_pages(self) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM settings WHERE key = 'target_pages'"
            ).fetchone()
        return int(row[0]) if row else DEFAULT_TARGET_PAGES

    def set_target_pages(self, pages: int) -> int:
        """Store the target page count, clamped to at least 1."""
        pages = max(1, int(pages))
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO settings (key, value) VALUES ('target_pages', ?)",
                (str(pages),),
            )
        return pages

    @staticmethod
    def _row_to_item(row: tuple) -> ArchiveItem:
        return ArchiveItem(
            id=row[0],
            label=row[1],
            data=ResumeDocument.from_wire(json.loads(row[2])),
            config=DisplayConfig.model_validate(json.loads(row[3])),
            is_current=bool(row[4]),
            date=datetime.fromisoformat(row[5]),
        )
