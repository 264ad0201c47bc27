"""SQLite-backed run log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from resume_customizer.logging.models import RunLog

DEFAULT_DB_PATH = Path.home() / ".resume-customizer" / "resume.db"

_COLUMNS = (
    "id",
    "timestamp",
    "provider",
    "style",
    "success",
    "fallback_used",
    "error_kind",
    "error_message",
    "input_tokens",
    "output_tokens",
    "elapsed_seconds",
    "company_or_role",
)


class RunStore:
    """SQLite-backed store for customization runs with WAL mode."""

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
                CREATE TABLE IF NOT EXISTS run_logs (
                    id TEXT PRIMARY KEY,
                    timestamp TEXT NOT NULL,
                    provider TEXT,
                    style TEXT,
                    success INTEGER NOT NULL DEFAULT 1,
                    fallback_used INTEGER NOT NULL DEFAULT 0,
                    error_kind TEXT,
                    error_message TEXT,
                    input_tokens INTEGER NOT NULL DEFAULT 0,
                    output_tokens INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    company_or_role TEXT
                )
            """)

    def save_log(self, log: RunLog) -> None:
        """Persist a run log entry."""
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._connect() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO run_logs ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                (
                    log.id,
                    log.timestamp.isoformat(),
                    log.provider,
                    log.style,
                    1 if log.success else 0,
                    1 if log.fallback_used else 0,
                    log.error_kind,
                    log.error_message,
                    log.input_tokens,
                    log.output_tokens,
                    log.elapsed_seconds,
                    log.company_or_role,
                ),
            )

    def get_logs(self, limit: int = 50) -> list[RunLog]:
        """Most recent runs first."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {', '.join(_COLUMNS)} FROM run_logs ORDER BY timestamp DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_stats(self) -> dict:
        """Aggregate counts over all runs, plus a per-error-kind breakdown."""
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*),
                       SUM(CASE WHEN fallback_used = 1 THEN 1 ELSE 0 END),
                       SUM(input_tokens),
                       SUM(output_tokens),
                       AVG(elapsed_seconds)
                   FROM run_logs"""
            ).fetchone()
            kinds = conn.execute(
                """SELECT error_kind, COUNT(*) FROM run_logs
                   WHERE error_kind IS NOT NULL GROUP BY error_kind"""
            ).fetchall()
        total = row[0] or 0
        fallbacks = row[1] or 0
        return {
            "total_runs": total,
            "fallback_runs": fallbacks,
            "fallback_rate": (fallbacks / total * 100) if total else 0.0,
            "total_input_tokens": row[2] or 0,
            "total_output_tokens": row[3] or 0,
            "avg_elapsed_seconds": round(row[4], 2) if row[4] is not None else None,
            "error_kinds": dict(kinds),
        }

    @staticmethod
    def _row_to_log(row: tuple) -> RunLog:
        return RunLog(
            id=row[0],
            timestamp=datetime.fromisoformat(row[1]),
            provider=row[2],
            style=row[3],
            success=bool(row[4]),
            fallback_used=bool(row[5]),
            error_kind=row[6],
            error_message=row[7],
            input_tokens=row[8],
            output_tokens=row[9],
            elapsed_seconds=row[10],
            company_or_role=row[11],
        )
