"""Durable storage for explicit primary-term assignments."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

DEFAULT_DB_PATH = Path("data/crumbtrail.sqlite")
LOGGER = logging.getLogger(__name__)


class PrimaryTermStore:
    """SQLite-backed metadata store for ``(post, taxonomy) -> term`` pairs.

    A stored value of ``0`` means "unset"; reads for unknown pairs return ``0``.
    """

    def __init__(self, db_path: Path | str = DEFAULT_DB_PATH) -> None:
        self.db_path = Path(db_path)
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = self._open_connection()
        self._bootstrap()

    def close(self) -> None:
        if getattr(self, "_conn", None) is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None

    def __enter__(self) -> "PrimaryTermStore":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _open_connection(self) -> sqlite3.Connection:
        connection = sqlite3.connect(str(self.db_path))
        connection.row_factory = sqlite3.Row
        return connection

    def _bootstrap(self) -> None:
        self._conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS primary_terms (
                post_id INTEGER NOT NULL,
                taxonomy TEXT NOT NULL,
                term_id INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (post_id, taxonomy)
            );
            """
        )
        self._conn.commit()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        try:
            yield self._conn
            self._conn.commit()
        except Exception:
            self._conn.rollback()
            raise

    def get_primary_term_id(self, post_id: int, taxonomy: str) -> int:
        cursor = self._conn.execute(
            "SELECT term_id FROM primary_terms WHERE post_id = ? AND taxonomy = ?",
            (int(post_id), taxonomy),
        )
        row = cursor.fetchone()
        if not row:
            return 0
        return int(row["term_id"] or 0)

    def set_primary_term_id(self, post_id: int, taxonomy: str, term_id: int) -> None:
        with self._transaction():
            self._conn.execute(
                """
                INSERT INTO primary_terms (post_id, taxonomy, term_id)
                VALUES (?, ?, ?)
                ON CONFLICT(post_id, taxonomy) DO UPDATE SET
                    term_id = excluded.term_id
                """,
                (int(post_id), taxonomy, int(term_id)),
            )
        LOGGER.debug("Stored primary term %s for post %s in %s", term_id, post_id, taxonomy)

    def list_assignments(self) -> List[Tuple[int, str, int]]:
        cursor = self._conn.execute(
            "SELECT post_id, taxonomy, term_id FROM primary_terms ORDER BY post_id, taxonomy"
        )
        return [(row["post_id"], row["taxonomy"], row["term_id"]) for row in cursor.fetchall()]
