"""Production log persistence: per-session output records and CSV export."""

import csv
import io
import math
import re
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Optional

from ..errors import PersistenceError
from ..logging.config import get_logger

CSV_HEADER = ("submitted_at", "left_ml", "right_ml", "total_ml")
CSV_BOM = "\ufeff"
SUBMITTED_AT_FORMAT = "%Y/%m/%d %H:%M:%S"

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class OutputRecord:
    """One submitted output measurement."""
    id: str
    left_ml: float
    right_ml: float
    submitted_at: str

    @property
    def total_ml(self) -> float:
        return self.left_ml + self.right_ml


def export_filename(now: Optional[datetime] = None) -> str:
    """Download name for a CSV export, stamped to the second."""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d-%H-%M-%S")
    return f"milk-records-{stamp}.csv"


def coerce_amount(value: Any) -> float:
    """Numeric prefix of ``value`` as a float; zero when there is none."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1))
    return number if math.isfinite(number) else 0.0


def _format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


class OutputLogStore:
    """SQLite-backed list of output records, newest first."""

    def __init__(self, db_path: str = "output_log.db"):
        self.db_path = Path(db_path)
        self.logger = get_logger("output_log.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS output_records (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    id TEXT NOT NULL UNIQUE,
                    left_ml REAL NOT NULL,
                    right_ml REAL NOT NULL,
                    submitted_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", db_path=str(self.db_path), error=str(e))
            raise PersistenceError(
                f"Database error: {e}",
                operation="sqlite",
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    def add_record(self, left_ml: Any, right_ml: Any,
                   submitted_at: Optional[datetime] = None) -> Optional[OutputRecord]:
        """
        Store a new record.

        Args:
            left_ml: Left-side amount; non-numeric input counts as zero
            right_ml: Right-side amount; non-numeric input counts as zero
            submitted_at: Submission moment, defaults to now

        Returns:
            The stored record, or None when neither amount is positive
        """
        left = coerce_amount(left_ml)
        right = coerce_amount(right_ml)
        if left <= 0 and right <= 0:
            return None

        record = OutputRecord(
            id=uuid.uuid4().hex,
            left_ml=left,
            right_ml=right,
            submitted_at=(submitted_at or datetime.now()).strftime(SUBMITTED_AT_FORMAT),
        )

        with self._lock:
            with self._get_connection() as conn:
                conn.execute("""
                    INSERT INTO output_records (id, left_ml, right_ml, submitted_at)
                    VALUES (?, ?, ?, ?)
                """, (record.id, record.left_ml, record.right_ml, record.submitted_at))
                conn.commit()

        self.logger.info("Output record stored", record_id=record.id, total_ml=record.total_ml)
        return record

    def delete_record(self, record_id: str) -> bool:
        """Delete a record; returns False when it did not exist."""
        with self._lock:
            with self._get_connection() as conn:
                cursor = conn.execute("DELETE FROM output_records WHERE id = ?", (record_id,))
                conn.commit()
                deleted = cursor.rowcount > 0

        self.logger.info("Output record deleted", record_id=record_id, deleted=deleted)
        return deleted

    def list_records(self) -> list[OutputRecord]:
        """All records, most recently submitted first."""
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT id, left_ml, right_ml, submitted_at
                FROM output_records ORDER BY seq DESC
            """).fetchall()

        return [
            OutputRecord(
                id=row["id"],
                left_ml=row["left_ml"],
                right_ml=row["right_ml"],
                submitted_at=row["submitted_at"],
            )
            for row in rows
        ]

    def export_csv(self) -> str:
        """
        Render all records as CSV text.

        Every field is double-quoted and the text starts with a UTF-8 BOM so
        spreadsheet tools detect the encoding. Returns an empty string when
        there is nothing to export.
        """
        records = self.list_records()
        if not records:
            return ""

        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for record in records:
            writer.writerow((
                record.submitted_at,
                _format_amount(record.left_ml),
                _format_amount(record.right_ml),
                _format_amount(record.total_ml),
            ))

        # Rows are newline-separated with no trailing newline
        return CSV_BOM + buffer.getvalue().rstrip("\n")

    def export_csv_file(self, directory: Path, now: Optional[datetime] = None) -> Optional[Path]:
        """Write the CSV export into ``directory``; None when there are no records."""
        content = self.export_csv()
        if not content:
            return None

        path = Path(directory) / export_filename(now)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(
                f"Failed to write CSV export: {e}",
                operation="export_csv",
                target=str(path)
            ) from e

        self.logger.info("Output records exported", path=str(path))
        return path
