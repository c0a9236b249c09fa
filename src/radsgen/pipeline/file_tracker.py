"""SQLite-based run ledger.

Records every L1R input file the converter saw (accumulated or skipped)
and every pass unit it flushed (written or skipped). Re-running the
converter on the same files overwrites their records.
"""

import sqlite3
import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional, Dict, List

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class FileProcessingTracker:
    """Tracks input files and output pass units of converter runs.

    **Database Schema:**

    SQLite table `l1r_files` (one row per input file):

    - file_id: File name (e.g., CS_OFFL_SIR_GDR_2__20140101T000000_..._C001.nc)
    - cycle_number, pass_number: Leading identity of the file
    - num_records: Number of 1 Hz records in the file
    - status: 'accumulated' or 'skipped'
    - error_message: Reason for skipping

    SQLite table `pass_units` (one row per flushed pass):

    - cycle_number, pass_number: Identity of the pass (primary key)
    - num_records: Records in the buffer at flush time
    - output_path: Written RADS pass file, NULL when skipped
    - status: 'written' or 'skipped'
    - reason: Why the pass was not written

    **Typical Usage:**

    Called internally by processor and commit policy. Query after a run::

        with FileProcessingTracker(db_path) as tracker:
            stats = tracker.get_statistics()
            print(f"Wrote {stats['passes_written']} passes")
    """

    def __init__(self, db_path: Path | str):
        """Initialize tracker.

        Parameters
        ----------
        db_path : Path or str
            Path to SQLite database file. Created if doesn't exist.
            Typically: <base_dir>/logs/radsgen_c2_tracker.db
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = None

        self._init_database()
        logger.info("File tracker initialized: %s", self.db_path)

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.row_factory = sqlite3.Row  # Enable dict-like access
        return self._conn

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        conn = self._get_connection()

        conn.execute("""
            CREATE TABLE IF NOT EXISTS l1r_files (
                file_id TEXT PRIMARY KEY,
                cycle_number INTEGER,
                pass_number INTEGER,
                num_records INTEGER,

                status TEXT NOT NULL,
                error_message TEXT,

                processed_at TEXT
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS pass_units (
                cycle_number INTEGER NOT NULL,
                pass_number INTEGER NOT NULL,
                num_records INTEGER,
                output_path TEXT,

                status TEXT NOT NULL,
                reason TEXT,

                flushed_at TEXT,
                PRIMARY KEY (cycle_number, pass_number)
            )
        """)
        conn.execute("CREATE INDEX IF NOT EXISTS idx_file_status ON l1r_files(status)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_pass_status ON pass_units(status)")
        conn.commit()

    def record_file(self, file_id: str, status: str,
                    cycle_number: Optional[int] = None,
                    pass_number: Optional[int] = None,
                    num_records: Optional[int] = None,
                    error: Optional[str] = None):
        """Record the outcome of one input file.

        Parameters
        ----------
        file_id : str
            Input file name.
        status : str
            'accumulated' when its records entered the pass buffer,
            'skipped' when the file was rejected.
        cycle_number, pass_number : int, optional
            Leading identity from the file header, if it could be read.
        num_records : int, optional
            Number of 1 Hz records in the file.
        error : str, optional
            Reason for skipping.
        """
        conn = self._get_connection()
        conn.execute("""
            INSERT OR REPLACE INTO l1r_files
            (file_id, cycle_number, pass_number, num_records, status, error_message, processed_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """, (file_id, cycle_number, pass_number, num_records, status, error, _now()))
        conn.commit()
        logger.debug("Recorded file %s: %s", file_id, status)

    def record_pass(self, cycle_number: int, pass_number: int, num_records: int,
                    status: str, output_path: Optional[Path] = None,
                    reason: Optional[str] = None):
        """Record the outcome of one pass flush ('written', 'skipped' or 'failed')."""
        conn = self._get_connection()
        conn.execute("""
            INSERT OR REPLACE INTO pass_units
            (cycle_number, pass_number, num_records, output_path, status, reason, flushed_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """, (
            cycle_number,
            pass_number,
            num_records,
            str(output_path) if output_path else None,
            status,
            reason,
            _now(),
        ))
        conn.commit()
        logger.debug("Recorded pass c%03d p%04d: %s", cycle_number, pass_number, status)

    def get_file_status(self, file_id: str) -> Optional[Dict]:
        """Get the ledger record of an input file, or None if never seen."""
        conn = self._get_connection()
        cursor = conn.execute("SELECT * FROM l1r_files WHERE file_id = ?", (file_id,))
        row = cursor.fetchone()
        if row:
            return dict(row)
        return None

    def get_pass_status(self, cycle_number: int, pass_number: int) -> Optional[Dict]:
        """Get the ledger record of a pass unit, or None if never flushed."""
        conn = self._get_connection()
        cursor = conn.execute("""
            SELECT * FROM pass_units WHERE cycle_number = ? AND pass_number = ?
        """, (cycle_number, pass_number))
        row = cursor.fetchone()
        if row:
            return dict(row)
        return None

    def get_passes(self, status: Optional[str] = None) -> List[Dict]:
        """List pass units ordered by cycle and pass, optionally by status."""
        conn = self._get_connection()
        query = "SELECT * FROM pass_units"
        params = []
        if status:
            query += " WHERE status = ?"
            params.append(status)
        query += " ORDER BY cycle_number, pass_number"
        cursor = conn.execute(query, params)
        return [dict(row) for row in cursor.fetchall()]

    def get_statistics(self) -> Dict:
        """Get summary statistics of the ledger.

        Returns
        -------
        dict
            - `files`: Input files recorded
            - `files_accumulated`, `files_skipped`
            - `passes_written`, `passes_skipped`, `passes_failed`
            - `records_written`: Sum of records over written passes
        """
        conn = self._get_connection()
        files = conn.execute("""
            SELECT
                COUNT(*) as files,
                COALESCE(SUM(CASE WHEN status = 'accumulated' THEN 1 ELSE 0 END), 0) as files_accumulated,
                COALESCE(SUM(CASE WHEN status = 'skipped' THEN 1 ELSE 0 END), 0) as files_skipped
            FROM l1r_files
        """).fetchone()
        passes = conn.execute("""
            SELECT
                COALESCE(SUM(CASE WHEN status = 'written' THEN 1 ELSE 0 END), 0) as passes_written,
                COALESCE(SUM(CASE WHEN status = 'skipped' THEN 1 ELSE 0 END), 0) as passes_skipped,
                COALESCE(SUM(CASE WHEN status = 'failed' THEN 1 ELSE 0 END), 0) as passes_failed,
                COALESCE(SUM(CASE WHEN status = 'written' THEN num_records ELSE 0 END), 0) as records_written
            FROM pass_units
        """).fetchone()
        return {**dict(files), **dict(passes)}

    def close(self):
        """Close database connection. Safe to call multiple times."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
