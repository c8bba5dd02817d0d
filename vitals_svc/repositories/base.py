"""
Base database connection and initialization.

This module handles database connection management and schema initialization.
Optimized for SQLite concurrency with WAL mode and busy_timeout.

IMPORTANT: Database instantiation should be done through the DI layer.
Use core.dependencies.get_database() instead of instantiating directly.
"""
import sqlite3
import logging
from typing import Optional
from pathlib import Path

from core.config import DATABASE_PATH, DATABASE_BUSY_TIMEOUT

logger = logging.getLogger(__name__)


class Database:
    """
    SQLite database connection manager with concurrency optimizations.

    Features:
    - WAL mode for better concurrent read/write performance
    - Busy timeout to handle lock contention gracefully
    - UTC ISO 8601 timestamps for all stored instants

    Usage:
        # Via dependency injection (recommended):
        from core.dependencies import get_database
        db = get_database()

        # Direct instantiation (for testing):
        db = Database(db_path="/tmp/test.db")
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        db_dir = Path(self.db_path).parent
        db_dir.mkdir(parents=True, exist_ok=True)

        self._init_db()

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        """Configure connection with optimal settings for concurrency."""
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")
        conn.execute("PRAGMA foreign_keys = ON")

    def _init_db(self) -> None:
        """Initialize database schema and enable WAL mode if not already enabled."""
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        cursor = conn.cursor()

        # WAL mode persists in the database file, so this only needs to run once
        cursor.execute("PRAGMA journal_mode = WAL")
        result = cursor.fetchone()
        if result and result[0].lower() == 'wal':
            logger.info(f"SQLite WAL mode enabled for {self.db_path}")
        else:
            logger.warning(f"Failed to enable WAL mode, current mode: {result}")

        # Records are scoped by owner_id; every query filters on it.
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS vital_records (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                systolic INTEGER NOT NULL,
                diastolic INTEGER NOT NULL,
                heart_rate INTEGER NOT NULL,
                spo2 INTEGER NOT NULL,
                temperature REAL NOT NULL,
                weight INTEGER NOT NULL,
                timestamp TEXT NOT NULL,
                date TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_vital_records_owner_ts
            ON vital_records (owner_id, timestamp)
        """)

        # Shared reports are never updated or purged; expiry is checked on read.
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS shared_reports (
                id TEXT PRIMARY KEY,
                owner_id TEXT NOT NULL,
                owner_name TEXT NOT NULL,
                window_days INTEGER,
                total_records INTEGER NOT NULL,
                created_at TEXT NOT NULL,
                expires_at TEXT NOT NULL,
                html_content TEXT NOT NULL,
                preview TEXT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_shared_reports_owner
            ON shared_reports (owner_id, created_at)
        """)

        conn.commit()
        conn.close()

        logger.info(
            f"Database initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a new database connection with concurrency settings.

        Returns:
            sqlite3.Connection: A new database connection configured for
                concurrent access with busy timeout set.
        """
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        return conn
