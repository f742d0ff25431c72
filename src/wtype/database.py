import logging
import os
import sqlite3
from typing import List

from fastapi.concurrency import run_in_threadpool

from .config import settings
from .errors import SubmitFailure
from .models import Result

logger = logging.getLogger(__name__)


def get_db_connection():
    """Establishes a connection to the SQLite database."""
    db_path = os.path.join(settings.DB_DIR, settings.DB_FILE)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def create_log_table():
    """Creates the log table if it doesn't exist."""
    conn = get_db_connection()
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
                level TEXT,
                message TEXT
            );
        """
        )
    conn.close()


def create_results_table():
    """Creates the results table if it doesn't exist."""
    conn = get_db_connection()
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS results (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                wpm INTEGER NOT NULL,
                accuracy INTEGER NOT NULL,
                timestamp INTEGER NOT NULL
            );
        """
        )
    conn.close()


def init_db():
    """Initializes the database and creates necessary tables."""
    if not os.path.exists(settings.DB_DIR):
        os.makedirs(settings.DB_DIR)
    create_log_table()
    create_results_table()


class ResultStore:
    """Keeps finished-session results in the ``results`` table."""

    def save(self, result: Result):
        try:
            conn = get_db_connection()
            with conn:
                conn.execute(
                    "INSERT INTO results (wpm, accuracy, timestamp) VALUES (?, ?, ?)",
                    (result.wpm, result.accuracy, result.timestamp),
                )
            conn.close()
        except sqlite3.Error as e:
            raise SubmitFailure(f"Could not store result: {e}") from e

    def recent(self, limit: int = settings.RESULTS_LIMIT) -> List[Result]:
        conn = get_db_connection()
        rows = conn.execute(
            "SELECT wpm, accuracy, timestamp FROM results "
            "ORDER BY timestamp DESC, id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        conn.close()
        return [Result(**dict(row)) for row in rows]

    async def submit(self, result: Result):
        await run_in_threadpool(self.save, result)
        logger.info(f"Stored result: {result.wpm} wpm, {result.accuracy}%")
