import logging

from .database import get_db_connection


class SQLiteHandler(logging.Handler):
    """
    Writes warnings and errors into the ``logs`` table so failed fetches and
    submissions can be looked up after the fact.
    """

    def __init__(self, level=logging.WARNING):
        super().__init__(level)
        self.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    def emit(self, record):
        try:
            conn = get_db_connection()
            with conn:
                conn.execute(
                    "INSERT INTO logs (level, message) VALUES (?, ?)",
                    (record.levelname, self.format(record)),
                )
            conn.close()
        except Exception:
            self.handleError(record)
