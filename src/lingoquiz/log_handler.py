import logging

from .database import get_db_connection


class SQLiteHandler(logging.Handler):
    """
    A logging handler that keeps session and engine logs in the ``logs``
    table of the quiz database, next to the stored sessions.
    """

    def __init__(self, level=logging.INFO):
        super().__init__(level)
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record):
        try:
            conn = get_db_connection()
            with conn:
                conn.execute(
                    "INSERT INTO logs (level, logger, message) VALUES (?, ?, ?)",
                    (record.levelname, record.name, self.format(record)),
                )
            conn.close()
        except Exception:
            self.handleError(record)
