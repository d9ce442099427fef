import os
import sqlite3
import threading


class Database:
    # Serialises schema creation across request threads
    _lock = threading.Lock()

    @staticmethod
    def connect(path):
        """Open a sqlite connection with dict-like rows.

        The parent directory is created on first use so a fresh DB_DIR
        works without a setup step.
        """
        db_dir = os.path.dirname(path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        return conn

    @classmethod
    def execute_script(cls, path, statements):
        """Run a sequence of DDL statements once, under the schema lock."""
        with cls._lock:
            with cls.connect(path) as conn:
                cursor = conn.cursor()
                for statement in statements:
                    cursor.execute(statement)
                conn.commit()

    @staticmethod
    def table_exists(path, table):
        if not os.path.isfile(path):
            return False
        with Database.connect(path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
                (table,)
            )
            return cursor.fetchone() is not None
