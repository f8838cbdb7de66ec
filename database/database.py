import logging
import sqlite3
from contextlib import contextmanager

from database.schema import kv_schema
from config import DB_PATH


# KEY-VALUE COMMANDS =========================================

def get_value(key):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute('SELECT value FROM kv_store WHERE key = ?', (key,))
        row = cursor.fetchone()
        if row:
            return row['value']
        return None


def set_value(key, value):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            """INSERT INTO kv_store (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET
                   value = excluded.value,
                   updated_at = datetime('now')
            """,
            (key, value)
        )
        logging.debug(f"Stored key: {key}")


def remove_value(key):
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute('DELETE FROM kv_store WHERE key = ?', (key,))
        logging.debug(f"Removed key: {key}")


# DB CONNECTION ==============================================

@contextmanager
def get_db():
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row

    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db():
    with get_db() as conn:
        conn.execute(kv_schema)
