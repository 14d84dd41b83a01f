"""SQLite storage for administrator accounts and check-in records."""

from __future__ import annotations

import logging
import os
import sqlite3
import threading

logger = logging.getLogger(__name__)

_CREATE_ADMIN = (
    "CREATE TABLE IF NOT EXISTS admin("
    "id   TEXT PRIMARY KEY,"
    "pwd  TEXT NOT NULL)"
)
_CREATE_RECORD = (
    "CREATE TABLE IF NOT EXISTS record("
    "rec_id INTEGER PRIMARY KEY AUTOINCREMENT,"
    "id     TEXT,"
    "date   TEXT,"
    "time   TEXT,"
    "valid  TEXT,"
    "FOREIGN KEY(id) REFERENCES admin(id))"
)


class DatabaseError(Exception):
    """Raised when the database cannot be opened or a statement fails."""


class RecordDatabase:
    """Connection to the record database, with its two tables created on open."""

    def __init__(self, path):
        self.path = os.fspath(path)
        self.closed = False
        self._lock = threading.RLock()
        try:
            self.connection = sqlite3.connect(self.path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise DatabaseError(f"Open DB failed: {exc}") from exc
        try:
            self.create_tables()
        except DatabaseError:
            self.close()
            raise

    def _execute(self, sql, params=()):
        with self._lock:
            try:
                with self.connection:
                    return self.connection.execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                raise DatabaseError(str(exc)) from exc

    def create_tables(self):
        """Create the admin and record tables and insert the seed rows."""
        try:
            self._execute(_CREATE_ADMIN)
        except DatabaseError as exc:
            raise DatabaseError(f"Create admin table failed: {exc}") from exc
        try:
            self._execute(_CREATE_RECORD)
        except DatabaseError as exc:
            raise DatabaseError(f"Create record table failed: {exc}") from exc
        self.insert_admin("1", "2")
        self.insert_record("17", "2001-01-01", "09:00:01", "yes")

    def insert_admin(self, admin_id, password):
        """Insert an administrator, replacing one with the same id."""
        try:
            self._execute(
                "INSERT OR REPLACE INTO admin(id, pwd) VALUES(?, ?)",
                (admin_id, password),
            )
        except DatabaseError as exc:
            raise DatabaseError(f"Insert admin failed: {exc}") from exc

    def admin_password(self, admin_id):
        """Return the password stored for an administrator, or None."""
        rows = self._execute("SELECT pwd FROM admin WHERE id = ?", (admin_id,))
        return str(rows[0][0]) if rows else None

    def insert_record(self, person_id, date, time, valid):
        """Append one check-in record."""
        try:
            self._execute(
                "INSERT INTO record(id, date, time, valid) VALUES(?, ?, ?, ?)",
                (person_id, date, time, valid),
            )
        except DatabaseError as exc:
            raise DatabaseError(f"Insert record failed: {exc}") from exc

    def records_for(self, person_id):
        """Return (date, time, valid) tuples for an id, newest first."""
        rows = self._execute(
            "SELECT date, time, valid FROM record WHERE id = ? ORDER BY rec_id DESC",
            (person_id,),
        )
        return [tuple("" if value is None else str(value) for value in row) for row in rows]

    def update_admin_password(self, admin_id, new_password):
        """Change the password of an existing administrator."""
        self._execute("UPDATE admin SET pwd=? WHERE id=?", (new_password, admin_id))

    def close(self):
        """Close the connection; later statements raise DatabaseError."""
        with self._lock:
            if not self.closed:
                self.connection.close()
                self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


_shared = None
_shared_lock = threading.Lock()


def shared_database(path):
    """Return the process-wide database, reopening it if the path changes."""
    global _shared
    wanted = os.fspath(path)
    with _shared_lock:
        if _shared is None or _shared.closed or _shared.path != wanted:
            if _shared is not None:
                _shared.close()
            _shared = RecordDatabase(wanted)
        return _shared