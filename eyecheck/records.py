"""Filterable view of the check-in record table, with CSV export and deletion."""

from __future__ import annotations

import re
import sqlite3

from eyecheck.database import DatabaseError

HEADERS = ("序号", "ID", "日期", "时间", "是否")
COLUMNS = ("rec_id", "id", "date", "time", "valid")

_INTEGER = re.compile(r"[+-]?\d+")


def _to_int(text):
    """Read text as an integer the lenient way a form field does; 0 if it is not one."""
    stripped = str(text).strip()
    return int(stripped) if _INTEGER.fullmatch(stripped) else 0


class RecordTable:
    """The rows of the record table, as seen through the current filter."""

    def __init__(self, database):
        self.database = database
        self._where = ""
        self._params = ()
        self.rows = []
        self.select()

    def _query(self, sql, params=()):
        try:
            with self.database.connection as conn:
                return conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    def set_filter_by_id(self, text):
        """Show only the records whose id equals text read as an integer."""
        self._where = "id = ?"
        self._params = (str(_to_int(text)),)
        return self.select()

    def set_date_range(self, start, end):
        """Show only the records dated from start to end, both included."""
        self._where = "date >= ? AND date <= ?"
        self._params = (start.strftime("%Y-%m-%d"), end.strftime("%Y-%m-%d"))
        return self.select()

    def clear_filter(self):
        """Show every record."""
        self._where = ""
        self._params = ()
        return self.select()

    def select(self):
        """Reload the rows that pass the current filter and return them."""
        columns = ", ".join(COLUMNS)
        sql = f"SELECT {columns} FROM record"
        if self._where:
            sql += f" WHERE {self._where}"
        sql += " ORDER BY rec_id"
        self.rows = [
            (row[0],) + tuple("" if value is None else str(value) for value in row[1:])
            for row in self._query(sql, self._params)
        ]
        return list(self.rows)

    def export_csv(self, path):
        """Write the header and the shown rows to a UTF-8 CSV file with a byte order mark."""
        lines = [",".join(HEADERS)]
        lines.extend(",".join(str(value) for value in row) for row in self.rows)
        with open(path, "w", encoding="utf-8-sig", newline="") as handle:
            handle.write("".join(line + "\n" for line in lines))
        return len(self.rows)

    def clear_all(self):
        """Delete every record, dropping the filter first."""
        self._where = ""
        self._params = ()
        self.select()
        self._query("DELETE FROM record")
        return self.select()

    def delete_row(self, row):
        """Delete the shown row at the given index."""
        if not 0 <= row < len(self.rows):
            raise IndexError(f"no record at row {row}")
        self._query("DELETE FROM record WHERE rec_id = ?", (self.rows[row][0],))
        return self.select()