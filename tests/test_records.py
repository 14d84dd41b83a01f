from datetime import date

import pytest

from eyecheck.database import DatabaseError, RecordDatabase
from eyecheck.records import HEADERS, RecordTable

SEED = ("17", "2001-01-01", "09:00:01", "yes")


@pytest.fixture
def database(tmp_path):
    db = RecordDatabase(tmp_path / "records.db")
    yield db
    db.close()


def test_initial_select_shows_seed_row(database):
    table = RecordTable(database)
    assert [row[1:] for row in table.rows] == [SEED]


def test_filter_by_id_reads_integer(database):
    database.insert_record("5", "2020-02-02", "10:00:00", "yes")
    database.insert_record("6", "2020-02-03", "10:00:00", "yes")
    table = RecordTable(database)
    rows = table.set_filter_by_id(" 05")
    assert [row[1] for row in rows] == ["5"]


def test_filter_by_non_number_matches_id_zero(database):
    database.insert_record("0", "2020-02-02", "10:00:00", "yes")
    table = RecordTable(database)
    rows = table.set_filter_by_id("abc")
    assert [row[1] for row in rows] == ["0"]


def test_date_range_is_inclusive(database):
    database.insert_record("1", "2020-01-01", "08:00:00", "yes")
    database.insert_record("1", "2020-01-31", "08:00:00", "yes")
    database.insert_record("1", "2020-02-01", "08:00:00", "yes")
    table = RecordTable(database)
    rows = table.set_date_range(date(2020, 1, 1), date(2020, 1, 31))
    assert [row[2] for row in rows] == ["2020-01-01", "2020-01-31"]


def test_clear_filter_shows_everything(database):
    database.insert_record("9", "2020-01-01", "08:00:00", "yes")
    table = RecordTable(database)
    table.set_filter_by_id("9")
    assert len(table.clear_filter()) == 2


def test_export_csv_writes_bom_header_and_rows(database, tmp_path):
    table = RecordTable(database)
    target = tmp_path / "out.csv"
    count = table.export_csv(target)
    raw = target.read_bytes()
    assert raw.startswith(b"\xef\xbb\xbf")
    lines = raw.decode("utf-8-sig").splitlines()
    assert count == 1
    assert lines[0] == ",".join(HEADERS)
    assert lines[1].split(",")[1:] == list(SEED)


def test_clear_all_removes_records_and_filter(database):
    database.insert_record("3", "2020-01-01", "08:00:00", "yes")
    table = RecordTable(database)
    table.set_filter_by_id("3")
    assert table.clear_all() == []
    assert database.records_for("17") == []
    database.insert_record("4", "2020-01-01", "08:00:00", "yes")
    assert len(table.select()) == 1


def test_delete_row_removes_only_that_row(database):
    database.insert_record("8", "2020-03-03", "08:00:00", "no")
    table = RecordTable(database)
    rows = table.delete_row(0)
    assert [row[1:] for row in rows] == [("8", "2020-03-03", "08:00:00", "no")]
    assert database.records_for("17") == []


@pytest.mark.parametrize("row", [-1, 1, 5])
def test_delete_row_out_of_range(database, row):
    table = RecordTable(database)
    with pytest.raises(IndexError):
        table.delete_row(row)


def test_select_on_closed_database_raises(database):
    table = RecordTable(database)
    database.close()
    with pytest.raises(DatabaseError):
        table.select()