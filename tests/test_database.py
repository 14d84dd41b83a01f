import pytest

from eyecheck.database import DatabaseError, RecordDatabase, shared_database


@pytest.fixture
def db(tmp_path):
    with RecordDatabase(tmp_path / "records.db") as database:
        yield database


def test_seed_admin_present(db):
    assert db.admin_password("1") == "2"


def test_seed_record_present(db):
    assert db.records_for("17") == [("2001-01-01", "09:00:01", "yes")]


def test_insert_admin_round_trip(db):
    password = "password"
    db.insert_admin("7", password)
    assert db.admin_password("7") == password


def test_insert_admin_replaces(db):
    password = "password"
    db.insert_admin("7", password)
    db.insert_admin("7", "secret")
    assert db.admin_password("7") == "secret"


def test_missing_admin_is_none(db):
    assert db.admin_password("nobody") is None


def test_update_admin_password(db):
    new_password = "secret"
    db.update_admin_password("1", new_password)
    assert db.admin_password("1") == new_password


def test_records_newest_first(db):
    db.insert_record("42", "2024-05-01", "08:00:00", "yes")
    db.insert_record("42", "2024-05-02", "09:30:00", "NONE")
    assert db.records_for("42") == [
        ("2024-05-02", "09:30:00", "NONE"),
        ("2024-05-01", "08:00:00", "yes"),
    ]


def test_records_for_unknown_id_empty(db):
    assert db.records_for("nobody") == []


def test_create_tables_again_adds_seed_record(db):
    db.create_tables()
    assert db.records_for("17") == [("2001-01-01", "09:00:01", "yes")] * 2


def test_reopen_keeps_data(tmp_path):
    path = tmp_path / "keep.db"
    with RecordDatabase(path) as first:
        first.insert_record("5", "2024-01-01", "10:00:00", "yes")
    with RecordDatabase(path) as second:
        assert ("2024-01-01", "10:00:00", "yes") in second.records_for("5")


def test_closed_database_raises(tmp_path):
    database = RecordDatabase(tmp_path / "closed.db")
    database.close()
    with pytest.raises(DatabaseError):
        database.records_for("17")


def test_unopenable_path_raises(tmp_path):
    with pytest.raises(DatabaseError):
        RecordDatabase(tmp_path)


def test_shared_database_is_shared(tmp_path):
    path = tmp_path / "shared.db"
    first = shared_database(path)
    assert shared_database(path) is first
    first.close()


def test_shared_database_reopens_on_new_path(tmp_path):
    first = shared_database(tmp_path / "a.db")
    second = shared_database(tmp_path / "b.db")
    assert second is not first and first.closed
    second.close()