# eyecheck

eyecheck keeps check-in records in a small SQLite database and runs a
cascade-style detector over camera frames. It provides:

- `eyecheck.database`: the record database (administrators and check-in records);
- `eyecheck.records`: a filterable view of the records, with CSV export and deletion;
- `eyecheck.camera`: frame conversion, detection with red boxes and labels, and a
  background capture worker;
- `eyecheck.app`: a controller that ties the worker, an activity log and the
  database together, and the `eyecheck` command;
- `eyecheck.keyboard`: a model of an on-screen keyboard that types into a line edit.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The `eyecheck` command

```
eyecheck [--db FILE] [--dev-root DIR] [--export CSV] [--id ID] [--from DATE --to DATE]
```

The command opens the database (`mysql.db` by default, creating its tables
and seed rows), prints the current time as `yyyy年MM月dd日  hh:mm:ss`, and
prints the name of each camera device `video0`, `video1` and `video2` that
exists under `--dev-root` (default `/dev`).

With `--export CSV` it also writes the records to that file. `--from` and
`--to` (ISO dates, given together) limit the export to that inclusive date
range; otherwise `--id` limits it to one person id. The command then prints
`导出完成！` and the file name.

## Library use

### The record database

`RecordDatabase(path)` opens (or creates) the database and calls
`create_tables()`, which creates the `admin` and `record` tables and inserts
a seed administrator `"1"` and a seed record for id `"17"`. Every call to
`create_tables()` inserts the seed record again.

```python
from eyecheck.database import RecordDatabase

with RecordDatabase("records.db") as db:
    db.insert_record("17", "2024-05-01", "09:00:01", "yes")
    for date, time, valid in db.records_for("17"):  # newest first
        print(date, time, valid)
```

Other methods: `insert_admin(admin_id, password)` (replaces an existing id),
`admin_password(admin_id)` (returns `None` if unknown),
`update_admin_password(admin_id, new_password)` and `close()`. Failed
statements, and statements on a closed database, raise `DatabaseError`.

`shared_database(path)` returns one instance for the whole process; calling
it with another path closes the old one and opens the new one.

### Browsing and exporting records

`RecordTable(database)` loads every record as `(rec_id, id, date, time, valid)`
rows, ordered by `rec_id`.

```python
import datetime
from eyecheck.records import RecordTable

table = RecordTable(db)
table.set_date_range(datetime.date(2024, 5, 1), datetime.date(2024, 5, 31))
table.export_csv("may.csv")   # UTF-8 with BOM, header row first; returns the row count
table.set_filter_by_id("17")  # text that is not an integer filters on id "0"
table.clear_filter()
```

`select()` reloads and returns the rows passing the current filter.
`delete_row(row)` deletes the shown row at that index (`IndexError` if out
of range). `clear_all()` drops the filter and deletes every record.

### Detection

`detect_and_draw(frame, detector)` takes a uint8 BGR `numpy` frame. It
converts it to an equalised grey image and calls
`detector(gray, scale_factor=1.1, min_neighbors=3, min_size=(30, 30))`,
which must return `(x, y, width, height)` rectangles. Each hit is boxed in
red and labelled on the frame in place. It returns `"yes"` when there is at
least one hit, `"NONE"` when there is none, and `"NO_CASCADE"` when the
detector is `None`.

`to_rgb(frame)` turns a uint8 grey, BGR or BGRA array into a PIL image.

`CameraWorker(capture_factory, detector_loader, on_frame, on_result)` runs the
capture loop. `capture_factory(camera_id, width=640, height=480, fps=15)` must
return an object with `read()` and `release()`, or `None`;
`detector_loader(path)` must return a detector or `None`. Each raw frame goes
to `on_frame(image)` and each annotated frame to `on_result(image, text)`.
`start()` runs the loop on a background thread; `stop()` and `wait()` end it;
`is_running()` reports on it. `set_camera` and `set_cascade` switch camera or
detector file. `run()` raises `CameraError` if the camera or detector cannot
be opened; when started with `start()`, that error is logged and kept in the
worker's `error` attribute.

### Controller

`Controller(database, worker, clock=None)` keeps an activity log of lines of
the form `yyyy-MM-dd hh:mm:ss  message`. `toggle_camera(index)` opens or
closes the camera, `switch_camera(index)` restarts the worker on another
camera, `handle_result(image, text)` logs the result, keeps the image and
stores a record for id `"17"` with validity `"1%"`, and `clear_log()`
empties the log. `format_clock`, `format_log_line` and
`scan_camera_devices` are available on their own.

### Soft keyboard

`SoftKeyboard` models a keyboard with a row of digits, three rows of letters
and the keys `Space`, `Backspace`, `Enter` and `关闭`. Key presses go to the
bound `LineEdit`; with none bound they do nothing. `Enter`, `关闭` and
`press_escape()` hide it. `focus_in(edit, position)` binds an edit and shows
the keyboard there if hidden; `mouse_press` and `mouse_move` drag it.
Pressing an unknown key raises `ValueError`.

```python
from eyecheck.keyboard import LineEdit, SoftKeyboard

keyboard = SoftKeyboard()
edit = LineEdit()
keyboard.set_focus_edit(edit)
keyboard.press("a")
keyboard.press("Space")
keyboard.press("Backspace")
print(edit.text)  # "a"
```

## What it does not do

eyecheck has no graphical windows, no password login dialog and no
password-change dialog. It ships no camera backend and no cascade detector:
`CameraWorker` and `detect_and_draw` work only with a capture factory and a
detector that you supply. The `eyecheck` command does not start the camera;
it lists devices and exports records.