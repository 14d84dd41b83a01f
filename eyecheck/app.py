"""Main controller: clock, activity log, camera switching and result storage."""

from __future__ import annotations

import argparse
import logging
import os
from datetime import date, datetime

from eyecheck.database import shared_database
from eyecheck.records import RecordTable

logger = logging.getLogger(__name__)

DEFAULT_DB = "mysql.db"
CAMERA_DEVICES = ("video0", "video1", "video2")
RESULT_ID = "17"
RESULT_VALID = "1%"


def format_clock(moment):
    """Format a moment the way the clock label shows it."""
    return moment.strftime("%Y年%m月%d日  %H:%M:%S")


def format_log_line(moment, text):
    """Prefix a log message with a right-aligned timestamp."""
    stamp = moment.strftime("%Y-%m-%d %H:%M:%S")
    return f"{stamp:>19}  {text}"


def scan_camera_devices(dev_root="/dev"):
    """Return the names of the camera device nodes present under dev_root."""
    return [name for name in CAMERA_DEVICES if os.path.exists(os.path.join(dev_root, name))]


class Controller:
    """Ties the camera worker, the activity log and the record database together."""

    def __init__(self, database, worker, clock=None):
        self.database = database
        self.worker = worker
        self.clock = clock or datetime.now
        self.log = []
        self.image = None
        self.camera_open = False

    def append_log(self, text):
        """Add a timestamped line to the log and return it."""
        line = format_log_line(self.clock(), text)
        self.log.append(line)
        return line

    def toggle_camera(self, camera_index):
        """Open the chosen camera if closed, close it if open."""
        if self.camera_open:
            self.worker.stop()
            self.worker.wait()
            self.image = None
            self.append_log("摄像头关闭！")
        else:
            self.worker.set_camera(camera_index)
            self.worker.start()
            self.append_log("摄像头已打开！")
        self.camera_open = not self.camera_open

    def switch_camera(self, index):
        """Restart the worker on another camera."""
        if self.worker.is_running():
            self.worker.stop()
            self.worker.wait()
        self.worker.set_camera(index)
        self.worker.start()
        self.append_log(f"切换到摄像头 {index}")

    def handle_result(self, image, text):
        """Log a detection result, show its image and store a record."""
        self.append_log(f"识别结果: {text}")
        self.image = image
        moment = self.clock()
        self.database.insert_record(
            RESULT_ID,
            moment.strftime("%Y-%m-%d"),
            moment.strftime("%H:%M:%S"),
            RESULT_VALID,
        )

    def clear_log(self):
        """Empty the log."""
        self.log.clear()


def main(argv=None):
    """Show the clock and cameras, and optionally export records to CSV."""
    parser = argparse.ArgumentParser(prog="eyecheck", description="Check-in record tool.")
    parser.add_argument("--db", default=DEFAULT_DB, help="database file")
    parser.add_argument("--dev-root", default="/dev", help="directory holding camera devices")
    parser.add_argument("--export", metavar="CSV", help="write records to this CSV file")
    parser.add_argument("--id", dest="person_id", help="export only this id")
    parser.add_argument("--from", dest="start", type=date.fromisoformat, help="first date")
    parser.add_argument("--to", dest="end", type=date.fromisoformat, help="last date")
    args = parser.parse_args(argv)
    if (args.start is None) != (args.end is None):
        parser.error("--from and --to must be given together")

    database = shared_database(args.db)
    print(format_clock(datetime.now()))
    for name in scan_camera_devices(args.dev_root):
        print(name)

    if args.export:
        table = RecordTable(database)
        if args.start is not None:
            table.set_date_range(args.start, args.end)
        elif args.person_id is not None:
            table.set_filter_by_id(args.person_id)
        table.export_csv(args.export)
        print(f"导出完成！\n文件：{args.export}")
    return 0