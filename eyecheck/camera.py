"""Camera capture worker with detection and frame annotation."""

from __future__ import annotations

import logging
import threading
import time

import numpy as np
from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

DEFAULT_CASCADE_PATH = "XML/my_haarcascade.xml"
FRAME_WIDTH = 640
FRAME_HEIGHT = 480
FRAME_RATE = 15
SCALE_FACTOR = 1.1
MIN_NEIGHBORS = 3
MIN_SIZE = (30, 30)

_RETRY_DELAY = 0.05
_TEXT_HEIGHT = 11
_RED = (255, 0, 0)


class CameraError(Exception):
    """Raised when the camera or the detector cannot be opened."""


def to_rgb(frame):
    """Convert a uint8 grey, BGR or BGRA frame to a PIL image."""
    array = np.asarray(frame)
    if array.dtype != np.uint8:
        raise ValueError(f"unsupported frame type {array.dtype}")
    if array.ndim == 3 and array.shape[2] == 1:
        array = array[..., 0]
    if array.ndim == 2:
        return Image.fromarray(np.ascontiguousarray(array))
    if array.ndim == 3 and array.shape[2] == 3:
        return Image.fromarray(np.ascontiguousarray(array[..., ::-1]))
    if array.ndim == 3 and array.shape[2] == 4:
        return Image.fromarray(np.ascontiguousarray(array[..., [2, 1, 0, 3]]))
    raise ValueError(f"unsupported frame shape {array.shape}")


def _bgr_to_gray(frame):
    b = frame[..., 0].astype(np.uint32)
    g = frame[..., 1].astype(np.uint32)
    r = frame[..., 2].astype(np.uint32)
    return ((b * 1868 + g * 9617 + r * 4899 + 8192) >> 14).astype(np.uint8)


def _equalize(gray):
    hist = np.bincount(gray.ravel(), minlength=256)
    total = gray.size
    occupied = np.flatnonzero(hist)
    if occupied.size == 0:
        return gray.copy()
    first = occupied[0]
    if hist[first] == total:
        return np.full_like(gray, first)
    scale = 255.0 / (total - hist[first])
    cumulative = np.cumsum(hist) - hist[first]
    lut = np.clip(np.rint(cumulative * scale), 0, 255).astype(np.uint8)
    lut[: first + 1] = 0
    return lut[gray]


def _draw(frame, rects, text):
    image = Image.fromarray(np.ascontiguousarray(frame[..., ::-1]))
    draw = ImageDraw.Draw(image)
    for x, y, w, h in rects:
        draw.rectangle([x, y, x + w - 1, y + h - 1], outline=_RED, width=2)
        draw.text((x, y - 5 - _TEXT_HEIGHT), text, fill=_RED)
    frame[...] = np.asarray(image)[..., ::-1]


def detect_and_draw(frame, detector):
    """Run the detector on a BGR frame, box each hit in place, return the label.

    The detector is called with the equalised grey image and the keyword
    arguments scale_factor, min_neighbors and min_size, and returns
    (x, y, width, height) rectangles.
    """
    if detector is None:
        return "NO_CASCADE"
    if not isinstance(frame, np.ndarray) or frame.dtype != np.uint8 or frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError("detection needs a uint8 BGR frame")
    gray = _equalize(_bgr_to_gray(frame))
    found = detector(gray, scale_factor=SCALE_FACTOR, min_neighbors=MIN_NEIGHBORS, min_size=MIN_SIZE)
    rects = [tuple(int(v) for v in rect) for rect in found]
    text = "yes" if rects else "NONE"
    if rects:
        _draw(frame, rects, text)
    return text


class CameraWorker:
    """Background loop that reads frames, reports them and reports detections.

    capture_factory(camera_id, width=, height=, fps=) returns an object with
    read() (a frame, or None when none is ready) and release(), or None when
    the camera cannot be opened. detector_loader(path) returns a detector for
    detect_and_draw, or None when the file cannot be loaded.
    """

    def __init__(self, capture_factory, detector_loader, on_frame, on_result):
        self._capture_factory = capture_factory
        self._detector_loader = detector_loader
        self._on_frame = on_frame
        self._on_result = on_result
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread = None
        self._detector = None
        self.camera_id = 0
        self.cascade_path = DEFAULT_CASCADE_PATH
        self.error = None

    def stop(self):
        """Ask the loop to finish after the current frame."""
        self._stop.set()

    def set_camera(self, camera_id):
        """Choose the camera opened by the next run."""
        with self._lock:
            self.camera_id = camera_id

    def set_cascade(self, path):
        """Switch to another detector file, loading it if the path changed."""
        with self._lock:
            if path != self.cascade_path:
                self.cascade_path = path
                self._detector = self._detector_loader(path)

    def run(self):
        """Capture and process frames until stopped; raises CameraError on setup failure."""
        with self._lock:
            capture = self._capture_factory(
                self.camera_id, width=FRAME_WIDTH, height=FRAME_HEIGHT, fps=FRAME_RATE
            )
            if capture is None:
                raise CameraError(f"Cannot open camera {self.camera_id}")
            detector = self._detector_loader(self.cascade_path)
            if detector is None:
                capture.release()
                raise CameraError(f"Cannot load cascade {self.cascade_path}")
            self._detector = detector
        try:
            while not self._stop.is_set():
                with self._lock:
                    frame = capture.read()
                    detector = self._detector
                if frame is None or np.size(frame) == 0:
                    self._stop.wait(_RETRY_DELAY)
                    continue
                if self._on_frame is not None:
                    self._on_frame(to_rgb(frame))
                started = time.perf_counter()
                text = detect_and_draw(frame, detector)
                logger.debug("Detect cost %d ms", (time.perf_counter() - started) * 1000)
                if self._on_result is not None:
                    self._on_result(to_rgb(frame), text)
        finally:
            capture.release()

    def _run_logged(self):
        try:
            self.run()
        except CameraError as exc:
            logger.critical("%s", exc)
            self.error = exc

    def start(self):
        """Run the loop on a background thread unless it is already running."""
        if self.is_running():
            return
        self._stop.clear()
        self.error = None
        self._thread = threading.Thread(target=self._run_logged, daemon=True)
        self._thread.start()

    def wait(self):
        """Block until the background thread has finished."""
        if self._thread is not None:
            self._thread.join()

    def is_running(self):
        """Whether the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()