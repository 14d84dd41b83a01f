"""On-screen keyboard model that types into a bound line edit."""

from __future__ import annotations

from dataclasses import dataclass

TITLE = "软键盘"
SIZE = (450, 220)

KEY_SPACE = "Space"
KEY_BACKSPACE = "Backspace"
KEY_ENTER = "Enter"
KEY_CLOSE = "关闭"

_LETTER_ROWS = ("qwertyuiop", "asdfghjkl", "zxcvbnm")


@dataclass(frozen=True)
class KeyPlacement:
    """A key and the grid cell it occupies."""

    label: str
    row: int
    column: int
    row_span: int = 1
    column_span: int = 1


@dataclass
class LineEdit:
    """A single-line text field with a cursor."""

    text: str = ""
    cursor: int | None = None

    def __post_init__(self):
        if self.cursor is None:
            self.cursor = len(self.text)
        elif not 0 <= self.cursor <= len(self.text):
            raise ValueError(f"cursor {self.cursor} outside text of length {len(self.text)}")

    def insert(self, text):
        """Insert text at the cursor and move the cursor past it."""
        self.text = self.text[: self.cursor] + text + self.text[self.cursor :]
        self.cursor += len(text)

    def backspace(self):
        """Delete the character before the cursor, if any."""
        if self.cursor == 0:
            return
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1


def _build_layout():
    for digit in range(10):
        yield KeyPlacement(str(digit), 0, digit)
    for row, letters in enumerate(_LETTER_ROWS, start=1):
        for column, letter in enumerate(letters):
            yield KeyPlacement(letter, row, column)
    yield KeyPlacement(KEY_SPACE, 4, 0, 1, 4)
    yield KeyPlacement(KEY_BACKSPACE, 4, 4, 1, 2)
    yield KeyPlacement(KEY_ENTER, 4, 6, 1, 2)
    yield KeyPlacement(KEY_CLOSE, 4, 8, 1, 2)


class SoftKeyboard:
    """Frameless pop-up keyboard that follows the focused line edit."""

    def __init__(self):
        self.title = TITLE
        self.size = SIZE
        self.target = None
        self.visible = False
        self.visible_by_focus = False
        self.position = (0, 0)
        self._drag_offset = (0, 0)
        self._layout = tuple(_build_layout())
        self._labels = frozenset(key.label for key in self._layout)

    def layout(self):
        """Return the placement of every key."""
        return list(self._layout)

    def set_focus_edit(self, edit):
        """Bind the line edit that key presses type into."""
        self.target = edit

    def _hide(self):
        self.visible_by_focus = False
        self.visible = False

    def press(self, key):
        """Handle a click on the key with the given label."""
        if key not in self._labels:
            raise ValueError(f"no such key: {key!r}")
        if self.target is None:
            return
        if key in (KEY_ENTER, KEY_CLOSE):
            self._hide()
        elif key == KEY_SPACE:
            self.target.insert(" ")
        elif key == KEY_BACKSPACE:
            self.target.backspace()
        else:
            self.target.insert(key)

    def press_escape(self):
        """Hide the keyboard as the Escape key does."""
        self._hide()

    def focus_in(self, edit, position):
        """Bind a newly focused edit and pop up at position if hidden."""
        self.set_focus_edit(edit)
        if not self.visible:
            self.position = tuple(position)
            self.visible = True
            self.visible_by_focus = True

    def mouse_press(self, global_pos, left):
        """Start dragging from a global point when the left button goes down."""
        if left:
            self._drag_offset = (
                global_pos[0] - self.position[0],
                global_pos[1] - self.position[1],
            )

    def mouse_move(self, global_pos, left):
        """Move the keyboard with the pointer while the left button is held."""
        if left:
            self.position = (
                global_pos[0] - self._drag_offset[0],
                global_pos[1] - self._drag_offset[1],
            )