"""Strips of numbered icons used for the frame timeline and the layer list."""

from __future__ import annotations

from pixelsprite.editor import Signal

HIGHLIGHT_STYLE = (
    "background-color: #f5f5f5;color: #000000;padding: 4px;border: 2px solid #5cc7d1"
)
REGULAR_STYLE = (
    "background-color: #f5f5f5;color: #000000;padding: 4px;border: 1px solid #444444"
)


class IconStrip:
    """A row of numbered icons, one of which is highlighted as current.

    ``selected`` is emitted with an icon's index when that icon is clicked.
    """

    def __init__(self, count: int = 1) -> None:
        self._styles: list[str] = []
        self._current = 0
        self.selected = Signal()
        self.reset(count)

    @property
    def count(self) -> int:
        return len(self._styles)

    @property
    def current(self) -> int:
        return self._current

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(str(index + 1) for index in range(len(self._styles)))

    def add(self) -> None:
        """Append an icon and highlight it."""
        self._styles.append(REGULAR_STYLE)
        self.highlight(len(self._styles) - 1)

    def remove_last(self) -> None:
        """Remove the last icon, never the first one."""
        if not self._styles:
            return
        last = len(self._styles) - 1
        if last > 0:
            self._styles.pop()
        if self._current != 0 and self._current == last:
            self.highlight(self._current - 1)

    def move_left(self) -> None:
        if self._current > 0:
            self.highlight(self._current - 1)

    def move_right(self) -> None:
        if self._current < len(self._styles) - 1:
            self.highlight(self._current + 1)

    def reset(self, count: int) -> None:
        """Replace all icons with ``count`` fresh ones."""
        self._styles.clear()
        for _ in range(count):
            self.add()

    def highlight(self, index: int) -> None:
        """Highlight the icon at ``index``; an unknown index clears every highlight."""
        for position in range(len(self._styles)):
            if position == index:
                self._styles[position] = HIGHLIGHT_STYLE
                self._current = index
            else:
                self._styles[position] = REGULAR_STYLE

    def select(self, index: int) -> None:
        """Report a click on the icon at ``index``."""
        if not 0 <= index < len(self._styles):
            raise IndexError(f"no icon at index {index}")
        self.selected.emit(index)

    def styles(self) -> tuple[str, ...]:
        """Style sheet of every icon, in order."""
        return tuple(self._styles)