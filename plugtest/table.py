"""A text table model with placeholder cells, colours and row management."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from plugtest.colors import Color

PLACEHOLDER = "---"
INDEX_HEADER = "编号"

BLACK = Color(0, 0, 0)
RED = Color(255, 0, 0)
AMBER = Color(232, 157, 18)

_ALARM_COLORS = {0: BLACK, 1: AMBER, 2: RED}


@dataclass
class Cell:
    """One table cell: its text, background and text colour."""

    text: str = PLACEHOLDER
    background: Color | None = None
    foreground: Color | None = None


class Table:
    """Rows of cells under a fixed header; missing rows are added on demand."""

    def __init__(self, header: Iterable[str], rows: int = 0, title: str = "") -> None:
        self.header = list(header)
        self.title = title
        self._rows: list[list[Cell]] = []
        self._add_rows(rows)

    @property
    def column_count(self) -> int:
        return len(self.header)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> list[list[Cell]]:
        return self._rows

    def cell(self, row: int, column: int) -> Cell:
        self._check_row(row)
        self._check_column(column)
        return self._rows[row][column]

    def texts(self, row: int) -> list[str]:
        self._check_row(row)
        return [cell.text for cell in self._rows[row]]

    def _check_row(self, row: int) -> None:
        if not 0 <= row < len(self._rows):
            raise IndexError(f"row out of range: {row}")

    def _check_column(self, column: int) -> None:
        if not 0 <= column < self.column_count:
            raise IndexError(f"column out of range: {column}")

    def _new_row(self) -> list[Cell]:
        return [Cell() for _ in self.header]

    def _add_rows(self, count: int) -> None:
        while len(self._rows) < count:
            self._rows.append(self._new_row())

    def set_item(self, row: int, column: int, text: str) -> None:
        """Set a cell's text, adding rows as needed; empty text shows the placeholder."""
        if row < 0:
            raise IndexError(f"row out of range: {row}")
        self._check_column(column)
        self._add_rows(row + 1)
        self._rows[row][column].text = text if text else PLACEHOLDER

    def set_row(self, row: int, values: Iterable[str], column: int = 0) -> None:
        """Set consecutive cells of ``row`` starting at ``column``."""
        for offset, text in enumerate(values):
            self.set_item(row, column + offset, text)

    def append_row(self, values: Iterable[str], highlight: bool = False) -> None:
        row = self.row_count
        self.set_row(row, values)
        self._add_rows(row + 1)
        if highlight:
            self.set_background(row)

    def resize(self, rows: int) -> None:
        """Add placeholder rows or drop trailing rows until there are ``rows``."""
        if rows < 0:
            raise ValueError(f"row count must not be negative: {rows}")
        self._add_rows(rows)
        del self._rows[rows:]

    def clear_row(self, row: int) -> None:
        for column in range(self.column_count):
            self.set_item(row, column, PLACEHOLDER)

    def clear(self) -> None:
        for row in range(self.row_count):
            self.clear_row(row)

    def delete_all(self) -> None:
        self._rows.clear()

    def set_background(self, row: int) -> None:
        """Mark every cell of ``row`` with a red background."""
        self._check_row(row)
        for cell in self._rows[row]:
            cell.background = RED

    def set_item_color(self, row: int, column: int, alarm: int) -> None:
        """Colour a cell's text: 0 normal, 1 warning, 2 alarm; other values change nothing."""
        if row < 0:
            raise IndexError(f"row out of range: {row}")
        self._check_column(column)
        self._add_rows(row + 1)
        color = _ALARM_COLORS.get(alarm)
        if color is not None:
            self._rows[row][column].foreground = color

    def to_list(self) -> list[list[str]]:
        """Return the header and every row, each prefixed with its 1-based number."""
        result = [[INDEX_HEADER, *self.header]]
        for number, row in enumerate(self._rows, start=1):
            result.append([str(number), *(cell.text for cell in row)])
        return result