from __future__ import annotations

import hashlib
import logging
from typing import Generator, Iterable, List, Optional, Sequence, Tuple

from ..constants import ORTHOGONAL
from .tiles import SYMBOLS, Cell

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


class MazeGrid:
    """An immutable, bounds-checked square maze grid.

    Cells are addressed as ``(x, y)`` where ``x`` is the column and ``y`` the
    row. The grid never changes after construction; a new game builds a new
    grid. Movement, placement and collision code should go through the safe
    accessors (``is_within``, ``safe_get``, ``is_path``) rather than indexing
    rows directly.

    Landmarks for a generated maze of side ``N``:
      - ``start``: (1, 1), the carving origin and player spawn cell
      - ``entrance``: (0, 1), boundary opening left of ``start``
      - ``exit``: (N-1, N-2), boundary opening on the right edge
    """

    __slots__ = ("_size", "_rows")

    def __init__(self, rows: Sequence[Sequence[Cell]]) -> None:
        if not rows:
            raise ValueError("MazeGrid requires at least one row")
        size = len(rows)
        for i, row in enumerate(rows):
            if len(row) != size:
                raise ValueError(f"MazeGrid must be square; row {i} has {len(row)} cells, expected {size}")
            for cell in row:
                if not isinstance(cell, Cell):
                    raise TypeError("rows must contain Cell enum members")
        self._size = size
        # rows[y][x]
        self._rows: Tuple[Tuple[Cell, ...], ...] = tuple(tuple(row) for row in rows)

    @property
    def size(self) -> int:
        return self._size

    @property
    def width(self) -> int:
        return self._size

    @property
    def height(self) -> int:
        return self._size

    @property
    def rows(self) -> Tuple[Tuple[Cell, ...], ...]:
        return self._rows

    @property
    def start(self) -> Point:
        return (1, 1)

    @property
    def entrance(self) -> Point:
        return (0, 1)

    @property
    def exit(self) -> Point:
        return (self._size - 1, self._size - 2)

    def is_within(self, x: int, y: int) -> bool:
        """Check if coordinates are within the grid bounds. Never raises."""
        return 0 <= x < self._size and 0 <= y < self._size

    def is_interior(self, x: int, y: int) -> bool:
        """True for cells that do not touch the outer boundary."""
        return 0 < x < self._size - 1 and 0 < y < self._size - 1

    def get(self, x: int, y: int) -> Cell:
        """Return the cell at (x, y).

        Raises IndexError if out of bounds to make misuse obvious.
        """
        if not self.is_within(x, y):
            raise IndexError(f"Coordinates out of bounds: ({x}, {y}) for grid {self._size}x{self._size}")
        return self._rows[y][x]

    def safe_get(self, x: int, y: int) -> Optional[Cell]:
        """Safely get a cell and return None when out-of-bounds."""
        if not self.is_within(x, y):
            return None
        return self._rows[y][x]

    def is_path(self, x: int, y: int) -> bool:
        return self.safe_get(x, y) is Cell.PATH

    def is_wall(self, x: int, y: int) -> bool:
        return self.safe_get(x, y) is Cell.WALL

    def neighbors(self, x: int, y: int) -> Generator[Point, None, None]:
        """Yield orthogonal neighbor coordinates that are within bounds."""
        for dx, dy in ORTHOGONAL:
            nx, ny = x + dx, y + dy
            if self.is_within(nx, ny):
                yield (nx, ny)

    def path_neighbors(self, x: int, y: int) -> List[Point]:
        return [(nx, ny) for nx, ny in self.neighbors(x, y) if self._rows[ny][nx] is Cell.PATH]

    def cells(self, kind: Cell) -> List[Point]:
        """All coordinates holding ``kind``, in row-major order."""
        return [
            (x, y)
            for y in range(self._size)
            for x in range(self._size)
            if self._rows[y][x] is kind
        ]

    def path_cells(self) -> List[Point]:
        return self.cells(Cell.PATH)

    def wall_cells(self) -> List[Point]:
        return self.cells(Cell.WALL)

    def signature(self) -> str:
        """Deterministic digest of the grid content."""
        raw = "\n".join(self.to_lines()).encode("utf-8")
        return hashlib.blake2b(raw, digest_size=16).hexdigest()

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "MazeGrid":
        """Create a grid from an ASCII picture ('#' wall, '.' path)."""
        rows: List[List[Cell]] = []
        for i, line in enumerate(lines):
            try:
                rows.append([SYMBOLS[ch] for ch in line])
            except KeyError as exc:
                raise ValueError(f"Unknown maze symbol {exc.args[0]!r} on line {i}") from None
        return cls(rows)

    def to_lines(self) -> List[str]:
        """ASCII representation, one string per row (for debugging/testing)."""
        return ["".join(cell.symbol for cell in row) for row in self._rows]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MazeGrid):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"MazeGrid(size={self._size})"
