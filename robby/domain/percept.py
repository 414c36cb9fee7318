"""Encoding of the robot's local neighbourhood into a table row index."""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from .types import Cell, Coord, Neighborhood

# (name, row offset, col offset) in encoding order, least significant first
NEIGHBORHOOD_OFFSETS: Dict[str, Tuple[Tuple[str, int, int], ...]] = {
    "von_neumann": (
        ("current", 0, 0),
        ("north", -1, 0),
        ("south", 1, 0),
        ("east", 0, 1),
        ("west", 0, -1),
    ),
    "moore": (
        ("current", 0, 0),
        ("north", -1, 0),
        ("south", 1, 0),
        ("east", 0, 1),
        ("west", 0, -1),
        ("north_east", -1, 1),
        ("north_west", -1, -1),
        ("south_east", 1, 1),
        ("south_west", 1, -1),
    ),
}

CELL_STATES = len(Cell)


@dataclass(frozen=True)
class Percept:
    """What the robot sees, one Cell per neighbourhood position."""
    cells: Tuple[Cell, ...]
    neighborhood: Neighborhood = "von_neumann"

    def cell(self, name: str) -> Cell:
        """State of the named position, e.g. percept.cell("north")."""
        for i, (label, _, _) in enumerate(NEIGHBORHOOD_OFFSETS[self.neighborhood]):
            if label == name:
                return self.cells[i]
        raise KeyError(f"No {name!r} cell in a {self.neighborhood} percept")

    def __str__(self) -> str:
        return "".join(cell.symbol for cell in self.cells)


class PerceptEncoder:
    """Maps a neighbourhood of cell states onto a dense integer range.

    Each position contributes one base-3 digit (empty/can/wall), so every
    combination of cell states gets a distinct index in ``range(n_percepts)``.
    """

    def __init__(self, neighborhood: Neighborhood = "von_neumann"):
        if neighborhood not in NEIGHBORHOOD_OFFSETS:
            raise ValueError(f"Unknown neighborhood: {neighborhood}")
        self.neighborhood = neighborhood
        self.offsets = NEIGHBORHOOD_OFFSETS[neighborhood]
        self.n_percepts = CELL_STATES ** len(self.offsets)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(label for label, _, _ in self.offsets)

    def read(self, grid: np.ndarray, position: Coord) -> Percept:
        """Read the neighbourhood around `position`."""
        size = grid.shape[0]
        row, col = position
        cells = []
        for _, d_row, d_col in self.offsets:
            r, c = row + d_row, col + d_col
            if 0 <= r < size and 0 <= c < size:
                cells.append(Cell(int(grid[r, c])))
            else:
                cells.append(Cell.WALL)
        return Percept(cells=tuple(cells), neighborhood=self.neighborhood)

    def perceive(self, world) -> Percept:
        """Read the neighbourhood around the robot in `world`."""
        return self.read(world.grid, world.position)

    def encode(self, grid: np.ndarray, position: Coord) -> int:
        """Percept index for the robot standing at `position` on `grid`."""
        return self.encode_percept(self.read(grid, position))

    def encode_percept(self, percept: Percept) -> int:
        if len(percept.cells) != len(self.offsets):
            raise ValueError(
                f"Percept has {len(percept.cells)} cells, expected {len(self.offsets)}"
            )
        index = 0
        for cell in reversed(percept.cells):
            index = index * CELL_STATES + int(cell)
        return index

    def decode(self, index: int) -> Percept:
        """Inverse of encode_percept."""
        if not (0 <= index < self.n_percepts):
            raise ValueError(f"Percept index {index} is outside [0, {self.n_percepts})")
        cells = []
        for _ in self.offsets:
            index, digit = divmod(index, CELL_STATES)
            cells.append(Cell(digit))
        return Percept(cells=tuple(cells), neighborhood=self.neighborhood)
