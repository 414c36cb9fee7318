"""Grid factory for creating and populating can grids."""

from typing import List, Optional

import numpy as np

from ..domain.types import Cell, Coord
from .rng import SeededRNG


def create_empty_grid(dimension: int) -> np.ndarray:
    """
    Create a new empty square grid.

    Args:
        dimension: Length of each side (must be > 0)

    Returns:
        Integer array of shape (dimension, dimension) filled with Cell.EMPTY

    Raises:
        ValueError: If dimension <= 0
    """
    if dimension <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {dimension}x{dimension}")

    return np.full((dimension, dimension), int(Cell.EMPTY), dtype=np.int8)


def all_coords(dimension: int) -> List[Coord]:
    """List every coordinate of a square grid in row-major order."""
    return [(row, col) for row in range(dimension) for col in range(dimension)]


def place_random_cans(grid: np.ndarray, count: int, rng: SeededRNG) -> List[Coord]:
    """
    Place cans on empty cells chosen uniformly without replacement.

    Args:
        grid: Grid to modify in place
        count: Number of cans to place
        rng: Random number generator to use

    Returns:
        Coordinates that received a can

    Raises:
        ValueError: If count is negative or exceeds the number of empty cells
    """
    empty_coords = [
        coord for coord in all_coords(grid.shape[0])
        if grid[coord] == Cell.EMPTY
    ]
    if not (0 <= count <= len(empty_coords)):
        raise ValueError(
            f"Cannot place {count} cans on a grid with {len(empty_coords)} empty cells"
        )

    can_coords = rng.sample(empty_coords, count)
    for coord in can_coords:
        grid[coord] = int(Cell.CAN)

    return can_coords


def random_grid(dimension: int, can_count: int, rng: Optional[SeededRNG] = None) -> np.ndarray:
    """
    Create a grid with `can_count` cans placed uniformly at random.

    Args:
        dimension: Length of each side
        can_count: Number of cans
        rng: Random number generator to use (unseeded if None)
    """
    if rng is None:
        rng = SeededRNG()

    grid = create_empty_grid(dimension)
    place_random_cans(grid, can_count, rng)
    return grid
