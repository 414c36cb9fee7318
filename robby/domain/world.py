"""Grid world in which the robot collects cans."""

from typing import Optional

import numpy as np

from .types import Action, Cell, Coord, RLConfig, ACTION_DELTAS
from ..utils.grid_factory import create_empty_grid, place_random_cans
from ..utils.rng import SeededRNG


class GridWorld:
    """Square grid of empty/can cells plus the robot's position.

    Moves are clamped at the edges: bumping into the boundary leaves the robot
    where it is and costs `reward_wall`. Every action from every position has a
    defined reward and successor state.
    """

    def __init__(self, config: RLConfig, rng: SeededRNG):
        self.config = config
        self.rng = rng
        self.dimension = config.grid_dimensions
        self.grid = create_empty_grid(self.dimension)
        self.position: Coord = (0, 0)
        self.cans_collected = 0

    def reset(self, can_count: Optional[int] = None, start: Optional[Coord] = None) -> Coord:
        """Clear the grid, scatter cans and place the robot.

        Args:
            can_count: Number of cans (configured initial count if None)
            start: Robot start; falls back to the configured start, then a random cell

        Returns:
            The robot's starting position
        """
        if can_count is None:
            can_count = self.config.initial_can_count

        self.grid.fill(int(Cell.EMPTY))
        place_random_cans(self.grid, can_count, self.rng)

        if start is None:
            start = self.config.start_position
        if start is None:
            start = (self.rng.randint(0, self.dimension - 1),
                     self.rng.randint(0, self.dimension - 1))
        elif not self.is_valid_coord(start):
            raise ValueError(f"Start position {start} is out of bounds")

        self.position = start
        self.cans_collected = 0
        return self.position

    def is_valid_coord(self, coord: Coord) -> bool:
        """Check if coordinate is within grid bounds."""
        row, col = coord
        return 0 <= row < self.dimension and 0 <= col < self.dimension

    def cell_at(self, coord: Coord) -> Cell:
        """State of the cell at `coord`; off-grid coordinates read as walls."""
        if not self.is_valid_coord(coord):
            return Cell.WALL
        return Cell(int(self.grid[coord]))

    def count_cans(self) -> int:
        """Number of cans still on the grid."""
        return int(np.count_nonzero(self.grid == int(Cell.CAN)))

    def would_crash(self, action: Action) -> bool:
        """Whether `action` would take the robot off the grid."""
        if not action.is_move:
            return False
        delta = ACTION_DELTAS[action]
        target = (self.position[0] + delta[0], self.position[1] + delta[1])
        return not self.is_valid_coord(target)

    def apply_action(self, action: Action) -> float:
        """Execute `action`, update the world and return the reward."""
        if action is Action.PICK_UP:
            if self.grid[self.position] == Cell.CAN:
                self.grid[self.position] = int(Cell.EMPTY)
                self.cans_collected += 1
                return self.config.reward_can
            return self.config.reward_empty_pickup

        if self.would_crash(action):
            # Hit boundary - stay in place
            return self.config.reward_wall

        delta = ACTION_DELTAS[action]
        self.position = (self.position[0] + delta[0], self.position[1] + delta[1])
        return self.config.reward_step

    def render(self) -> str:
        """Text picture of the grid: `_` empty, `C` can, `R` robot."""
        rows = []
        for row in range(self.dimension):
            symbols = []
            for col in range(self.dimension):
                if (row, col) == self.position:
                    symbols.append("R")
                else:
                    symbols.append(Cell(int(self.grid[row, col])).symbol)
            rows.append(" ".join(symbols))
        return "\n".join(rows)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return (f"GridWorld(dimension={self.dimension}, position={self.position}, "
                f"cans={self.count_cans()})")
