"""Core type definitions for the can-collecting robot."""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional, Tuple, Literal, Dict, List

# Coordinate type for grid positions: (row, col)
Coord = Tuple[int, int]

# Which neighbouring cells the robot can see
Neighborhood = Literal["von_neumann", "moore"]


class Cell(IntEnum):
    """State of a single location as seen by the robot."""
    EMPTY = 0
    CAN = 1
    WALL = 2  # only ever reported for off-grid neighbours

    @property
    def symbol(self) -> str:
        return CELL_SYMBOLS[self]


class Action(Enum):
    """Actions the robot can take, in tie-breaking order."""
    MOVE_NORTH = 0
    MOVE_SOUTH = 1
    MOVE_EAST = 2
    MOVE_WEST = 3
    PICK_UP = 4

    @property
    def label(self) -> str:
        """Column label used in weight exports."""
        return ACTION_LABELS[self]

    @property
    def is_move(self) -> bool:
        return self is not Action.PICK_UP


ACTIONS: Tuple[Action, ...] = tuple(Action)

CELL_SYMBOLS: Dict[Cell, str] = {
    Cell.EMPTY: "_",
    Cell.CAN: "C",
    Cell.WALL: "#",
}

ACTION_LABELS: Dict[Action, str] = {
    Action.MOVE_NORTH: "MoveNorth",
    Action.MOVE_SOUTH: "MoveSouth",
    Action.MOVE_EAST: "MoveEast",
    Action.MOVE_WEST: "MoveWest",
    Action.PICK_UP: "PickUp",
}

# Row 0 is the northern edge
ACTION_DELTAS: Dict[Action, Coord] = {
    Action.MOVE_NORTH: (-1, 0),
    Action.MOVE_SOUTH: (1, 0),
    Action.MOVE_EAST: (0, 1),
    Action.MOVE_WEST: (0, -1),
}


@dataclass
class RLConfig:
    """Configuration for a training run."""
    # World
    grid_dimensions: int = 10
    initial_can_count: int = 50
    start_position: Optional[Coord] = None  # random start when None
    neighborhood: Neighborhood = "von_neumann"

    # Schedule
    n_episodes: int = 5000
    m_steps: int = 200

    # Learning
    eta: float = 0.2
    gamma: float = 0.9
    initial_weight: float = 0.0

    # Exploration (epsilon_decay == 1.0 keeps the rate constant)
    epsilon: float = 0.1
    epsilon_decay: float = 1.0
    epsilon_min: float = 0.0

    # Rewards
    reward_can: float = 10.0
    reward_empty_pickup: float = -1.0
    reward_wall: float = -5.0
    reward_step: float = 0.0

    seed: Optional[int] = None
    progress_interval: int = 500

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot describe a run."""
        if self.grid_dimensions <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.grid_dimensions}")
        cells = self.grid_dimensions * self.grid_dimensions
        if not (0 <= self.initial_can_count <= cells):
            raise ValueError(
                f"Initial can count must be between 0 and {cells}, got {self.initial_can_count}"
            )
        if self.n_episodes < 0:
            raise ValueError(f"Number of episodes cannot be negative, got {self.n_episodes}")
        if self.m_steps < 0:
            raise ValueError(f"Number of steps cannot be negative, got {self.m_steps}")
        if not (0.0 < self.eta <= 1.0):
            raise ValueError(f"Eta must be in (0, 1], got {self.eta}")
        if not (0.0 <= self.gamma <= 1.0):
            raise ValueError(f"Gamma must be in [0, 1], got {self.gamma}")
        if not (0.0 <= self.epsilon <= 1.0):
            raise ValueError(f"Epsilon must be in [0, 1], got {self.epsilon}")
        if not (0.0 < self.epsilon_decay <= 1.0):
            raise ValueError(f"Epsilon decay must be in (0, 1], got {self.epsilon_decay}")
        if not (0.0 <= self.epsilon_min <= 1.0):
            raise ValueError(f"Epsilon minimum must be in [0, 1], got {self.epsilon_min}")
        if self.neighborhood not in ("von_neumann", "moore"):
            raise ValueError(f"Unknown neighborhood: {self.neighborhood}")
        if self.start_position is not None:
            row, col = self.start_position
            if not (0 <= row < self.grid_dimensions and 0 <= col < self.grid_dimensions):
                raise ValueError(f"Start position {self.start_position} is out of bounds")
        if self.progress_interval < 0:
            raise ValueError(f"Progress interval cannot be negative, got {self.progress_interval}")


@dataclass(frozen=True)
class EpisodeRecord:
    """Outcome of a single training episode."""
    number: int
    total_reward: float
    steps: int = 0
    cans_collected: int = 0
    epsilon_used: float = 0.0


@dataclass
class TrainingResult:
    """Result of a training run."""
    episodes: List[EpisodeRecord] = field(default_factory=list)
    final_epsilon: float = 0.0

    @property
    def total_episodes(self) -> int:
        return len(self.episodes)

    @property
    def average_reward(self) -> float:
        """Mean total reward over all episodes."""
        if not self.episodes:
            return 0.0
        return sum(ep.total_reward for ep in self.episodes) / len(self.episodes)

    def _window(self, fraction: float, from_end: bool) -> List[EpisodeRecord]:
        count = max(1, int(len(self.episodes) * fraction))
        return self.episodes[-count:] if from_end else self.episodes[:count]

    def early_mean_reward(self, fraction: float = 0.1) -> float:
        """Mean reward over the first `fraction` of episodes."""
        if not self.episodes:
            return 0.0
        window = self._window(fraction, from_end=False)
        return sum(ep.total_reward for ep in window) / len(window)

    def late_mean_reward(self, fraction: float = 0.1) -> float:
        """Mean reward over the last `fraction` of episodes."""
        if not self.episodes:
            return 0.0
        window = self._window(fraction, from_end=True)
        return sum(ep.total_reward for ep in window) / len(window)

    @property
    def improved(self) -> bool:
        """Whether the late episodes outscored the early ones."""
        return self.late_mean_reward() > self.early_mean_reward()
