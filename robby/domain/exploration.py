"""Exploration-rate schedules for epsilon-greedy action selection."""

from dataclasses import dataclass
from typing import Callable, Union

# Maps an episode index to the exploration rate used in that episode
ExplorationSchedule = Callable[[int], float]


@dataclass(frozen=True)
class ConstantExploration:
    """Same exploration rate for every episode."""
    rate: float = 0.1

    def __call__(self, episode: int) -> float:
        return self.rate


@dataclass(frozen=True)
class DecayingExploration:
    """Geometric decay: max(minimum, start * decay ** episode)."""
    start: float = 0.4
    decay: float = 0.995
    minimum: float = 0.03

    def __call__(self, episode: int) -> float:
        return max(self.minimum, self.start * self.decay ** episode)


def as_schedule(exploration: Union[float, ExplorationSchedule]) -> ExplorationSchedule:
    """Wrap a bare rate in a ConstantExploration; pass schedules through."""
    if callable(exploration):
        return exploration
    return ConstantExploration(float(exploration))


def schedule_from_config(epsilon: float, epsilon_decay: float, epsilon_min: float) -> ExplorationSchedule:
    """Constant schedule when decay is 1.0, decaying otherwise."""
    if epsilon_decay >= 1.0:
        return ConstantExploration(epsilon)
    return DecayingExploration(start=epsilon, decay=epsilon_decay, minimum=epsilon_min)
