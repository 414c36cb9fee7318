"""Controller wiring configuration, simulation and reporting together."""

from pathlib import Path
from typing import Optional, Tuple, Union

from ..domain.exploration import ExplorationSchedule, schedule_from_config
from ..domain.percept import PerceptEncoder
from ..domain.qlearning import EpisodeRunner, PolicyTable, QLearningAgent
from ..domain.types import RLConfig, TrainingResult
from ..domain.world import GridWorld
from ..utils.reporter import write_report
from ..utils.rng import SeededRNG


class RLController:
    """Owns every collaborator of a single training run.

    One SeededRNG feeds the world and the agent, and one PolicyTable is shared
    by the agent across all episodes.
    """

    def __init__(self, config: Optional[RLConfig] = None, verbose: bool = True):
        self._config = config or RLConfig()
        self._config.validate()

        self.rng = SeededRNG(self._config.seed)
        self.encoder = PerceptEncoder(self._config.neighborhood)
        self.table = PolicyTable(self.encoder.n_percepts, initial_weight=self._config.initial_weight)
        self.world = GridWorld(self._config, self.rng)
        self.agent = QLearningAgent(self.table, self.rng, eta=self._config.eta, gamma=self._config.gamma)
        self.runner = EpisodeRunner(
            self.world,
            self.encoder,
            self.agent,
            progress_interval=self._config.progress_interval if verbose else 0,
        )
        self.result: Optional[TrainingResult] = None

    @property
    def config(self) -> RLConfig:
        return self._config

    def exploration_schedule(self) -> ExplorationSchedule:
        return schedule_from_config(self._config.epsilon, self._config.epsilon_decay,
                                    self._config.epsilon_min)

    def train(self) -> TrainingResult:
        """Run the configured number of episodes."""
        self.result = self.runner.run(
            self._config.n_episodes,
            self._config.m_steps,
            eta=self._config.eta,
            gamma=self._config.gamma,
            exploration=self.exploration_schedule(),
        )
        return self.result

    def save(self, output_dir: Union[str, Path] = ".") -> Tuple[Path, Path]:
        """Write episodes.csv and weights.csv for the finished run."""
        if self.result is None:
            raise RuntimeError("Nothing to save; call train() first")
        return write_report(self.result.episodes, self.table, output_dir)

    def sample_grid(self) -> str:
        """Text rendering of a freshly reset world (draws from the run's RNG)."""
        self.world.reset()
        return self.world.render()
