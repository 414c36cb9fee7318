"""Q-Learning algorithm implementation for can collecting."""

import time
from typing import Callable, Iterator, List, Optional, Union

import numpy as np

from .exploration import ExplorationSchedule, as_schedule
from .percept import PerceptEncoder
from .types import Action, ACTIONS, EpisodeRecord, TrainingResult
from .world import GridWorld
from ..app.fsm import AgentPhase, AgentStateMachine
from ..utils.rng import SeededRNG


class PolicyTable:
    """Weight per (percept, action) pair, stored as a dense numpy array.

    Rows are percept indices, columns follow Action enum order. The table is
    fixed-size for the whole run and only ``update`` writes to it.
    """

    def __init__(self, n_percepts: int, n_actions: int = len(ACTIONS),
                 initial_weight: float = 0.0):
        if n_percepts <= 0 or n_actions <= 0:
            raise ValueError(f"Table shape must be positive, got {n_percepts}x{n_actions}")
        self._weights = np.full((n_percepts, n_actions), float(initial_weight), dtype=np.float64)

    @property
    def n_percepts(self) -> int:
        return self._weights.shape[0]

    @property
    def n_actions(self) -> int:
        return self._weights.shape[1]

    def __len__(self) -> int:
        return self._weights.size

    def weight(self, percept: int, action: Action) -> float:
        """Get weight for percept-action pair."""
        return float(self._weights[percept, action.value])

    def weights(self, percept: int) -> np.ndarray:
        """Copy of the weights of every action for `percept`."""
        return self._weights[percept].copy()

    def as_array(self) -> np.ndarray:
        """Copy of the whole table."""
        return self._weights.copy()

    def max_weight(self, percept: int) -> float:
        return float(self._weights[percept].max())

    def greedy_action(self, percept: int) -> Action:
        """Highest-weight action; ties go to the earliest action in enum order."""
        return ACTIONS[int(np.argmax(self._weights[percept]))]

    def select_action(self, percept: int, exploration_rate: float, rng: SeededRNG) -> Action:
        """Epsilon-greedy choice between a random action and the greedy one."""
        if exploration_rate > 0.0 and rng.random() < exploration_rate:
            return ACTIONS[rng.randint(0, self.n_actions - 1)]
        return self.greedy_action(percept)

    def td_error(self, percept: int, action: Action, reward: float,
                 next_percept: int, gamma: float) -> float:
        """Temporal-difference error of the current estimate."""
        target = reward + gamma * self.max_weight(next_percept)
        return target - self.weight(percept, action)

    def update(self, percept: int, action: Action, reward: float,
               next_percept: int, eta: float, gamma: float) -> float:
        """Apply the Q-learning update and return the TD error it corrected."""
        error = self.td_error(percept, action, reward, next_percept, gamma)
        self._weights[percept, action.value] += eta * error
        return error


class QLearningAgent:
    """Chooses actions from a PolicyTable and learns one step behind.

    The update for a step needs the percept that follows it, so the agent
    keeps the last (percept, action, reward) pending until the next call to
    ``act`` or ``end_episode``.
    """

    def __init__(self, table: PolicyTable, rng: SeededRNG, eta: float = 0.2, gamma: float = 0.9):
        self.table = table
        self.rng = rng
        self.eta = eta
        self.gamma = gamma
        self.state = AgentStateMachine()

        self._pending_percept: Optional[int] = None
        self._pending_action: Optional[Action] = None
        self._pending_reward: Optional[float] = None

    @property
    def phase(self) -> AgentPhase:
        return self.state.current_state

    def begin_episode(self):
        """Discard per-episode state; the table is kept."""
        self._clear_pending()
        self.state.reset()

    def act(self, percept: int, exploration_rate: float) -> Action:
        """Learn from the pending transition (if any) and choose the next action."""
        if not self.state.can_transition(AgentPhase.PENDING_TRANSITION):
            raise RuntimeError("Episode is over; call begin_episode() first")
        if self.state.has_pending_transition():
            self._apply_pending(percept)

        action = self.table.select_action(percept, exploration_rate, self.rng)
        self._pending_percept = percept
        self._pending_action = action
        self._pending_reward = None
        self.state.transition(AgentPhase.PENDING_TRANSITION)
        return action

    def observe(self, reward: float):
        """Record the reward earned by the last chosen action."""
        if not self.state.has_pending_transition():
            raise RuntimeError("No action is awaiting a reward")
        if self._pending_reward is not None:
            raise RuntimeError("Reward already recorded for the last action")
        self._pending_reward = reward

    def end_episode(self, final_percept: int):
        """Apply the last pending update and close the episode."""
        if self.state.has_pending_transition():
            self._apply_pending(final_percept)
        self.state.transition(AgentPhase.TERMINAL)
        self._clear_pending()

    def _apply_pending(self, next_percept: int):
        if self._pending_reward is None:
            raise RuntimeError("Cannot learn from an action whose reward was never observed")
        self.table.update(self._pending_percept, self._pending_action, self._pending_reward,
                          next_percept, self.eta, self.gamma)

    def _clear_pending(self):
        self._pending_percept = None
        self._pending_action = None
        self._pending_reward = None


class EpisodeRunner:
    """Drives the world/agent loop for a number of episodes."""

    def __init__(self, world: GridWorld, encoder: PerceptEncoder, agent: QLearningAgent,
                 progress_interval: int = 0,
                 episode_callback: Optional[Callable[[EpisodeRecord], None]] = None):
        self.world = world
        self.encoder = encoder
        self.agent = agent
        self.progress_interval = progress_interval
        self.episode_callback = episode_callback
        self.episodes_completed = 0
        self.last_epsilon = 0.0

    def iter_episodes(self, n_episodes: int, m_steps: int,
                      exploration: Union[float, ExplorationSchedule] = 0.1,
                      eta: Optional[float] = None,
                      gamma: Optional[float] = None) -> Iterator[EpisodeRecord]:
        """Lazily run episodes, yielding one record as each finishes."""
        schedule = as_schedule(exploration)
        if eta is not None:
            self.agent.eta = eta
        if gamma is not None:
            self.agent.gamma = gamma

        recent_rewards: List[float] = []
        for episode_num in range(n_episodes):
            epsilon_used = schedule(episode_num)
            record = self.run_episode(episode_num, m_steps, epsilon_used)
            self.episodes_completed += 1
            self.last_epsilon = epsilon_used

            if self.episode_callback:
                self.episode_callback(record)

            # Print progress occasionally
            if self.progress_interval:
                recent_rewards.append(record.total_reward)
                if (episode_num + 1) % self.progress_interval == 0:
                    average = sum(recent_rewards) / len(recent_rewards)
                    print(f"Episode {episode_num + 1}: Average reward: {average:.2f}, "
                          f"Epsilon: {epsilon_used:.3f}")
                    recent_rewards.clear()

            yield record

    def run_episode(self, episode_num: int, m_steps: int, exploration_rate: float) -> EpisodeRecord:
        """Reset the world and play a single episode of `m_steps` steps."""
        world, encoder, agent = self.world, self.encoder, self.agent

        world.reset()
        agent.begin_episode()
        total_reward = 0.0

        for _ in range(m_steps):
            percept = encoder.encode(world.grid, world.position)
            action = agent.act(percept, exploration_rate)
            reward = world.apply_action(action)
            agent.observe(reward)
            total_reward += reward

        agent.end_episode(encoder.encode(world.grid, world.position))

        return EpisodeRecord(
            number=episode_num,
            total_reward=total_reward,
            steps=m_steps,
            cans_collected=world.cans_collected,
            epsilon_used=exploration_rate,
        )

    def run(self, n_episodes: int, m_steps: int, eta: float, gamma: float,
            exploration: Union[float, ExplorationSchedule] = 0.1) -> TrainingResult:
        """Run every episode eagerly and summarise them."""
        start_time = time.time()
        episodes = list(self.iter_episodes(n_episodes, m_steps, exploration, eta=eta, gamma=gamma))
        result = TrainingResult(episodes=episodes, final_epsilon=self.last_epsilon)

        if self.progress_interval and episodes:
            print(f"Trained {len(episodes)} episodes in {time.time() - start_time:.1f}s "
                  f"(average reward {result.average_reward:.2f})")

        return result
