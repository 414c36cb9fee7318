"""Finite State Machine for the agent's per-episode lifecycle."""

from enum import Enum, auto
from typing import Dict, Callable, Optional, Set


class AgentPhase(Enum):
    """Where the agent is within an episode."""
    AWAITING_FIRST_PERCEPT = auto()
    PENDING_TRANSITION = auto()
    TERMINAL = auto()


class AgentStateMachine:
    """State machine guarding the order of agent calls within an episode."""

    def __init__(self):
        self.current_state = AgentPhase.AWAITING_FIRST_PERCEPT
        self._enter_callbacks: Dict[AgentPhase, Callable[[AgentPhase], None]] = {}

        # Define valid state transitions
        self._valid_transitions: Dict[AgentPhase, Set[AgentPhase]] = {
            AgentPhase.AWAITING_FIRST_PERCEPT: {AgentPhase.PENDING_TRANSITION, AgentPhase.TERMINAL},
            AgentPhase.PENDING_TRANSITION: {AgentPhase.PENDING_TRANSITION, AgentPhase.TERMINAL},
            AgentPhase.TERMINAL: set(),
        }

    def on_state_enter(self, state: AgentPhase, callback: Callable[[AgentPhase], None]):
        """Register callback for state entry; it receives the previous state."""
        self._enter_callbacks[state] = callback

    def can_transition(self, to_state: AgentPhase) -> bool:
        """Check if transition to target state is valid."""
        return to_state in self._valid_transitions.get(self.current_state, set())

    def transition(self, to_state: AgentPhase) -> None:
        """Move to `to_state`, raising RuntimeError for an invalid transition."""
        if not self.can_transition(to_state):
            raise RuntimeError(
                f"Invalid agent transition {self.current_state.name} -> {to_state.name}"
            )

        from_state = self.current_state
        self.current_state = to_state

        if to_state in self._enter_callbacks:
            self._enter_callbacks[to_state](from_state)

    def reset(self, state: Optional[AgentPhase] = None) -> None:
        """Start a fresh episode (or force a state)."""
        self.current_state = state or AgentPhase.AWAITING_FIRST_PERCEPT

    def is_awaiting_first_percept(self) -> bool:
        return self.current_state == AgentPhase.AWAITING_FIRST_PERCEPT

    def has_pending_transition(self) -> bool:
        return self.current_state == AgentPhase.PENDING_TRANSITION

    def is_terminal(self) -> bool:
        return self.current_state == AgentPhase.TERMINAL
