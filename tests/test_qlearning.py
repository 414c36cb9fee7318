import numpy as np
import pytest

from robby.app.fsm import AgentPhase
from robby.domain.qlearning import PolicyTable, QLearningAgent
from robby.domain.types import Action, ACTIONS
from robby.utils.rng import SeededRNG


def test_table_starts_at_initial_weight():
    table = PolicyTable(243)
    assert len(table) == 243 * 5
    assert table.n_percepts == 243
    assert table.n_actions == len(ACTIONS)
    assert not table.as_array().any()

    assert PolicyTable(3, initial_weight=0.5).weight(2, Action.PICK_UP) == 0.5


def test_update_rule():
    table = PolicyTable(2)
    error = table.update(0, Action.PICK_UP, 10.0, 1, eta=0.5, gamma=0.9)
    assert error == pytest.approx(10.0)
    assert table.weight(0, Action.PICK_UP) == pytest.approx(5.0)

    # Target bootstraps from the best action of the next percept
    table.update(1, Action.MOVE_NORTH, 0.0, 0, eta=0.5, gamma=0.9)
    assert table.weight(1, Action.MOVE_NORTH) == pytest.approx(2.25)


def test_zero_learning_rate_leaves_weights_unchanged():
    table = PolicyTable(4)
    table.update(1, Action.MOVE_EAST, 3.0, 2, eta=0.2, gamma=0.9)
    before = table.as_array()

    for action in ACTIONS:
        table.update(1, action, 10.0, 2, eta=0.0, gamma=0.9)
        table.update(3, action, -5.0, 1, eta=0.0, gamma=0.9)

    assert np.array_equal(table.as_array(), before)


def test_td_error_shrinks_under_repeated_reward():
    table = PolicyTable(1)
    errors = [
        abs(table.update(0, Action.PICK_UP, 1.0, 0, eta=0.2, gamma=0.9))
        for _ in range(50)
    ]
    assert all(later < earlier for earlier, later in zip(errors, errors[1:]))
    assert table.weight(0, Action.PICK_UP) < 10.0


def test_greedy_ties_follow_action_order():
    table = PolicyTable(2)
    assert table.greedy_action(0) is Action.MOVE_NORTH

    table.update(0, Action.PICK_UP, 1.0, 1, eta=1.0, gamma=0.0)
    table.update(0, Action.MOVE_WEST, 1.0, 1, eta=1.0, gamma=0.0)
    assert table.greedy_action(0) is Action.MOVE_WEST


def test_select_action_exploration():
    table = PolicyTable(1)
    table.update(0, Action.PICK_UP, 1.0, 0, eta=1.0, gamma=0.0)
    rng = SeededRNG(3)

    assert {table.select_action(0, 0.0, rng) for _ in range(50)} == {Action.PICK_UP}
    assert {table.select_action(0, 1.0, rng) for _ in range(500)} == set(ACTIONS)


def make_agent():
    return QLearningAgent(PolicyTable(4), SeededRNG(0), eta=0.5, gamma=0.0)


def test_agent_learns_one_step_behind():
    agent = make_agent()
    agent.begin_episode()
    assert agent.phase is AgentPhase.AWAITING_FIRST_PERCEPT

    action = agent.act(0, exploration_rate=0.0)
    assert action is Action.MOVE_NORTH
    assert agent.phase is AgentPhase.PENDING_TRANSITION
    agent.observe(-5.0)
    assert agent.table.weight(0, Action.MOVE_NORTH) == 0.0

    agent.act(1, exploration_rate=0.0)
    assert agent.table.weight(0, Action.MOVE_NORTH) == pytest.approx(-2.5)

    agent.observe(10.0)
    agent.end_episode(2)
    assert agent.table.weight(1, Action.MOVE_NORTH) == pytest.approx(5.0)
    assert agent.phase is AgentPhase.TERMINAL


def test_agent_rejects_out_of_order_calls():
    agent = make_agent()
    agent.begin_episode()

    with pytest.raises(RuntimeError):
        agent.observe(1.0)

    agent.act(0, 0.0)
    with pytest.raises(RuntimeError):
        agent.act(1, 0.0)

    agent.begin_episode()
    agent.act(0, 0.0)
    agent.observe(1.0)
    with pytest.raises(RuntimeError):
        agent.observe(1.0)

    agent.end_episode(1)
    with pytest.raises(RuntimeError):
        agent.act(1, 0.0)
    with pytest.raises(RuntimeError):
        agent.end_episode(1)


def test_agent_state_is_per_episode_but_table_persists():
    agent = make_agent()
    agent.begin_episode()
    agent.act(0, 0.0)
    agent.observe(4.0)
    agent.end_episode(0)

    agent.begin_episode()
    assert agent.phase is AgentPhase.AWAITING_FIRST_PERCEPT
    # Closing an episode with no steps applies no update
    agent.end_episode(3)
    assert agent.table.weight(0, Action.MOVE_NORTH) == pytest.approx(2.0)


def test_weights_returns_a_copy():
    table = PolicyTable(2)
    row = table.weights(1)
    row[:] = 7.0
    assert table.max_weight(1) == 0.0
    assert list(table.weights(1)) == [0.0] * 5
