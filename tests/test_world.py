import numpy as np
import pytest

from robby.domain.types import Action, Cell, RLConfig
from robby.domain.world import GridWorld
from robby.utils.rng import SeededRNG


def make_world(dimension=3, cans=0, seed=0):
    config = RLConfig(grid_dimensions=dimension, initial_can_count=cans)
    return GridWorld(config, SeededRNG(seed))


def test_reset_places_requested_cans():
    world = make_world(dimension=10, cans=20)
    world.reset()
    assert world.count_cans() == 20

    world.reset(can_count=7)
    assert world.count_cans() == 7


def test_reset_can_fill_every_cell():
    world = make_world(dimension=3)
    world.reset(can_count=9)
    assert world.count_cans() == 9

    with pytest.raises(ValueError):
        world.reset(can_count=10)


def test_reset_uses_given_or_random_start():
    world = make_world(dimension=4)
    assert world.reset(start=(2, 3)) == (2, 3)

    for _ in range(20):
        assert world.is_valid_coord(world.reset())

    with pytest.raises(ValueError):
        world.reset(start=(4, 0))


def test_pickup_on_can_rewards_and_removes_it():
    world = make_world()
    world.reset(start=(1, 1))
    world.grid[1, 1] = Cell.CAN

    assert world.apply_action(Action.PICK_UP) == 10.0
    assert world.cell_at((1, 1)) == Cell.EMPTY
    assert world.cans_collected == 1


def test_pickup_on_empty_cell_penalises_and_leaves_grid():
    world = make_world(dimension=5, cans=6)
    world.reset(start=(2, 2))
    world.grid[2, 2] = Cell.EMPTY
    before = world.grid.copy()

    assert world.apply_action(Action.PICK_UP) == -1.0
    assert np.array_equal(world.grid, before)
    assert world.position == (2, 2)


def test_moves_follow_compass_directions():
    world = make_world()
    world.reset(start=(1, 1))

    assert world.apply_action(Action.MOVE_NORTH) == 0.0
    assert world.position == (0, 1)
    world.apply_action(Action.MOVE_EAST)
    assert world.position == (0, 2)
    world.apply_action(Action.MOVE_SOUTH)
    assert world.position == (1, 2)
    world.apply_action(Action.MOVE_WEST)
    assert world.position == (1, 1)


def test_bumping_the_edge_keeps_robot_in_place():
    world = make_world()
    world.reset(start=(0, 0))

    assert world.apply_action(Action.MOVE_NORTH) == -5.0
    assert world.position == (0, 0)
    assert world.apply_action(Action.MOVE_WEST) == -5.0
    assert world.position == (0, 0)


def test_moves_never_leave_the_grid():
    world = make_world(dimension=4)
    for row in range(4):
        for col in range(4):
            for action in Action:
                world.reset(start=(row, col))
                world.apply_action(action)
                r, c = world.position
                assert 0 <= r < 4 and 0 <= c < 4


def test_cell_at_reports_walls_off_grid():
    world = make_world()
    world.reset(start=(0, 0))
    assert world.cell_at((-1, 0)) == Cell.WALL
    assert world.cell_at((0, 3)) == Cell.WALL
    assert world.cell_at((0, 0)) == Cell.EMPTY


def test_render():
    world = make_world(dimension=2)
    world.reset(start=(0, 0))
    world.grid[1, 1] = Cell.CAN

    assert world.render() == "R _\n_ C"
    assert str(world) == world.render()
