import pytest

from actions import Action, ActionKind, Direction, all_actions
from senses import Sense, SenseKind, all_senses
from world import Food


def test_move_needs_a_direction_and_others_refuse_one():
    with pytest.raises(ValueError):
        Action(ActionKind.MOVE)
    with pytest.raises(ValueError):
        Action(ActionKind.EAT, Direction.UP)


def test_action_catalogue():
    actions = all_actions()
    assert len(actions) == 6
    assert len(set(actions)) == 6
    assert [str(a) for a in actions[-2:]] == ["eat", "flee_danger"]
    assert str(Action.move(Direction.LEFT)) == "move_left"


def test_direction_offsets():
    assert (Direction.LEFT.dx, Direction.LEFT.dy) == (-1, 0)
    assert (Direction.UP.dx, Direction.UP.dy) == (0, -1)


def test_sense_catalogue_is_unique_and_hashable():
    senses = all_senses()
    assert len(senses) == 14
    assert len(set(senses)) == 14
    assert {Sense(SenseKind.HUNGER): 1.0}[Sense(SenseKind.HUNGER)] == 1.0


def test_vision_sees_land_across_the_edge(make_world, make_organism):
    world = make_world(3, 3, water={(2, 0)})
    org = make_organism()
    look_left  = Sense(SenseKind.VISION, Direction.LEFT)
    look_right = Sense(SenseKind.VISION, Direction.RIGHT)
    assert look_left.calc(world, org, 0, 0) == 0.0     # wraps onto the water at x=2
    assert look_right.calc(world, org, 0, 0) == 1.0


def test_smell_here_and_nearby(make_world, make_organism):
    world = make_world()
    org = make_organism()
    world.tile_at(1, 0).food = Food()
    here = Sense(SenseKind.SMELL)
    up   = Sense(SenseKind.SMELL, Direction.UP)

    assert here.calc(world, org, 1, 0) == 1.0
    assert here.calc(world, org, 1, 1) == 0.0
    assert up.calc(world, org, 1, 1) == 1.0
    assert up.calc(world, org, 0, 1) == 0.0


@pytest.mark.parametrize("energy,hunger,health", [
    (0, -20.0, -5.0),
    (5, -20.0, 0.0),
    (11, -20.0, 1.0),
    (60, 1.0, 1.0),
    (61, 1.0, 1.5),
])
def test_hunger_and_health(make_world, make_organism, energy, hunger, health):
    world = make_world()
    org = make_organism(energy=energy)
    assert Sense(SenseKind.HUNGER).calc(world, org, 0, 0) == hunger
    assert Sense(SenseKind.HEALTH).calc(world, org, 0, 0) == health


def test_hearing_touch_and_taste(make_world, make_organism):
    world = make_world(5, 5)
    me = make_organism()
    world.set_organism_at(2, 2, me)
    world.set_organism_at(1, 1, make_organism())      # diagonal
    world.tile_at(2, 2).food = Food(energy=30)

    hearing = Sense(SenseKind.HEARING)
    touch   = Sense(SenseKind.TOUCH)
    taste   = Sense(SenseKind.TASTE)

    assert hearing.calc(world, me, 2, 2) == pytest.approx(1 / 8)
    assert touch.calc(world, me, 2, 2) == 0.0
    world.set_organism_at(2, 3, make_organism())      # directly below
    assert touch.calc(world, me, 2, 2) == 1.0
    assert hearing.calc(world, me, 2, 2) == pytest.approx(2 / 8)
    assert taste.calc(world, me, 2, 2) == pytest.approx(0.3)
    assert taste.calc(world, me, 0, 0) == 0.0
