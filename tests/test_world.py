import pytest

from world import Food, World, wrap


def test_wrap_is_toroidal():
    assert wrap(-1, 5) == 4
    assert wrap(5, 5) == 0
    assert wrap(-11, 5) == 4
    assert wrap(3, 5) == 3


def test_world_size_must_be_positive():
    with pytest.raises(ValueError):
        World(0, 3)
    with pytest.raises(ValueError):
        World(3, -1)


def test_tile_access_wraps(make_world):
    world = make_world(4, 3)
    assert world.tile_at(-1, 0) is world.tiles[0][3]
    assert world.tile_at(0, 3) is world.tiles[0][0]
    assert (world.tile_at(5, -1).x, world.tile_at(5, -1).y) == (1, 2)


def test_set_on_occupied_tile_fails_without_overwriting(make_world, make_organism):
    world = make_world()
    a, b = make_organism(), make_organism()
    assert world.set_organism_at(1, 1, a)
    assert not world.set_organism_at(1, 1, b)
    assert world.get_organism_at(1, 1) is a


def test_set_on_water_fails(make_world, make_organism):
    world = make_world(water={(0, 0)})
    assert not world.set_organism_at(0, 0, make_organism())
    assert world.get_organism_at(0, 0) is None


def test_move_onto_occupied_tile_changes_nothing(make_world, make_organism):
    world = make_world()
    a, b = make_organism(), make_organism()
    world.set_organism_at(0, 0, a)
    world.set_organism_at(1, 0, b)

    assert not world.move_organism(0, 0, 1, 0)
    assert world.get_organism_at(0, 0) is a
    assert world.get_organism_at(1, 0) is b


def test_move_left_from_left_edge_wraps(make_world, make_organism):
    world = make_world(5, 2)
    org = make_organism()
    world.set_organism_at(0, 1, org)

    assert world.move_organism(0, 1, -1, 0)
    assert world.get_organism_at(4, 1) is org
    assert world.get_organism_at(0, 1) is None


def test_move_from_empty_tile_fails(make_world):
    assert not make_world().move_organism(1, 1, 0, 1)


def test_clear_returns_previous_occupant(make_world, make_organism):
    world = make_world()
    org = make_organism()
    world.set_organism_at(2, 2, org)
    assert world.clear_organism_at(2, 2) is org
    assert world.clear_organism_at(2, 2) is None


def test_read_views_scan_the_live_grid_row_major(make_world, make_organism):
    world = make_world(3, 2)
    a, b, c = make_organism(), make_organism(), make_organism()
    world.set_organism_at(2, 1, c)
    world.set_organism_at(0, 1, b)
    world.set_organism_at(1, 0, a)

    assert world.get_all_organisms() == [a, b, c]
    assert [(t.x, t.y) for t in world.get_tiles_with_organisms()] == [(1, 0), (0, 1), (2, 1)]

    world.move_organism(1, 0, 0, 1)   # a → (1, 1)
    assert world.get_all_organisms() == [b, a, c]
    assert world.organism_count() == 3


def test_food_helpers_and_snapshot(make_world, make_organism):
    world = make_world(3, 3, water={(2, 2)})
    world.tile_at(0, 0).food = Food(energy=5)
    world.set_organism_at(1, 1, make_organism())

    assert world.food_count() == 1
    assert len(world.land_tiles()) == 8
    organisms, food, water = world.snapshot()
    assert (organisms, food, water) == ([(1, 1)], [(0, 0)], [(2, 2)])

    world.clear_food()
    assert world.food_count() == 0
