import os

from actions import Action
from neural_network import Brain
from senses import Sense, SenseKind
from visualizer import (append_csv, brain_to_dot, ensure_dirs, save_brain_diagram,
                        save_population_chart, save_world_snapshot)


def _snapshot():
    brain = Brain([Sense(SenseKind.HUNGER), Sense(SenseKind.TASTE)], 1, [Action.eat()])
    brain.connect(0, 2, 2.0)
    brain.connect(1, 2, -0.5)
    brain.connect(2, 3, 0.3)
    return brain.snapshot()


def test_brain_to_dot():
    dot = brain_to_dot(_snapshot(), "best")
    lines = dot.splitlines()
    assert lines[0] == "digraph best {"
    assert lines[-1] == "}"
    assert sum(1 for l in lines if "->" in l) == 3
    assert 'n0 -> n2 [label="2.00", color=green' in dot
    assert 'n1 -> n2 [label="-0.50", color=orange' in dot
    assert "color=red" not in dot.split("->", 1)[1]
    assert "hunger" in dot and "eat" in dot


def test_csv_header_is_written_once(tmp_path):
    row = {"simulation_id": 1, "ticks": 5}
    path = append_csv(row, str(tmp_path))
    append_csv({"simulation_id": 2, "ticks": 9}, str(tmp_path))
    with open(path) as f:
        assert f.read().splitlines() == ["simulation_id,ticks", "1,5", "2,9"]


def test_csv_can_be_disabled(tmp_path):
    assert append_csv({"a": 1}, str(tmp_path), enabled=False) is None
    assert not os.listdir(tmp_path)


def test_images_are_written(tmp_path, make_world):
    base = str(tmp_path)
    ensure_dirs(base)

    brain_png = save_brain_diagram(_snapshot(), "sim_001_best", base)
    assert brain_png == os.path.join(base, "brains", "sim_001_best.png")
    assert os.path.getsize(brain_png) > 0

    world_png = save_world_snapshot(make_world(water={(1, 1)}), 7, "run", base)
    assert os.path.basename(world_png) == "run_tick_000007.png"
    assert os.path.isfile(world_png)

    chart = save_population_chart({1: [(1, 3, 59.0), (2, 2, 58.5)], 2: []}, base)
    assert os.path.isfile(chart)


def test_population_chart_needs_data(tmp_path):
    assert save_population_chart({1: [], 2: []}, str(tmp_path)) is None
