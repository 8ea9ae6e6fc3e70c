import math

import pytest

from actions import Action, Direction
from config import DEFAULT_CONFIG
from neural_network import (Brain, Connection, Neuron, NeuronType,
                            gelu, leaky_relu, relu, sigmoid)
from senses import Sense, SenseKind

HUNGER = Sense(SenseKind.HUNGER)
HEALTH = Sense(SenseKind.HEALTH)
TASTE  = Sense(SenseKind.TASTE)

# plain nonlinearity, no memory, neurons start silent
LINEAR_CFG = DEFAULT_CONFIG.with_overrides(
    activation_function="relu",
    memory_decay=0.0,
    memory_decay_min=0.0,
    initial_activation=0.0,
)


# ──────────────────────────────────────────────────────────────────────────────
# Activation functions / neuron
# ──────────────────────────────────────────────────────────────────────────────

def test_activation_functions():
    assert sigmoid(0.0) == 0.5
    assert sigmoid(1000.0) == pytest.approx(1.0)
    assert sigmoid(-1000.0) == pytest.approx(0.0)
    assert relu(-2.0) == 0.0 and relu(1.5) == 1.5
    assert leaky_relu(-1.0) == pytest.approx(-0.01)
    assert gelu(0.0) == 0.0
    assert gelu(3.0) == pytest.approx(3.0 * 0.5 * (1 + math.erf(3.0 / math.sqrt(2))))


def test_unknown_activation_function_is_rejected():
    with pytest.raises(KeyError):
        Neuron(0, NeuronType.INTER, activation_fn="softmax")


def test_neuron_without_inputs_keeps_its_activation():
    n = Neuron(0, NeuronType.MOTOR, activation=0.7)
    n.compute_activation([n])
    assert n.activation == 0.7
    assert n.previous_activation == 0.0


def test_memory_is_blended_after_the_nonlinearity():
    src = Neuron(0, NeuronType.SENSORY, activation=1.0)
    dst = Neuron(1, NeuronType.MOTOR, memory_decay=0.5)
    dst.incoming.append(Connection(0, 1, 2.0))
    neurons = [src, dst]

    dst.compute_activation(neurons)
    first = sigmoid(2.0) * 0.5
    assert dst.activation == pytest.approx(first)
    assert dst.previous_activation == pytest.approx(first)

    dst.compute_activation(neurons)
    assert dst.activation == pytest.approx(sigmoid(2.0) * 0.5 + first * 0.5)


def test_memory_decay_steps_and_clamps():
    n = Neuron(0, NeuronType.INTER, memory_decay=0.98)
    n.adjust_memory_decay(1.0)
    assert n.memory_decay == 1.0
    for _ in range(20):
        n.adjust_memory_decay(-1.0)
    assert n.memory_decay == 0.5
    n.adjust_memory_decay(0.0)          # zero counts as "not positive"
    assert n.memory_decay == 0.5


# ──────────────────────────────────────────────────────────────────────────────
# Construction
# ──────────────────────────────────────────────────────────────────────────────

def test_brain_requires_sensory_and_motor_neurons():
    with pytest.raises(ValueError):
        Brain([], 2, [Action.eat()])
    with pytest.raises(ValueError):
        Brain([HUNGER], 2, [])


def test_neuron_ids_follow_group_order():
    brain = Brain([HUNGER, HEALTH], 3, [Action.eat(), None])
    assert brain.sensory == [0, 1]
    assert brain.inter == [2, 3, 4]
    assert brain.motor == [5, 6]
    assert brain.motor_actions == {5: Action.eat()}
    assert all(brain.neurons[i].kind is NeuronType.INTER for i in brain.inter)


# ──────────────────────────────────────────────────────────────────────────────
# Forward pass
# ──────────────────────────────────────────────────────────────────────────────

def test_missing_sense_reads_as_zero():
    brain = Brain([HUNGER, HEALTH], 0, [Action.eat()], LINEAR_CFG)
    brain.process_input({HEALTH: 0.75})
    assert brain.neurons[0].activation == 0.0
    assert brain.neurons[1].activation == 0.75


def test_inter_chain_lags_one_tick_per_hop():
    # ids: sensory 0, inter a=1, inter b=2, motor 3; a reads b, b reads the sense
    brain = Brain([HUNGER], 2, [Action.eat()], LINEAR_CFG)
    brain.connect(0, 2, 1.0)
    brain.connect(2, 1, 1.0)

    brain.process_input({HUNGER: 0.8})
    assert brain.neurons[2].activation == pytest.approx(0.8)
    assert brain.neurons[1].activation == 0.0      # saw b as it was before the pass

    brain.process_input({HUNGER: 0.8})
    assert brain.neurons[1].activation == pytest.approx(0.8)


def test_motor_reads_inter_values_of_the_same_tick():
    brain = Brain([HUNGER], 1, [Action.eat()], LINEAR_CFG)
    brain.connect(0, 1, 1.0)
    brain.connect(1, 2, 2.0)
    brain.process_input({HUNGER: 0.5})
    assert brain.neurons[2].activation == pytest.approx(1.0)


# ──────────────────────────────────────────────────────────────────────────────
# Action selection
# ──────────────────────────────────────────────────────────────────────────────

def _brain_with_motor_values(values, actions):
    brain = Brain([HUNGER], 0, actions)
    for nid, value in zip(brain.motor, values):
        brain.neurons[nid].activation = value
    return brain


def test_single_action_picks_the_strongest_motor():
    left, right = Action.move(Direction.LEFT), Action.move(Direction.RIGHT)
    brain = _brain_with_motor_values([0.3, 0.9], [left, right])
    assert brain.trigger_single_action() == right


def test_single_action_tie_goes_to_first_declared_motor():
    brain = _brain_with_motor_values([0.5, 0.5], [Action.eat(), Action.flee()])
    assert brain.trigger_single_action() == Action.eat()


def test_single_action_below_threshold_is_idle():
    brain = _brain_with_motor_values([0.1, 0.05], [Action.eat(), Action.flee()])
    assert brain.trigger_single_action() is None


def test_unmapped_motor_neurons_are_ignored():
    brain = _brain_with_motor_values([0.9, 0.4], [None, Action.flee()])
    assert brain.trigger_single_action() == Action.flee()
    assert brain.trigger_actions() == [Action.flee()]


def test_trigger_actions_lists_every_motor_above_threshold():
    brain = _brain_with_motor_values([0.5, 0.05, 0.2],
                                     [Action.eat(), Action.flee(), Action.move(Direction.UP)])
    assert brain.trigger_actions() == [Action.eat(), Action.move(Direction.UP)]


# ──────────────────────────────────────────────────────────────────────────────
# Learning
# ──────────────────────────────────────────────────────────────────────────────

def test_zero_reward_changes_nothing():
    brain = Brain([HUNGER], 0, [Action.eat()])
    conn = brain.connect(0, 1, 0.3)
    brain.neurons[0].activation = 1.0
    brain.adjust_weights_based_on_reward(0.0, 0.5)
    assert conn.weight == 0.3
    assert brain.neurons[1].memory_decay == DEFAULT_CONFIG.memory_decay


def test_motor_update_then_hebbian_credit():
    brain = Brain([HUNGER], 0, [Action.eat()])
    conn = brain.connect(0, 1, 0.5)
    brain.neurons[0].activation = 1.0
    brain.neurons[1].activation = 0.2

    brain.adjust_weights_based_on_reward(1.0, 0.1)

    direct  = 0.1 * (1.0 - 0.2) * 1.0
    hebbian = 0.1 * (1.0 / 1.5) * 1.0
    assert conn.weight == pytest.approx(0.5 + direct + hebbian)
    assert brain.neurons[1].memory_decay == pytest.approx(0.95)
    assert brain.neurons[0].memory_decay == pytest.approx(0.95)


def test_credit_assignment_stops_at_the_depth_bound():
    cfg = DEFAULT_CONFIG.with_overrides(learn_depth=3, initial_activation=0.0)
    brain = Brain([HUNGER], 1, [Action.eat()], cfg)    # inter 1, motor 2
    motor_in = brain.connect(1, 2, 0.0)
    loop     = brain.connect(1, 1, 0.0)                 # self loop
    brain.neurons[1].activation = 1.0

    brain.adjust_weights_based_on_reward(1.0, 0.1)

    r1 = 1.0 / 1.5
    r2 = r1 / 2.5
    r3 = r2 / 3.5
    assert motor_in.weight == pytest.approx(0.1 * 1.0 + 0.1 * r1)
    assert loop.weight == pytest.approx(0.1 * r2 + 0.1 * r3)


def test_touched_weights_stay_within_bounds():
    brain = Brain([HUNGER, HEALTH, TASTE], 3, [Action.eat(), Action.flee()])
    for s in brain.sensory:
        for i in brain.inter:
            brain.connect(s, i, 4.9)
    for i in brain.inter:
        for m in brain.motor:
            brain.connect(i, m, -4.9)
        brain.connect(i, i, 4.9)
    brain.process_input({HUNGER: -20.0, HEALTH: 1.5, TASTE: 3.0})

    for reward in (-20.0, 3.0, 50.0):
        brain.adjust_weights_based_on_reward(reward, 1.0)
        for c in brain.connections():
            assert DEFAULT_CONFIG.weight_min <= c.weight <= DEFAULT_CONFIG.weight_max


# ──────────────────────────────────────────────────────────────────────────────
# Plasticity
# ──────────────────────────────────────────────────────────────────────────────

def test_prune_removes_only_weights_strictly_inside_threshold():
    brain = Brain([HUNGER], 1, [Action.eat()])
    for w in (0.1, -0.1, 0.2, -0.2, 0.5):
        brain.connect(0, 1, w)
    brain.connect(1, 2, 0.0)

    assert brain.prune_weak_connections(0.2) == 3
    assert sorted(c.weight for c in brain.connections()) == [-0.2, 0.2, 0.5]


def test_prune_is_idempotent():
    brain = Brain([HUNGER, HEALTH], 2, [Action.eat()])
    for w, (s, t) in zip((0.05, 0.3, -0.15, -0.9, 0.19), ((0, 2), (1, 2), (0, 3), (3, 4), (2, 4))):
        brain.connect(s, t, w)
    brain.prune_weak_connections(0.2)
    assert brain.prune_weak_connections(0.2) == 0


def test_grow_adds_exactly_k_connections(rng):
    brain = Brain([HUNGER, HEALTH], 3, [Action.eat(), Action.flee()])
    before = brain.connection_count()
    brain.grow_random_connections(25, rng)
    assert brain.connection_count() == before + 25

    sources = set(brain.sensory + brain.inter)
    targets = set(brain.inter + brain.motor)
    for c in brain.connections():
        assert c.source in sources
        assert c.target in targets
        assert DEFAULT_CONFIG.init_weight_min <= c.weight < DEFAULT_CONFIG.init_weight_max
        assert c in brain.neurons[c.target].incoming


def test_grow_zero_is_a_no_op(rng):
    brain = Brain([HUNGER], 1, [Action.eat()])
    brain.grow_random_connections(0, rng)
    assert brain.connection_count() == 0


# ──────────────────────────────────────────────────────────────────────────────
# Introspection
# ──────────────────────────────────────────────────────────────────────────────

def test_snapshot_lists_neurons_and_connections():
    brain = Brain([HUNGER], 1, [Action.eat()])
    brain.connect(0, 1, 0.25)
    snap = brain.snapshot()

    assert [n["type"] for n in snap["neurons"]] == ["sensory", "inter", "motor"]
    assert [n["label"] for n in snap["neurons"]] == ["hunger", "I01", "eat"]
    assert snap["connections"] == [{"source": 0, "target": 1, "weight": 0.25}]

    snap["connections"][0]["weight"] = 99.0
    assert next(brain.connections()).weight == 0.25


def test_summary_mentions_every_connection():
    brain = Brain([HUNGER], 0, [Action.eat()])
    brain.connect(0, 1, -0.4)
    text = brain.summary()
    assert "1 connections" in text
    assert "hunger" in text and "eat" in text and "-0.400" in text
