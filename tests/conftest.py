import numpy as np
import pytest

from actions import Action
from config import DEFAULT_CONFIG
from creature import Organism
from neural_network import Brain
from senses import Sense, SenseKind
from world import LAND, WATER, World


@pytest.fixture
def quiet_config():
    """Defaults with every periodic side effect switched off."""
    return DEFAULT_CONFIG.with_overrides(
        food_interval=0,
        vitals_reset_interval=0,
        reality_tick=10**9,
        plasticity_interval=0,
        log_interval=0,
    )


@pytest.fixture
def make_world():
    def _make(width=3, height=3, water=(), seed=0):
        terrain = [[WATER if (x, y) in water else LAND for x in range(width)]
                   for y in range(height)]
        return World(width, height, seed=seed, terrain=terrain)
    return _make


@pytest.fixture
def make_organism(quiet_config):
    """
    Organism whose single motor neuron has no inputs, so its activation is
    frozen at ``activation``.  With ``action=None`` the motor is unmapped.
    """
    def _make(action=None, activation=0.0, energy=60, health=100, config=None):
        cfg = (config or quiet_config).with_overrides(initial_activation=activation)
        brain = Brain([Sense(SenseKind.HUNGER)], 0, [action], cfg)
        return Organism(brain, health=health, energy=energy,
                        learning_rate=cfg.learning_rate)
    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def eat():
    return Action.eat()
