"""
Random generation for NeuroGrid.

Brains:
  one sensory neuron per sense, ``inter_neurons`` inter neurons and
  ``motor_neurons`` motor neurons.  Every sensory→inter and inter→motor
  pair is wired with probability ``connection_probability`` and a weight
  drawn uniformly from [init_weight_min, init_weight_max).  Each motor
  neuron is bound to a random action from the catalogue.

Worlds:
  each tile is land with probability ``land_probability``; each land tile
  starts with an organism with probability ``spawn_probability``; then a
  first round of food is spawned.
"""

import numpy as np

from actions import all_actions
from config import DEFAULT_CONFIG
from creature import Organism
from neural_network import Brain
from senses import all_senses
from world import LAND, WATER, Food, World


# ──────────────────────────────────────────────────────────────────────────────
# Brain generation
# ──────────────────────────────────────────────────────────────────────────────

def _connect_randomly(brain: Brain, sources: list, targets: list, rng, config) -> None:
    for src in sources:
        for dst in targets:
            if rng.random() < config.connection_probability:
                weight = rng.uniform(config.init_weight_min, config.init_weight_max)
                brain.connect(src, dst, float(weight))


def random_brain(config=DEFAULT_CONFIG, rng=None, senses: list = None,
                 actions: list = None) -> Brain:
    """Build a freshly wired random brain.  Rejects empty sensory/motor layers."""
    if rng is None:
        rng = np.random.default_rng()
    senses  = all_senses() if senses is None else list(senses)
    actions = all_actions() if actions is None else list(actions)
    if not senses:
        raise ValueError("cannot generate a brain without senses")
    if config.motor_neurons <= 0:
        raise ValueError("cannot generate a brain without motor neurons")
    if not actions:
        raise ValueError("cannot generate a brain without actions")

    motor_actions = [actions[int(rng.integers(0, len(actions)))]
                     for _ in range(config.motor_neurons)]
    brain = Brain(senses, config.inter_neurons, motor_actions, config)

    _connect_randomly(brain, brain.sensory, brain.inter, rng, config)
    _connect_randomly(brain, brain.inter, brain.motor, rng, config)
    return brain


def random_organism(config=DEFAULT_CONFIG, rng=None) -> Organism:
    return Organism(
        brain=random_brain(config, rng),
        health=config.initial_health,
        energy=config.initial_energy,
        learning_rate=config.learning_rate,
    )


# ──────────────────────────────────────────────────────────────────────────────
# World generation
# ──────────────────────────────────────────────────────────────────────────────

def spawn_food(world: World, probability: float, energy: int) -> int:
    """Drop food on free-of-food land tiles independently; returns count spawned."""
    spawned = 0
    for tile in world.land_tiles():
        if tile.food is None and world.rng.random() < probability:
            tile.food = Food(energy=energy)
            spawned += 1
    return spawned


def random_world(config=DEFAULT_CONFIG, seed: int = None) -> World:
    config.validate()
    rng = np.random.default_rng(seed)
    terrain = [
        [LAND if rng.random() < config.land_probability else WATER
         for _ in range(config.world_width)]
        for _ in range(config.world_height)
    ]
    world = World(config.world_width, config.world_height, seed=seed, terrain=terrain)
    world.rng = rng

    for tile in world.land_tiles():
        if rng.random() < config.spawn_probability:
            world.set_organism_at(tile.x, tile.y, random_organism(config, rng))

    spawn_food(world, config.food_probability, config.food_energy)
    return world
