"""
Organism class for NeuroGrid.

Each organism has:
  - A Brain (senses → inter neurons → motor neurons → actions)
  - Vital state: health, energy, age
  - A fixed learning rate
  - An optional debug history (tick → diagnostic line)

The organism does not store its position; the world grid owns it and the
driver passes the (x, y) it found the organism on.  Every tick it:
  1. Senses the world
  2. Runs its brain and picks at most one action
  3. Executes the action, collecting a reward (moves are only staged)
  4. Ages; dies and leaves the grid once health reaches 0
  5. Learns from the reward
  6. Commits the staged move if the destination is still free
  7. Periodically prunes and regrows brain connections
"""

import uuid

from actions import ActionKind
from config import DEFAULT_CONFIG

# Reward table
REWARD_MOVE_LAND     = 0.2
REWARD_MOVE_WATER    = -0.5
REWARD_MOVE_OCCUPIED = -1.0
REWARD_MOVE_FOOD     = 0.5
REWARD_EAT           = 3.0
REWARD_OVERFEED      = -1.0
REWARD_EAT_NOTHING   = -20.0


class Organism:
    """
    A single agent living on the grid.
    """
    __slots__ = ("id", "brain", "health", "energy", "age", "_learning_rate", "history")

    def __init__(self, brain, health: int = 100, energy: int = 60,
                 learning_rate: float = 0.02, organism_id: str = None):
        self.id      = organism_id or uuid.uuid4().hex[:12]
        self.brain   = brain
        self.health  = health
        self.energy  = energy
        self.age     = 0
        self._learning_rate = learning_rate
        self.history = {}

    @property
    def learning_rate(self) -> float:
        return self._learning_rate

    def is_alive(self) -> bool:
        return self.health > 0

    def __repr__(self):
        return f"Organism({self.id}, hp={self.health}, energy={self.energy}, age={self.age})"

    # ──────────────────────────────────────────────────────────────────────────

    def sense(self, world, x: int, y: int) -> dict:
        return {s: s.calc(world, self, x, y) for s in self.brain.senses}

    def time_goes_on(self) -> None:
        self.energy -= 1
        self.age    += 1
        if self.energy <= 0:
            self.energy  = 0
            self.health -= 1

    def eat(self, food) -> None:
        self.energy += food.energy

    def reset_vitals(self, config=DEFAULT_CONFIG) -> None:
        self.health = config.initial_health
        self.energy = config.initial_energy
        self.age    = 0

    # ──────────────────────────────────────────────────────────────────────────

    def live(self, world, x: int, y: int, tick: int, config=DEFAULT_CONFIG) -> float:
        """Run one full tick for the organism standing on (x, y); returns the reward."""
        self.brain.process_input(self.sense(world, x, y))
        action = self.brain.trigger_single_action()

        tile = world.tile_at(x, y)
        if tick > config.reality_tick:
            self.history[tick] = (
                f"health={self.health} energy={self.energy} "
                f"action={action} food_here={tile.has_food()}"
            )

        reward, move = self._execute_action(action, world, x, y, config)

        self.time_goes_on()
        if not self.is_alive():
            # movement is not committed yet, so the organism is still on (x, y)
            world.clear_organism_at(x, y)
            return reward

        self.brain.adjust_weights_based_on_reward(reward, self.learning_rate)

        if move is not None:
            world.move_organism(x, y, move[0], move[1])

        if config.plasticity_interval > 0 and tick % config.plasticity_interval == 0:
            pruned = self.brain.prune_weak_connections(config.prune_threshold)
            self.brain.grow_random_connections(pruned, world.rng)

        return reward

    def _execute_action(self, action, world, x: int, y: int, config):
        """Carry out a chosen action.  Returns (reward, staged (dx, dy) or None)."""
        if action is None:
            return 0.0, None

        if action.kind is ActionKind.MOVE:
            dx, dy = action.direction.dx, action.direction.dy
            return self._reward_movement(world.tile_at(x + dx, y + dy)), (dx, dy)

        if action.kind is ActionKind.EAT:
            tile = world.tile_at(x, y)
            if tile.is_land and tile.food is not None:
                self.eat(tile.food)
                tile.food = None
                if self.energy > config.overfeed_energy:
                    return REWARD_OVERFEED, None
                return REWARD_EAT, None
            return REWARD_EAT_NOTHING, None

        # FLEE_DANGER: no predators yet
        return 0.0, None

    @staticmethod
    def _reward_movement(destination) -> float:
        reward = 0.0
        if destination.has_organism():
            reward += REWARD_MOVE_OCCUPIED
        if destination.is_land:
            reward += REWARD_MOVE_LAND
            if destination.has_food():
                reward += REWARD_MOVE_FOOD
        else:
            reward += REWARD_MOVE_WATER
        return reward
