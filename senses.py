"""
Senses for NeuroGrid.

A sense turns the world around an organism into one scalar stimulus.
Each ``Sense`` is a frozen (hashable) value so a brain can key its
sensory input map by sense.  Evaluation goes through ``_DISPATCH``,
one function per ``SenseKind``.

  vision(d)   1 if the neighbour in direction d is walkable land
  smell()     1 if the current tile holds food
  smell(d)    1 if the neighbour in direction d holds food
  hunger      strongly negative while energy is low
  health      graded by remaining energy
  hearing     share of the 8 surrounding tiles that hold an organism
  touch       1 if an orthogonal neighbour holds an organism
  taste       energy of the food on the current tile (scaled)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from actions import Direction

# 8-neighbourhood offsets used by hearing
_RING = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)]


class SenseKind(Enum):
    VISION  = "vision"
    SMELL   = "smell"
    HUNGER  = "hunger"
    HEALTH  = "health"
    HEARING = "hearing"
    TOUCH   = "touch"
    TASTE   = "taste"


@dataclass(frozen=True)
class Sense:
    kind: SenseKind
    direction: Optional[Direction] = None

    def calc(self, world, organism, x: int, y: int) -> float:
        return _DISPATCH[self.kind](self, world, organism, x, y)

    def __str__(self) -> str:
        if self.direction is not None:
            return f"{self.kind.value}_{self.direction.name.lower()}"
        return self.kind.value


# ──────────────────────────────────────────────────────────────────────────────
# Per-kind evaluation
# ──────────────────────────────────────────────────────────────────────────────

def _vision(sense, world, organism, x, y) -> float:
    return 1.0 if world.neighbour(x, y, sense.direction).is_land else 0.0


def _smell(sense, world, organism, x, y) -> float:
    if sense.direction is None:
        tile = world.tile_at(x, y)
        return 1.0 if tile.is_land and tile.has_food() else 0.0
    return 1.0 if world.neighbour(x, y, sense.direction).has_food() else 0.0


def _hunger(sense, world, organism, x, y) -> float:
    return -20.0 if organism.energy < 60 else 1.0


def _health(sense, world, organism, x, y) -> float:
    if organism.energy > 60:
        return 1.5
    if organism.energy > 10:
        return 1.0
    if organism.energy <= 0:
        return -5.0
    return 0.0


def _hearing(sense, world, organism, x, y) -> float:
    heard = sum(1 for dx, dy in _RING if world.get_organism_at(x + dx, y + dy) is not None)
    return heard / len(_RING)


def _touch(sense, world, organism, x, y) -> float:
    for d in Direction:
        if world.neighbour(x, y, d).has_organism():
            return 1.0
    return 0.0


def _taste(sense, world, organism, x, y) -> float:
    food = world.tile_at(x, y).food
    return food.energy / 100.0 if food is not None else 0.0


_DISPATCH = {
    SenseKind.VISION:  _vision,
    SenseKind.SMELL:   _smell,
    SenseKind.HUNGER:  _hunger,
    SenseKind.HEALTH:  _health,
    SenseKind.HEARING: _hearing,
    SenseKind.TOUCH:   _touch,
    SenseKind.TASTE:   _taste,
}


def all_senses() -> list:
    """Full sense catalogue; one sensory neuron is created per entry."""
    return (
        [Sense(SenseKind.VISION, d) for d in Direction]
        + [Sense(SenseKind.HEARING), Sense(SenseKind.SMELL)]
        + [Sense(SenseKind.SMELL, d) for d in Direction]
        + [Sense(SenseKind.TASTE), Sense(SenseKind.TOUCH),
           Sense(SenseKind.HUNGER), Sense(SenseKind.HEALTH)]
    )
