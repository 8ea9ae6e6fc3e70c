"""
Actions for NeuroGrid.

An action is a closed tagged variant: the kind says what the organism
does, MOVE additionally carries a compass direction.  Motor neurons are
mapped onto these values; the organism interprets them each tick.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Direction(Enum):
    UP    = (0, -1)
    DOWN  = (0, 1)
    LEFT  = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


class ActionKind(Enum):
    MOVE        = "move"
    EAT         = "eat"
    FLEE_DANGER = "flee_danger"   # reserved for predator/prey, reward-neutral


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    direction: Optional[Direction] = None

    def __post_init__(self):
        if self.kind is ActionKind.MOVE and self.direction is None:
            raise ValueError("a MOVE action needs a direction")
        if self.kind is not ActionKind.MOVE and self.direction is not None:
            raise ValueError(f"{self.kind.name} does not take a direction")

    @classmethod
    def move(cls, direction: Direction) -> "Action":
        return cls(ActionKind.MOVE, direction)

    @classmethod
    def eat(cls) -> "Action":
        return cls(ActionKind.EAT)

    @classmethod
    def flee(cls) -> "Action":
        return cls(ActionKind.FLEE_DANGER)

    def __str__(self) -> str:
        if self.direction is not None:
            return f"{self.kind.value}_{self.direction.name.lower()}"
        return self.kind.value


def all_actions() -> list:
    """The full action catalogue a motor neuron can be bound to."""
    return [Action.move(d) for d in Direction] + [Action.eat(), Action.flee()]
