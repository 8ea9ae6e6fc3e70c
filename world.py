"""
World Grid for NeuroGrid.

The world is a fixed-size toroidal 2-D grid of tiles.  Each tile is land
or water, may carry one piece of food and holds at most one organism.
The grid is the only owner of organisms: an organism does not know its
own position, the driver tells it where it is standing each tick.
"""

from dataclasses import dataclass

import numpy as np

LAND  = "land"
WATER = "water"


def wrap(c: int, size: int) -> int:
    return ((c % size) + size) % size


@dataclass
class Food:
    energy: int = 20
    kind: str = "vegetable"


class Tile:
    __slots__ = ("x", "y", "terrain", "food", "organism")

    def __init__(self, x: int, y: int, terrain: str = LAND, food: Food = None):
        self.x        = x
        self.y        = y
        self.terrain  = terrain
        self.food     = food
        self.organism = None

    @property
    def is_land(self) -> bool:
        return self.terrain == LAND

    def has_food(self) -> bool:
        return self.food is not None

    def has_organism(self) -> bool:
        return self.organism is not None

    def __repr__(self):
        return f"Tile({self.x},{self.y},{self.terrain})"


class World:
    """
    Manages the tile grid, organism occupancy and food.
    """

    def __init__(self, width: int, height: int, seed: int = None, terrain=None):
        if width <= 0 or height <= 0:
            raise ValueError(f"world size must be positive, got {width}x{height}")
        self.width  = width
        self.height = height
        self.rng    = np.random.default_rng(seed)
        # tiles[y][x]; terrain[y][x] optional, defaults to all land
        self.tiles  = [
            [Tile(x, y, terrain[y][x] if terrain is not None else LAND) for x in range(width)]
            for y in range(height)
        ]

    # ──────────────────────────────────────────────────────────────────────────
    # Tile access
    # ──────────────────────────────────────────────────────────────────────────

    def tile_at(self, x: int, y: int) -> Tile:
        return self.tiles[wrap(y, self.height)][wrap(x, self.width)]

    def neighbour(self, x: int, y: int, direction) -> Tile:
        return self.tile_at(x + direction.dx, y + direction.dy)

    def land_tiles(self) -> list:
        return [t for row in self.tiles for t in row if t.is_land]

    # ──────────────────────────────────────────────────────────────────────────
    # Occupancy
    # ──────────────────────────────────────────────────────────────────────────

    def get_organism_at(self, x: int, y: int):
        return self.tile_at(x, y).organism

    def set_organism_at(self, x: int, y: int, organism) -> bool:
        """Place organism if the tile is free land.  Never overwrites."""
        tile = self.tile_at(x, y)
        if tile.organism is not None or not tile.is_land:
            return False
        tile.organism = organism
        return True

    def clear_organism_at(self, x: int, y: int):
        """Empty the tile; returns whoever was there (or None)."""
        tile = self.tile_at(x, y)
        organism, tile.organism = tile.organism, None
        return organism

    def move_organism(self, x: int, y: int, dx: int, dy: int) -> bool:
        """
        Move the occupant of (x, y) by (dx, dy) with wraparound.
        Returns False (nothing changes) if the source is empty or the
        destination is occupied or water.
        """
        organism = self.get_organism_at(x, y)
        if organism is None:
            return False
        if not self.set_organism_at(x + dx, y + dy, organism):
            return False
        self.tile_at(x, y).organism = None
        return True

    # ──────────────────────────────────────────────────────────────────────────
    # Live read views (row-major: y, then x)
    # ──────────────────────────────────────────────────────────────────────────

    def get_tiles_with_organisms(self) -> list:
        return [t for row in self.tiles for t in row if t.organism is not None]

    def get_all_organisms(self) -> list:
        return [t.organism for t in self.get_tiles_with_organisms()]

    def organism_count(self) -> int:
        return sum(1 for row in self.tiles for t in row if t.organism is not None)

    # ──────────────────────────────────────────────────────────────────────────
    # Food
    # ──────────────────────────────────────────────────────────────────────────

    def clear_food(self) -> None:
        for row in self.tiles:
            for t in row:
                t.food = None

    def food_count(self) -> int:
        return sum(1 for row in self.tiles for t in row if t.food is not None)

    # ──────────────────────────────────────────────────────────────────────────
    # Snapshot for visualisation
    # ──────────────────────────────────────────────────────────────────────────

    def snapshot(self):
        """
        Returns three lists of (x, y) for visualisation:
          organisms, food, water
        """
        organisms, food, water = [], [], []
        for row in self.tiles:
            for t in row:
                if t.organism is not None:
                    organisms.append((t.x, t.y))
                if t.food is not None:
                    food.append((t.x, t.y))
                if not t.is_land:
                    water.append((t.x, t.y))
        return organisms, food, water
