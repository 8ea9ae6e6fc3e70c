"""
NeuroGrid Configuration
All tunable parameters for the organism / neural-brain simulation.

The module-level constants are the defaults.  Generators and the
simulation driver never read them directly at run time: they receive a
frozen ``SimConfig`` built from these values (optionally overridden).
"""

from dataclasses import dataclass, fields, replace

# ─── World ────────────────────────────────────────────────────────────────────
WORLD_WIDTH       = 32     # grid cells east-west (wraps)
WORLD_HEIGHT      = 32     # grid cells north-south (wraps)
LAND_PROBABILITY  = 0.7    # chance a generated tile is land (else water)
SPAWN_PROBABILITY = 0.25   # chance a land tile starts with an organism

# ─── Food ─────────────────────────────────────────────────────────────────────
FOOD_INTERVAL     = 30     # clear + respawn food every N ticks (0 = never)
FOOD_PROBABILITY  = 0.1    # per-land-tile chance of a vegetable on respawn
FOOD_ENERGY       = 20     # energy gained from eating one vegetable

# ─── Organism ─────────────────────────────────────────────────────────────────
INITIAL_HEALTH    = 100
INITIAL_ENERGY    = 60
OVERFEED_ENERGY   = 100    # eating above this is punished instead of rewarded
LEARNING_RATE     = 0.02

# ─── Brain topology ───────────────────────────────────────────────────────────
INTER_NEURONS          = 10
MOTOR_NEURONS          = 6
CONNECTION_PROBABILITY = 0.2     # chance per (sensory→inter) / (inter→motor) pair
ACTIVATION_FUNCTION    = "sigmoid"
NEURON_INITIAL_ACTIVATION = 0.2

# ─── Neuron memory ────────────────────────────────────────────────────────────
MEMORY_DECAY       = 0.9     # share of the previous activation kept each pass
MEMORY_DECAY_STEP  = 0.05
MEMORY_DECAY_MIN   = 0.5
MEMORY_DECAY_MAX   = 1.0

# ─── Learning ─────────────────────────────────────────────────────────────────
ACTIVATION_THRESHOLD = 0.1   # motor neuron must exceed this to fire an action
INIT_WEIGHT_MIN      = -0.5
INIT_WEIGHT_MAX      = 0.5
WEIGHT_MIN           = -5.0
WEIGHT_MAX           = 5.0
LEARN_DEPTH          = 8     # backward credit assignment depth bound

# ─── Plasticity ───────────────────────────────────────────────────────────────
PLASTICITY_INTERVAL  = 50    # prune + regrow every N ticks
PRUNE_THRESHOLD      = 0.2

# ─── Simulation driver ────────────────────────────────────────────────────────
MAX_TICKS             = 1500
REALITY_TICK          = 1000   # one-time vitals reset; history recorded after it
VITALS_RESET_INTERVAL = 100    # periodic vitals reset before REALITY_TICK (0 = off)
SIMULATIONS           = 4      # independent runs launched by main.py

# ─── Output / Logging ─────────────────────────────────────────────────────────
SAVE_DIR      = "output"       # directory for charts, diagrams and CSV
LOG_INTERVAL  = 100            # print a progress line every N ticks
LOG_CSV       = True           # write per-run CSV log
SNAPSHOT_INTERVAL = 500        # save a world image every N ticks (0 = off)


@dataclass(frozen=True)
class SimConfig:
    """Immutable bundle of every tunable, threaded through generators and driver."""

    # world
    world_width: int = WORLD_WIDTH
    world_height: int = WORLD_HEIGHT
    land_probability: float = LAND_PROBABILITY
    spawn_probability: float = SPAWN_PROBABILITY

    # food
    food_interval: int = FOOD_INTERVAL
    food_probability: float = FOOD_PROBABILITY
    food_energy: int = FOOD_ENERGY

    # organism
    initial_health: int = INITIAL_HEALTH
    initial_energy: int = INITIAL_ENERGY
    overfeed_energy: int = OVERFEED_ENERGY
    learning_rate: float = LEARNING_RATE

    # brain
    inter_neurons: int = INTER_NEURONS
    motor_neurons: int = MOTOR_NEURONS
    connection_probability: float = CONNECTION_PROBABILITY
    activation_function: str = ACTIVATION_FUNCTION
    initial_activation: float = NEURON_INITIAL_ACTIVATION
    memory_decay: float = MEMORY_DECAY
    memory_decay_step: float = MEMORY_DECAY_STEP
    memory_decay_min: float = MEMORY_DECAY_MIN
    memory_decay_max: float = MEMORY_DECAY_MAX
    activation_threshold: float = ACTIVATION_THRESHOLD
    init_weight_min: float = INIT_WEIGHT_MIN
    init_weight_max: float = INIT_WEIGHT_MAX
    weight_min: float = WEIGHT_MIN
    weight_max: float = WEIGHT_MAX
    learn_depth: int = LEARN_DEPTH

    # plasticity
    plasticity_interval: int = PLASTICITY_INTERVAL
    prune_threshold: float = PRUNE_THRESHOLD

    # driver
    max_ticks: int = MAX_TICKS
    reality_tick: int = REALITY_TICK
    vitals_reset_interval: int = VITALS_RESET_INTERVAL
    log_interval: int = LOG_INTERVAL

    def with_overrides(self, **overrides) -> "SimConfig":
        """Return a copy with some fields replaced (unknown names raise TypeError)."""
        return replace(self, **overrides)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def validate(self) -> "SimConfig":
        """Reject configurations that cannot produce a runnable simulation."""
        if self.world_width <= 0 or self.world_height <= 0:
            raise ValueError(
                f"world size must be positive, got {self.world_width}x{self.world_height}")
        for name in ("land_probability", "spawn_probability",
                     "food_probability", "connection_probability"):
            p = getattr(self, name)
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {p}")
        if self.motor_neurons <= 0:
            raise ValueError("a brain needs at least one motor neuron")
        if self.inter_neurons < 0:
            raise ValueError("inter_neurons cannot be negative")
        if self.weight_min > self.weight_max:
            raise ValueError("weight_min must not exceed weight_max")
        if self.init_weight_min > self.init_weight_max:
            raise ValueError("init_weight_min must not exceed init_weight_max")
        if not self.memory_decay_min <= self.memory_decay <= self.memory_decay_max:
            raise ValueError("memory_decay must lie within [memory_decay_min, memory_decay_max]")
        if self.learn_depth < 1:
            raise ValueError("learn_depth must be at least 1")
        if self.max_ticks < 0:
            raise ValueError("max_ticks cannot be negative")
        return self


DEFAULT_CONFIG = SimConfig()
