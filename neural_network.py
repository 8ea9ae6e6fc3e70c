"""
Neural Network Brain for NeuroGrid.

Topology: sensory neurons → inter neurons → motor neurons, wired by
weighted ``Connection`` edges that each target neuron owns in its
``incoming`` list.  Neurons live in a per-brain arena (``Brain.neurons``)
and connections refer to their source by index, never by copy.

Forward pass (per simulation tick):
  1. Sensory neurons are set from the sense map (missing sense → 0.0)
  2. Every inter neuron computes its activation, in declared order
  3. Every motor neuron computes its activation, in declared order

Only these two sequential passes run.  An inter→inter edge therefore
reads its source as it stood at the start of the pass, so a chain of k
inter neurons needs k ticks to carry a signal through.

Learning (per tick, from a scalar reward):
  - motor inputs get an error-driven update, clipped to [w_min, w_max]
  - the reward is then pushed backwards, depth-bounded, as a Hebbian
    update scaled by 1 / (depth + 0.5); touched weights are clipped last

Plasticity (every few ticks): prune near-zero weights, regrow random ones.
"""

import math
from enum import Enum

import numpy as np

from config import DEFAULT_CONFIG


# ──────────────────────────────────────────────────────────────────────────────
# Activation functions
# ──────────────────────────────────────────────────────────────────────────────

def sigmoid(x: float) -> float:
    x = max(-60.0, min(60.0, x))
    return 1.0 / (1.0 + math.exp(-x))


def relu(x: float) -> float:
    return x if x > 0.0 else 0.0


def leaky_relu(x: float, slope: float = 0.01) -> float:
    return x if x > 0.0 else slope * x


def gelu(x: float) -> float:
    return 0.5 * x * (1.0 + math.erf(x / math.sqrt(2.0)))


ACTIVATIONS = {
    "sigmoid":    sigmoid,
    "relu":       relu,
    "leaky_relu": leaky_relu,
    "gelu":       gelu,
    "tanh":       math.tanh,
}


# ──────────────────────────────────────────────────────────────────────────────
# Neurons and connections
# ──────────────────────────────────────────────────────────────────────────────

class NeuronType(Enum):
    SENSORY = "sensory"
    INTER   = "inter"
    MOTOR   = "motor"


class Connection:
    """Directed weighted edge; ``source``/``target`` are neuron ids in the brain arena."""
    __slots__ = ("source", "target", "weight")

    def __init__(self, source: int, target: int, weight: float):
        self.source = source
        self.target = target
        self.weight = float(weight)

    def __repr__(self):
        return f"Connection({self.source} → {self.target}, w={self.weight:+.3f})"


class Neuron:
    __slots__ = (
        "id", "kind", "activation", "previous_activation",
        "memory_decay", "activation_fn", "_fn", "incoming",
    )

    def __init__(self, nid: int, kind: NeuronType, activation: float = 0.0,
                 memory_decay: float = 0.9, activation_fn: str = "sigmoid"):
        if activation_fn not in ACTIVATIONS:
            raise KeyError(f"unknown activation function '{activation_fn}'")
        self.id            = nid
        self.kind          = kind
        self.activation    = float(activation)
        self.previous_activation = 0.0
        self.memory_decay  = float(memory_decay)
        self.activation_fn = activation_fn
        self._fn           = ACTIVATIONS[activation_fn]
        self.incoming      = []          # list[Connection], owned by this neuron

    def compute_activation(self, neurons: list) -> None:
        """Weighted sum → nonlinearity → blend with remembered activation."""
        if not self.incoming:
            return
        weighted_sum = sum(neurons[c.source].activation * c.weight for c in self.incoming)
        decay = self.memory_decay
        self.activation = self._fn(weighted_sum) * (1.0 - decay) + self.previous_activation * decay
        self.previous_activation = self.activation

    def adjust_memory_decay(self, reward: float, step: float = 0.05,
                            min_decay: float = 0.5, max_decay: float = 1.0) -> None:
        # positive reward → hold on to memory longer
        if reward > 0:
            self.memory_decay = min(max_decay, self.memory_decay + step)
        else:
            self.memory_decay = max(min_decay, self.memory_decay - step)

    def __repr__(self):
        return (f"Neuron({self.id}, {self.kind.value}, a={self.activation:.3f}, "
                f"in={len(self.incoming)})")


# ──────────────────────────────────────────────────────────────────────────────
# Brain
# ──────────────────────────────────────────────────────────────────────────────

class Brain:
    """
    One organism's network.  Neuron ids are assigned in group order:
    sensory (one per sense), then inter, then motor.

    Args:
        senses:        ordered senses, one sensory neuron each
        n_inter:       number of inter neurons
        motor_actions: one entry per motor neuron, the Action it fires or None
        config:        SimConfig supplying memory / learning constants
    """

    def __init__(self, senses: list, n_inter: int, motor_actions: list,
                 config=DEFAULT_CONFIG):
        if not senses:
            raise ValueError("a brain needs at least one sensory neuron")
        if not motor_actions:
            raise ValueError("a brain needs at least one motor neuron")

        self.config  = config
        self.senses  = list(senses)
        self.neurons = []
        self.sensory = [self._add_neuron(NeuronType.SENSORY) for _ in self.senses]
        self.inter   = [self._add_neuron(NeuronType.INTER) for _ in range(n_inter)]
        self.motor   = [self._add_neuron(NeuronType.MOTOR) for _ in motor_actions]
        self.motor_actions = {
            nid: action for nid, action in zip(self.motor, motor_actions)
            if action is not None
        }

    def _add_neuron(self, kind: NeuronType) -> int:
        cfg = self.config
        nid = len(self.neurons)
        self.neurons.append(Neuron(
            nid, kind,
            activation=cfg.initial_activation,
            memory_decay=cfg.memory_decay,
            activation_fn=cfg.activation_function,
        ))
        return nid

    def connect(self, source: int, target: int, weight: float) -> Connection:
        """Append a new edge to ``target``'s incoming list."""
        conn = Connection(source, target, weight)
        self.neurons[target].incoming.append(conn)
        return conn

    # ──────────────────────────────────────────────────────────────────────────
    # Forward pass / action selection
    # ──────────────────────────────────────────────────────────────────────────

    def process_input(self, sensory_data) -> None:
        for nid, sense in zip(self.sensory, self.senses):
            self.neurons[nid].activation = float(sensory_data.get(sense, 0.0))

        for nid in self.inter:
            self.neurons[nid].compute_activation(self.neurons)
        for nid in self.motor:
            self.neurons[nid].compute_activation(self.neurons)

    def trigger_single_action(self):
        """Action of the most active mapped motor neuron, if above threshold."""
        best_nid = None
        best_val = -math.inf
        for nid in self.motor:
            if nid not in self.motor_actions:
                continue
            value = self.neurons[nid].activation
            if value > best_val:          # strict: earliest neuron wins ties
                best_val = value
                best_nid = nid
        if best_nid is None or best_val <= self.config.activation_threshold:
            return None
        return self.motor_actions[best_nid]

    def trigger_actions(self) -> list:
        """
        Every mapped action whose motor neuron is above threshold.
        Alternative to ``trigger_single_action`` for organisms that may act
        on several motors in one tick; the tick cycle uses the single form.
        """
        threshold = self.config.activation_threshold
        return [
            self.motor_actions[nid] for nid in self.motor
            if nid in self.motor_actions and self.neurons[nid].activation > threshold
        ]

    # ──────────────────────────────────────────────────────────────────────────
    # Learning
    # ──────────────────────────────────────────────────────────────────────────

    def adjust_weights_based_on_reward(self, reward: float, learning_rate: float) -> None:
        if reward == 0.0:
            return
        cfg     = self.config
        neurons = self.neurons
        touched = []

        for mid in self.motor:
            motor = neurons[mid]
            for conn in motor.incoming:
                error = reward - motor.activation
                conn.weight += learning_rate * error * neurons[conn.source].activation
                conn.weight = min(cfg.weight_max, max(cfg.weight_min, conn.weight))
            touched.extend(self._propagate_reward(mid, reward, learning_rate))

        for conn in touched:
            conn.weight = min(cfg.weight_max, max(cfg.weight_min, conn.weight))

    def _propagate_reward(self, start: int, reward: float, learning_rate: float) -> list:
        """
        Depth-bounded backward credit assignment from one motor neuron.
        Explicit stack of (neuron id, reward, depth); returns touched edges.
        """
        cfg     = self.config
        neurons = self.neurons
        touched = []
        stack   = [(start, reward, 1)]
        while stack:
            nid, r, depth = stack.pop()
            neuron = neurons[nid]
            neuron.adjust_memory_decay(r, cfg.memory_decay_step,
                                       cfg.memory_decay_min, cfg.memory_decay_max)
            scaled = r / (depth + 0.5)
            for conn in neuron.incoming:
                conn.weight += learning_rate * scaled * neurons[conn.source].activation
                touched.append(conn)
                if depth < cfg.learn_depth:
                    stack.append((conn.source, scaled, depth + 1))
        return touched

    # ──────────────────────────────────────────────────────────────────────────
    # Structural plasticity
    # ──────────────────────────────────────────────────────────────────────────

    def prune_weak_connections(self, threshold: float) -> int:
        pruned = 0
        for neuron in self.neurons:
            kept = [c for c in neuron.incoming if not (-threshold < c.weight < threshold)]
            pruned += len(neuron.incoming) - len(kept)
            neuron.incoming = kept
        return pruned

    def grow_random_connections(self, n: int, rng=None) -> None:
        if rng is None:
            rng = np.random.default_rng()
        cfg     = self.config
        sources = self.sensory + self.inter
        targets = self.inter + self.motor
        for _ in range(n):
            src    = sources[int(rng.integers(0, len(sources)))]
            dst    = targets[int(rng.integers(0, len(targets)))]
            weight = float(rng.uniform(cfg.init_weight_min, cfg.init_weight_max))
            self.connect(src, dst, weight)

    # ──────────────────────────────────────────────────────────────────────────
    # Introspection
    # ──────────────────────────────────────────────────────────────────────────

    def connections(self):
        for neuron in self.neurons:
            yield from neuron.incoming

    def connection_count(self) -> int:
        return sum(len(n.incoming) for n in self.neurons)

    def label(self, nid: int) -> str:
        neuron = self.neurons[nid]
        if neuron.kind is NeuronType.SENSORY:
            return str(self.senses[self.sensory.index(nid)])
        if neuron.kind is NeuronType.MOTOR:
            action = self.motor_actions.get(nid)
            return str(action) if action is not None else f"M{nid:02d}"
        return f"I{nid:02d}"

    def snapshot(self) -> dict:
        """Read-only copy of neurons and connections for external visualisers."""
        return {
            "neurons": [
                {"id": n.id, "type": n.kind.value,
                 "activation": n.activation, "label": self.label(n.id)}
                for n in self.neurons
            ],
            "connections": [
                {"source": c.source, "target": c.target, "weight": c.weight}
                for c in self.connections()
            ],
        }

    def summary(self) -> str:
        lines = [f"Brain ({len(self.neurons)} neurons, {self.connection_count()} connections)"]
        for c in self.connections():
            lines.append(f"  {self.label(c.source):>12} → {self.label(c.target):<12}  w={c.weight:+.3f}")
        return "\n".join(lines)
