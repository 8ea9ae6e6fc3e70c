"""
Visualizer for NeuroGrid.

Produces:
  1. World snapshots    – water, food and organisms on the grid
  2. Population chart   – living organisms + average energy over ticks
  3. Brain diagrams     – layered wiring of one organism's brain
  4. DOT export         – Graphviz text of a brain snapshot
  5. CSV log            – one row of statistics per simulation

Everything here consumes read-only snapshots; nothing in the core
imports this module.
"""

import csv
import os

import matplotlib
matplotlib.use("Agg")          # non-interactive backend (no display needed)
import matplotlib.pyplot as plt

from config import LOG_CSV, SAVE_DIR

_NEURON_COLORS = {"sensory": "#4499FF", "inter": "#AAAAAA", "motor": "#FF88AA"}
_DOT_COLORS    = {"sensory": "green", "inter": "blue", "motor": "red"}
_COLUMN_X      = {"sensory": 0.0, "inter": 0.5, "motor": 1.0}


# ──────────────────────────────────────────────────────────────────────────────
# Directory setup
# ──────────────────────────────────────────────────────────────────────────────

def ensure_dirs(base: str = SAVE_DIR):
    for sub in ("snapshots", "charts", "brains"):
        os.makedirs(os.path.join(base, sub), exist_ok=True)


def _dark_axes(fig, ax):
    ax.set_facecolor("#111111")
    fig.patch.set_facecolor("#111111")
    ax.tick_params(colors="white")
    for spine in ax.spines.values():
        spine.set_edgecolor("#444444")


# ──────────────────────────────────────────────────────────────────────────────
# World snapshot
# ──────────────────────────────────────────────────────────────────────────────

def save_world_snapshot(world, tick: int, label: str = "world", base: str = SAVE_DIR):
    """Water in blue, food in green, organisms in white."""
    fig, ax = plt.subplots(figsize=(6, 6), dpi=100)
    _dark_axes(fig, ax)
    ax.set_xlim(-1, world.width)
    ax.set_ylim(world.height, -1)          # row 0 at the top
    ax.set_aspect("equal")

    organisms, food, water = world.snapshot()
    ax.set_title(f"{label} – tick {tick}  ({len(organisms)} organisms)",
                 color="white", fontsize=10)
    for points, color, size in ((water, "#224488", 30), (food, "#44FF44", 8),
                                (organisms, "#FFFFFF", 14)):
        if points:
            ax.scatter([p[0] for p in points], [p[1] for p in points],
                       c=color, s=size, marker="s", linewidths=0)

    path = os.path.join(base, "snapshots", f"{label}_tick_{tick:06d}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Population chart
# ──────────────────────────────────────────────────────────────────────────────

def save_population_chart(histories: dict, base: str = SAVE_DIR,
                          filename: str = "population.png"):
    """
    histories: {simulation_id: [(tick, organisms, avg_energy), ...]}
    Organisms on the left axis (solid), average energy on the right (dashed).
    """
    histories = {k: v for k, v in histories.items() if v}
    if not histories:
        return None

    fig, ax1 = plt.subplots(figsize=(12, 5), dpi=100)
    _dark_axes(fig, ax1)
    ax2 = ax1.twinx()
    ax2.tick_params(colors="white")

    cmap = plt.get_cmap("tab10")
    for i, (sim_id, rows) in enumerate(sorted(histories.items())):
        ticks  = [r[0] for r in rows]
        counts = [r[1] for r in rows]
        energy = [r[2] for r in rows]
        color  = cmap(i % 10)
        ax1.plot(ticks, counts, color=color, linewidth=1.2, label=f"Sim {sim_id}")
        ax2.plot(ticks, energy, color=color, linewidth=0.8, linestyle="--", alpha=0.7)

    ax1.set_xlabel("Tick", color="white")
    ax1.set_ylabel("Living organisms", color="white")
    ax2.set_ylabel("Average energy (dashed)", color="white")
    ax1.legend(facecolor="#222222", labelcolor="white", loc="upper right", fontsize=8)
    ax1.set_title("Population over time", color="white", fontsize=12)

    plt.tight_layout()
    path = os.path.join(base, "charts", filename)
    plt.savefig(path, dpi=100, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


# ──────────────────────────────────────────────────────────────────────────────
# Brain diagram
# ──────────────────────────────────────────────────────────────────────────────

def _layout(neurons: list) -> dict:
    """Column per neuron type, evenly spaced rows inside each column."""
    pos = {}
    for kind, x in _COLUMN_X.items():
        column = [n for n in neurons if n["type"] == kind]
        for i, n in enumerate(column):
            pos[n["id"]] = (x, (i + 1) / (len(column) + 1))
    return pos


def save_brain_diagram(snapshot: dict, label: str = "brain", base: str = SAVE_DIR):
    """
    Draw a brain snapshot (``Brain.snapshot()``) as a layered graph.
    Green edges = positive weights, red edges = negative.
    """
    neurons     = snapshot["neurons"]
    connections = snapshot["connections"]
    pos = _layout(neurons)

    fig, ax = plt.subplots(figsize=(10, 7), dpi=100)
    fig.patch.set_facecolor("#111111")
    ax.set_facecolor("#111111")
    ax.axis("off")
    ax.set_xlim(-0.3, 1.3)
    ax.set_ylim(-0.05, 1.08)

    for c in connections:
        x1, y1 = pos[c["source"]]
        x2, y2 = pos[c["target"]]
        w      = c["weight"]
        color  = "#44FF44" if w >= 0 else "#FF4444"
        ax.annotate("", xy=(x2, y2), xytext=(x1, y1),
                    arrowprops=dict(arrowstyle="-|>", color=color,
                                    lw=0.4 + min(3.0, abs(w)), alpha=0.6),
                    zorder=1)

    for n in neurons:
        x, y = pos[n["id"]]
        ax.add_patch(plt.Circle((x, y), 0.018, color=_NEURON_COLORS[n["type"]], zorder=3))
        ha = "right" if n["type"] == "sensory" else ("left" if n["type"] == "motor" else "center")
        dx = -0.03 if n["type"] == "sensory" else (0.03 if n["type"] == "motor" else 0.0)
        dy = 0.0 if n["type"] != "inter" else 0.03
        ax.text(x + dx, y + dy, f"{n['label']} ({n['activation']:.2f})",
                color="white", fontsize=6.5, ha=ha, va="center", zorder=4)

    for tx, title in [(0.0, "Sensory"), (0.5, "Inter"), (1.0, "Motor")]:
        ax.text(tx, 1.05, title, color="#CCCCCC", ha="center", fontsize=9, fontweight="bold")

    ax.set_title(f"{label}  ({len(connections)} connections)", color="white", fontsize=10, pad=4)

    path = os.path.join(base, "brains", f"{label}.png")
    plt.savefig(path, dpi=100, bbox_inches="tight", facecolor=fig.get_facecolor())
    plt.close(fig)
    return path


def brain_to_dot(snapshot: dict, name: str = "brain") -> str:
    """Graphviz DOT text for a brain snapshot."""
    lines = [f"digraph {name} {{", "  rankdir=LR;"]
    for n in snapshot["neurons"]:
        label = f"{n['type']}\\n{n['label']}\\nactivation {n['activation']:.2f}"
        lines.append(f'  n{n["id"]} [label="{label}", color={_DOT_COLORS[n["type"]]}];')
    for c in snapshot["connections"]:
        w = c["weight"]
        if w < -1:
            color, pen = "red", "1.0"
        elif w < 0:
            color, pen = "orange", "1.0"
        elif w > 1:
            color, pen = "green", "1.0"
        else:
            color, pen = "blue", "0.5"
        lines.append(f'  n{c["source"]} -> n{c["target"]} '
                     f'[label="{w:.2f}", color={color}, penwidth={pen}];')
    lines.append("}")
    return "\n".join(lines)


# ──────────────────────────────────────────────────────────────────────────────
# CSV log
# ──────────────────────────────────────────────────────────────────────────────

def append_csv(stats: dict, base: str = SAVE_DIR, enabled: bool = LOG_CSV):
    """Append one simulation's stats to a CSV file."""
    if not enabled:
        return None
    path = os.path.join(base, "simulation_log.csv")
    file_exists = os.path.isfile(path)
    with open(path, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(stats.keys()))
        if not file_exists:
            writer.writeheader()
        writer.writerow(stats)
    return path
