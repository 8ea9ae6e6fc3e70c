"""
NeuroGrid – Main Entry Point
============================

Usage examples:
  python main.py                            # 4 simulations, default settings
  python main.py --sims 10 --workers 4      # 10 runs spread over 4 processes
  python main.py --ticks 3000 --width 48    # longer runs on a bigger world
  python main.py --activation gelu          # different neuron nonlinearity
  python main.py --seed 7 --dot             # reproducible, print a brain as DOT
  python main.py --snapshot_interval 100    # world image every 100 ticks
"""

import argparse
import functools
import os

from config import (SAVE_DIR, SIMULATIONS, MAX_TICKS, WORLD_WIDTH,
                    WORLD_HEIGHT, LEARNING_RATE, ACTIVATION_FUNCTION,
                    REALITY_TICK, SNAPSHOT_INTERVAL, DEFAULT_CONFIG)
from neural_network import ACTIVATIONS
from simulation import run_simulations, summarize_statistics, print_summary
from visualizer import (ensure_dirs, append_csv, save_population_chart,
                        save_brain_diagram, save_world_snapshot, brain_to_dot)


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="NeuroGrid – learning organisms on a toroidal grid")
    p.add_argument("--sims",          type=int,   default=SIMULATIONS,
                   help="Number of independent simulations")
    p.add_argument("--workers",       type=int,   default=os.cpu_count() or 1,
                   help="Worker processes (1 = run sequentially)")
    p.add_argument("--ticks",         type=int,   default=MAX_TICKS,
                   help="Maximum ticks per simulation")
    p.add_argument("--width",         type=int,   default=WORLD_WIDTH,
                   help="World width in tiles")
    p.add_argument("--height",        type=int,   default=WORLD_HEIGHT,
                   help="World height in tiles")
    p.add_argument("--learning_rate", type=float, default=LEARNING_RATE,
                   help="Per-organism learning rate")
    p.add_argument("--activation",    default=ACTIVATION_FUNCTION,
                   choices=sorted(ACTIVATIONS),
                   help="Neuron activation function")
    p.add_argument("--reality_tick",  type=int,   default=REALITY_TICK,
                   help="Tick of the one-time vitals reset")
    p.add_argument("--seed",          type=int,   default=None,
                   help="Base random seed (run i uses seed + i)")
    p.add_argument("--outdir",        default=SAVE_DIR,
                   help="Output directory")
    p.add_argument("--snapshot_interval", type=int, default=SNAPSHOT_INTERVAL,
                   help="Save a world snapshot every N ticks (0 = off)")
    p.add_argument("--dot",           action="store_true",
                   help="Print the best survivor's brain of each run as DOT")
    p.add_argument("--quiet",         action="store_true",
                   help="Suppress per-tick progress lines")
    return p.parse_args(argv)


class WorldSnapshots:
    """on_tick_callback that saves a world image every ``interval`` ticks."""

    def __init__(self, outdir: str, interval: int, simulation_id: int):
        self.outdir        = outdir
        self.interval      = interval
        self.simulation_id = simulation_id

    def __call__(self, tick, world, organisms):
        if tick % self.interval == 0:
            path = save_world_snapshot(world, tick, f"sim_{self.simulation_id:03d}", self.outdir)
            print(f"  → Snapshot: {path}")


def build_config(args):
    return DEFAULT_CONFIG.with_overrides(
        max_ticks           = args.ticks,
        world_width         = args.width,
        world_height        = args.height,
        learning_rate       = args.learning_rate,
        activation_function = args.activation,
        reality_tick        = args.reality_tick,
    ).validate()


# ──────────────────────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────────────────────

def main(argv=None):
    args   = parse_args(argv)
    config = build_config(args)
    ensure_dirs(args.outdir)

    print("=" * 60)
    print("  NeuroGrid – Learning Organisms Simulator")
    print("=" * 60)
    print(f"  Simulations: {args.sims}  (workers: {args.workers})")
    print(f"  World      : {config.world_width} x {config.world_height}")
    print(f"  Max ticks  : {config.max_ticks}  (reality at {config.reality_tick})")
    print(f"  Activation : {config.activation_function}")
    print(f"  Learn rate : {config.learning_rate}")
    print(f"  Output dir : {args.outdir}")
    print("=" * 60)

    print(f"Starting {args.sims} simulations, each running for up to {config.max_ticks} ticks...")
    snapshots = None
    if args.snapshot_interval > 0:
        snapshots = functools.partial(WorldSnapshots, args.outdir, args.snapshot_interval)
    results = run_simulations(args.sims, config, workers=args.workers,
                              base_seed=args.seed, verbose=not args.quiet,
                              callback_factory=snapshots)
    print(f"All {args.sims} simulations completed.\n")

    for stats in results:
        print(stats)
        print()
        append_csv(stats.as_dict(), args.outdir)
        if stats.best_brain is not None:
            path = save_brain_diagram(stats.best_brain, f"sim_{stats.simulation_id:03d}_best",
                                      args.outdir)
            print(f"  → Brain diagram: {path}")
            if args.dot:
                print(brain_to_dot(stats.best_brain, f"sim_{stats.simulation_id}"))

    print_summary(summarize_statistics(results))

    chart = save_population_chart(
        {s.simulation_id: s.population_history for s in results}, args.outdir)
    if chart:
        print(f"\n  → Population chart: {chart}")

    print("\nDone! All outputs saved to:", args.outdir)
    return results


if __name__ == "__main__":
    main()
