"""
Simulation Engine for NeuroGrid.

Runs one world tick by tick:
  for each tick:
    1. Clear + respawn food on the configured cadence
    2. Reset organism vitals (periodically before the reality tick,
       once more exactly at it)
    3. Snapshot occupied tiles in row-major order and let each organism
       live one tick (sense → act → age → learn → move)
  until max_ticks is reached or every organism has died.

Independent simulations share nothing and can be fanned out over worker
processes with ``run_simulations``; their statistics are joined at the end.
"""

import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field

import numpy as np

from config import DEFAULT_CONFIG
from genome import random_world, spawn_food


@dataclass
class SimulationStatistics:
    simulation_id: int
    ticks: int = 0
    initial_organisms: int = 0
    final_organisms: int = 0
    total_food_consumed: int = 0      # Σ energy left in surviving organisms
    average_energy: float = 0.0

    # not part of the report; carried back from worker processes for charts
    population_history: list = field(default_factory=list, repr=False, compare=False)
    best_brain: dict = field(default=None, repr=False, compare=False)

    @property
    def survival_rate(self) -> float:
        if self.initial_organisms == 0:
            return 0.0
        return self.final_organisms / self.initial_organisms

    def as_dict(self) -> dict:
        return {
            "simulation_id":       self.simulation_id,
            "ticks":               self.ticks,
            "initial_organisms":   self.initial_organisms,
            "final_organisms":     self.final_organisms,
            "total_food_consumed": self.total_food_consumed,
            "average_energy":      round(self.average_energy, 4),
            "survival_rate":       round(self.survival_rate, 4),
        }

    def __str__(self) -> str:
        return (
            f"Simulation {self.simulation_id} Statistics:\n"
            f"-------------------------------------\n"
            f"Total Ticks: {self.ticks}\n"
            f"Initial Organisms: {self.initial_organisms}\n"
            f"Final Organisms: {self.final_organisms}\n"
            f"Total Food Consumed: {self.total_food_consumed}\n"
            f"Average Final Energy: {self.average_energy:.2f}\n"
            f"Survival Rate: {100.0 * self.survival_rate:.2f}%"
        )


class Simulation:
    """
    Main simulation controller for a single world.
    """

    def __init__(
        self,
        config           = DEFAULT_CONFIG,
        simulation_id:   int  = 1,
        seed:            int  = None,
        world            = None,     # pre-built world (otherwise generated)
        on_tick_callback = None,     # called after every tick (for live viz)
        verbose:         bool = True,
    ):
        self.config        = config.validate()
        self.simulation_id = simulation_id
        self.world         = world if world is not None else random_world(config, seed)
        self.on_tick_callback = on_tick_callback
        self.verbose       = verbose

        self.tick              = 0
        self.initial_organisms = self.world.organism_count()
        self.history           = []    # per-tick (tick, organisms, avg_energy)

    # ──────────────────────────────────────────────────────────────────────────
    # Public API
    # ──────────────────────────────────────────────────────────────────────────

    def run(self) -> SimulationStatistics:
        """Advance until max_ticks or extinction, then report."""
        t0 = time.time()
        while self.tick < self.config.max_ticks and self.world.organism_count() > 0:
            self.step()

        stats = self.statistics()
        if self.verbose:
            print(f"  Simulation {self.simulation_id} finished after {self.tick} ticks "
                  f"in {time.time() - t0:.2f}s")
        return stats

    def step(self) -> None:
        """Run exactly one tick."""
        cfg  = self.config
        tick = self.tick + 1

        if cfg.food_interval > 0 and tick % cfg.food_interval == 0:
            self.world.clear_food()
            spawn_food(self.world, cfg.food_probability, cfg.food_energy)

        if tick == cfg.reality_tick:
            self._reset_vitals()
        elif (cfg.vitals_reset_interval > 0 and tick < cfg.reality_tick
              and tick % cfg.vitals_reset_interval == 0):
            self._reset_vitals()

        # Stable enumeration: organisms that move during the pass are not
        # picked up again at their new tile.
        order = [(t.x, t.y, t.organism) for t in self.world.get_tiles_with_organisms()]
        for x, y, organism in order:
            if self.world.get_organism_at(x, y) is not organism:
                continue
            organism.live(self.world, x, y, tick, cfg)

        self.tick = tick
        organisms = self.world.get_all_organisms()
        avg = float(np.mean([o.energy for o in organisms])) if organisms else 0.0
        self.history.append((tick, len(organisms), avg))

        if self.verbose and cfg.log_interval > 0 and tick % cfg.log_interval == 0:
            self._print_progress(tick, len(organisms), avg)

        if self.on_tick_callback:
            self.on_tick_callback(tick, self.world, organisms)

    def statistics(self) -> SimulationStatistics:
        organisms = self.world.get_all_organisms()
        energies  = [o.energy for o in organisms]
        best      = max(organisms, key=lambda o: o.energy) if organisms else None
        return SimulationStatistics(
            simulation_id       = self.simulation_id,
            ticks               = self.tick,
            initial_organisms   = self.initial_organisms,
            final_organisms     = len(organisms),
            total_food_consumed = int(sum(energies)),
            average_energy      = float(np.mean(energies)) if energies else 0.0,
            population_history  = list(self.history),
            best_brain          = best.brain.snapshot() if best is not None else None,
        )

    # ──────────────────────────────────────────────────────────────────────────

    def _reset_vitals(self) -> None:
        for organism in self.world.get_all_organisms():
            organism.reset_vitals(self.config)

    def _print_progress(self, tick: int, alive: int, avg_energy: float):
        print(
            f"Sim {self.simulation_id:>3}  |  "
            f"tick {tick:>6}/{self.config.max_ticks:<6}  |  "
            f"organisms {alive:>5}/{self.initial_organisms:<5}  |  "
            f"avg energy {avg_energy:>7.2f}"
        )


# ──────────────────────────────────────────────────────────────────────────────
# Multiple runs
# ──────────────────────────────────────────────────────────────────────────────

def _run_one(args) -> SimulationStatistics:
    simulation_id, config, seed, verbose, callback_factory = args
    callback = callback_factory(simulation_id) if callback_factory is not None else None
    return Simulation(config, simulation_id=simulation_id, seed=seed,
                      on_tick_callback=callback, verbose=verbose).run()


def run_simulations(n: int, config=DEFAULT_CONFIG, workers: int = 1,
                    base_seed: int = None, verbose: bool = True,
                    callback_factory=None) -> list:
    """
    Run ``n`` independent simulations and return their statistics in id order.
    With workers > 1 they run in separate processes.

    callback_factory: optional picklable ``f(simulation_id)`` returning the
    ``on_tick_callback`` for that run (built inside the worker process).
    """
    jobs = [
        (sim_id, config, None if base_seed is None else base_seed + sim_id,
         verbose, callback_factory)
        for sim_id in range(1, n + 1)
    ]
    if workers <= 1:
        return [_run_one(job) for job in jobs]
    with ProcessPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_run_one, jobs))


def summarize_statistics(results: list) -> dict:
    if not results:
        raise ValueError("no simulation results to summarise")
    n          = len(results)
    initial    = sum(r.initial_organisms for r in results)
    final      = sum(r.final_organisms for r in results)
    return {
        "simulations":             n,
        "total_ticks":             sum(r.ticks for r in results),
        "average_initial":         initial / n,
        "average_final":           final / n,
        "total_food_consumed":     sum(r.total_food_consumed for r in results),
        "average_energy":          float(np.mean([r.average_energy for r in results])),
        "survival_rate":           final / initial if initial else 0.0,
    }


def print_summary(summary: dict) -> None:
    print("\nOverall Simulation Statistics:")
    print("-------------------------------------")
    print(f"Total Simulations: {summary['simulations']}")
    print(f"Total Ticks Simulated: {summary['total_ticks']}")
    print(f"Average Initial Organisms: {summary['average_initial']:.1f}")
    print(f"Average Final Organisms: {summary['average_final']:.1f}")
    print(f"Total Food Consumed: {summary['total_food_consumed']}")
    print(f"Average Energy Across Simulations: {summary['average_energy']:.2f}")
    print(f"Overall Survival Rate: {100.0 * summary['survival_rate']:.2f}%")
