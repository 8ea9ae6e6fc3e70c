"""
NeuroGrid Server  –  Flask + Server-Sent Events
===============================================

Endpoints:
  POST /start        Start (or restart) a simulation with a JSON config body
  POST /stop         Stop the running simulation
  GET  /status       Current sim state as JSON
  GET  /stream       SSE stream – browser subscribes here for live ticks
  GET  /brain        Snapshot of the most energetic organism's brain

Run:
  python server.py
  # → http://localhost:5000
"""

import json
import queue
import threading

from flask import Flask, Response, jsonify, request

from config import DEFAULT_CONFIG
from neural_network import ACTIVATIONS
from simulation import Simulation

# ──────────────────────────────────────────────────────────────────────────────
app = Flask(__name__)

FRAME_INTERVAL = 5       # push one SSE frame every N ticks

# camelCase request keys → SimConfig fields
_CFG_KEYS = {
    "worldWidth":          ("world_width", int),
    "worldHeight":         ("world_height", int),
    "maxTicks":            ("max_ticks", int),
    "landProbability":     ("land_probability", float),
    "spawnProbability":    ("spawn_probability", float),
    "foodInterval":        ("food_interval", int),
    "foodProbability":     ("food_probability", float),
    "learningRate":        ("learning_rate", float),
    "interNeurons":        ("inter_neurons", int),
    "motorNeurons":        ("motor_neurons", int),
    "activationFunction":  ("activation_function", str),
    "realityTick":         ("reality_tick", int),
    "vitalsResetInterval": ("vitals_reset_interval", int),
}

# Global simulation state
_sim_thread:  threading.Thread | None = None
_stop_event   = threading.Event()
_tick_queue   = queue.Queue(maxsize=200)   # holds dicts to stream
_sim_status   = {
    "running":   False,
    "tick":      0,
    "maxTicks":  0,
    "organisms": 0,
    "cfg":       {},
}
_latest_brain = {"snapshot": None}
_status_lock  = threading.Lock()


# ──────────────────────────────────────────────────────────────────────────────
# CORS helper – allow a dev front-end (any origin) to call us
# ──────────────────────────────────────────────────────────────────────────────

@app.after_request
def add_cors(response):
    response.headers["Access-Control-Allow-Origin"]  = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    return response


@app.route("/", methods=["OPTIONS"])
@app.route("/<path:p>", methods=["OPTIONS"])
def preflight(p=""):
    return Response(status=200)


# ──────────────────────────────────────────────────────────────────────────────
# Simulation thread
# ──────────────────────────────────────────────────────────────────────────────

def build_config(data: dict):
    """Merge request JSON with defaults.  Raises ValueError on bad input."""
    overrides = {}
    for key, value in data.items():
        if key == "seed":
            continue
        if key not in _CFG_KEYS:
            raise ValueError(f"unknown config key '{key}'")
        field_name, cast = _CFG_KEYS[key]
        try:
            overrides[field_name] = cast(value)
        except (TypeError, ValueError):
            raise ValueError(f"bad value for '{key}': {value!r}") from None
    if overrides.get("activation_function", DEFAULT_CONFIG.activation_function) not in ACTIVATIONS:
        raise ValueError(f"unknown activation function '{overrides['activation_function']}'")
    return DEFAULT_CONFIG.with_overrides(**overrides).validate()


def parse_seed(data: dict):
    """``seed`` from the request: absent/null, or a non-negative integer."""
    seed = data.get("seed")
    if seed is None:
        return None
    if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
        raise ValueError(f"seed must be a non-negative integer, got {seed!r}")
    return seed


def _push(out_q: queue.Queue, payload: dict):
    # Non-blocking put; drop oldest frame if queue full
    if out_q.full():
        try:
            out_q.get_nowait()
        except queue.Empty:
            pass
    out_q.put(payload)


def _sim_worker(sim: Simulation, stop_evt: threading.Event, out_q: queue.Queue):
    """Run the simulation tick by tick in a background thread."""
    with _status_lock:
        _sim_status["running"] = True

    try:
        while (not stop_evt.is_set() and sim.tick < sim.config.max_ticks
               and sim.world.organism_count() > 0):
            sim.step()
            tick, alive, avg_energy = sim.history[-1]
            with _status_lock:
                _sim_status["tick"]      = tick
                _sim_status["organisms"] = alive

            if tick % FRAME_INTERVAL == 0:
                organisms, food, _ = sim.world.snapshot()
                _push(out_q, {
                    "type":      "tick",
                    "tick":      tick,
                    "maxTicks":  sim.config.max_ticks,
                    "organisms": alive,
                    "initial":   sim.initial_organisms,
                    "avgEnergy": round(avg_energy, 3),
                    "positions": [{"x": x, "y": y} for x, y in organisms],
                    "food":      [{"x": x, "y": y} for x, y in food],
                })
                with _status_lock:
                    _latest_brain["snapshot"] = sim.statistics().best_brain
    finally:
        stats = sim.statistics()
        with _status_lock:
            _sim_status["running"] = False
        _push(out_q, {"type": "done", "tick": sim.tick, "stats": stats.as_dict()})


# ──────────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────────

@app.route("/start", methods=["POST"])
def start():
    global _sim_thread, _stop_event, _tick_queue

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"status": "error", "error": "body must be a JSON object"}), 400
    # a rejected request must not touch the running sim
    try:
        cfg = build_config(data)
        sim = Simulation(cfg, seed=parse_seed(data), verbose=False)
    except (ValueError, TypeError, KeyError) as exc:
        return jsonify({"status": "error", "error": str(exc)}), 400

    # Stop any running sim
    _stop_event.set()
    if _sim_thread and _sim_thread.is_alive():
        _sim_thread.join(timeout=3)

    # Reset
    _stop_event = threading.Event()
    _tick_queue = queue.Queue(maxsize=200)
    with _status_lock:
        _sim_status["tick"]      = 0
        _sim_status["running"]   = False
        _sim_status["cfg"]       = cfg.as_dict()
        _sim_status["maxTicks"]  = cfg.max_ticks
        _sim_status["organisms"] = sim.initial_organisms
        _latest_brain["snapshot"] = None

    _sim_thread = threading.Thread(
        target=_sim_worker,
        args=(sim, _stop_event, _tick_queue),
        daemon=True,
    )
    _sim_thread.start()
    return jsonify({"status": "started", "cfg": cfg.as_dict()})


@app.route("/stop", methods=["POST"])
def stop():
    _stop_event.set()
    return jsonify({"status": "stopped"})


@app.route("/status", methods=["GET"])
def status():
    with _status_lock:
        return jsonify(dict(_sim_status))


@app.route("/brain", methods=["GET"])
def brain():
    with _status_lock:
        snapshot = _latest_brain["snapshot"]
    if snapshot is None:
        return jsonify({"status": "empty"}), 404
    return jsonify(snapshot)


@app.route("/stream", methods=["GET"])
def stream():
    """SSE endpoint – browser subscribes and receives tick frames."""
    q = _tick_queue

    def event_gen():
        # Send a hello so the browser knows it's connected
        yield "data: {\"type\": \"connected\"}\n\n"

        while True:
            try:
                payload = q.get(timeout=1)
                yield f"data: {json.dumps(payload)}\n\n"
                if payload.get("type") == "done":
                    break
            except queue.Empty:
                # Keep-alive ping
                yield "data: {\"type\": \"ping\"}\n\n"

    return Response(
        event_gen(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",    # disable nginx buffering if behind proxy
        },
    )


# ──────────────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 50)
    print("  NeuroGrid Server  →  http://localhost:5000")
    print("  SSE stream        →  http://localhost:5000/stream")
    print("=" * 50)
    app.run(host="0.0.0.0", port=5000, threaded=True, debug=False)
