#!/usr/bin/env python3
"""
Sine Wave Trace Generation
==========================

Runs a scene of sine wave oscillators at a fixed frame rate and records
the vector each oscillator writes every frame.

Features:
- YAML scene files or the built-in demo scene
- Reproducible phase randomization via --seed
- Optional pause window to exercise pause handling
- JSON trace export and per-axis plots

Usage:
    python generate_sine_wave_trace.py [--config harbor_scene.yaml] [--frames 240] [--no-plot]
"""

import sys
import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.absolute()
sys.path.insert(0, str(PROJECT_ROOT))

from sinewave.config.scene_config import get_config_manager
from sinewave.oscillation.oscillation_engine import OscillationEngine

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

AXIS_COLORS = {"x": "red", "y": "green", "z": "blue"}


def plot_traces(traces: Dict[str, np.ndarray], times: np.ndarray, output_path: Path, title: str):
    """Plot each oscillator's X/Y/Z output against time, one subplot per oscillator."""
    names = list(traces.keys())
    fig, axes = plt.subplots(len(names), 1, figsize=(12, 2.8 * len(names)), sharex=True, squeeze=False)

    for ax, name in zip(axes[:, 0], names):
        trace = traces[name]
        for i, axis_name in enumerate("xyz"):
            ax.plot(times, trace[:, i], color=AXIS_COLORS[axis_name], linewidth=1.5, label=axis_name)
        ax.set_ylabel(name)
        ax.grid(True, alpha=0.3)
        ax.legend(loc="upper right", fontsize=8)

    axes[-1, 0].set_xlabel("Time since load (s)")
    fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)


def generate_sine_wave_trace(config_path: Optional[str] = None,
                             num_frames: Optional[int] = None,
                             frame_rate: Optional[float] = None,
                             seed: Optional[int] = None,
                             pause_window: Optional[tuple] = None,
                             no_plot: bool = False,
                             output_dir: Optional[str] = None) -> Dict[str, np.ndarray]:
    """
    Run a scene and export the oscillator traces.

    Args:
        config_path: Scene file (uses the demo scene if None)
        num_frames: Number of frames (defaults to duration * frame_rate from the scene)
        frame_rate: Frames per second (defaults to the scene's frame rate)
        seed: Random seed for phase randomization (defaults to the scene's seed)
        pause_window: (start, end) in seconds during which the host reports pause
        no_plot: Skip plotting
        output_dir: Output directory (defaults to the scene's output_dir)

    Returns:
        Dictionary of oscillator names to (num_frames, 3) traces
    """
    print("SINE WAVE TRACE GENERATION")
    print("=" * 80)

    manager = get_config_manager()
    config = manager.load_config(config_path)
    scene = manager.build_scene(config)
    defaults = config.simulation_defaults

    frame_rate = frame_rate if frame_rate is not None else defaults.frame_rate
    if num_frames is None:
        num_frames = max(1, int(round(defaults.duration * frame_rate)))

    out_dir = Path(output_dir if output_dir is not None else defaults.output_dir)
    if not out_dir.is_absolute():
        out_dir = PROJECT_ROOT / out_dir
    out_dir.mkdir(parents=True, exist_ok=True)

    print(f"Scene: {scene.name}")
    print(f"Objects: {', '.join(scene.object_names())}")
    print(f"Frames: {num_frames} @ {frame_rate:g} fps")

    engine = OscillationEngine(config, scene, seed=seed)
    if pause_window is not None:
        pause_start, pause_end = pause_window
        engine.pause_source = lambda: pause_start <= engine.clock.time_since_load < pause_end
        print(f"Pause window: {pause_start:g}s - {pause_end:g}s")

    traces = engine.run(num_frames, frame_rate)
    times = np.arange(1, num_frames + 1) / frame_rate

    trace_path = out_dir / "trace.json"
    with open(trace_path, 'w') as f:
        json.dump({
            "scene": scene.name,
            "frame_rate": frame_rate,
            "times": times.tolist(),
            # NaN marks paused frames
            "oscillators": {name: [[None if np.isnan(v) else float(v) for v in row] for row in trace]
                            for name, trace in traces.items()}
        }, f, indent=2)
    logger.info(f"Trace written to {trace_path}")

    if not no_plot and traces:
        plot_path = out_dir / "trace.png"
        plot_traces(traces, times, plot_path, f"{scene.name} oscillator output")
        logger.info(f"Plot written to {plot_path}")

    print("=" * 80)
    for name, trace in traces.items():
        valid = trace[~np.isnan(trace).any(axis=1)]
        if len(valid) == 0:
            print(f"  {name}: paused for the whole run")
            continue
        print(f"  {name}: min {np.round(valid.min(axis=0), 3)}  max {np.round(valid.max(axis=0), 3)}")

    return traces


def main():
    parser = argparse.ArgumentParser(description="Sine wave oscillator trace generation")
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Scene file (absolute, or relative to data/scenes). Uses the demo scene if omitted")
    parser.add_argument("--frames", "-n", type=int, default=None,
                        help="Number of frames to run")
    parser.add_argument("--fps", "-f", type=float, default=None,
                        help="Frame rate in frames per second")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Random seed for phase randomization")
    parser.add_argument("--pause-from", type=float, default=None,
                        help="Start of the host pause window in seconds")
    parser.add_argument("--pause-to", type=float, default=None,
                        help="End of the host pause window in seconds")
    parser.add_argument("--no-plot", action="store_true",
                        help="Skip plotting")
    parser.add_argument("--output-dir", "-o", type=str, default=None,
                        help="Output directory")
    args = parser.parse_args()

    pause_window = None
    if args.pause_from is not None or args.pause_to is not None:
        if args.pause_from is None or args.pause_to is None:
            parser.error("--pause-from and --pause-to must be given together")
        pause_window = (args.pause_from, args.pause_to)

    generate_sine_wave_trace(
        config_path=args.config,
        num_frames=args.frames,
        frame_rate=args.fps,
        seed=args.seed,
        pause_window=pause_window,
        no_plot=args.no_plot,
        output_dir=args.output_dir
    )


if __name__ == "__main__":
    main()
