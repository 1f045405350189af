"""
Oscillation engine for frame-driven scenes.
Builds sine wave oscillators from a scene configuration and advances them once per frame.
"""

import logging
import numpy as np
from typing import Dict, Callable, Optional, List

from sinewave.config.config_schemas import SceneConfig, OscillatorParameters
from sinewave.models.scene_definitions import Scene
from sinewave.simulation.frame_clock import FrameClock
from .sine_wave import SineWave

logger = logging.getLogger(__name__)


class OscillationEngine:
    """Owns the oscillators of a scene and drives them from the host frame loop."""

    def __init__(self,
                 config: SceneConfig,
                 scene: Scene,
                 clock: Optional[FrameClock] = None,
                 pause_source: Optional[Callable[[], bool]] = None,
                 seed: Optional[int] = None):
        """
        Initialize oscillation engine with configuration.

        Args:
            config: Scene configuration containing oscillator definitions
            scene: Scene built from the same configuration
            clock: Frame clock; a new one is created from the simulation defaults if None
            pause_source: Callable reporting the host pause state; never paused if None
            seed: Seed for the oscillators' random sources; falls back to the configured seed
        """
        self.config = config
        self.scene = scene
        self.clock = clock if clock is not None else FrameClock(config.simulation_defaults.smoothing)
        self.pause_source = pause_source
        self.oscillators: Dict[str, SineWave] = {}
        self.started = False

        if seed is None:
            seed = config.simulation_defaults.seed
        self._seed_sequence = np.random.SeedSequence(seed)

        for params in config.oscillators:
            self.register_oscillator(params.name, self.create_oscillator(params))

    def create_oscillator(self, params: OscillatorParameters) -> SineWave:
        """
        Create a sine wave for an oscillator definition.

        Args:
            params: Oscillator definition naming its host object

        Returns:
            SineWave bound to the host object's transform
        """
        host = self.scene.get_object(params.object)
        if host is None:
            raise ValueError(f"Oscillator '{params.name}' is attached to unknown object '{params.object}'")

        target_override = None
        if params.config.target_override is not None:
            override_object = self.scene.get_object(params.config.target_override)
            if override_object is None:
                raise ValueError(f"Oscillator '{params.name}' overrides unknown target "
                                 f"'{params.config.target_override}'")
            target_override = override_object.transform

        rng = np.random.default_rng(self._seed_sequence.spawn(1)[0])
        return SineWave(params.config, host.transform, target_override=target_override,
                        rng=rng, name=params.name)

    def register_oscillator(self, name: str, oscillator: SineWave):
        """
        Register an oscillator to be driven by this engine.

        Args:
            name: Unique oscillator name
            oscillator: Oscillator instance
        """
        if name in self.oscillators:
            raise ValueError(f"Oscillator '{name}' is already registered")
        self.oscillators[name] = oscillator
        if self.started:
            oscillator.start()

    def get_oscillator(self, name: str) -> Optional[SineWave]:
        return self.oscillators.get(name)

    def oscillator_names(self) -> List[str]:
        return list(self.oscillators.keys())

    def is_paused(self) -> bool:
        return bool(self.pause_source()) if self.pause_source is not None else False

    def start(self):
        """Start every registered oscillator. Called automatically before the first step."""
        if self.started:
            return
        logger.info(f"Starting {len(self.oscillators)} oscillators in scene '{self.scene.name}'")
        for oscillator in self.oscillators.values():
            oscillator.start()
        self.started = True

    def step(self,
             delta_time: float,
             simulation_step: Optional[Callable[[Scene, FrameClock], None]] = None
             ) -> Dict[str, Optional[np.ndarray]]:
        """
        Run one frame.

        The clock is advanced, the host simulation step runs, then every
        oscillator is advanced so it can overwrite values set earlier in the frame.

        Args:
            delta_time: Elapsed frame time in seconds
            simulation_step: Optional host callback run before the oscillators

        Returns:
            Dictionary of oscillator names to written vectors (None when paused)
        """
        if not self.started:
            self.start()

        self.clock.tick(delta_time)

        if simulation_step is not None:
            simulation_step(self.scene, self.clock)

        paused = self.is_paused()
        results = {}
        for name, oscillator in self.oscillators.items():
            results[name] = oscillator.advance(
                self.clock.smooth_delta_time,
                global_clock=self.clock.time_since_load,
                paused=paused
            )
        return results

    def run(self, num_frames: int, frame_rate: float) -> Dict[str, np.ndarray]:
        """
        Run a fixed-rate frame loop and collect each oscillator's output.

        Args:
            num_frames: Number of frames to run
            frame_rate: Frames per second

        Returns:
            Dictionary of oscillator names to (num_frames, 3) arrays; paused frames hold NaN
        """
        if num_frames <= 0:
            raise ValueError(f"num_frames must be positive, got {num_frames}")
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")

        delta_time = 1.0 / frame_rate
        traces = {name: np.full((num_frames, 3), np.nan) for name in self.oscillators}
        for frame in range(num_frames):
            results = self.step(delta_time)
            for name, value in results.items():
                if value is not None:
                    traces[name][frame] = value
        return traces
