"""
Configuration schemas for the sine wave oscillator system.
Defines the structure of scene files and oscillator settings.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, List

CHANNEL_POSITION = "position"
CHANNEL_ROTATION = "rotation"
CHANNEL_SCALE = "scale"

# Priority order used when capturing the base value from a target
CHANNELS = (CHANNEL_POSITION, CHANNEL_ROTATION, CHANNEL_SCALE)


@dataclass
class OscillatorConfig:
    """Authored settings of a single sine wave oscillator."""
    affects: List[str] = field(default_factory=lambda: [CHANNEL_POSITION])
    amplitude: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    frequency: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])  # omega, rad per phase unit
    phase_offset: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    bounce: List[bool] = field(default_factory=lambda: [False, False, False])
    uniform: bool = False
    use_local_space: bool = True  # scale is always local
    randomize_on_start: bool = False
    randomize_on_change: bool = False
    use_global_clock: bool = False  # overrides randomization
    use_start_value_as_base: bool = True
    base_position: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    ignore_pause: bool = False
    target_override: Optional[str] = None  # scene object name


@dataclass
class TransformParameters:
    """Initial transform of a scene object, in its parent's space."""
    position: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    rotation: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])  # euler degrees
    scale: List[float] = field(default_factory=lambda: [1.0, 1.0, 1.0])
    parent: Optional[str] = None


@dataclass
class OscillatorParameters:
    """An oscillator attached to a named scene object."""
    name: str
    object: str
    config: OscillatorConfig = field(default_factory=OscillatorConfig)


@dataclass
class SimulationDefaults:
    """Default frame loop parameters."""
    frame_rate: float = 60.0
    duration: float = 4.0
    smoothing: float = 0.2
    seed: Optional[int] = None
    output_dir: str = "sine_wave_traces"


@dataclass
class SceneInfo:
    """Scene file information."""
    name: str = "Unknown Scene"


@dataclass
class SceneConfig:
    """Complete scene configuration."""
    scene_info: SceneInfo = field(default_factory=SceneInfo)
    simulation_defaults: SimulationDefaults = field(default_factory=SimulationDefaults)
    objects: Dict[str, TransformParameters] = field(default_factory=dict)
    oscillators: List[OscillatorParameters] = field(default_factory=list)
