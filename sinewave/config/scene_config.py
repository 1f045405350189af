"""
Scene configuration management for sine wave oscillators.
Handles loading of scene files and building scenes from them.
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union

from .config_schemas import SceneConfig, SceneInfo, SimulationDefaults
from .config_schemas import TransformParameters, OscillatorParameters, OscillatorConfig, CHANNELS
from sinewave.models.scene_definitions import Scene, SceneObject, Transform
from sinewave.utils.geometry_utils import as_vector3, as_bool3, euler_degrees_to_quaternion

logger = logging.getLogger(__name__)


class SceneConfigManager:
    """Manages loading and validation of oscillator scene configurations."""

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            project_root: Path to project root directory
        """
        if project_root is None:
            self.project_root = Path(__file__).parent.parent.parent
        else:
            self.project_root = Path(project_root)

        self.scenes_dir = self.project_root / "data" / "scenes"

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> SceneConfig:
        """
        Load a scene configuration from file or use the built-in demo scene.

        Args:
            config_path: Path to scene file. If None, uses the demo scene.

        Returns:
            SceneConfig: Loaded configuration

        Raises:
            FileNotFoundError: If the scene file does not exist
            ValueError: If the scene file contains malformed entries
        """
        if config_path is None:
            return self._get_default_demo_config()

        config_path = Path(config_path)
        if not config_path.is_absolute() and not config_path.exists():
            config_path = self.scenes_dir / config_path

        if not config_path.exists():
            raise FileNotFoundError(f"Scene file not found: {config_path}")

        logger.info(f"Loading scene configuration from: {config_path}")
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}

        config = self.parse_config(config_data)
        logger.info(f"Loaded scene '{config.scene_info.name}': "
                    f"{len(config.objects)} objects, {len(config.oscillators)} oscillators")
        return config

    def parse_config(self, config_data: Dict[str, Any]) -> SceneConfig:
        """Parse an already-loaded mapping into a validated SceneConfig."""
        config = SceneConfig()

        if 'scene_info' in config_data:
            scene_info = config_data['scene_info'] or {}
            config.scene_info = SceneInfo(name=scene_info.get('name', 'Unknown Scene'))

        if 'simulation_defaults' in config_data:
            sim_defaults = config_data['simulation_defaults'] or {}
            config.simulation_defaults = SimulationDefaults(
                frame_rate=float(sim_defaults.get('frame_rate', 60.0)),
                duration=float(sim_defaults.get('duration', 4.0)),
                smoothing=float(sim_defaults.get('smoothing', 0.2)),
                seed=sim_defaults.get('seed', None),
                output_dir=sim_defaults.get('output_dir', 'sine_wave_traces')
            )

        for object_name, params in (config_data.get('objects') or {}).items():
            config.objects[object_name] = self._parse_transform(object_name, params or {})

        for i, params in enumerate(config_data.get('oscillators') or []):
            config.oscillators.append(self._parse_oscillator(i, params or {}))

        self.validate_config(config)
        return config

    def _parse_transform(self, object_name: str, params: Dict[str, Any]) -> TransformParameters:
        """Parse the transform entry of a single scene object."""
        return TransformParameters(
            position=as_vector3(params.get('position', [0.0, 0.0, 0.0]), f"{object_name}.position").tolist(),
            rotation=as_vector3(params.get('rotation', [0.0, 0.0, 0.0]), f"{object_name}.rotation").tolist(),
            scale=as_vector3(params.get('scale', [1.0, 1.0, 1.0]), f"{object_name}.scale").tolist(),
            parent=params.get('parent', None)
        )

    def _parse_oscillator(self, index: int, params: Dict[str, Any]) -> OscillatorParameters:
        """Parse a single oscillator entry."""
        name = params.get('name', f"oscillator_{index}")
        if 'object' not in params:
            raise ValueError(f"Oscillator '{name}' does not name an object")

        affects = params.get('affects', ['position'])
        if isinstance(affects, str):
            affects = [affects]
        affects = [str(channel).lower() for channel in affects]
        for channel in affects:
            if channel not in CHANNELS:
                raise ValueError(f"Oscillator '{name}' affects unknown channel '{channel}', "
                                 f"expected one of {list(CHANNELS)}")

        config = OscillatorConfig(
            affects=affects,
            amplitude=as_vector3(params.get('amplitude', [0.0, 0.0, 0.0]), f"{name}.amplitude").tolist(),
            frequency=as_vector3(params.get('frequency', [0.0, 0.0, 0.0]), f"{name}.frequency").tolist(),
            phase_offset=as_vector3(params.get('phase_offset', [0.0, 0.0, 0.0]), f"{name}.phase_offset").tolist(),
            bounce=list(as_bool3(params.get('bounce', [False, False, False]), f"{name}.bounce")),
            uniform=bool(params.get('uniform', False)),
            use_local_space=bool(params.get('use_local_space', True)),
            randomize_on_start=bool(params.get('randomize_on_start', False)),
            randomize_on_change=bool(params.get('randomize_on_change', False)),
            use_global_clock=bool(params.get('use_global_clock', False)),
            use_start_value_as_base=bool(params.get('use_start_value_as_base', True)),
            base_position=as_vector3(params.get('base_position', [0.0, 0.0, 0.0]), f"{name}.base_position").tolist(),
            ignore_pause=bool(params.get('ignore_pause', False)),
            target_override=params.get('target_override', None)
        )
        return OscillatorParameters(name=name, object=params['object'], config=config)

    def validate_config(self, config: SceneConfig):
        """
        Check cross references between objects and oscillators.

        Raises:
            ValueError: On unknown object names, duplicate oscillator names or parent cycles
        """
        for object_name, params in config.objects.items():
            if params.parent is not None and params.parent not in config.objects:
                raise ValueError(f"Object '{object_name}' has unknown parent '{params.parent}'")

        for object_name in config.objects:
            seen = {object_name}
            parent = config.objects[object_name].parent
            while parent is not None:
                if parent in seen:
                    raise ValueError(f"Parent cycle detected at object '{object_name}'")
                seen.add(parent)
                parent = config.objects[parent].parent

        names = set()
        for oscillator in config.oscillators:
            if oscillator.name in names:
                raise ValueError(f"Duplicate oscillator name '{oscillator.name}'")
            names.add(oscillator.name)
            if oscillator.object not in config.objects:
                raise ValueError(f"Oscillator '{oscillator.name}' is attached to unknown object "
                                 f"'{oscillator.object}'")
            override = oscillator.config.target_override
            if override is not None and override not in config.objects:
                raise ValueError(f"Oscillator '{oscillator.name}' overrides unknown target '{override}'")

    def build_scene(self, config: SceneConfig) -> Scene:
        """
        Instantiate scene objects and their parent links from a configuration.

        Args:
            config: Validated scene configuration

        Returns:
            Scene: Scene with one object per configured entry
        """
        scene = Scene(name=config.scene_info.name)
        for object_name, params in config.objects.items():
            transform = Transform(
                local_position=params.position,
                local_rotation=euler_degrees_to_quaternion(params.rotation),
                local_scale=params.scale
            )
            scene.add_object(SceneObject(name=object_name, transform=transform))

        for object_name, params in config.objects.items():
            if params.parent is not None:
                scene.get_object(object_name).transform.parent = scene.get_object(params.parent).transform

        return scene

    def _get_default_demo_config(self) -> SceneConfig:
        """Get the built-in demo scene used when no scene file is given."""
        objects = {
            "Buoy": TransformParameters(position=[0.0, 1.0, 0.0]),
            "Beacon": TransformParameters(position=[3.0, 0.0, 0.0]),
            "Pulse": TransformParameters(position=[-3.0, 0.0, 0.0], scale=[1.0, 1.0, 1.0]),
            "Lantern_A": TransformParameters(position=[0.0, 0.0, 3.0]),
            "Lantern_B": TransformParameters(position=[0.0, 0.0, -3.0])
        }

        oscillators = [
            OscillatorParameters(
                name="buoy_bob",
                object="Buoy",
                config=OscillatorConfig(affects=["position"], amplitude=[0.0, 0.5, 0.0],
                                        frequency=[0.0, 2.0, 0.0])
            ),
            OscillatorParameters(
                name="beacon_sway",
                object="Beacon",
                config=OscillatorConfig(affects=["rotation"], amplitude=[0.0, 0.0, 15.0],
                                        frequency=[0.0, 0.0, 1.5], randomize_on_start=True)
            ),
            OscillatorParameters(
                name="pulse_scale",
                object="Pulse",
                config=OscillatorConfig(affects=["scale"], amplitude=[0.25, 0.0, 0.0],
                                        frequency=[3.0, 0.0, 0.0], bounce=[True, False, False],
                                        uniform=True)
            ),
            OscillatorParameters(
                name="lantern_a_sync",
                object="Lantern_A",
                config=OscillatorConfig(amplitude=[0.0, 0.3, 0.0], frequency=[0.0, 1.0, 0.0],
                                        use_global_clock=True)
            ),
            OscillatorParameters(
                name="lantern_b_sync",
                object="Lantern_B",
                config=OscillatorConfig(amplitude=[0.0, 0.3, 0.0], frequency=[0.0, 1.0, 0.0],
                                        use_global_clock=True)
            )
        ]

        return SceneConfig(
            scene_info=SceneInfo(name="Sine Wave Demo"),
            simulation_defaults=SimulationDefaults(),
            objects=objects,
            oscillators=oscillators
        )


# Global instance for easy access
_config_manager = None

def get_config_manager() -> SceneConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = SceneConfigManager()
    return _config_manager
