#!/usr/bin/env python3
"""
Unit tests for sinewave/config/scene_config.py

Tests YAML scene loading, validation and scene building.
"""

import pytest
import numpy as np
import yaml
from pathlib import Path

# Import the module under test
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from sinewave.config.scene_config import SceneConfigManager, get_config_manager
from sinewave.config.config_schemas import SceneConfig, OscillatorConfig
from sinewave.utils.geometry_utils import angles_close

PROJECT_ROOT = Path(__file__).parent.parent


def write_scene(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "scene.yaml"
    with open(path, 'w') as f:
        yaml.safe_dump(data, f)
    return path


class TestLoadConfig:
    """Test loading scene files."""

    @pytest.fixture
    def manager(self, tmp_path):
        return SceneConfigManager(project_root=tmp_path)

    def test_default_demo_config(self, manager):
        """No path yields the built-in demo scene."""
        config = manager.load_config()
        assert isinstance(config, SceneConfig)
        assert config.scene_info.name == "Sine Wave Demo"
        assert len(config.oscillators) == 5
        assert all(osc.object in config.objects for osc in config.oscillators)

    def test_missing_file(self, manager):
        with pytest.raises(FileNotFoundError, match="Scene file not found"):
            manager.load_config("does_not_exist.yaml")

    def test_minimal_scene_uses_defaults(self, manager, tmp_path):
        """Omitted keys fall back to the schema defaults."""
        path = write_scene(tmp_path, {
            "objects": {"Buoy": {}},
            "oscillators": [{"object": "Buoy", "amplitude": [0, 1, 0], "frequency": [0, 2, 0]}]
        })
        config = manager.load_config(path)

        assert config.scene_info.name == "Unknown Scene"
        assert config.simulation_defaults.frame_rate == 60.0
        assert config.objects["Buoy"].scale == [1.0, 1.0, 1.0]

        osc = config.oscillators[0]
        assert osc.name == "oscillator_0"
        defaults = OscillatorConfig()
        assert osc.config.affects == ["position"]
        assert osc.config.amplitude == [0.0, 1.0, 0.0]
        assert osc.config.bounce == [False, False, False]
        assert osc.config.use_local_space == defaults.use_local_space
        assert osc.config.use_start_value_as_base == defaults.use_start_value_as_base
        assert osc.config.target_override is None

    def test_relative_path_resolves_to_scenes_dir(self, tmp_path):
        scenes_dir = tmp_path / "data" / "scenes"
        scenes_dir.mkdir(parents=True)
        with open(scenes_dir / "mini.yaml", 'w') as f:
            yaml.safe_dump({"scene_info": {"name": "Mini"}}, f)
        config = SceneConfigManager(project_root=tmp_path).load_config("mini.yaml")
        assert config.scene_info.name == "Mini"

    def test_bundled_harbor_scene(self):
        """The scene shipped in data/scenes loads and builds."""
        manager = SceneConfigManager(project_root=PROJECT_ROOT)
        config = manager.load_config("harbor_scene.yaml")
        assert config.scene_info.name == "Harbor"
        assert config.simulation_defaults.seed == 7

        lamp = next(osc for osc in config.oscillators if osc.name == "lamp_glow")
        assert lamp.config.affects == ["scale"]
        assert lamp.config.bounce == [True, False, False]
        assert lamp.config.uniform and lamp.config.use_global_clock and lamp.config.ignore_pause
        assert lamp.config.target_override == "Lamp_Glow"

        scene = manager.build_scene(config)
        assert scene.get_object("Buoy_1").transform.parent is scene.get_object("Dock").transform

    def test_affects_accepts_single_string(self, manager, tmp_path):
        path = write_scene(tmp_path, {
            "objects": {"Flag": {}},
            "oscillators": [{"object": "Flag", "affects": "Rotation"}]
        })
        assert manager.load_config(path).oscillators[0].config.affects == ["rotation"]

    def test_bounce_accepts_single_bool(self, manager, tmp_path):
        path = write_scene(tmp_path, {
            "objects": {"Flag": {}},
            "oscillators": [{"object": "Flag", "bounce": True}]
        })
        assert manager.load_config(path).oscillators[0].config.bounce == [True, True, True]


class TestValidation:
    """Test rejection of malformed scenes."""

    @pytest.fixture
    def manager(self, tmp_path):
        return SceneConfigManager(project_root=tmp_path)

    @pytest.mark.parametrize("data,message", [
        ({"objects": {"A": {"position": [1, 2]}}}, "exactly 3 components"),
        ({"objects": {"A": {}}, "oscillators": [{"object": "A", "amplitude": [1, 2, 3, 4]}]},
         "exactly 3 components"),
        ({"objects": {"A": {}}, "oscillators": [{"object": "A", "affects": ["colour"]}]},
         "unknown channel"),
        ({"objects": {"A": {}}, "oscillators": [{"amplitude": [1, 0, 0]}]}, "does not name an object"),
        ({"objects": {"A": {}}, "oscillators": [{"object": "B"}]}, "unknown object"),
        ({"objects": {"A": {}}, "oscillators": [{"object": "A", "target_override": "B"}]},
         "unknown target"),
        ({"objects": {"A": {"parent": "B"}}}, "unknown parent"),
        ({"objects": {"A": {"parent": "B"}, "B": {"parent": "A"}}}, "Parent cycle"),
        ({"objects": {"A": {}}, "oscillators": [{"name": "x", "object": "A"}, {"name": "x", "object": "A"}]},
         "Duplicate oscillator"),
    ])
    def test_malformed_entries(self, manager, tmp_path, data, message):
        path = write_scene(tmp_path, data)
        with pytest.raises(ValueError, match=message):
            manager.load_config(path)


class TestBuildScene:
    """Test building scenes from configurations."""

    def test_build_scene_transforms(self):
        manager = SceneConfigManager()
        config = manager.parse_config({
            "scene_info": {"name": "Built"},
            "objects": {
                "Root": {"position": [1, 0, 0], "rotation": [0, 0, 30], "scale": [2, 2, 2]},
                "Child": {"parent": "Root", "position": [0, 1, 0]}
            }
        })
        scene = manager.build_scene(config)

        assert scene.name == "Built"
        assert scene.object_names() == ["Root", "Child"]
        root = scene.get_object("Root").transform
        child = scene.get_object("Child").transform
        assert np.allclose(root.local_position, [1, 0, 0])
        assert angles_close(root.local_euler_angles, [0, 0, 30], atol=1e-6)
        assert np.allclose(root.local_scale, [2, 2, 2])
        assert child.parent is root


def test_get_config_manager_is_singleton():
    assert get_config_manager() is get_config_manager()
