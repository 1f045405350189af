#!/usr/bin/env python3
"""
Unit tests for sinewave/models/scene_definitions.py and sinewave/utils/geometry_utils.py

Tests Euler/quaternion conversion and local/world transform access.
"""

import pytest
import numpy as np
import quaternion
from pathlib import Path

# Import the module under test
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from sinewave.models.scene_definitions import Transform, SceneObject, Scene
from sinewave.utils.geometry_utils import (
    as_vector3,
    as_bool3,
    wrap_degrees,
    angles_close,
    euler_degrees_to_quaternion,
    quaternion_to_euler_degrees,
    rotate_vector,
)


class TestGeometryUtils:
    """Test vector helpers and Euler conversions."""

    def test_as_vector3_valid(self):
        vec = as_vector3([1, 2, 3])
        assert vec.dtype == float
        assert np.array_equal(vec, [1.0, 2.0, 3.0])

    def test_as_vector3_invalid(self):
        with pytest.raises(ValueError, match="exactly 3 components"):
            as_vector3([1, 2])
        with pytest.raises(ValueError, match="sequence of 3 numbers"):
            as_vector3(["a", "b", "c"])

    def test_as_bool3(self):
        assert as_bool3(True) == [True, True, True]
        assert as_bool3([1, 0, 1]) == [True, False, True]
        with pytest.raises(ValueError):
            as_bool3([True, False])

    def test_wrap_degrees(self):
        assert np.allclose(wrap_degrees(np.array([-10.0, 370.0, 0.0])), [350.0, 10.0, 0.0])

    @pytest.mark.parametrize("euler", [
        [0, 0, 0],
        [10, 20, 30],
        [45, 300, 120],
        [350, 5, 270],
    ])
    def test_euler_round_trip(self, euler):
        """Euler angles survive a trip through a quaternion."""
        q = euler_degrees_to_quaternion(euler)
        assert angles_close(quaternion_to_euler_degrees(q), euler, atol=1e-6)

    def test_euler_application_order(self):
        """Z is applied first, then X, then Y."""
        q = euler_degrees_to_quaternion([90, 90, 0])
        # X then Y: +Z axis goes to -Y under X(90), and -Y is unaffected by Y(90)
        assert np.allclose(rotate_vector(q, [0, 0, 1]), [0, -1, 0], atol=1e-9)

    def test_gimbal_lock_is_stable(self):
        """At X = 90 the decomposition still reproduces the rotation."""
        q = euler_degrees_to_quaternion([90, 30, 40])
        back = euler_degrees_to_quaternion(quaternion_to_euler_degrees(q))
        assert np.allclose(quaternion.as_rotation_matrix(q), quaternion.as_rotation_matrix(back), atol=1e-6)

    def test_quaternion_to_euler_input_validation(self):
        with pytest.raises(TypeError, match="numpy.quaternion"):
            quaternion_to_euler_degrees([1, 0, 0, 0])
        with pytest.raises(ValueError, match="zero quaternion"):
            quaternion_to_euler_degrees(np.quaternion(0, 0, 0, 0))


class TestTransform:
    """Test local and world space transform access."""

    @pytest.fixture
    def parent(self):
        return Transform(
            local_position=[10.0, 0.0, 0.0],
            local_rotation=euler_degrees_to_quaternion([0, 90, 0]),
            local_scale=[2.0, 2.0, 2.0]
        )

    def test_defaults(self):
        t = Transform()
        assert np.array_equal(t.local_position, [0, 0, 0])
        assert np.array_equal(t.local_scale, [1, 1, 1])
        assert t.local_rotation == np.quaternion(1, 0, 0, 0)
        assert t.parent is None

    def test_root_world_equals_local(self):
        t = Transform(local_position=[1, 2, 3], local_rotation=euler_degrees_to_quaternion([0, 0, 45]))
        assert np.allclose(t.position, [1, 2, 3])
        assert angles_close(t.euler_angles, [0, 0, 45])

    def test_world_position_through_parent(self, parent):
        """Child position is scaled, rotated and translated by the parent."""
        child = Transform(local_position=[1.0, 0.0, 0.0], parent=parent)
        # scale 2 -> (2,0,0), rotate 90 about Y -> (0,0,-2), translate -> (10,0,-2)
        assert np.allclose(child.position, [10.0, 0.0, -2.0])

    def test_world_position_setter_round_trip(self, parent):
        child = Transform(parent=parent)
        child.position = [3.0, 4.0, 5.0]
        assert np.allclose(child.position, [3.0, 4.0, 5.0])
        assert not np.allclose(child.local_position, [3.0, 4.0, 5.0])

    def test_world_rotation_setter_round_trip(self, parent):
        child = Transform(parent=parent)
        child.euler_angles = [10, 20, 30]
        assert angles_close(child.euler_angles, [10, 20, 30], atol=1e-6)
        assert angles_close(child.local_euler_angles, [10, 290, 30], atol=1e-6)

    def test_world_position_setter_zero_scale_parent(self):
        """A zero-scale parent collapses the child onto the parent origin instead of failing."""
        parent = Transform(local_position=[1.0, 2.0, 3.0], local_scale=[0.0, 0.0, 0.0])
        child = Transform(parent=parent)
        child.position = [5.0, 5.0, 5.0]
        assert np.all(np.isfinite(child.local_position))
        assert np.allclose(child.position, [1.0, 2.0, 3.0])

    def test_local_euler_angles_are_wrapped(self):
        t = Transform()
        t.local_euler_angles = [-15, 0, 0]
        assert np.allclose(t.local_euler_angles, [345, 0, 0])

    def test_local_setters_validate(self):
        t = Transform()
        with pytest.raises(ValueError):
            t.set_local_position([1, 2])
        with pytest.raises(ValueError):
            Transform(local_scale=[1, 1])

    def test_iter_ancestors(self, parent):
        child = Transform(parent=parent)
        grandchild = Transform(parent=child)
        assert list(grandchild.iter_ancestors()) == [child, parent]


class TestScene:
    """Test scene object bookkeeping."""

    def test_add_and_get(self):
        scene = Scene(name="Test")
        buoy = scene.add_object(SceneObject(name="Buoy"))
        assert scene.get_object("Buoy") is buoy
        assert scene.get_object("Missing") is None
        assert scene.object_names() == ["Buoy"]

    def test_duplicate_names_rejected(self):
        scene = Scene()
        scene.add_object(SceneObject(name="Buoy"))
        with pytest.raises(ValueError, match="already contains"):
            scene.add_object(SceneObject(name="Buoy"))
