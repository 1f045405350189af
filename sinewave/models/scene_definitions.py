# sinewave/models/scene_definitions.py

import numpy as np
import quaternion  # numpy-quaternion
from dataclasses import dataclass, field
from typing import List, Optional, Iterator

from sinewave.core.common_types import Vector3D, Quaternion
from sinewave.utils.geometry_utils import (
    as_vector3,
    euler_degrees_to_quaternion,
    quaternion_to_euler_degrees,
    trs_matrix,
)


@dataclass(eq=False)
class Transform:
    """
    Position, rotation and scale of a scene object, relative to an optional parent.

    Local values are stored; world values are derived through the parent chain
    and can be assigned, in which case they are solved back into local space.
    Rotation is stored as a unit quaternion and exposed as Euler angles in
    degrees (Z applied first, then X, then Y), reported in [0, 360).

    Attributes:
        local_position: Position relative to the parent (or world if no parent).
        local_rotation: Rotation relative to the parent.
        local_scale: Per-axis scale relative to the parent.
        parent: Parent transform, or None for a root transform.
    """
    local_position: Vector3D = field(default_factory=lambda: np.array([0.0, 0.0, 0.0]))
    local_rotation: Quaternion = field(default_factory=lambda: np.quaternion(1, 0, 0, 0))
    local_scale: Vector3D = field(default_factory=lambda: np.array([1.0, 1.0, 1.0]))
    parent: Optional["Transform"] = field(default=None, repr=False)

    def __post_init__(self):
        self.local_position = as_vector3(self.local_position, "local_position")
        self.local_scale = as_vector3(self.local_scale, "local_scale")

    # --- Local space ---

    @property
    def local_euler_angles(self) -> Vector3D:
        return quaternion_to_euler_degrees(self.local_rotation)

    @local_euler_angles.setter
    def local_euler_angles(self, euler_deg: Vector3D):
        self.local_rotation = euler_degrees_to_quaternion(euler_deg)

    def set_local_position(self, position: Vector3D):
        self.local_position = as_vector3(position, "local_position")

    def set_local_scale(self, scale: Vector3D):
        self.local_scale = as_vector3(scale, "local_scale")

    # --- World space ---

    @property
    def local_to_world_matrix(self) -> np.ndarray:
        """4x4 matrix mapping points in this transform's space to world space."""
        local_matrix = trs_matrix(self.local_position, self.local_rotation, self.local_scale)
        if self.parent is None:
            return local_matrix
        return self.parent.local_to_world_matrix @ local_matrix

    @property
    def position(self) -> Vector3D:
        if self.parent is None:
            return self.local_position.copy()
        homogeneous = np.append(self.local_position, 1.0)
        return (self.parent.local_to_world_matrix @ homogeneous)[:3]

    @position.setter
    def position(self, world_position: Vector3D):
        world_position = as_vector3(world_position, "position")
        if self.parent is None:
            self.local_position = world_position
            return
        # pseudo-inverse keeps zero-scale parents solvable
        parent_inverse = np.linalg.pinv(self.parent.local_to_world_matrix)
        self.local_position = (parent_inverse @ np.append(world_position, 1.0))[:3]

    @property
    def rotation(self) -> Quaternion:
        if self.parent is None:
            return self.local_rotation
        return (self.parent.rotation * self.local_rotation).normalized()

    @rotation.setter
    def rotation(self, world_rotation: Quaternion):
        if self.parent is None:
            self.local_rotation = world_rotation.normalized()
            return
        self.local_rotation = (self.parent.rotation.inverse() * world_rotation).normalized()

    @property
    def euler_angles(self) -> Vector3D:
        return quaternion_to_euler_degrees(self.rotation)

    @euler_angles.setter
    def euler_angles(self, euler_deg: Vector3D):
        self.rotation = euler_degrees_to_quaternion(euler_deg)

    def iter_ancestors(self) -> Iterator["Transform"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent


@dataclass(eq=False)
class SceneObject:
    """A named object in the scene that owns a transform."""
    name: str
    transform: Transform = field(default_factory=Transform)


@dataclass
class Scene:
    """
    Ordered collection of scene objects.

    Attributes:
        name: Descriptive name of the scene.
        objects: Scene objects in creation order.
    """
    name: str = "Untitled Scene"
    objects: List[SceneObject] = field(default_factory=list)

    def add_object(self, scene_object: SceneObject) -> SceneObject:
        if self.get_object(scene_object.name) is not None:
            raise ValueError(f"Scene already contains an object named '{scene_object.name}'")
        self.objects.append(scene_object)
        return scene_object

    def get_object(self, name: str) -> Optional[SceneObject]:
        for scene_object in self.objects:
            if scene_object.name == name:
                return scene_object
        return None

    def object_names(self) -> List[str]:
        return [scene_object.name for scene_object in self.objects]
