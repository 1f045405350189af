"""
Transform channels an oscillator can drive.
Each channel knows how to read and write one aspect of a transform.
"""

from typing import Dict

from sinewave.core.common_types import Vector3D
from sinewave.models.scene_definitions import Transform
from sinewave.config.config_schemas import CHANNEL_POSITION, CHANNEL_ROTATION, CHANNEL_SCALE


class TransformChannel:
    """Base class for a readable/writable transform channel."""

    name = "none"

    def read(self, transform: Transform, local: bool) -> Vector3D:
        raise NotImplementedError

    def write(self, transform: Transform, value: Vector3D, local: bool):
        raise NotImplementedError


class PositionChannel(TransformChannel):
    name = CHANNEL_POSITION

    def read(self, transform: Transform, local: bool) -> Vector3D:
        return transform.local_position.copy() if local else transform.position

    def write(self, transform: Transform, value: Vector3D, local: bool):
        if local:
            transform.set_local_position(value)
        else:
            transform.position = value


class RotationChannel(TransformChannel):
    """Rotation expressed as Euler angles in degrees."""

    name = CHANNEL_ROTATION

    def read(self, transform: Transform, local: bool) -> Vector3D:
        return transform.local_euler_angles if local else transform.euler_angles

    def write(self, transform: Transform, value: Vector3D, local: bool):
        if local:
            transform.local_euler_angles = value
        else:
            transform.euler_angles = value


class ScaleChannel(TransformChannel):
    """Scale is always read and written in local space."""

    name = CHANNEL_SCALE

    def read(self, transform: Transform, local: bool) -> Vector3D:
        return transform.local_scale.copy()

    def write(self, transform: Transform, value: Vector3D, local: bool):
        transform.set_local_scale(value)


CHANNEL_REGISTRY: Dict[str, TransformChannel] = {
    CHANNEL_POSITION: PositionChannel(),
    CHANNEL_ROTATION: RotationChannel(),
    CHANNEL_SCALE: ScaleChannel(),
}
