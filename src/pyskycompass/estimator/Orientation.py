"""Camera attitude relative to the local East-North-Up frame."""

from math import isfinite
from dataclasses import dataclass
from typing import Sequence

from numpy.typing import NDArray
from numpy import float64, rad2deg
from scipy.spatial.transform import Rotation


@dataclass(frozen=True)
class Orientation:
    """Intrinsic Z-Y'-X'' Tait-Bryan angles in degrees.

    The rotation maps camera body vectors into ENU. The identity looks
    straight down; a level camera facing the sky has roll = 180.
    """

    yaw: float
    pitch: float
    roll: float

    def __post_init__(self):
        if not (isfinite(self.yaw) and isfinite(self.pitch) and isfinite(self.roll)):
            raise ValueError(f'Orientation angles must be finite, got {self}')

    @classmethod
    def aligned(cls) -> 'Orientation':
        """Body axes coincide with East, North and Up."""
        return cls(yaw=0.0, pitch=0.0, roll=0.0)

    @classmethod
    def zenith_facing(cls, yaw: float = 0.0) -> 'Orientation':
        """Level camera whose optical axis points at the zenith."""
        return cls(yaw=yaw, pitch=0.0, roll=180.0)

    @classmethod
    def from_rotation(cls, rotation: Rotation) -> 'Orientation':
        yaw, pitch, roll = rotation.as_euler('ZYX', degrees=True)
        return cls(yaw=float(yaw), pitch=float(pitch), roll=float(roll))

    @classmethod
    def from_quaternion(cls, quaternion: Sequence[float]) -> 'Orientation':
        """Build from a scalar-last (x, y, z, w) quaternion."""
        return cls.from_rotation(Rotation.from_quat(quaternion))

    @property
    def rotation(self) -> Rotation:
        """Return the body-to-ENU rotation.

        Returns:
            scipy rotation applying yaw about Up, then pitch, then roll.
        """
        return Rotation.from_euler('ZYX', [self.yaw, self.pitch, self.roll], degrees=True)

    def as_quaternion(self) -> NDArray[float64]:
        return self.rotation.as_quat()

    def perturbed(self, yaw: float = 0.0, pitch: float = 0.0, roll: float = 0.0) -> 'Orientation':
        """Return a copy with the given angles added."""
        return Orientation(yaw=self.yaw + yaw, pitch=self.pitch + pitch, roll=self.roll + roll)

    def angular_distance(self, other: 'Orientation') -> float:
        """Return the angle in degrees of the rotation between two orientations."""
        return float(rad2deg((self.rotation.inv() * other.rotation).magnitude()))
