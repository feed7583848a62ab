"""Rotation plus translation between two Cartesian frames."""

from typing import Optional

from numpy.typing import NDArray
from numpy import float64, array, asarray, zeros
from scipy.spatial.transform import Rotation


class RigidTransform:
    """Map points as ``rotation.apply(point - origin)``.

    ``origin`` is the target frame's origin expressed in the source frame.
    Directions ignore the origin.
    """

    __rotation: Rotation
    __origin: NDArray[float64]

    def __init__(
            self,
            rotation: Rotation,
            origin: Optional[NDArray[float64]] = None
    ) -> None:
        """Initialize the transform.

        Args:
            rotation: Rotation taking source-frame vectors to the target frame.
            origin: Target origin in source-frame coordinates; defaults to zero.
        """
        self.__rotation = rotation
        self.__origin = zeros(3) if origin is None else asarray(origin, dtype=float64).reshape(3)

    @property
    def rotation(self) -> Rotation:
        return self.__rotation

    @property
    def origin(self) -> NDArray[float64]:
        return self.__origin.copy()

    def apply(self, points: NDArray[float64]) -> NDArray[float64]:
        """Transform points shaped (3,) or (n, 3)."""
        return self.__rotation.apply(asarray(points, dtype=float64) - self.__origin)

    def apply_to_vectors(self, vectors: NDArray[float64]) -> NDArray[float64]:
        """Rotate directions shaped (3,) or (n, 3)."""
        return self.__rotation.apply(array(vectors, dtype=float64))

    def inverse(self) -> 'RigidTransform':
        """Return the transform mapping target-frame points back to the source frame."""
        inverse_rotation = self.__rotation.inv()
        return RigidTransform(inverse_rotation, -self.__rotation.apply(self.__origin))

    def __matmul__(self, other: 'RigidTransform') -> 'RigidTransform':
        """Compose so that ``(self @ other).apply(p) == self.apply(other.apply(p))``."""
        rotation = self.__rotation * other.rotation
        origin = other.origin + other.rotation.inv().apply(self.__origin)
        return RigidTransform(rotation, origin)
