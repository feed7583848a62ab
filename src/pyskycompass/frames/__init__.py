from .RigidTransform import RigidTransform
from . import frame_utils
from .frame_utils import ecef_to_local

__all__ = [
    "RigidTransform",
    "ecef_to_local",
    "frame_utils"
]
