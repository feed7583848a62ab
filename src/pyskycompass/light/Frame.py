"""Reference frame markers for polarization quantities."""

from typing import Type, TypeVar

from pyskycompass.exceptions import FrameMismatchError


class Frame:
    """Base marker for the frame an angle of polarization is measured in."""


class SensorFrame(Frame):
    """Angles measured from the sensor's x axis."""


class GlobalFrame(Frame):
    """Angles measured from the radial direction through the zenith pixel."""


F = TypeVar('F', bound=Frame)


def check_frame(expected: Type[Frame], actual: Type[Frame]) -> None:
    """Raise when two frame markers differ.

    Args:
        expected: Frame required by the operation.
        actual: Frame carried by the operand.

    Raises:
        FrameMismatchError: If the frames are not the same marker.
    """
    if expected is not actual:
        raise FrameMismatchError(expected=expected, actual=actual)
