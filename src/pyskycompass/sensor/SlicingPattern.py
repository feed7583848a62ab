"""Data structure describing where each polarizer orientation sits in the mosaic."""

from typing import Dict
from dataclasses import dataclass


@dataclass(frozen=True)
class SlicingPattern:
    """Define a slicing pattern for selecting pixels by orientation."""

    start_row: int
    start_column: int
    step: int


WIRE_GRID_ORIENTATIONS = (0, 45, 90, 135)


def default_wire_grid_orientations_slicing() -> Dict[int, SlicingPattern]:
    """Return the mosaic layout of the supported DoFP sensors.

    Each 2x2 metapixel reads 90 deg at its top-left sample, 135 deg top-right,
    45 deg bottom-left and 0 deg bottom-right.

    Returns:
        Slicing pattern per wire-grid orientation angle.
    """
    return {
        0: SlicingPattern(start_row=1, start_column=1, step=2),
        45: SlicingPattern(start_row=1, start_column=0, step=2),
        90: SlicingPattern(start_row=0, start_column=0, step=2),
        135: SlicingPattern(start_row=0, start_column=1, step=2),
    }


def validate_wire_grid_orientations_slicing(
        wire_grid_orientations_slicing: Dict[int, SlicingPattern]
) -> None:
    """Check that a layout covers the four orientations of a 2x2 metapixel.

    Args:
        wire_grid_orientations_slicing: Slicing pattern per orientation angle.

    Raises:
        ValueError: If an orientation is missing, a step is not 2 or two
            orientations share a sample.
    """
    if set(wire_grid_orientations_slicing) != set(WIRE_GRID_ORIENTATIONS):
        raise ValueError(
            f'Slicing must cover orientations {WIRE_GRID_ORIENTATIONS}, '
            f'got {sorted(wire_grid_orientations_slicing)}'
        )
    offsets = set()
    for orientation_angle, pattern in wire_grid_orientations_slicing.items():
        if pattern.step != 2 or pattern.start_row not in (0, 1) or pattern.start_column not in (0, 1):
            raise ValueError(f'Orientation {orientation_angle} has an invalid slicing pattern {pattern}')
        offsets.add((pattern.start_row, pattern.start_column))
    if len(offsets) != len(WIRE_GRID_ORIENTATIONS):
        raise ValueError('Two orientations share the same metapixel sample')
