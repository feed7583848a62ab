import numpy as np
import pytest

from pyskycompass.sensor.SlicingPattern import SlicingPattern, default_wire_grid_orientations_slicing
from pyskycompass.sensor.StokesCalculator import StokesCalculator


def test_stokes_calculator_recovers_simple_signal():
    wire_grid_orientations_slicing = {
        0: SlicingPattern(start_row=0, start_column=0, step=2),
        45: SlicingPattern(start_row=0, start_column=1, step=2),
        90: SlicingPattern(start_row=1, start_column=0, step=2),
        135: SlicingPattern(start_row=1, start_column=1, step=2),
    }
    calculator = StokesCalculator(wire_grid_orientations_slicing=wire_grid_orientations_slicing)

    raw_intensity = np.array([
        [4.0, 2.0],
        [0.0, 2.0],
    ], dtype=np.float32)

    aop, dop = calculator.measurements(raw_intensity=raw_intensity)

    assert np.allclose(dop, 1.0)
    assert np.allclose(aop, 0.0)


def test_default_layout_reads_ninety_top_left():
    calculator = StokesCalculator(wire_grid_orientations_slicing=default_wire_grid_orientations_slicing())
    raw_intensity = np.array([
        [20, 30],
        [30, 10],
    ], dtype=np.uint8)

    s0, s1, s2 = calculator.stokes_parameters(raw_intensity=raw_intensity)
    aop, dop = calculator.measurements(raw_intensity=raw_intensity)

    assert s0[0, 0] == 45.0
    assert s1[0, 0] == -10.0
    assert s2[0, 0] == 0.0
    assert aop[0, 0] == pytest.approx(90.0)
    assert dop[0, 0] == pytest.approx(0.2222, abs=1e-4)


def test_stokes_calculator_masks_dark_and_over_polarized_metapixels():
    calculator = StokesCalculator(wire_grid_orientations_slicing=default_wire_grid_orientations_slicing())
    raw_intensity = np.array([
        [0, 0, 0, 200],
        [0, 0, 0, 0],
    ], dtype=np.uint8)

    aop, dop = calculator.measurements(raw_intensity=raw_intensity)

    # S0 = 100 but |S2| = 200 for the second metapixel
    assert np.isnan(aop).all()
    assert np.isnan(dop).all()


def test_invalid_layout_is_rejected():
    layout = default_wire_grid_orientations_slicing()
    layout[45] = layout[0]
    with pytest.raises(ValueError):
        StokesCalculator(wire_grid_orientations_slicing=layout)
