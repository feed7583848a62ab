import math

import pytest

from pyskycompass.light import Dop, StokesVector, SensorFrame, GlobalFrame
from pyskycompass.exceptions import (
    DegreeOutOfBoundsError, NonFiniteError, ZeroIntensityError, SkyCompassError
)


@pytest.mark.parametrize('value', [-0.01, 1.01])
def test_dop_rejects_out_of_range(value):
    with pytest.raises(DegreeOutOfBoundsError):
        Dop(value)


@pytest.mark.parametrize('value, expected', [(-3.0, 0.0), (0.4, 0.4), (7.0, 1.0), (math.inf, 1.0)])
def test_dop_clamped(value, expected):
    assert Dop.clamped(value).value == expected


def test_dop_clamped_rejects_nan():
    with pytest.raises(NonFiniteError):
        Dop.clamped(math.nan)


def test_dop_arithmetic_reclamps():
    assert (Dop(0.7) + Dop(0.6)).value == 1.0
    assert (Dop(0.2) - Dop(0.6)).value == 0.0
    assert (Dop(0.5) * 3.0).value == 1.0
    assert (Dop(0.5) * 0.5).value == pytest.approx(0.25)
    assert Dop(0.2) < Dop(0.3)


def test_stokes_vector_derivation():
    stokes = StokesVector(45.0, -10.0, 0.0, SensorFrame)
    assert stokes.aop().angle == pytest.approx(90.0)
    assert stokes.aop().frame is SensorFrame
    assert stokes.dop().value == pytest.approx(10.0 / 45.0)


def test_stokes_vector_diagonal_polarization():
    stokes = StokesVector(2.0, 0.0, -1.0, GlobalFrame)
    assert stokes.aop().angle == pytest.approx(-45.0)
    assert stokes.dop().value == pytest.approx(0.5)


def test_stokes_vector_zero_intensity():
    with pytest.raises(ZeroIntensityError):
        StokesVector(0.0, 0.0, 0.0, SensorFrame).dop()


def test_stokes_vector_over_polarized():
    with pytest.raises(DegreeOutOfBoundsError):
        StokesVector(1.0, 3.0, 4.0, SensorFrame).dop()


def test_stokes_vector_non_finite():
    with pytest.raises(NonFiniteError):
        StokesVector(1.0, math.nan, 0.0, SensorFrame).aop()
    with pytest.raises(SkyCompassError):
        StokesVector(math.inf, 0.0, 0.0, SensorFrame).dop()
