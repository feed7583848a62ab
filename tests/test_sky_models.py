import numpy as np
import pytest
from astropy.time import Time
from astropy.coordinates import EarthLocation

from pyskycompass.light import GlobalFrame
from pyskycompass.sky_models import Bearing, Rayleigh, solar_bearing


def test_bearing_validation():
    with pytest.raises(ValueError):
        Bearing(azimuth=0.0, elevation=91.0)
    with pytest.raises(ValueError):
        Bearing(azimuth=float('nan'), elevation=10.0)
    assert Bearing(azimuth=10.0, elevation=30.0).zenith_angle == 60.0
    assert not Bearing(azimuth=10.0, elevation=-0.1).is_above_horizon


def test_rayleigh_degree_peaks_ninety_degrees_from_the_sun():
    model = Rayleigh(solar_bearing=Bearing(azimuth=0.0, elevation=0.0), max_dop=0.8)

    assert model.dop(Bearing(azimuth=0.0, elevation=0.0)).value == pytest.approx(0.0, abs=1e-12)
    assert model.dop(Bearing(azimuth=123.0, elevation=90.0)).value == pytest.approx(0.8)
    assert model.dop(Bearing(azimuth=90.0, elevation=0.0)).value == pytest.approx(0.8)
    assert model.dop(Bearing(azimuth=45.0, elevation=0.0)).value < 0.8


@pytest.mark.parametrize('solar_elevation', [0.0, 20.0, 40.0, 60.0, 85.0])
def test_rayleigh_angle_is_perpendicular_on_the_solar_meridian(solar_elevation):
    # observed elevations avoid the sun itself; the antisun is always below the horizon
    model = Rayleigh(solar_bearing=Bearing(azimuth=135.0, elevation=solar_elevation))

    for elevation in (10.0, 50.0, 75.0):
        for azimuth in (135.0, 315.0):
            aop = model.aop(Bearing(azimuth=azimuth, elevation=elevation))
            assert aop.frame is GlobalFrame
            assert abs(aop.angle) == pytest.approx(90.0)


def test_rayleigh_angle_along_the_horizon_at_right_angles_to_a_setting_sun():
    model = Rayleigh(solar_bearing=Bearing(azimuth=0.0, elevation=0.0))
    assert model.aop(Bearing(azimuth=90.0, elevation=0.0)).angle == pytest.approx(0.0, abs=1e-9)


def test_rayleigh_is_undefined_below_the_horizon():
    model = Rayleigh(solar_bearing=Bearing(azimuth=135.0, elevation=40.0))
    below = Bearing(azimuth=200.0, elevation=-5.0)

    assert model.aop(below) is None
    assert model.dop(below) is None
    assert model.ray(below) is None
    assert np.isnan(model.aop_array(np.array([200.0]), np.array([-5.0]))).all()


def test_rayleigh_scalar_and_array_agree(sky_model):
    azimuth = np.array([[0.0, 45.0, 170.0], [250.0, 300.0, 359.0]])
    elevation = np.array([[5.0, 30.0, 60.0], [80.0, 20.0, 45.0]])

    aop = sky_model.aop_array(azimuth, elevation)
    dop = sky_model.dop_array(azimuth, elevation)

    for index in np.ndindex(azimuth.shape):
        ray = sky_model.ray(Bearing(azimuth=azimuth[index], elevation=elevation[index]))
        assert ray.aop.angle == pytest.approx(aop[index])
        assert ray.dop.value == pytest.approx(dop[index])


def test_rayleigh_rejects_invalid_maximum_degree():
    with pytest.raises(ValueError):
        Rayleigh(solar_bearing=Bearing(azimuth=0.0, elevation=10.0), max_dop=1.5)


def test_solar_bearing_at_greenwich_midsummer_noon():
    greenwich = EarthLocation.from_geodetic(lon=0.0, lat=51.4769, height=0.0)
    time = Time('2020-06-21T12:00:00', scale='utc')

    bearing = solar_bearing(location=greenwich, time=time)

    assert 55.0 < bearing.elevation < 70.0
    assert 160.0 < bearing.azimuth < 200.0
    assert Rayleigh.from_position_and_time(location=greenwich, time=time).solar_bearing == bearing


def test_solar_bearing_needs_a_scalar_time():
    greenwich = EarthLocation.from_geodetic(lon=0.0, lat=51.4769, height=0.0)
    with pytest.raises(ValueError):
        solar_bearing(location=greenwich, time=Time(['2020-06-21T12:00:00', '2020-06-21T13:00:00']))
