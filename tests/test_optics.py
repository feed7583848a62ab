import numpy as np
import pytest

from pyskycompass.optics import Camera, PinholeOptic, RayDirection
from pyskycompass.sensor import ImageSensor, PixelCoordinate, SensorCoordinate
from pyskycompass.exceptions import InvalidDimensionsError, InvalidFocalLengthError


def test_pixel_sensor_round_trip():
    sensor = ImageSensor(pixel_size_micrometers=3.45, rows=6, cols=9)
    for pixel in sensor.pixels():
        assert sensor.pixel_from_sensor(sensor.sensor_from_pixel(pixel)) == pixel


def test_sensor_center_and_bounds():
    sensor = ImageSensor(pixel_size_micrometers=2.0, rows=5, cols=7)
    assert sensor.sensor_from_pixel(PixelCoordinate(2, 3)) == SensorCoordinate(0.0, 0.0)
    assert sensor.sensor_from_pixel(PixelCoordinate(0, 0)) == SensorCoordinate(-6.0, -4.0)
    assert sensor.sensor_from_pixel(PixelCoordinate(5, 0)) is None
    assert sensor.pixel_from_sensor(SensorCoordinate(7.5, 0.0)) is None
    assert sensor.pixel_from_sensor(SensorCoordinate(-6.9, -4.9)) == PixelCoordinate(0, 0)


def test_pixel_from_sensor_rounds_half_away_from_zero():
    sensor = ImageSensor(pixel_size_micrometers=1.0, rows=1, cols=2)
    # column centers are at x = -0.5 and x = 0.5, so x = 0 sits on the boundary at index 0.5
    assert sensor.pixel_from_sensor(SensorCoordinate(0.0, 0.0)) == PixelCoordinate(0, 1)


def test_pixels_are_row_major_and_restartable():
    sensor = ImageSensor(pixel_size_micrometers=1.0, rows=2, cols=3)
    first = list(sensor.pixels())
    assert first == list(sensor.pixels())
    assert first[:4] == [PixelCoordinate(0, 0), PixelCoordinate(0, 1), PixelCoordinate(0, 2), PixelCoordinate(1, 0)]


def test_sensor_coordinates_grid_matches_scalar_mapping():
    sensor = ImageSensor(pixel_size_micrometers=2.5, rows=4, cols=6)
    x, y = sensor.sensor_coordinates()
    assert x.shape == (4, 6)
    coordinate = sensor.sensor_from_pixel(PixelCoordinate(3, 1))
    assert x[3, 1] == pytest.approx(coordinate.x)
    assert y[3, 1] == pytest.approx(coordinate.y)


@pytest.mark.parametrize('pitch, rows, cols', [(0.0, 2, 2), (-1.0, 2, 2), (1.0, 0, 2), (1.0, 2, -3)])
def test_sensor_rejects_invalid_dimensions(pitch, rows, cols):
    with pytest.raises(InvalidDimensionsError):
        ImageSensor(pixel_size_micrometers=pitch, rows=rows, cols=cols)


@pytest.mark.parametrize('focal_length', [0.0, -10.0, float('nan'), float('inf')])
def test_pinhole_rejects_invalid_focal_length(focal_length):
    with pytest.raises(InvalidFocalLengthError):
        PinholeOptic(focal_length_micrometers=focal_length)


def test_pinhole_round_trip():
    optic = PinholeOptic(focal_length_micrometers=8000.0)
    for x in np.linspace(-5000.0, 5000.0, 21):
        for y in np.linspace(-5000.0, 5000.0, 21):
            coordinate = SensorCoordinate(float(x), float(y))
            traced = optic.trace_forward(optic.trace_backward(coordinate))
            assert traced.x == pytest.approx(coordinate.x, rel=1e-9, abs=1e-9)
            assert traced.y == pytest.approx(coordinate.y, rel=1e-9, abs=1e-9)


def test_pinhole_directions():
    optic = PinholeOptic(focal_length_micrometers=1000.0)
    assert optic.trace_backward(SensorCoordinate(0.0, 0.0)).polar_deg == pytest.approx(180.0)
    oblique = optic.trace_backward(SensorCoordinate(0.0, 1000.0))
    assert oblique.polar_deg == pytest.approx(135.0)
    assert oblique.azimuth_deg == pytest.approx(90.0)
    assert optic.trace_forward(RayDirection(polar_deg=90.0, azimuth_deg=0.0)) is None
    assert optic.trace_forward(RayDirection(polar_deg=45.0, azimuth_deg=0.0)) is None


def test_pinhole_array_trace_matches_scalar_trace():
    optic = PinholeOptic(focal_length_micrometers=1500.0)
    x = np.array([[0.0, 300.0], [-700.0, 120.0]])
    y = np.array([[0.0, -50.0], [400.0, 900.0]])
    polar, azimuth = optic.trace_backward_array(x, y)
    direction = optic.trace_backward(SensorCoordinate(-700.0, 400.0))
    assert polar[1, 0] == pytest.approx(direction.polar_deg)
    assert azimuth[1, 0] == pytest.approx(direction.azimuth_deg)


def test_camera_traces_between_pixels_and_directions(camera):
    for pixel in [PixelCoordinate(0, 0), PixelCoordinate(20, 25), PixelCoordinate(40, 50), PixelCoordinate(7, 33)]:
        direction = camera.trace_from_pixel(pixel)
        assert camera.trace_to_pixel(direction) == pixel
    assert camera.trace_from_pixel(PixelCoordinate(41, 0)) is None
    assert camera.trace_to_pixel(RayDirection(polar_deg=100.0, azimuth_deg=0.0)) is None


def test_camera_direction_vectors_are_unit_and_look_down_body_z(camera):
    vectors = camera.direction_vectors()
    assert vectors.shape == (41, 51, 3)
    assert np.allclose(np.linalg.norm(vectors, axis=-1), 1.0)
    assert np.allclose(vectors[20, 25], [0.0, 0.0, -1.0])
    assert (vectors[..., 2] < 0).all()
