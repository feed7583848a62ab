import numpy as np
import pytest

from pyskycompass.image import RayImage, AopFilter, DopFilter
from pyskycompass.light import Aop, Dop, Ray, SensorFrame, GlobalFrame
from pyskycompass.sensor import ImageSensor, PixelCoordinate, SensorCoordinate
from pyskycompass.exceptions import (
    AmbiguousRayError, OutOfBoundsRayError, InvalidDimensionsError, FrameMismatchError,
    AngleOutOfBoundsError, DegreeOutOfBoundsError, MissingCoordinateError
)


def _ray(angle, degree, coordinate=None, frame=SensorFrame):
    return Ray(Aop(angle, frame), Dop(degree), coordinate)


def test_from_rays_with_sensor_places_rays():
    sensor = ImageSensor(pixel_size_micrometers=2.0, rows=2, cols=3)
    rays = [
        _ray(10.0, 0.5, sensor.sensor_from_pixel(PixelCoordinate(0, 2))),
        _ray(-20.0, 0.25, sensor.sensor_from_pixel(PixelCoordinate(1, 0))),
    ]

    image = RayImage.from_rays_with_sensor(rays, sensor)

    assert image.shape == (2, 3)
    assert image.count() == 2
    assert image.ray(0, 2).aop.angle == 10.0
    assert image.ray(1, 0).dop.value == 0.25
    assert image.ray(0, 0) is None


def test_from_rays_with_sensor_detects_collisions():
    sensor = ImageSensor(pixel_size_micrometers=2.0, rows=2, cols=3)
    rays = [_ray(10.0, 0.5, SensorCoordinate(0.0, 1.0)), _ray(20.0, 0.5, SensorCoordinate(0.2, 1.1))]

    with pytest.raises(AmbiguousRayError) as error:
        RayImage.from_rays_with_sensor(rays, sensor)

    assert (error.value.row, error.value.col) == (1, 1)


def test_from_rays_with_sensor_detects_out_of_bounds():
    sensor = ImageSensor(pixel_size_micrometers=2.0, rows=2, cols=3)
    with pytest.raises(OutOfBoundsRayError) as error:
        RayImage.from_rays_with_sensor([_ray(10.0, 0.5, SensorCoordinate(50.0, 0.0))], sensor)
    assert error.value.coordinate == SensorCoordinate(50.0, 0.0)
    with pytest.raises(OutOfBoundsRayError):
        RayImage.from_rays_with_sensor([_ray(10.0, 0.5)], sensor)


def test_from_rays_is_dense_row_major():
    rays = [_ray(1.0, 0.1), None, _ray(3.0, 0.3), _ray(4.0, 0.4), None, None]

    image = RayImage.from_rays(rays, rows=2, cols=3)

    assert image.ray(0, 2).aop.angle == 3.0
    assert image.ray(1, 0).aop.angle == 4.0
    assert [ray is None for _, ray in image.pixels()] == [False, True, False, False, True, True]
    with pytest.raises(InvalidDimensionsError):
        RayImage.from_rays(rays, rows=2, cols=2)
    with pytest.raises(FrameMismatchError):
        RayImage.from_rays([_ray(1.0, 0.1, frame=GlobalFrame)], rows=1, cols=1)


def test_from_arrays_validates_ranges():
    with pytest.raises(AngleOutOfBoundsError):
        RayImage.from_arrays(np.array([[95.0]]), np.array([[0.5]]), SensorFrame)
    with pytest.raises(DegreeOutOfBoundsError):
        RayImage.from_arrays(np.array([[5.0]]), np.array([[1.5]]), SensorFrame)
    with pytest.raises(InvalidDimensionsError):
        RayImage.from_arrays(np.zeros(3), np.zeros(3), SensorFrame)

    image = RayImage.from_arrays(np.array([[-90.0, np.nan]]), np.array([[0.5, 0.5]]), SensorFrame)
    assert image.ray(0, 0).aop.angle == 90.0
    assert image.ray(0, 1) is None
    assert np.isnan(image.dop_array()[0, 1])


def test_frame_transform_uses_radial_offsets_and_round_trips():
    aop = np.zeros((3, 3))
    image = RayImage.from_arrays(aop, np.full((3, 3), 0.5), SensorFrame)
    zenith = PixelCoordinate(1, 1)

    global_image = image.into_global_frame(zenith)

    assert global_image.frame is GlobalFrame
    # right of the zenith the radial direction is the x axis, below it the y axis
    assert global_image.ray(1, 2).aop.angle == pytest.approx(0.0)
    assert global_image.ray(2, 1).aop.angle == pytest.approx(90.0)
    assert global_image.ray(2, 2).aop.angle == pytest.approx(-45.0)
    assert global_image.ray(0, 2).aop.angle == pytest.approx(45.0)
    back = global_image.into_sensor_frame(zenith)
    assert np.allclose(back.aop_array(), aop)


def test_frame_transform_without_zenith_is_none_and_checks_frame():
    image = RayImage.from_arrays(np.zeros((2, 2)), np.zeros((2, 2)), SensorFrame)
    assert image.into_global_frame(None) is None
    with pytest.raises(FrameMismatchError):
        image.into_sensor_frame(PixelCoordinate(0, 0))


def test_single_ray_frame_transform():
    ray = _ray(30.0, 0.4, SensorCoordinate(0.0, 5.0))
    global_ray = ray.into_global_frame(SensorCoordinate(0.0, 0.0))
    assert global_ray.aop.angle == pytest.approx(-60.0)
    assert global_ray.into_sensor_frame(SensorCoordinate(0.0, 0.0)).aop.angle == pytest.approx(30.0)
    assert ray.into_global_frame(None) is None
    with pytest.raises(MissingCoordinateError):
        _ray(30.0, 0.4).into_global_frame(SensorCoordinate(0.0, 0.0))


def test_filters_agree_between_single_rays_and_images():
    aop = np.array([[89.5, -89.5, 45.0, np.nan]])
    dop = np.array([[0.05, 0.5, 0.9, np.nan]])
    image = RayImage.from_arrays(aop, dop, GlobalFrame)
    aop_filter = AopFilter(Aop(90.0, GlobalFrame), threshold=1.0)
    dop_filter = DopFilter(minimum=0.1)

    assert aop_filter.mask(image).tolist() == [[True, True, False, False]]
    assert dop_filter.mask(image).tolist() == [[False, True, True, False]]
    for col in range(3):
        ray = image.ray(0, col)
        assert aop_filter.evaluate(ray) == aop_filter.mask(image)[0, col]
        assert dop_filter.evaluate(ray) == dop_filter.mask(image)[0, col]

    filtered = image.filter(aop_filter).filter(dop_filter)
    assert filtered.count() == 1
    assert filtered.ray(0, 1).aop.angle == -89.5


def test_aop_filter_checks_frame():
    image = RayImage.from_arrays(np.zeros((1, 1)), np.zeros((1, 1)), SensorFrame)
    with pytest.raises(FrameMismatchError):
        AopFilter(Aop(90.0, GlobalFrame), threshold=1.0).mask(image)
