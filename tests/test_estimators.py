from importlib import import_module

import numpy as np
import pytest
from astropy.time import Time
from astropy.coordinates import EarthLocation

from pyskycompass.light import GlobalFrame
from pyskycompass.image import RayImage
from pyskycompass.sensor import PixelCoordinate
from pyskycompass.estimator import (
    Orientation, Simulation, VecSearcher, StochasticSearcher, PatternMatch, CoordinateDescent, HoughTransform
)
from pyskycompass.sky_models import Rayleigh
from pyskycompass.exceptions import FailedToConvergeError, InvalidDimensionsError, NoValidCandidateError

TRUTH = Orientation.zenith_facing(yaw=30.0)

pattern_match_module = import_module('pyskycompass.estimator.PatternMatch')


@pytest.fixture
def measured(camera, sky_model):
    simulation = Simulation(camera=camera, orientation=TRUTH, sky_model=sky_model)
    return simulation.ray_image().into_sensor_frame(simulation.zenith_pixel())


def test_pattern_match_picks_the_truth_among_decoys(camera, sky_model, measured):
    candidates = [TRUTH.perturbed(yaw=offset) for offset in (-20.0, -5.0, 0.0, 5.0, 20.0)]
    estimator = PatternMatch(camera=camera, searcher=VecSearcher(candidates), max_iterations=len(candidates))

    estimate = estimator.estimate(measured, sky_model)

    assert estimate.orientation == TRUTH
    assert estimate.loss == pytest.approx(0.0, abs=1e-12)
    assert estimate.iterations == 5


def test_pattern_match_is_independent_of_worker_count(camera, sky_model, measured):
    searcher = StochasticSearcher(
        low=Orientation(yaw=0.0, pitch=-3.0, roll=177.0),
        high=Orientation(yaw=60.0, pitch=3.0, roll=183.0),
        count=10,
        random_seed=5
    )

    sequential = PatternMatch(camera, searcher, max_iterations=10, max_workers=1).estimate(measured, sky_model)
    parallel = PatternMatch(camera, searcher, max_iterations=10, max_workers=4).estimate(measured, sky_model)

    assert sequential == parallel


def test_pattern_match_stops_after_max_iterations(camera, sky_model, measured):
    endless = StochasticSearcher(
        low=Orientation(yaw=0.0, pitch=0.0, roll=180.0),
        high=Orientation(yaw=60.0, pitch=0.0, roll=180.0),
        random_seed=1
    )
    estimate = PatternMatch(camera, endless, max_iterations=7, max_workers=3).estimate(measured, sky_model)
    assert estimate.iterations == 7


def test_pattern_match_keeps_the_first_of_tied_candidates(camera, sky_model, measured, monkeypatch):
    monkeypatch.setattr(pattern_match_module, 'score_orientation', lambda *args: 1.0)
    candidates = [TRUTH.perturbed(yaw=offset) for offset in (7.0, 0.0, -7.0)]

    estimate = PatternMatch(camera, VecSearcher(candidates), max_iterations=3).estimate(measured, sky_model)

    assert estimate.orientation == candidates[0]


def test_pattern_match_without_a_scorable_candidate_raises(camera, sky_model, measured):
    estimator = PatternMatch(camera, VecSearcher([Orientation.aligned()]), max_iterations=1)
    with pytest.raises(NoValidCandidateError):
        estimator.estimate(measured, sky_model)


def test_pattern_match_rejects_mismatched_measurement(camera, sky_model):
    estimator = PatternMatch(camera, VecSearcher([TRUTH]), max_iterations=1)
    wrong = RayImage.from_arrays(np.zeros((3, 3)), np.zeros((3, 3)), GlobalFrame)
    with pytest.raises(TypeError):
        estimator.estimate(wrong, sky_model)
    with pytest.raises(InvalidDimensionsError):
        estimator.estimate(wrong.into_sensor_frame(PixelCoordinate(1, 1)), sky_model)


def test_coordinate_descent_walks_back_to_the_truth(camera, sky_model, measured):
    refinement = CoordinateDescent(camera, step=1.0, convergence_threshold=1e-6, max_iterations=100)

    estimate = refinement.refine(measured, sky_model, TRUTH.perturbed(yaw=3.0))

    assert estimate.orientation.yaw == pytest.approx(TRUTH.yaw, abs=0.1)
    assert estimate.orientation.pitch == pytest.approx(TRUTH.pitch, abs=0.1)
    assert estimate.orientation.roll == pytest.approx(TRUTH.roll, abs=0.1)
    assert estimate.loss < 1e-8


def test_coordinate_descent_reports_failure_to_converge(camera, sky_model, measured):
    refinement = CoordinateDescent(camera, step=1.0, convergence_threshold=1e-6, max_iterations=1, max_workers=1)

    with pytest.raises(FailedToConvergeError) as error:
        refinement.refine(measured, sky_model, TRUTH.perturbed(yaw=3.0))

    assert error.value.iterations == 1
    assert error.value.achieved > 1e-6


def test_coordinate_descent_needs_a_scorable_start(camera, sky_model, measured):
    with pytest.raises(NoValidCandidateError):
        CoordinateDescent(camera).refine(measured, sky_model, Orientation.aligned())


def _diagonal_meridian_image():
    aop = np.zeros((41, 41))
    for offset in range(-15, 16):
        aop[20 + offset, 20 + offset] = 90.0
    return RayImage.from_arrays(aop, np.full((41, 41), 0.5), GlobalFrame)


def test_hough_transform_finds_the_meridian_direction():
    angle = HoughTransform(resolution=2.0, threshold=1.0).meridian_angle(_diagonal_meridian_image(), PixelCoordinate(20, 20))
    assert angle == pytest.approx(45.0)


def test_hough_transform_without_votes_is_none():
    image = RayImage.from_arrays(np.zeros((5, 5)), np.full((5, 5), 0.5), GlobalFrame)
    assert HoughTransform().meridian_angle(image, PixelCoordinate(2, 2)) is None


def test_hough_transform_on_a_simulated_sky(camera, sky_model):
    simulation = Simulation(camera=camera, orientation=Orientation.zenith_facing(), sky_model=sky_model)
    zenith = simulation.zenith_pixel()

    angle = HoughTransform(resolution=1.0, threshold=1.0).meridian_angle(simulation.ray_image(), zenith)

    # with yaw 0 columns run east and rows run south, so the sun at azimuth 135 lies along the diagonal
    expected = 45.0
    assert angle is not None
    assert abs(((angle - expected) + 90.0) % 180.0 - 90.0) <= 2.0


def test_orientation_of_uses_the_sun_at_a_place_and_time(camera):
    greenwich = EarthLocation.from_geodetic(lon=0.0, lat=51.4769, height=0.0)
    # late afternoon, the sun is low in the west and out of view
    time = Time('2020-06-21T17:00:00', scale='utc')
    sky_model = Rayleigh.from_position_and_time(location=greenwich, time=time)
    simulation = Simulation(camera=camera, orientation=TRUTH, sky_model=sky_model)
    measured = simulation.ray_image().into_sensor_frame(simulation.zenith_pixel())
    candidates = [TRUTH.perturbed(yaw=-15.0), TRUTH, TRUTH.perturbed(yaw=15.0)]

    estimate = PatternMatch(camera, VecSearcher(candidates), max_iterations=3).orientation_of(measured, greenwich, time)

    assert estimate.orientation == TRUTH
    assert estimate.loss == pytest.approx(0.0, abs=1e-12)
