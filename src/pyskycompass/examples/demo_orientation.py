"""
Demo
------------
- Simulates the raw frame of a sky-facing DoFP camera under a Rayleigh sky
  for a given place and time.
- Demosaics it and estimates the camera orientation with a pattern match
  followed by coordinate descent.
- Saves AoP/DoP PNGs of the measurement.

"""

from __future__ import annotations
import os
import logging
import numpy as np
import matplotlib.pyplot as plt

import astropy.units as u
from astropy.time import Time
from astropy.coordinates import EarthLocation

from pyskycompass.engine import Engine, EngineConfig
from pyskycompass.estimator import Orientation, GridSearcher, Simulation
from pyskycompass.sky_models import Rayleigh


# --------------------------
# Helpers
# --------------------------
def _ensure_outdir(path: str) -> str:
    os.makedirs(path, exist_ok=True)
    return path

def _save_png(basename: str, arr: np.ndarray, title: str, cmap: str = "viridis"):
    plt.figure()
    plt.imshow(arr, origin="upper", cmap=cmap)
    plt.title(title)
    plt.colorbar()
    plt.tight_layout()
    plt.savefig(basename + ".png", dpi=160)
    plt.close()


# --------------------------
# Demo
# --------------------------
def run_demo():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    here = os.path.dirname(__file__)
    out_dir = _ensure_outdir(os.path.join(here, "demo_outputs_orientation"))

    # --- Camera: small raw frame for speed (metapixel grid is half of it) ---
    config = EngineConfig(
        sensor_pixel_size_square_micrometers=30.0,
        number_pixels_vertical=162,
        number_pixels_horizontal=202,
        lens_focal_length_micrometers=2000.0,
        max_iterations=5000,
        random_seed=7,
        refine=True,
    )
    engine = Engine(config)

    # --- Site & time ---
    loc = EarthLocation(lat=53.4808 * u.deg, lon=-2.2426 * u.deg, height=50 * u.m)
    t = Time("2025-09-16T15:00:00", scale="utc")
    sky = Rayleigh.from_position_and_time(location=loc, time=t)
    print(f"[demo] Sun at {sky.solar_bearing}")

    # --- Synthesize the raw frame at a known orientation ---
    truth = Orientation.zenith_facing(yaw=37.0).perturbed(pitch=3.0)
    raw = engine.simulate_measurement(orientation=truth, sky_model=sky)

    # --- Demosaic and estimate ---
    measured = engine.demosaic(raw.tobytes())
    coarse = GridSearcher(center=Orientation.zenith_facing(), span=(180.0, 6.0, 6.0), resolution=3.0)
    estimate = engine.orientation_of(raw.tobytes(), location=loc, time=t, searcher=coarse)

    # --- Save outputs ---
    base = os.path.join(out_dir, "pyskycompass")
    _save_png(base + "_aop", measured.aop_array(), "Measured AoP, sensor frame [deg]", cmap="twilight")
    _save_png(base + "_dop", measured.dop_array(), "Measured DoP")
    simulated = Simulation(engine.camera, estimate.orientation, sky).ray_image()
    _save_png(base + "_aop_estimate", simulated.aop_array(), "Simulated AoP at estimate, global frame [deg]",
              cmap="twilight")

    print(f"[demo] Truth:    {truth}")
    print(f"[demo] Estimate: {estimate.orientation} (loss {estimate.loss:.3e}, "
          f"{truth.angular_distance(estimate.orientation):.2f} deg off)")
    print(f"[demo] Outputs written to: {out_dir}\n")


if __name__ == "__main__":
    run_demo()
