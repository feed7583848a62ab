# src/pyskycompass/frames/frame_utils.py
from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
import astropy.units as u
from astropy.coordinates import EarthLocation
from scipy.spatial.transform import Rotation

from pyskycompass.frames.RigidTransform import RigidTransform


# -----------------------------
# Internal utilities
# -----------------------------
def _normalize(v: NDArray, eps: float = 1e-12) -> NDArray:
    v = np.asarray(v, dtype=np.float64)
    n = np.linalg.norm(v, axis=-1, keepdims=True) + eps
    return v / n

def _enu_basis_in_ecef(lat_rad: float, lon_rad: float) -> NDArray:
    """
    Return a 3x3 matrix whose ROWS are the ENU basis vectors expressed in ECEF:
      R[0,:] = East_in_ECEF, R[1,:] = North_in_ECEF, R[2,:] = Up_in_ECEF
    """
    sφ, cφ = np.sin(lat_rad), np.cos(lat_rad)
    sλ, cλ = np.sin(lon_rad), np.cos(lon_rad)
    return np.array([
        [-sλ,            cλ,           0.0],   # E
        [-sφ * cλ,  -sφ * sλ,      cφ],       # N
        [ cφ * cλ,   cφ * sλ,      sφ],       # U
    ], dtype=np.float64)

# -----------------------------
# Alt/Az <-> local ENU unit vectors
# -----------------------------
def altaz_to_unit_xyz_local(alt_deg: NDArray, az_deg: NDArray) -> NDArray:
    """
    Elevation/azimuth (degrees) -> local ENU unit vector (...,3).
    Azimuth: 0=N, +90°=E. Elevation: 0=horizon, +90°=zenith.
    """
    alt = np.deg2rad(np.asarray(alt_deg, dtype=np.float64))
    az = np.deg2rad(np.asarray(az_deg, dtype=np.float64))
    ca, sa = np.cos(alt), np.sin(alt)
    return np.stack([np.sin(az) * ca, np.cos(az) * ca, sa], axis=-1)

def unit_xyz_local_to_altaz(enu_vecs: NDArray) -> tuple[NDArray, NDArray]:
    """Local ENU vectors (...,3) -> (elevation_deg, azimuth_deg), azimuth in [0, 360)."""
    v = _normalize(enu_vecs)
    E, N, U = v[..., 0], v[..., 1], v[..., 2]
    alt = np.rad2deg(np.arcsin(np.clip(U, -1.0, 1.0)))
    az = np.mod(np.rad2deg(np.arctan2(E, N)), 360.0)
    return alt, az

# -----------------------------
# ECEF -> local ENU
# -----------------------------
def ecef_to_local(loc: EarthLocation) -> RigidTransform:
    """
    Rigid transform taking ECEF (ITRS) points in metres to the ENU frame
    anchored at geodetic location 'loc'.
    """
    lat = float(loc.lat.to_value(u.rad))
    lon = float(loc.lon.to_value(u.rad))
    R = _enu_basis_in_ecef(lat, lon)  # rows: E,N,U in ECEF, so v_enu = R @ v_ecef
    origin = np.array([
        loc.x.to_value(u.m),
        loc.y.to_value(u.m),
        loc.z.to_value(u.m),
    ], dtype=np.float64)
    return RigidTransform(Rotation.from_matrix(R), origin)

def ecef_to_enu_unit(ecef: NDArray, loc: EarthLocation) -> NDArray:
    """ECEF unit vectors (...,3) -> ENU unit vectors (...,3) at geodetic location 'loc'."""
    v = _normalize(ecef)
    lead = v.shape[:-1]
    enu = ecef_to_local(loc).apply_to_vectors(v.reshape(-1, 3))
    return _normalize(enu).reshape(*lead, 3)

def vectors_ecef_to_altaz(ecef: NDArray, loc: EarthLocation) -> tuple[NDArray, NDArray]:
    """Convert topocentric ECEF direction vectors at 'loc' into (elevation_deg, azimuth_deg)."""
    return unit_xyz_local_to_altaz(ecef_to_enu_unit(ecef, loc=loc))
