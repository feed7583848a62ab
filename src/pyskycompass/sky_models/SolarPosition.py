"""Solar position seen from the ground, through astropy."""

from astropy.time import Time
from astropy.units import deg
from astropy.coordinates import AltAz, EarthLocation, get_body, get_sun

from pyskycompass.sky_models.Bearing import Bearing


def solar_bearing(
        location: EarthLocation,
        time: Time,
        accuracy: bool = False
) -> Bearing:
    """Return the bearing of the sun for an observer.

    Args:
        location: Observer on Earth.
        time: Scalar observation time.
        accuracy: Whether to use the JPL ephemeris for higher accuracy.

    Returns:
        Azimuth clockwise from north and elevation of the sun, in degrees.
    """
    if not time.isscalar:
        raise ValueError('solar_bearing expects a scalar time')
    frame = AltAz(obstime=time, location=location)
    if accuracy:
        sun = get_body('sun', time, ephemeris='jpl').transform_to(frame)
    else:
        sun = get_sun(time).transform_to(frame)
    return Bearing(azimuth=float(sun.az.to_value(deg)), elevation=float(sun.alt.to_value(deg)))
