# -*- coding: utf-8 -*-
"""
Terrain indices from digital elevation models: topographic position index,
slope position and heat load index.
"""
import logging

import ee

from eeformulas.config import DEFAULT_MAX_PIXELS, FLAT_DEGREES
from eeformulas.utils import ArgumentError, deg2rad, item_in_list, match_arg

log = logging.getLogger(__name__)

KERNEL_TYPES = ['circle', 'square', 'cross', 'plus', 'octagon', 'diamond']
KERNEL_UNITS = ['pixels', 'meters']

# Aspect folding coefficients (degrees) by hemisphere
FOLD_COEFFS = {'north': 225, 'south': 315}

SLOPE_POSITIONS = {1: 'ridge',
                   2: 'upper slope',
                   3: 'middle slope',
                   4: 'flat',
                   5: 'lower slope',
                   6: 'valley'}


def tpi(dem, radius=300, window_shape='circle', units='meters'):
    """ Topographic position index following Weiss 2001

    Elevation minus the mean elevation of the surrounding window, rounded by
    adding 0.5 and truncating toward zero (2.5 -> 3, -2.5 -> -2).

    Parameters
    ----------
    dem: ee.Image
        Elevation image.

    radius: float
        Radius of the window passed to ee.Image.focal_mean.

    window_shape: str
        Kernel type passed to ee.Image.focal_mean.

    units: str
        Units of radius, 'meters' or 'pixels'.

    Returns
    -------
    ee.Image
        Integer band 'tpi'.
    """
    match_arg(window_shape, KERNEL_TYPES)
    match_arg(units, KERNEL_UNITS)

    dem = dem.double()
    neighborhood = dem.focal_mean(radius=radius, kernelType=window_shape, units=units)

    return (dem.subtract(neighborhood)
               .add(0.5)
               .int()
               .rename('tpi'))


def slope_position(tpi, slope, region, scale, flat_degrees=FLAT_DEGREES, max_pixels=DEFAULT_MAX_PIXELS):
    """ Reclassify a continuous TPI image into slope positions following Weiss 2001

    Classes are based on the standard deviation (sd) of TPI over region.
    Assignments are applied in order and later classes overwrite earlier ones.

        1 ridge          tpi > sd
        2 upper slope    sd/2 < tpi <= sd, or tpi == sd/2 and slope > flat_degrees
        3 middle slope   -sd/2 < tpi < sd/2 and slope > flat_degrees
        4 flat           -sd/2 <= tpi <= sd/2 and slope <= flat_degrees
        5 lower slope    -sd <= tpi < -sd/2, or tpi == -sd/2 and slope > flat_degrees
        6 valley         tpi < -sd

    A region without valid TPI pixels has no standard deviation. That raises
    an error when the result is evaluated rather than producing a default.

    Parameters
    ----------
    tpi: ee.Image
        TPI image, e.g. from tpi(). The first band is used.

    slope: ee.Image
        Slope in degrees, e.g. ee.Terrain.slope(dem).

    region: ee.Geometry
        Region to calculate the TPI standard deviation over.

    scale: float
        Scale in meters to calculate the standard deviation at.

    flat_degrees: float
        Maximum slope of a flat mid-slope pixel.

    max_pixels: float
        Maximum number of pixels used to calculate the standard deviation.

    Returns
    -------
    ee.Image
        Integer band 'slope_position' with values 1-6.
    """
    log.debug("Slope position at scale %s with flat slope <= %s degrees", scale, flat_degrees)
    tpi = tpi.select([0])

    sd = (tpi.reduceRegion(reducer=ee.Reducer.stdDev(),
                           geometry=region,
                           scale=scale,
                           maxPixels=max_pixels)
             .getNumber(tpi.bandNames().get(0)))
    half_sd = sd.multiply(0.5)
    neg_half_sd = sd.multiply(-0.5)
    neg_sd = sd.multiply(-1)

    steep = slope.gt(flat_degrees)
    flat = slope.lte(flat_degrees)

    positions = (ee.Image(0)
                   .where(tpi.gt(sd), 1)
                   .where(tpi.lte(sd).And(tpi.gt(half_sd).Or(tpi.eq(half_sd).And(steep))), 2)
                   .where(tpi.gt(neg_half_sd).And(tpi.lt(half_sd)).And(steep), 3)
                   .where(tpi.gte(neg_half_sd).And(tpi.lte(half_sd)).And(flat), 4)
                   .where(tpi.gte(neg_sd).And(tpi.lt(neg_half_sd).Or(tpi.eq(neg_half_sd).And(steep))), 5)
                   .where(tpi.lt(neg_sd), 6))

    return (positions.updateMask(tpi.mask())
                     .int()
                     .rename('slope_position'))


def hli(dem, force_latitude=None, force_hemisphere=None):
    """ McCune and Keon 2002 Heat Load Index with corrected coefficients from McCune 2007

    Follows the R spatialEco implementation with per-pixel latitudes.

    Parameters
    ----------
    dem: ee.Image
        Elevation image.

    force_latitude: float or ee.Number
        Fixed latitude in degrees, e.g. a region centroid latitude. Calculated
        per pixel if None.

    force_hemisphere: str
        'north' or 'south' to fold aspect about 225 or 315 degrees. Chosen per
        pixel from the sign of latitude if None.

    Returns
    -------
    ee.Image
        Band 'hli'.
    """
    if isinstance(force_latitude, ee.ComputedObject):
        lat = ee.Image.constant(ee.Number(force_latitude))
    elif force_latitude is not None:
        try:
            lat = ee.Image.constant(float(force_latitude))
        except (TypeError, ValueError):
            raise ArgumentError('Invalid force_latitude "{}". Argument must be a number or None.'.format(force_latitude))
    else:
        lat = ee.Image.pixelLonLat().select('latitude')
    lat = deg2rad(lat)

    if force_hemisphere is not None:
        hemisphere = str(force_hemisphere).lower()
        if not item_in_list(hemisphere, FOLD_COEFFS):
            raise ArgumentError('Argument "{}" must be in {}'.format(force_hemisphere, list(FOLD_COEFFS)))
        fold = ee.Image.constant(FOLD_COEFFS[hemisphere])
    else:
        fold = ee.Image(FOLD_COEFFS['north']).where(lat.lt(0), FOLD_COEFFS['south'])

    slope = deg2rad(ee.Terrain.slope(dem))
    # Fold aspect so the warmest aspect is 0
    aspect = deg2rad(ee.Terrain.aspect(dem)
                       .subtract(fold)
                       .abs()
                       .multiply(-1)
                       .add(180)
                       .abs())

    return (dem.expression("exp(1.582 * cos(slope) * cos(lat)"
                           " - 1.5 * sin(slope) * sin(lat) * cos(aspect)"
                           " - 0.262 * sin(slope) * sin(lat)"
                           " + 0.607 * sin(slope) * sin(aspect)"
                           " - 1.467)",
                           {'slope': slope,
                            'aspect': aspect,
                            'lat': lat
                           })
               .select([0], ['hli']))
