# -*- coding: utf-8 -*-
"""
Fire boundaries from geostationary active fire detections.

Boundaries combine two independent detection sources (GOES-16 and GOES-17
fire products by default). A pixel is in an interval's boundary if the median
detection quality over the interval is a good quality fire in either source.
Boundaries are generated per interval or accumulated over time, and can be
converted to polygons.
"""
import logging
import numbers
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import ee

from eeformulas.config import (FIRE_MASK_BAND, FIRE_QUALITY_BAND, GOES_COLLECTIONS,
                               VECTOR_MAX_PIXELS)
from eeformulas.utils import ArgumentError

log = logging.getLogger(__name__)

HOUR_MS = 3600000
# Detection quality flag of a good quality fire pixel
GOOD_FIRE_QUALITY = 0
TIME_PROPERTIES = ['system:time_start', 'system:time_end']


@dataclass(frozen=True)
class FireBoundaryParams:
    """ Options for fire_boundary and periodic_fire_boundaries

    interval_hours: float
        Length of each interval in hours.

    smooth: bool
        Apply a majority filter to remove salt-and-pepper pixels.

    smooth_kernel: ee.Kernel
        Kernel of the majority filter. A normalized 2 km circle if None.

    cumulative: bool
        Accumulate boundaries so each one covers the start date through the
        end of its interval.

    collections: tuple
        The detection sources, as collection ids or ee.ImageCollections.

    quality_band: str
        Detection quality band of the sources.
    """
    interval_hours: float = 24
    smooth: bool = False
    smooth_kernel: Optional[Any] = None
    cumulative: bool = False
    collections: Tuple[Any, ...] = GOES_COLLECTIONS
    quality_band: str = FIRE_QUALITY_BAND

    def __post_init__(self):
        if not isinstance(self.interval_hours, numbers.Number) or self.interval_hours <= 0:
            raise ArgumentError('interval_hours must be a positive number, got "{}"'.format(self.interval_hours))
        if not self.collections:
            raise ArgumentError('At least one detection source collection is required')

    def kernel(self):
        if self.smooth_kernel is None:
            return ee.Kernel.circle(2000, 'meters', True)
        return self.smooth_kernel


def _tag(img, start, end):
    """ Set the interval start and end and a unique index on a boundary."""
    end = ee.Date(end)
    return img.set({'system:time_start': ee.Date(start).millis(),
                    'system:time_end': end.millis(),
                    'system:index': ee.String('fire_mask_').cat(end.format('YYYYMMdd_HHmmss'))})


def source_fire_mask(collection, start, end, region, quality_band=FIRE_QUALITY_BAND):
    """ Binary fire mask from one detection source over [start, end)

    Pixels with a median quality of a good fire are 1 and others 0. An
    interval without observations gives a fully masked image.
    """
    detections = (ee.ImageCollection(collection)
                    .filterDate(start, end)
                    .filterBounds(region)
                    .select(quality_band))

    # Fully masked placeholder so an empty interval still has the quality band
    placeholder = ee.ImageCollection([ee.Image().int().rename(quality_band)])
    median_quality = detections.merge(placeholder).reduce(ee.Reducer.median())

    return median_quality.eq(GOOD_FIRE_QUALITY)


def fire_boundary(start, region, params=FireBoundaryParams()):
    """ Fire boundary for one interval beginning at start

    Parameters
    ----------
    start: ee.Date, millis or date string
        Start of the interval.

    region: ee.Geometry
        Region to search for detections in.

    params: FireBoundaryParams
        Interval length, smoothing and sources.

    Returns
    -------
    ee.Image
        Band 'fire_mask' with fire pixels as 1 and everything else masked,
        with system:time_start and system:time_end of the interval.
    """
    start = ee.Date(start)
    end = start.advance(params.interval_hours, 'hour')

    masks = [source_fire_mask(c, start, end, region, params.quality_band) for c in params.collections]
    # Max over the sources is a logical OR that skips masked sources
    combined = ee.ImageCollection(masks).reduce(ee.Reducer.max())

    if params.smooth:
        combined = combined.reduceNeighborhood(reducer=ee.Reducer.mode(), kernel=params.kernel())

    combined = combined.selfMask().rename(FIRE_MASK_BAND)
    return _tag(combined, start, end)


def accumulate_boundaries(boundaries, start):
    """ Running union of a chronological list of boundaries

    Parameters
    ----------
    boundaries: ee.List
        Boundary images in chronological order.

    start: ee.Date
        Start of the first interval. Every accumulated boundary starts here.

    Returns
    -------
    ee.List
        One boundary per input, each the union of all inputs up to and
        including it, ending at that input's system:time_end.
    """
    start = ee.Date(start)
    seed = _tag(ee.Image(0).int().rename(FIRE_MASK_BAND), start, start)

    def accumulate(current, accumulated):
        accumulated = ee.List(accumulated)
        current = ee.Image(current)
        previous = ee.Image(accumulated.get(-1))

        union = (current.unmask()
                        .add(previous.unmask())
                        .gt(0)
                        .selfMask()
                        .rename(FIRE_MASK_BAND))

        return accumulated.add(_tag(union, start, current.get('system:time_end')))

    accumulated = ee.List(ee.List(boundaries).iterate(accumulate, ee.List([seed])))
    # Drop the seed
    return accumulated.slice(1)


def periodic_fire_boundaries(start, end, region, params=FireBoundaryParams()):
    """ Fire boundaries for each interval between start and end

    Parameters
    ----------
    start: ee.Date or date string
        Start of the first interval.

    end: ee.Date or date string
        Last interval start, inclusive.

    region: ee.Geometry
        Region to search for detections in.

    params: FireBoundaryParams
        Interval length, smoothing, sources and whether to accumulate.

    Returns
    -------
    ee.ImageCollection
        Chronological boundaries. Each covers its own interval, or the start
        through the end of its interval if params.cumulative.
    """
    log.debug("Generating %s-hour fire boundaries (cumulative=%s, smooth=%s)",
              params.interval_hours, params.cumulative, params.smooth)
    start = ee.Date(start)
    end = ee.Date(end)

    times = ee.List.sequence(start.millis(), end.millis(), params.interval_hours * HOUR_MS)
    boundaries = times.map(lambda t: fire_boundary(t, region, params))

    if params.cumulative:
        boundaries = accumulate_boundaries(boundaries, start)

    return ee.ImageCollection.fromImages(boundaries)


def vectorize_boundary(img, scale, region, max_pixels=VECTOR_MAX_PIXELS, simplify=False, max_error=None):
    """ Convert a binary boundary image to a single polygon feature

    Parameters
    ----------
    img: ee.Image
        Boundary with fire pixels as 1 and everything else masked.

    scale: float
        Scale in meters to vectorize at.

    region: ee.Geometry
        Region to vectorize within.

    max_pixels: float
        Maximum number of pixels to vectorize.

    simplify: bool
        Simplify each polygon to remove stair-steps from coarse pixels.

    max_error: float
        Maximum error in meters when simplifying. Required if simplify.

    Returns
    -------
    ee.Feature
        All fire pixels dissolved into one geometry with the time properties
        of img.
    """
    if simplify and max_error is None:
        raise ArgumentError('max_error is required to simplify boundaries')

    polys = img.reduceToVectors(scale=scale, geometry=region, maxPixels=max_pixels)

    if simplify:
        polys = polys.map(lambda f: ee.Feature(f).simplify(ee.Number(max_error)))

    feature = ee.Feature(polys.geometry())
    return ee.Feature(feature.copyProperties(img, TIME_PROPERTIES))


def vectorize_boundary_collection(collection, scale, region, max_pixels=VECTOR_MAX_PIXELS,
                                  simplify=False, max_error=None):
    """ Convert a collection of boundary images to a collection of polygon features.

    See vectorize_boundary for parameters.
    """
    if simplify and max_error is None:
        raise ArgumentError('max_error is required to simplify boundaries')

    def vectorize(img):
        return vectorize_boundary(ee.Image(img), scale, region, max_pixels, simplify, max_error)

    return ee.FeatureCollection(collection.map(vectorize))
