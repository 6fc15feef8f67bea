# -*- coding: utf-8 -*-
"""
Band-wise radiometric correction and normalization based on region statistics.
"""
import logging

import ee

from eeformulas.config import DEFAULT_MAX_PIXELS

log = logging.getLogger(__name__)


def reduce_image(img, reducer, geometry=None, scale=None, max_pixels=DEFAULT_MAX_PIXELS):
    """ Reduce each band of an image over a region to a constant image.

    Parameters
    ----------
    img: ee.Image
        Image to calculate reduced values for.

    reducer: ee.Reducer
        Reducer to apply, such as ee.Reducer.mean().

    geometry: ee.Geometry
        Region to calculate statistics over. Defaults to the image footprint.

    scale: float or ee.Number
        Scale in meters to calculate statistics at. Defaults to the nominal
        scale of the image.

    max_pixels: float
        Maximum number of pixels used to calculate statistics.

    Returns
    -------
    ee.Image
        Image with the same bands, in the same order, as img where each band
        is the constant reduced value of the matching band of img.
    """
    if geometry is None:
        geometry = img.geometry()
    if scale is None:
        scale = img.projection().nominalScale()

    log.debug("Reducing image bands with %s at scale %s", reducer, scale)
    reduced = img.reduceRegion(reducer=reducer,
                               geometry=geometry,
                               scale=scale,
                               maxPixels=max_pixels)

    return reduced.toImage(img.bandNames())


def dark_object_subtraction(img, obj, scale=None, max_pixels=DEFAULT_MAX_PIXELS):
    """ Radiometric correction by dark object subtraction (DOS)

    Subtract the band-wise mean of a dark object from every pixel.

    Parameters
    ----------
    img: ee.Image
        Image to correct.

    obj: ee.Geometry, ee.Feature or ee.FeatureCollection
        Location or extent of the dark object within the image.

    scale: float
        Scale to calculate dark object statistics at.

    max_pixels: float
        Maximum number of pixels used to calculate statistics.

    Returns
    -------
    ee.Image
        The corrected image.
    """
    if isinstance(obj, (ee.Feature, ee.FeatureCollection)):
        obj = obj.geometry()

    offset = reduce_image(img, ee.Reducer.mean(), obj, scale, max_pixels)
    return img.subtract(offset)


def linear_histogram_match(target, reference, geometry, scale=None, max_pixels=DEFAULT_MAX_PIXELS):
    """ Rescale the mean and standard deviation of target to match reference.

    With a geometry over pseudo-invariant features this is PIF normalization.
    All statistics are computed band-wise over the same region and scale.

    Parameters
    ----------
    target: ee.Image
        Image to rescale.

    reference: ee.Image
        Image to rescale towards. Must have the same bands as target.

    geometry: ee.Geometry
        Region to calculate statistics over.

    scale: float
        Scale to calculate statistics at.

    max_pixels: float
        Maximum number of pixels used to calculate statistics.

    Returns
    -------
    ee.Image
        Rescaled version of target.
    """
    def stat(img, reducer):
        return reduce_image(img, reducer, geometry, scale, max_pixels)

    target_mean = stat(target, ee.Reducer.mean())
    reference_mean = stat(reference, ee.Reducer.mean())
    rescale = stat(reference, ee.Reducer.stdDev()).divide(stat(target, ee.Reducer.stdDev()))

    return target.subtract(target_mean).multiply(rescale).add(reference_mean)
