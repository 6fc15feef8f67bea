# -*- coding: utf-8 -*-
"""
Cloud and cloud shadow masking for Sentinel-2 style imagery with a cloud
probability image (e.g. COPERNICUS/S2_CLOUD_PROBABILITY).
"""
import logging
from dataclasses import dataclass
from typing import Optional

import ee

from eeformulas.utils import require_band

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloudMaskParams:
    """ Options for probability_cloud_mask

    probability_threshold: float
        Cloud probability above which a pixel is cloud.

    buffer_dist: float
        Distance in meters to buffer clouds (and shadows) by.

    scale: float
        Scale in meters for shadow projection and mask cleaning. The nominal
        scale of the image's first band if None.

    mask_shadow: bool
        Also mask cloud shadows.

    shadow_nir: float
        NIR value below which a pixel near a cloud may be shadow.

    shadow_dist: float
        Maximum distance (in tens of meters) to project shadows from clouds.

    solar_azimuth: float
        Solar azimuth in degrees. Read from MEAN_SOLAR_AZIMUTH_ANGLE if None.

    nir_band: str
        Name of the NIR band.
    """
    probability_threshold: float = 30
    buffer_dist: float = 15
    scale: Optional[float] = None
    mask_shadow: bool = False
    shadow_nir: float = 1000
    shadow_dist: float = 10
    solar_azimuth: Optional[float] = None
    nir_band: str = 'B8'


def generate_cloud_mask(probability, probability_threshold=30):
    """ Binary cloud mask from a cloud probability image."""
    return probability.gt(probability_threshold)


def generate_shadow_mask(img, cloud_mask, shadow_nir=1000, shadow_dist=10, solar_azimuth=None,
                         scale=None, nir_band='B8'):
    """ Binary shadow mask of dark pixels near clouds

    Potential shadows are the cloud mask projected away from the sun with a
    directional distance transform, intersected with dark NIR pixels.

    Parameters
    ----------
    img: ee.Image
        Image with a NIR band.

    cloud_mask: ee.Image
        Binary cloud mask, e.g. from generate_cloud_mask.

    shadow_nir: float
        NIR value below which a pixel may be shadow.

    shadow_dist: float
        Maximum shadow projection distance in tens of meters.

    solar_azimuth: float or ee.Number
        Solar azimuth in degrees. Read from MEAN_SOLAR_AZIMUTH_ANGLE if None.

    scale: float
        Scale in meters to reproject the projected shadows to. Nominal scale of
        the first band if None.

    nir_band: str
        Name of the NIR band.

    Returns
    -------
    ee.Image
        Binary shadow mask.
    """
    dark = img.select(nir_band).lt(shadow_nir)

    if solar_azimuth is None:
        solar_azimuth = img.get('MEAN_SOLAR_AZIMUTH_ANGLE')
    if scale is None:
        scale = img.select(0).projection().nominalScale()

    shadow_az = ee.Number(90).subtract(solar_azimuth)

    projected = (cloud_mask.directionalDistanceTransform(shadow_az, shadow_dist * 10)
                           .reproject(crs=img.select(0).projection(), scale=scale)
                           .select('distance')
                           .mask())

    return projected.multiply(dark)


def clean_mask(mask, buffer_dist, scale):
    """ Morphological closing to remove small groups of pixels in a binary mask."""
    radius = ee.Number(buffer_dist).multiply(2).divide(scale)
    return mask.focal_max(radius).focal_min(2)


def probability_cloud_mask(img, probability, params=CloudMaskParams()):
    """ Mask clouds, and optionally shadows, using a cloud probability image

    Parameters
    ----------
    img: ee.Image
        Image to mask.

    probability: ee.Image
        Cloud probability (0-100) matching img.

    params: CloudMaskParams
        Masking options.

    Returns
    -------
    ee.Image
        img with clouds (and shadows) masked out.
    """
    log.debug("Cloud masking with %s", params)
    scale = params.scale
    if scale is None:
        scale = img.select(0).projection().nominalScale()

    cloud_mask = generate_cloud_mask(probability, params.probability_threshold)

    if params.mask_shadow:
        shadow_mask = generate_shadow_mask(img, cloud_mask,
                                           shadow_nir=params.shadow_nir,
                                           shadow_dist=params.shadow_dist,
                                           solar_azimuth=params.solar_azimuth,
                                           scale=scale,
                                           nir_band=params.nir_band)
        clear = cloud_mask.add(shadow_mask).gt(0).eq(0)
    else:
        clear = cloud_mask.eq(0)

    clear = clean_mask(clear, params.buffer_dist, scale)

    return img.updateMask(clear)


def simple_cloud_mask(img, mask_band='QA60'):
    """ Mask clouds with a binary cloud band, such as Sentinel-2 QA60

    Pixels where mask_band is 0 are kept. Raises a MissingBandError if the
    image has no mask_band.
    """
    require_band(img, mask_band)
    return img.updateMask(img.select(mask_band).eq(0))
