# -*- coding: utf-8 -*-
"""
Burn severity metrics from pre- and post-fire multispectral imagery.
"""
import logging

import ee

from eeformulas import time_series

log = logging.getLogger(__name__)


def nbr(img, nir, swir):
    """
    Normalized Burn Ratio (Key and Benson 2006) No. RMRS-GTR-164-CD, scaled by 1000
    """
    return (img.normalizedDifference([nir, swir])
               .multiply(1000)
               .select([0], ['nbr']))


def calculate_burn_severity(pre, post, nir, swir):
    """ Calculate burn severity metrics between pre- and post-fire images.

    Invalid values are not trapped. An RdNBR with a pre-fire NBR of 0 and a
    mortality with a negative radicand are invalid pixels in the output.

    Parameters
    ----------
    pre: ee.Image
        Multispectral prefire image.

    post: ee.Image
        Multispectral postfire image.

    nir: str
        Name of the NIR band in both images.

    swir: str
        Name of the SWIR band in both images.

    Returns
    -------
    ee.Image
        Bands preNBR, postNBR, dNBR, RdNBR, percentMortality and refugia.
    """
    log.debug("Calculating burn severity from bands %s and %s", nir, swir)
    pre_nbr = nbr(pre, nir, swir).rename('preNBR')
    post_nbr = nbr(post, nir, swir).rename('postNBR')

    dnbr = pre_nbr.subtract(post_nbr).rename('dNBR')

    # Relativized dNBR, Miller & Thode 2007
    rdnbr = dnbr.divide(pre_nbr.divide(1000).abs().sqrt()).rename('RdNBR')

    # Basal area mortality regression, Reilly et al. 2017
    mortality = (rdnbr.multiply(1135360)
                      .add(-119487011)
                      .sqrt()
                      .multiply(0.00003938)
                      .add(-0.22845617)
                      .rename('percentMortality'))

    # Refugia have <= 10% basal area mortality, Meigs & Krawchuk 2018. Where the
    # regression is undefined (low RdNBR) the pixel counts as refugia.
    refugia = (ee.Image(1).where(mortality.gt(0.1), 0)
                 .updateMask(dnbr.mask())
                 .rename('refugia'))

    return ee.Image.cat([pre_nbr, post_nbr, dnbr, rdnbr, mortality, refugia])


def generate_dnbr(collection, prefire_date, postfire_date, region, max_cloud_cover=10,
                  nir='B5', swir='B6', cloud_property='CLOUD_COVER_LAND'):
    """ Delta normalized burn ratio from the images nearest two dates

    Parameters
    ----------
    collection: ee.ImageCollection
        Images to search, e.g. Landsat 8 'LANDSAT/LC08/C02/T1'.

    prefire_date, postfire_date: ee.Date or date string
        Target dates. The image closest to each date is used.

    region: ee.Geometry
        Fire location or boundary. Images must intersect it.

    max_cloud_cover: float
        Maximum cloud cover percent of an image to be considered.

    nir, swir: str
        Band names used for the normalized burn ratio.

    cloud_property: str
        Image property holding the cloud cover percent.

    Returns
    -------
    ee.Image
        Single band 'dNBR', unscaled prefire minus postfire NBR.
    """
    imgs = (collection.filterBounds(region)
                      .filter(ee.Filter.lte(cloud_property, max_cloud_cover))
                      .sort(cloud_property))

    prefire = time_series.get_nearest_image(imgs, prefire_date)
    postfire = time_series.get_nearest_image(imgs, postfire_date)

    pre = prefire.normalizedDifference([nir, swir])
    post = postfire.normalizedDifference([nir, swir])

    return (pre.subtract(post)
               .rename('dNBR')
               .set({'prefire_time': prefire.get('system:time_start'),
                     'postfire_time': postfire.get('system:time_start')}))
