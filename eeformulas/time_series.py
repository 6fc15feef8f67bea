# -*- coding: utf-8 -*-
"""
Scripts related to processing a time series which aren't specific to any
particular sensor
"""
import logging

import ee

log = logging.getLogger(__name__)


def nearest_before(imgs, date, sort_property='system:time_start'):
    """ Collection with the latest image acquired before date, or empty."""
    date = ee.Date(date)
    return (imgs.filterDate(date.advance(-999, 'year'), date)
                .sort(sort_property, False)
                .limit(1))


def nearest_after(imgs, date, sort_property='system:time_start'):
    """ Collection with the earliest image acquired on or after date, or empty."""
    date = ee.Date(date)
    return (imgs.filterDate(date, date.advance(999, 'year'))
                .sort(sort_property)
                .limit(1))


def get_nearest_image(imgs, date, sort_property='system:time_start'):
    """ Choose the image in a collection closest in time to a date

    imgs: ee.ImageCollection
        Images with system:time_start properties.

    date: ee.Date or date string
        Target date.

    sort_property: str
        Property used to order images when picking the candidate on each side
        of the date.

    returns: ee.Image
        The nearer of the closest images before and after date. Null if the
        collection is empty.
    """
    log.debug("Nearest image to %s by %s", date, sort_property)
    date = ee.Date(date)
    candidates = nearest_before(imgs, date, sort_property).merge(nearest_after(imgs, date, sort_property))

    def time_diff(img):
        diff = ee.Number(img.get('system:time_start')).subtract(date.millis()).abs()
        return img.set('time_diff', diff)

    return ee.Image(candidates.map(time_diff).sort('time_diff').first())
