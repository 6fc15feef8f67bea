# -*- coding: utf-8 -*-
"""
Small helpers shared by the formula modules. None of them touch module state.
"""
import numpy as np


class ArgumentError(ValueError):
    """An argument is not one of its allowed values."""


class MissingBandError(ArgumentError):
    """A required band is not present in an image."""


def deg2rad(deg):
    """ Convert an ee.Image or ee.Number of degrees to radians.
    """
    return deg.divide(180.0 / np.pi)


def item_in_list(item, choices):
    return item in list(choices)


def match_arg(arg, choices, allow_several=False):
    """ Return arg if it is one of choices, otherwise raise an ArgumentError.

    Parameters
    ----------
    arg: object or list
        Value to check. May be a list of values if allow_several.

    choices: list
        Allowed values.

    allow_several: bool
        If True, arg may be a list and every member must be in choices.

    Returns
    -------
    object
        arg, unchanged
    """
    if not isinstance(arg, (list, tuple)):
        if item_in_list(arg, choices):
            return arg
    elif allow_several:
        if all(item_in_list(item, choices) for item in arg):
            return arg

    raise ArgumentError('Argument "{}" must be in {}'.format(arg, list(choices)))


def require_band(img, band):
    """ Raise a MissingBandError if img has no band named band.

    This evaluates the band names on the server (one getInfo round trip).
    """
    bands = img.bandNames().getInfo()
    if band not in bands:
        raise MissingBandError('Image does not contain a band called "{}". Bands: {}'.format(band, bands))
    return band
