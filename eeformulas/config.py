# -*- coding: utf-8 -*-
"""
Engine initialization and defaults shared by the formula modules.

Nothing in eeformulas initializes Earth Engine on import. Scripts call
initialize() once before building any expressions.
"""
import logging
import os

import ee

log = logging.getLogger(__name__)

# Region statistics (reduceRegion) pixel cap
DEFAULT_MAX_PIXELS = 1e12
# reduceToVectors pixel cap
VECTOR_MAX_PIXELS = 1e13

# Slope (degrees) at or below which a mid-slope TPI pixel is considered flat
FLAT_DEGREES = 5

# GOES ABI fire detection products and the band holding the detection quality flag.
# A DQF of 0 is a good quality fire pixel.
GOES_COLLECTIONS = ('NOAA/GOES/16/FDCF', 'NOAA/GOES/17/FDCF')
FIRE_QUALITY_BAND = 'DQF'
FIRE_MASK_BAND = 'fire_mask'

_PROJECT_VARS = ('EEFORMULAS_PROJECT', 'EE_PROJECT')


def get_project(project=None):
    """ Return the cloud project to initialize Earth Engine with.

    An explicit project wins, then EEFORMULAS_PROJECT, then EE_PROJECT. None
    lets the client fall back to the project of the stored credentials.
    """
    if project:
        return project
    for var in _PROJECT_VARS:
        value = os.environ.get(var)
        if value:
            return value
    return None


def initialize(project=None, **kwargs):
    """ Initialize the Earth Engine client.

    Parameters
    ----------
    project: str
        Google Cloud project id. See get_project for the fallbacks.

    **kwargs:
        Passed to ee.Initialize (e.g. credentials, opt_url).
    """
    project = get_project(project)
    log.debug("Initializing Earth Engine with project %s", project)
    ee.Initialize(project=project, **kwargs)


def setup_logging(level=logging.INFO):
    """ Send eeformulas log records to stderr. Intended for scripts only."""
    logger = logging.getLogger('eeformulas')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s %(name)s %(levelname)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
