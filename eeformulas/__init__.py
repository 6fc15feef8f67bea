# -*- coding: utf-8 -*-
"""
Raster algebra helpers for Google Earth Engine: burn severity, terrain
indices, cloud masking, radiometric normalization, climate indices and fire
boundaries.

Call eeformulas.config.initialize() once before using the formula modules.
"""
__version__ = '0.1.0'
