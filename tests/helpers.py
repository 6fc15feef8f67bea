# tests/helpers.py

import numpy as np
import numpy.ma as ma

DAY_MS = 86400000.0
# 2020-09-01T00:00:00Z
START_MS = 1598918400000.0


def fire_cells(img):
    """Set of (row, col) pixels that are unmasked fire."""
    # An interval without observations is a 0-d fully masked array
    arr = ma.atleast_1d(ma.asarray(img.bands['fire_mask']))
    valid = ~ma.getmaskarray(arr) & (ma.getdata(arr) == 1)
    return {tuple(int(i) for i in idx) for idx in zip(*np.nonzero(valid))}


def assert_close(actual, expected, tol=1e-6):
    """Compare the data of masked arrays or scalars to expected values."""
    actual = np.asarray(ma.getdata(actual), dtype=float)
    np.testing.assert_allclose(actual, np.asarray(expected, dtype=float), rtol=0, atol=tol)
