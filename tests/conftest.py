# tests/conftest.py

import numpy as np
import pytest

import fake_ee
from helpers import DAY_MS, START_MS
from eeformulas import (burn_severity, climate, cloud_masking, config, fire,
                        radiometric_correction, terrain, time_series)

EE_MODULES = [burn_severity, climate, cloud_masking, config, fire,
              radiometric_correction, terrain, time_series]


@pytest.fixture
def ee(monkeypatch):
    """
    Fixture: Swaps the numpy test double in for the Earth Engine client in
    every eeformulas module.
    """
    fake_ee.reset()
    for module in EE_MODULES:
        monkeypatch.setattr(module, 'ee', fake_ee)
    yield fake_ee
    fake_ee.reset()


@pytest.fixture
def goes_factory(ee):
    """
    Fixture: Registers two detection sources in the fake catalog.

    Each source is given as {day offset: [DQF arrays observed that day]}.
    """
    def _make(goes16, goes17):
        for collection_id, days in zip(fake_ee.GOES_IDS, (goes16, goes17)):
            images = []
            for day, observations in days.items():
                for hour, dqf in enumerate(observations):
                    t = START_MS + day * DAY_MS + hour * 3600000.0
                    images.append(ee.image({'DQF': dqf}, **{'system:time_start': t}))
            ee.CATALOG[collection_id] = images
        return ee.CATALOG
    return _make


@pytest.fixture
def fire_pixels():
    """3x3 DQF grid with one good quality fire pixel in the corner."""
    dqf = np.full((3, 3), 5.0)
    dqf[0, 0] = 0
    return dqf
