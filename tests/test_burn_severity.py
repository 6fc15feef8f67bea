# tests/test_burn_severity.py

import numpy as np
import numpy.ma as ma
import pytest

from helpers import DAY_MS, START_MS, assert_close
from fake_ee import invalid
from eeformulas import burn_severity

BANDS = ['preNBR', 'postNBR', 'dNBR', 'RdNBR', 'percentMortality', 'refugia']


def expected_severity(pre_nir, pre_swir, post_nir, post_swir):
    with np.errstate(all='ignore'):
        pre = (pre_nir - pre_swir) / (pre_nir + pre_swir) * 1000
        post = (post_nir - post_swir) / (post_nir + post_swir) * 1000
        dnbr = pre - post
        rdnbr = dnbr / np.sqrt(np.abs(pre / 1000))
        mortality = np.sqrt(rdnbr * 1135360 - 119487011) * 0.00003938 - 0.22845617
    return pre, post, dnbr, rdnbr, mortality


def landsat(ee, nir, swir, **properties):
    return ee.image({'B5': [nir], 'B6': [swir]}, **properties)


def test_burn_severity_bands(ee):
    pre = landsat(ee, [0.4, 0.5], [0.1, 0.1])
    post = landsat(ee, [0.1, 0.5], [0.3, 0.1])

    severity = burn_severity.calculate_burn_severity(pre, post, 'B5', 'B6')

    assert severity.bandNames().getInfo() == BANDS
    expected = expected_severity(np.array([0.4, 0.5]), np.array([0.1, 0.1]),
                                 np.array([0.1, 0.5]), np.array([0.3, 0.1]))
    assert_close(severity.bands['preNBR'], [expected[0]])
    assert_close(severity.bands['postNBR'], [expected[1]])
    assert_close(severity.bands['dNBR'], [expected[2]])
    assert_close(severity.bands['RdNBR'][0, 0], expected[3][0])
    assert_close(severity.bands['percentMortality'][0, 0], expected[4][0])


def test_high_severity_is_not_refugia(ee):
    severity = burn_severity.calculate_burn_severity(landsat(ee, [0.4], [0.1]),
                                                     landsat(ee, [0.1], [0.3]),
                                                     'B5', 'B6')

    assert float(severity.bands['percentMortality'][0, 0]) > 0.1
    assert severity.bands['refugia'][0, 0] == 0


def test_unchanged_pixel_is_refugia(ee):
    img = landsat(ee, [0.5], [0.1])

    severity = burn_severity.calculate_burn_severity(img, img, 'B5', 'B6')

    assert severity.bands['dNBR'][0, 0] == 0
    assert severity.bands['RdNBR'][0, 0] == 0
    # Negative radicand
    assert invalid(severity.bands['percentMortality']).all()
    assert severity.bands['refugia'][0, 0] == 1


def test_zero_prefire_nbr_is_invalid_not_an_error(ee):
    img = landsat(ee, [0.3], [0.3])

    severity = burn_severity.calculate_burn_severity(img, img, 'B5', 'B6')

    assert severity.bands['preNBR'][0, 0] == 0
    assert severity.bands['dNBR'][0, 0] == 0
    assert invalid(severity.bands['RdNBR']).all()
    assert invalid(severity.bands['percentMortality']).all()


def test_masked_input_masks_refugia(ee):
    nir = ma.masked_array([[0.4, 0.4]], mask=[[False, True]])
    pre = ee.image({'B5': nir, 'B6': [[0.1, 0.1]]})
    post = landsat(ee, [0.1, 0.1], [0.3, 0.3])

    refugia = burn_severity.calculate_burn_severity(pre, post, 'B5', 'B6').bands['refugia']

    assert not ma.getmaskarray(refugia)[0, 0]
    assert ma.getmaskarray(refugia)[0, 1]


@pytest.fixture
def landsat_collection(ee):
    def scene(day, nir, cloud):
        return landsat(ee, [nir], [0.1], **{'system:time_start': START_MS + day * DAY_MS,
                                            'CLOUD_COVER_LAND': cloud})
    return ee.ImageCollection([scene(0, 0.5, 5),
                               scene(10, 0.4, 50),
                               scene(20, 0.3, 5),
                               scene(40, 0.2, 5)])


def test_generate_dnbr(ee, landsat_collection):
    dnbr = burn_severity.generate_dnbr(landsat_collection,
                                       START_MS + 12 * DAY_MS,
                                       START_MS + 38 * DAY_MS,
                                       ee.Geometry())

    assert dnbr.bandNames().getInfo() == ['dNBR']
    # The cloudy day 10 scene is skipped, so day 20 is nearest the prefire date
    assert dnbr.get('prefire_time') == START_MS + 20 * DAY_MS
    assert dnbr.get('postfire_time') == START_MS + 40 * DAY_MS
    expected = (0.3 - 0.1) / (0.3 + 0.1) - (0.2 - 0.1) / (0.2 + 0.1)
    assert_close(dnbr.bands['dNBR'], [[expected]])


def test_generate_dnbr_cloud_threshold(ee, landsat_collection):
    dnbr = burn_severity.generate_dnbr(landsat_collection,
                                       START_MS + 12 * DAY_MS,
                                       START_MS + 38 * DAY_MS,
                                       ee.Geometry(),
                                       max_cloud_cover=60)

    assert dnbr.get('prefire_time') == START_MS + 10 * DAY_MS
