# -*- coding: utf-8 -*-
"""
Climate indices from meteorological variables.

Each index is one expression written against the arithmetic methods shared by
ee.Image and ee.Number. The image functions coerce their inputs with ee.Image
and name the output band; the *_number functions coerce with ee.Number.
"""
import ee


def _relative_humidity(q, p, t):
    # Saturation vapor pressure (hPa) and vapor pressure (Pa), so the ratio is a percent
    es = t.multiply(17.67).divide(t.add(243.5)).exp().multiply(6.112)
    e = q.multiply(p).divide(q.multiply(0.378).add(0.622))
    return e.divide(es).clamp(0, 100)


def _vapor_pressure_deficit(t, rh):
    return (t.multiply(17.27).divide(t.add(237.3)).exp()
             .multiply(0.6108)
             .multiply(rh.divide(-100).add(1)))


def _wind_velocity(u, v):
    return u.pow(2).add(v.pow(2)).sqrt()


def _hot_dry_windy_index(vpd, wind):
    return vpd.multiply(wind)


def relative_humidity(q, p, t):
    """ Relative humidity percent following Bolton 1980

    https://archive.eol.ucar.edu/projects/ceop/dm/documents/refdata_report/eqns.html

    Parameters
    ----------
    q: ee.Image
        Specific humidity, unitless.

    p: ee.Image
        Pressure in Pa.

    t: ee.Image
        Temperature in C.

    Returns
    -------
    ee.Image
        Band 'RH', clamped to 0-100.
    """
    return _relative_humidity(ee.Image(q), ee.Image(p), ee.Image(t)).rename('RH')


def relative_humidity_number(q, p, t):
    """ Relative humidity percent for single values. See relative_humidity."""
    return _relative_humidity(ee.Number(q), ee.Number(p), ee.Number(t))


def vapor_pressure_deficit(t, rh):
    """ Vapor pressure deficit in kPa

    t: ee.Image
        Air temperature in C.

    rh: ee.Image
        Relative humidity percent.

    returns: ee.Image
        Band 'VPD'
    """
    return _vapor_pressure_deficit(ee.Image(t), ee.Image(rh)).rename('VPD')


def vapor_pressure_deficit_number(t, rh):
    return _vapor_pressure_deficit(ee.Number(t), ee.Number(rh))


def wind_velocity(u, v):
    """ Wind velocity from U and V components. Returns band 'WIND'."""
    return _wind_velocity(ee.Image(u), ee.Image(v)).rename('WIND')


def wind_velocity_number(u, v):
    return _wind_velocity(ee.Number(u), ee.Number(v))


def hot_dry_windy_index(vpd, wind):
    """ Hot-dry-windy index (Srock et al. 2018) https://www.mdpi.com/2073-4433/9/7/279

    vpd: ee.Image
        Vapor pressure deficit.

    wind: ee.Image
        Maximum wind speed.

    returns: ee.Image
        Band 'HDWI'
    """
    return _hot_dry_windy_index(ee.Image(vpd), ee.Image(wind)).rename('HDWI')


def hot_dry_windy_index_number(vpd, wind):
    return _hot_dry_windy_index(ee.Number(vpd), ee.Number(wind))
