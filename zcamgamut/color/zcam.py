"""
The ZCAM color appearance model.

See `ZCAM, a colour appearance model based on a high dynamic range uniform
colour space <https://doi.org/10.1364/OE.413659>`_. ZCAM builds on Izazbz and
computes ten appearance attributes for a color under given viewing conditions.
This module implements the forward model from absolute XYZ, the inverse model
from any sufficient subset of attributes, and the conversions from and to sRGB
used for gamut mapping.

sRGB colors are displayed with a white luminance of 100 cd/m² and adapted to
the viewing conditions' white point.
"""
import math
from typing import TypeAlias

from .adaptation import xyz_chromatic_adaptation, xyz_chromatic_adaptation_inverse
from .conversion import (
    linear_srgb_in_gamut,
    linear_srgb_to_xyz,
    srgb_to_linear_srgb,
    xyz_to_linear_srgb,
)
from .jzazbz import izazbz_to_xyz, xyz_to_izazbz
from .search import bisect_boundary, golden_section_max
from .spec import (
    CuspPoint,
    MissingAttributeError,
    PerceptualColor,
    Surround,
    ViewingConditions,
)


_Vector: TypeAlias = tuple[float, float, float]

DEFAULT_VIEWING = ViewingConditions.create(
    surround=Surround.DIM, Yb=20, La=100, Yw=100
)
"""Dim surround, 100 cd/m² white and adapting field, 20% background."""

SRGB_WHITE_LUMINANCE = 100.0

_D65 = (95.047, 100.0, 108.883)

# Unique hues for hue quadrature: angle, eccentricity, quadrature
_HUE_DATA = (
    (33.44, 0.68, 0.0),
    (89.29, 0.64, 100.0),
    (146.30, 1.52, 200.0),
    (238.36, 0.77, 300.0),
    (393.44, 0.68, 400.0),
)

_HUES = ('hue', 'quadrature')
_ACHROMATIC = ('lightness', 'brightness')
_CHROMATIC = (
    'chroma', 'colorfulness', 'saturation', 'vividness', 'blackness', 'whiteness'
)


# --------------------------------------------------------------------------------------
# Hue


def hue_quadrature(hue: float) -> float:
    """Compute the hue quadrature H_z for the hue angle h_z in degrees."""
    h = hue % 360
    if h < _HUE_DATA[0][0]:
        h += 360
    for (h0, e0, H0), (h1, e1, _) in zip(_HUE_DATA, _HUE_DATA[1:]):
        if h < h1:
            t = (h - h0) / e0
            return H0 + 100 * t / (t + (h1 - h) / e1)
    raise AssertionError(f'unreachable hue {hue}')


def hue_from_quadrature(quadrature: float) -> float:
    """Compute the hue angle h_z in degrees for the hue quadrature H_z."""
    H = quadrature % 400
    i = min(int(H // 100), 3)
    (h0, e0, H0), (h1, e1, _) = _HUE_DATA[i], _HUE_DATA[i + 1]
    t = (H - H0) / 100
    h = (t * e0 * h1 + (1 - t) * e1 * h0) / ((1 - t) * e1 + t * e0)
    return h % 360


def _eccentricity(hue: float) -> float:
    return 1.015 + math.cos(math.radians(89.038 + hue % 360))


# --------------------------------------------------------------------------------------
# Forward model


def xyz_to_zcam(
    X: float, Y: float, Z: float, viewing: ViewingConditions = DEFAULT_VIEWING
) -> PerceptualColor:
    """
    Compute all appearance attributes for the given absolute XYZ color seen
    under the viewing conditions.
    """
    xyz = xyz_chromatic_adaptation((X, Y, Z), viewing.white, _D65, viewing.D)
    Iz, az, bz = xyz_to_izazbz(*xyz)

    hue = math.degrees(math.atan2(bz, az)) % 360
    brightness = viewing.Qz_multiplier * max(Iz, 0.0) ** viewing.Qz_exponent
    colorfulness = (
        100 * (az * az + bz * bz) ** 0.37
        * _eccentricity(hue) ** 0.068 * viewing.FL ** 0.2
        / (viewing.Fb ** 0.1 * viewing.Iz_w ** 0.78)
    )
    return _derive(
        viewing, hue, 100 * brightness / viewing.Qz_w, brightness,
        100 * colorfulness / viewing.Qz_w, colorfulness,
    )


def _derive(
    viewing: ViewingConditions,
    hue: float,
    lightness: float,
    brightness: float,
    chroma: float,
    colorfulness: float,
) -> PerceptualColor:
    if brightness > 0:
        saturation = 100 * viewing.FL ** 0.6 * math.sqrt(colorfulness / brightness)
    else:
        saturation = 0.0

    return PerceptualColor(
        hue=hue,
        quadrature=hue_quadrature(hue),
        lightness=lightness,
        brightness=brightness,
        chroma=chroma,
        colorfulness=colorfulness,
        saturation=saturation,
        vividness=math.sqrt((lightness - 58) ** 2 + 3.4 * chroma ** 2),
        blackness=100 - 0.8 * math.sqrt(lightness ** 2 + 8 * chroma ** 2),
        whiteness=100 - math.sqrt((100 - lightness) ** 2 + chroma ** 2),
    )


# --------------------------------------------------------------------------------------
# Attribute normalization


def complete(
    color: PerceptualColor, viewing: ViewingConditions = DEFAULT_VIEWING
) -> PerceptualColor:
    """
    Fill in all missing appearance attributes.

    The color needs one attribute from each of three groups: hue or
    quadrature; lightness or brightness; and chroma, colorfulness, saturation,
    vividness, blackness, or whiteness. Attributes are consulted in that
    order. The result is computed from the first available attribute in each
    group, so inconsistent redundant attributes are replaced.

    Raises:
        MissingAttributeError: if one of the groups has no attribute
    """
    if color.hue is not None:
        hue = color.hue
    elif color.quadrature is not None:
        hue = hue_from_quadrature(color.quadrature)
    else:
        raise MissingAttributeError('a hue', _HUES)

    if color.lightness is not None:
        lightness = color.lightness
        brightness = lightness * viewing.Qz_w / 100
    elif color.brightness is not None:
        brightness = color.brightness
        lightness = 100 * brightness / viewing.Qz_w
    else:
        raise MissingAttributeError('an achromatic attribute', _ACHROMATIC)

    if color.chroma is not None:
        chroma = color.chroma
    elif color.colorfulness is not None:
        chroma = 100 * color.colorfulness / viewing.Qz_w
    elif color.saturation is not None:
        colorfulness = (color.saturation / (100 * viewing.FL ** 0.6)) ** 2 * brightness
        chroma = 100 * colorfulness / viewing.Qz_w
    elif color.vividness is not None:
        chroma = math.sqrt(max(color.vividness ** 2 - (lightness - 58) ** 2, 0) / 3.4)
    elif color.blackness is not None:
        chroma = math.sqrt(max(((100 - color.blackness) / 0.8) ** 2 - lightness ** 2, 0) / 8)
    elif color.whiteness is not None:
        chroma = math.sqrt(max((100 - color.whiteness) ** 2 - (100 - lightness) ** 2, 0))
    else:
        raise MissingAttributeError('a colorfulness attribute', _CHROMATIC)

    return _derive(
        viewing, hue, lightness, brightness, chroma, chroma * viewing.Qz_w / 100
    )


# --------------------------------------------------------------------------------------
# Inverse model


def _jch_to_izazbz(
    hue: float, lightness: float, chroma: float, viewing: ViewingConditions
) -> _Vector:
    brightness = lightness * viewing.Qz_w / 100
    Iz = (max(brightness, 0.0) / viewing.Qz_multiplier) ** (1 / viewing.Qz_exponent)
    colorfulness = max(chroma, 0.0) * viewing.Qz_w / 100
    radius = (
        colorfulness * viewing.Iz_w ** 0.78 * viewing.Fb ** 0.1
        / (100 * _eccentricity(hue) ** 0.068 * viewing.FL ** 0.2)
    ) ** (1 / 0.37 / 2)
    h = math.radians(hue)
    return Iz, radius * math.cos(h), radius * math.sin(h)


def zcam_to_xyz(
    color: PerceptualColor, viewing: ViewingConditions = DEFAULT_VIEWING
) -> _Vector:
    """Convert the appearance attributes to absolute XYZ."""
    color = complete(color, viewing)
    assert color.hue is not None and color.lightness is not None
    assert color.chroma is not None
    xyz = izazbz_to_xyz(*_jch_to_izazbz(color.hue, color.lightness, color.chroma, viewing))
    return xyz_chromatic_adaptation_inverse(xyz, viewing.white, _D65, viewing.D)


def jch_to_linear_srgb(
    hue: float,
    lightness: float,
    chroma: float,
    viewing: ViewingConditions = DEFAULT_VIEWING,
) -> _Vector:
    """
    Convert hue, lightness, and chroma to linear sRGB. This is the inner loop
    of all gamut searches and hence avoids creating intermediate colors.
    """
    xyz = izazbz_to_xyz(*_jch_to_izazbz(hue, lightness, chroma, viewing))
    xyz = xyz_chromatic_adaptation_inverse(xyz, viewing.white, _D65, viewing.D)
    xyz = xyz_chromatic_adaptation_inverse(xyz, _D65, viewing.white)
    X, Y, Z = (c / SRGB_WHITE_LUMINANCE for c in xyz)
    return xyz_to_linear_srgb(X, Y, Z)


def zcam_to_linear_srgb(
    color: PerceptualColor, viewing: ViewingConditions = DEFAULT_VIEWING
) -> _Vector:
    """Convert the appearance attributes to linear sRGB."""
    color = complete(color, viewing)
    assert color.hue is not None and color.lightness is not None
    assert color.chroma is not None
    return jch_to_linear_srgb(color.hue, color.lightness, color.chroma, viewing)


def srgb_to_zcam(
    r: float, g: float, b: float, viewing: ViewingConditions = DEFAULT_VIEWING
) -> PerceptualColor:
    """Compute the appearance attributes for the sRGB color."""
    X, Y, Z = (
        SRGB_WHITE_LUMINANCE * c
        for c in linear_srgb_to_xyz(*srgb_to_linear_srgb(r, g, b))
    )
    xyz = xyz_chromatic_adaptation((X, Y, Z), _D65, viewing.white)
    return xyz_to_zcam(*xyz, viewing)


# --------------------------------------------------------------------------------------
# Cusps


def find_cusp(
    hue: float,
    eps: float = 1e-5,
    chroma_max: float = 101,
    viewing: ViewingConditions = DEFAULT_VIEWING,
) -> CuspPoint:
    """
    Find the cusp for the hue, i.e., the lightness with the largest chroma
    still inside the sRGB gamut. The search is a golden-section search over
    lightness, whose objective is a bisection over chroma.
    """
    def max_chroma(lightness: float) -> float:
        return bisect_boundary(
            lambda c: linear_srgb_in_gamut(*jch_to_linear_srgb(hue, lightness, c, viewing)),
            0, chroma_max, eps,
        )

    extremum = golden_section_max(max_chroma, 0, 100, eps)
    return CuspPoint(hue, extremum.x, extremum.y)
