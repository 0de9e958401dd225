"""
Chromatic adaptation with the CIECAM02 CAT02 transform.

The luminance ratio between the two white points deviates from the published
transform, which scales by the source white's luminance only. Without the
ratio, adapting absolute colors to a relative reference white does not invert
cleanly. See `Some concerns regarding the CAT16 chromatic adaptation transform
<https://lirias.kuleuven.be/retrieve/552107>`_.
"""
from typing import TypeAlias

from .conversion import _multiply


_Vector: TypeAlias = tuple[float, float, float]

# The CIECAM02 color appearance model; https://scholarworks.rit.edu/other/143

_CAT02 = (
	( +0.7328, +0.4296, -0.1624 ),
	( -0.7036, +1.6975, +0.0061 ),
	( +0.0030, +0.0136, +0.9834 ),
)

_CAT02_INVERSE = (
	( +1.096123820835514e0,  -2.788690002182872e-1, +1.827451793827731e-1 ),
	( +4.543690419753592e-1, +4.735331543074117e-1, +7.20978037172291e-2  ),
	( -9.627608738429352e-3, -5.698031216113419e-3, +1.015325639954543e0  ),
)


def xyz_chromatic_adaptation(
    xyz: _Vector,
    w_prev: _Vector,
    w_ref: _Vector,
    D: float = 1.0,
) -> _Vector:
    """
    Adapt the XYZ color from the current white point ``w_prev`` to the
    reference white point ``w_ref``.

    Args:
        xyz: is the color relative to ``w_prev``
        w_prev: is the current white point
        w_ref: is the new reference white point
        D: is the degree of adaptation between 0 and 1
    Returns:
        the color relative to ``w_ref``
    """
    if not 0.0 <= D <= 1.0:
        raise ValueError(f'degree of adaptation {D} is not between 0 and 1')
    if w_prev == w_ref:
        return xyz

    ratio = w_prev[1] / w_ref[1]
    lms_w = _multiply(_CAT02, w_prev)
    lms_wr = _multiply(_CAT02, w_ref)
    lms = _multiply(_CAT02, xyz)
    lms_c = tuple(
        (ratio * wr / w * D + 1 - D) * c for c, w, wr in zip(lms, lms_w, lms_wr)
    )
    return _multiply(_CAT02_INVERSE, lms_c)  # type: ignore[arg-type]


def xyz_chromatic_adaptation_inverse(
    xyz: _Vector,
    w_prev: _Vector,
    w_ref: _Vector,
    D: float = 1.0,
) -> _Vector:
    """
    Undo :func:`xyz_chromatic_adaptation`, i.e., convert a color relative to
    ``w_ref`` back to one relative to ``w_prev``.
    """
    if not 0.0 <= D <= 1.0:
        raise ValueError(f'degree of adaptation {D} is not between 0 and 1')
    if w_prev == w_ref:
        return xyz

    ratio = w_prev[1] / w_ref[1]
    lms_w = _multiply(_CAT02, w_prev)
    lms_wr = _multiply(_CAT02, w_ref)
    lms_c = _multiply(_CAT02, xyz)
    lms = tuple(
        c / (ratio * wr / w * D + 1 - D) for c, w, wr in zip(lms_c, lms_w, lms_wr)
    )
    return _multiply(_CAT02_INVERSE, lms)  # type: ignore[arg-type]
