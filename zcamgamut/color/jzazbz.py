"""
The Jzazbz color space and its Izazbz variant used by ZCAM. Both operate on
absolute XYZ for a D65 white point, i.e., Y is luminance in cd/m².

See `Perceptually uniform color space for image signals including high dynamic
range and wide gamut <https://doi.org/10.1364/OE.25.015131>`_.
"""
import math

from .conversion import _multiply


_B = 1.15
_G = 0.66
_D = -0.56
_D0 = 1.6295499532821566e-11
_IZ_EPSILON = 3.7035226210190005e-11

_ETA = 2610 / 2**14
_RHO = 1.7 * 2523 / 2**5
_C1 = 3424 / 2**12
_C2 = 2413 / 2**7
_C3 = 2392 / 2**7

_XYZ_TO_LMS = (
	(  0.41478972, 0.579999, 0.0146480 ),
	( -0.2015100,  1.120649, 0.0531008 ),
	( -0.0166008,  0.264800, 0.6684799 ),
)

_LMS_TO_XYZ = (
	(  1.9242264357876069,   -1.0047923125953657,   0.037651404030618014 ),
	(  0.35031676209499912,   0.72648119393165533, -0.065384422948085025 ),
	( -0.090982810982847592, -0.31272829052307399,  1.5227665613052606   ),
)


def _pq(value: float) -> float:
    vη = math.pow(max(value, 0.0) / 10000, _ETA)
    return math.pow((_C1 + _C2 * vη) / (1 + _C3 * vη), _RHO)


def _pq_inverse(value: float) -> float:
    vρ = math.pow(max(value, 0.0), 1 / _RHO)
    base = (_C1 - vρ) / (_C3 * vρ - _C2)
    return 10000 * math.pow(max(base, 0.0), 1 / _ETA)


def _xyz_to_lms(X: float, Y: float, Z: float) -> tuple[float, float, float]:
    Xp = _B * X - (_B - 1) * Z
    Yp = _G * Y - (_G - 1) * X
    L, M, S = _multiply(_XYZ_TO_LMS, (Xp, Yp, Z))
    return _pq(L), _pq(M), _pq(S)


def _lms_to_xyz(L: float, M: float, S: float) -> tuple[float, float, float]:
    Xp, Yp, Z = _multiply(_LMS_TO_XYZ, (_pq_inverse(L), _pq_inverse(M), _pq_inverse(S)))
    X = (Xp + (_B - 1) * Z) / _B
    Y = (Yp + (_G - 1) * X) / _G
    return X, Y, Z


def _opponents(L: float, M: float, S: float) -> tuple[float, float]:
    az = 3.524000 * L - 4.066708 * M + 0.542708 * S
    bz = 0.199076 * L + 1.096799 * M - 1.295875 * S
    return az, bz


# --------------------------------------------------------------------------------------
# Jzazbz


def xyz_to_jzazbz(X: float, Y: float, Z: float) -> tuple[float, float, float]:
    """Convert the given color from absolute XYZ to Jzazbz."""
    L, M, S = _xyz_to_lms(X, Y, Z)
    az, bz = _opponents(L, M, S)
    Iz = 0.5 * (L + M)
    Jz = (1 + _D) * Iz / (1 + _D * Iz) - _D0
    return Jz, az, bz


def jzazbz_to_xyz(Jz: float, az: float, bz: float) -> tuple[float, float, float]:
    """Convert the given color from Jzazbz to absolute XYZ."""
    Jzd0 = Jz + _D0
    Iz = Jzd0 / (1 + _D - _D * Jzd0)
    L = Iz + 0.13860504327153927 * az + 0.058047316156118862 * bz
    M = Iz - 0.13860504327153927 * az - 0.058047316156118862 * bz
    S = Iz - 0.096019242026318938 * az - 0.81189189605603884 * bz
    return _lms_to_xyz(L, M, S)


# --------------------------------------------------------------------------------------
# Izazbz


def xyz_to_izazbz(X: float, Y: float, Z: float) -> tuple[float, float, float]:
    """
    Convert the given color from absolute XYZ to Izazbz, which replaces the
    lightness of Jzazbz with the achromatic response G' - ε.
    """
    L, M, S = _xyz_to_lms(X, Y, Z)
    az, bz = _opponents(L, M, S)
    return M - _IZ_EPSILON, az, bz


def izazbz_to_xyz(Iz: float, az: float, bz: float) -> tuple[float, float, float]:
    """Convert the given color from Izazbz to absolute XYZ."""
    G = Iz + _IZ_EPSILON
    # Solve the opponent equations for L and S given M = G
    #   3.524000 L + 0.542708 S = az + 4.066708 G
    #   0.199076 L - 1.295875 S = bz - 1.096799 G
    u = az + 4.066708 * G
    v = bz - 1.096799 * G
    det = 3.524000 * -1.295875 - 0.542708 * 0.199076
    L = (u * -1.295875 - 0.542708 * v) / det
    S = (3.524000 * v - 0.199076 * u) / det
    return _lms_to_xyz(L, G, S)
