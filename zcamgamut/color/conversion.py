"""
Conversion between sRGB, linear sRGB, and relative XYZ as well as the gamut
tests used by the gamut engine. XYZ is relative, i.e., white has Y = 1. The
appearance models scale it to absolute luminance.
"""
import math
from typing import cast, TypeAlias


# See https://github.com/color-js/color.js/blob/a77e080a070039c534dda3965a769675aac5f75e/src/spaces/srgb-linear.js

_XYZ_TO_LINEAR_SRGB = (
	(  3.2409699419045226,  -1.537383177570094,   -0.4986107602930034  ),
	( -0.9692436362808796,   1.8759675015077202,   0.04155505740717559 ),
	(  0.05563007969699366, -0.20397695888897652,  1.0569715142428786  ),
)

_LINEAR_SRGB_TO_XYZ = (
	( 0.41239079926595934, 0.357584339383878,   0.1804807884018343  ),
	( 0.21263900587151027, 0.715168678767756,   0.07219231536073371 ),
	( 0.01933081871559182, 0.11919477979462598, 0.9505321522496607  ),
)

# Half an 8-bit quantization step, once in the companded domain
_HALF_STEP = 0.5 / 255
_EPSILON = 1e-12


_Vector: TypeAlias = tuple[float, float, float]
_Matrix: TypeAlias = tuple[_Vector, _Vector, _Vector]

def _multiply(matrix: _Matrix, vector: _Vector) -> _Vector:
    return cast(
        _Vector,
        tuple(sum(r * c for r, c in zip(row, vector)) for row in matrix)
    )


# --------------------------------------------------------------------------------------
# Hexadecimal notation


def parse_hex(color: str) -> tuple[float, float, float]:
    """Parse the string specifying a color in hashed hexadecimal format."""
    text = color.strip()
    if not text.startswith('#'):
        raise ValueError(f'hex web color "{color}" does not start with "#"')
    text = text[1:]
    if len(text) not in (3, 6):
        raise ValueError(f'hex web color "{color}" does not have 3 or 6 digits')
    if len(text) == 3:
        text = ''.join(f'{d}{d}' for d in text)
    try:
        r, g, b = (int(text[n:n+2], base=16) for n in range(0, 6, 2))
    except ValueError:
        raise ValueError(f'hex web color "{color}" is malformed') from None
    return r / 255.0, g / 255.0, b / 255.0


def srgb_to_hex(r: float, g: float, b: float) -> str:
    """
    Format the sRGB color in hashed hexadecimal format. Coordinates are
    clipped to the unit range first.
    """
    def convert(value: float) -> str:
        return f'{int(255 * min(max(value, 0.0), 1.0) + 0.5):02x}'

    return f'#{convert(r)}{convert(g)}{convert(b)}'


# --------------------------------------------------------------------------------------
# sRGB and Linear sRGB
# See https://github.com/color-js/color.js/blob/a77e080a070039c534dda3965a769675aac5f75e/src/spaces/srgb.js


def srgb_to_linear_srgb(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert the given color from sRGB to linear sRGB."""
    def convert(value: float) -> float:
        magnitude = math.fabs(value)

        if magnitude <= 0.04045:
            return value / 12.92

        return math.copysign(math.pow((magnitude + 0.055) / 1.055, 2.4), value)

    return convert(r), convert(g), convert(b)


def linear_srgb_to_srgb(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert the given color from linear sRGB to sRGB."""
    def convert(value: float) -> float:
        magnitude = math.fabs(value)

        if magnitude <= 0.0031308:
            return value * 12.92

        return math.copysign(math.pow(magnitude, 1/2.4) * 1.055 - 0.055, value)

    return convert(r), convert(g), convert(b)


def linear_srgb_to_xyz(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert the given color from linear sRGB to relative XYZ."""
    return _multiply(_LINEAR_SRGB_TO_XYZ, (r, g, b))


def xyz_to_linear_srgb(X: float, Y: float, Z: float) -> tuple[float, float, float]:
    """Convert the given color from relative XYZ to linear sRGB."""
    return _multiply(_XYZ_TO_LINEAR_SRGB, (X, Y, Z))


# --------------------------------------------------------------------------------------
# Gamut


def linear_srgb_in_gamut(r: float, g: float, b: float) -> bool:
    """
    Determine whether the linear sRGB color lies within the unit cube. The
    test tolerates floating point noise but nothing more.
    """
    return all(-_EPSILON <= c <= 1 + _EPSILON for c in (r, g, b))


def linear_srgb_in_8bit_gamut(r: float, g: float, b: float) -> bool:
    """
    Determine whether the linear sRGB color rounds to a valid 24-bit color.
    That is the case if its companded coordinates are within half a
    quantization step of the unit range.
    """
    return all(
        -_HALF_STEP <= c <= 1 + _HALF_STEP for c in linear_srgb_to_srgb(r, g, b)
    )
