"""
Basic type declarations for appearance attributes, viewing conditions, and the
gamut engine:

  * ``Surround`` enumerates the three CIE surround classes together with their
    ZCAM surround factor and CIECAM02 adaptation factor
  * ``ViewingConditions`` bundles white point, background, adapting luminance,
    and surround with the coefficients derived from them
  * ``PerceptualColor`` is a partial record of ZCAM appearance attributes
  * ``CuspPoint`` is the point of maximum chroma at a fixed hue
  * ``BuildStep`` reports progress of the incremental boundary build
  * ``GamutConfig`` holds the tolerances and budgets for the gamut engine

All container types are immutable.
"""
import dataclasses
import enum
import math
from collections.abc import Callable
from typing import Self, TypeAlias


FloatCoordinateSpec: TypeAlias = tuple[float, float, float]

DumpSpec: TypeAlias = Callable[[str, str], None]
"""A callback receiving a file name and ``x y`` text for offline plotting."""


class ConvergenceError(ArithmeticError):
    """
    An iterative search did not converge within its iteration limit. That
    signals a misuse, i.e., a function with more than one extremum inside the
    bracket, and is never retried.
    """
    def __init__(self, lo: float, hi: float, eps: float) -> None:
        super().__init__(
            f'search did not converge on [{lo}, {hi}] with epsilon {eps}'
        )
        self.lo = lo
        self.hi = hi
        self.eps = eps


class MissingAttributeError(ValueError):
    """A perceptual color lacks the attributes needed to reconstruct it."""
    def __init__(self, axis: str, alternatives: tuple[str, ...]) -> None:
        names = ', '.join(alternatives)
        super().__init__(f'color requires {axis}, i.e., one of {names}')
        self.axis = axis
        self.alternatives = alternatives


class Surround(enum.Enum):
    """
    The surround of the viewing field. Each value pairs the ZCAM surround
    factor F_s with the CIECAM02 factor F for the degree of adaptation.
    """
    DARK = (0.525, 0.8)
    DIM = (0.59, 0.9)
    AVERAGE = (0.69, 1.0)

    @property
    def Fs(self) -> float:
        return self.value[0]

    @property
    def F(self) -> float:
        return self.value[1]


@dataclasses.dataclass(frozen=True, slots=True)
class ViewingConditions:
    """
    The viewing conditions for the ZCAM appearance model.

    Attributes:
        surround: is the surround class
        Yb: is the background luminance factor
        La: is the luminance of the adapting field in cd/m²
        white: is the absolute white point in cd/m²
        Fb: is the background factor
        FL: is the luminance level adaptation factor
        D: is the degree of adaptation
        Iz_w: is the achromatic response of the white point
        Qz_w: is the brightness of the white point
        Qz_exponent: is the exponent applied to I_z for brightness
        Qz_multiplier: is the multiplier applied for brightness

    Use :meth:`create` to compute the derived coefficients. Instances are
    cheap to share since they are never mutated.
    """
    surround: Surround
    Yb: float
    La: float
    white: FloatCoordinateSpec
    Fb: float
    FL: float
    D: float
    Iz_w: float
    Qz_w: float
    Qz_exponent: float
    Qz_multiplier: float

    @property
    def Fs(self) -> float:
        return self.surround.Fs

    @property
    def Yw(self) -> float:
        return self.white[1]

    @classmethod
    def create(
        cls,
        *,
        surround: Surround = Surround.AVERAGE,
        Yb: float = 20,
        La: float = 4,
        Yw: float = 203,
        white: FloatCoordinateSpec = (95.047, 100.0, 108.883),
    ) -> Self:
        """
        Create new viewing conditions. The defaults follow ITU-R BT.2408 with
        HDR reference white at 203 cd/m², 20% background reflectance, and a
        dim adapting field. The relative ``white`` is scaled to ``Yw``.
        """
        if Yb <= 0 or La <= 0 or Yw <= 0:
            raise ValueError(
                f'viewing conditions need positive Yb, La, Yw, not {Yb}, {La}, {Yw}'
            )

        from .jzazbz import xyz_to_izazbz

        Yw = float(Yw)
        scale = Yw / white[1]
        Xw, _, Zw = (c * scale for c in white)
        Fs = surround.Fs
        Fb = math.sqrt(Yb / Yw)
        FL = 0.171 * math.cbrt(La) * (1 - math.exp(-48 / 9 * La))
        D = surround.F * (1 - 1 / 3.6 * math.exp((-La - 42) / 92))
        D = min(max(D, 0.0), 1.0)
        Iz_w, _, _ = xyz_to_izazbz(Xw, Yw, Zw)
        Qz_exponent = 1.6 * Fs / Fb ** 0.12
        Qz_multiplier = 2700 * Fs ** 2.2 * Fb ** 0.5 * FL ** 0.2
        Qz_w = Qz_multiplier * Iz_w ** Qz_exponent

        return cls(
            surround, Yb, La, (Xw, Yw, Zw), Fb, FL, D, Iz_w, Qz_w,
            Qz_exponent, Qz_multiplier
        )


@dataclasses.dataclass(frozen=True, slots=True)
class PerceptualColor:
    """
    A color described by ZCAM appearance attributes.

    Attributes:
        hue: is the hue angle h_z in degrees
        quadrature: is the hue quadrature H_z
        lightness: is J_z
        brightness: is Q_z
        chroma: is C_z
        colorfulness: is M_z
        saturation: is S_z
        vividness: is V_z
        blackness: is K_z
        whiteness: is W_z

    Not all attributes need to be present. A color is complete enough to be
    converted back to XYZ if it has one hue attribute, one achromatic
    attribute, and one attribute along the colorfulness axis. The
    :func:`.zcam.complete` function fills in the remaining attributes.
    """
    hue: None | float = None
    quadrature: None | float = None
    lightness: None | float = None
    brightness: None | float = None
    chroma: None | float = None
    colorfulness: None | float = None
    saturation: None | float = None
    vividness: None | float = None
    blackness: None | float = None
    whiteness: None | float = None

    def replace(self, **changes: None | float) -> Self:
        return dataclasses.replace(self, **changes)

    def is_complete(self) -> bool:
        return all(getattr(self, f.name) is not None for f in dataclasses.fields(self))


@dataclasses.dataclass(frozen=True, slots=True)
class CuspPoint:
    """The point of maximum chroma within gamut for a hue."""
    hue: float
    lightness: float
    chroma: float

    def to_color(self) -> PerceptualColor:
        return PerceptualColor(
            hue=self.hue, lightness=self.lightness, chroma=self.chroma
        )


@dataclasses.dataclass(frozen=True, slots=True)
class BuildStep:
    """
    A unit of work completed by the incremental boundary build.

    Attributes:
        stage: is one of ``extrema``, ``samples``, ``lightness``, ``chroma``
        done: is the number of completed items in the stage
        total: is the number of items in the stage
    """
    stage: str
    done: int
    total: int


@dataclasses.dataclass(frozen=True, slots=True)
class GamutConfig:
    """
    The configuration for the gamut engine.

    Attributes:
        cusp_epsilon: is the accuracy for cusp samples
        extremum_epsilon: is the accuracy in degrees for the hue extrema,
            which determine the spline segmentation
        spline_epsilon: is the maximum residual for spline fitting
        segment_points: is the control point budget per spline segment
        hue_step: is the distance between equidistant hue samples
        batch_size: is the number of cusp samples per build step
        cache_bytes: is the memory budget for the chroma cache; zero
            disables the cache
        dump: is an optional callback for ``x y`` debug output
    """
    cusp_epsilon: float = 1e-5
    extremum_epsilon: float = 1e-7
    spline_epsilon: float = 1e-3
    segment_points: int = 37
    hue_step: float = 0.5
    batch_size: int = 32
    cache_bytes: int = 0
    dump: None | DumpSpec = None

    def __post_init__(self) -> None:
        if self.batch_size < 1 or self.batch_size > 32:
            raise ValueError(f'batch size {self.batch_size} is not between 1 and 32')
        if self.segment_points < 2:
            raise ValueError(f'segment needs at least 2 points, not {self.segment_points}')
        if self.hue_step <= 0:
            raise ValueError(f'hue step {self.hue_step} is not positive')
        if self.cache_bytes < 0:
            raise ValueError(f'cache budget {self.cache_bytes} is negative')
