"""
Support for gamut mapping in ZCAM.

The boundary of the sRGB gamut in ZCAM has no closed form. Finding the
largest chroma for a hue and lightness requires a bisection over chroma, and
finding the cusp for a hue requires a golden-section search over lightness of
such bisections. This module's :class:`Gamut` performs those searches once
across the hue circle and fits two splines, one for cusp lightness and one for
cusp chroma. Afterwards, cusps are a spline evaluation away and boundary
searches start from tight brackets.

Building the splines takes a few thousand cusp searches. To avoid blocking an
event loop, :meth:`Gamut.build_steps` performs the build incrementally and
yields after each bounded unit of work. :meth:`Gamut.build_boundary` and
:meth:`Gamut.build_boundary_async` drive it to completion.
"""
import asyncio
from collections.abc import Iterator
import logging
import math

from .conversion import (
    linear_srgb_in_8bit_gamut,
    linear_srgb_in_gamut,
    linear_srgb_to_srgb,
    parse_hex,
)
from .hashtable import Float64Table, pack_key
from .search import bisect_inside, golden_section_extremum
from .spec import (
    BuildStep,
    CuspPoint,
    GamutConfig,
    PerceptualColor,
    ViewingConditions,
)
from .spline import SegmentedSpline, dump_spline, format_points, iter_spline_segments
from .zcam import (
    DEFAULT_VIEWING,
    complete,
    find_cusp,
    jch_to_linear_srgb,
    srgb_to_zcam,
    zcam_to_linear_srgb,
)


logger = logging.getLogger(__name__)

HUE_GUESSES = (42, 102, 133, 204, 258, 321, 402)
"""
Rough hues for the extrema of cusp lightness, alternating between minima and
maxima. They are close to red, yellow, green, cyan, blue, magenta, and red
again, i.e., the corners of the RGB cube.
"""

HUE_WINDOW = 22
"""The distance in degrees searched on either side of each guess."""

CHROMA_LIMIT = 101
"""The upper bound for chroma searches without cusp information."""

SLOT_BYTES = 12


def sample_hues(extrema: list[float], step: float, offset: float) -> list[float]:
    """
    Determine the hues for sampling cusps. They include the extrema, points at
    doubling offsets on either side of each extremum, and equidistant points.
    The offsets start well above the cusp accuracy, so that samples near an
    extremum are not perturbed by search inaccuracy.
    """
    first, last = extrema[0], extrema[-1]
    hues = set(extrema)

    for x in extrema:
        d = offset
        while d < step:
            hues.add(x - d)
            hues.add(x + d)
            d *= 2

    for i in range(math.ceil(first / step), math.floor(last / step) + 1):
        hues.add(i * step)

    return sorted(h for h in hues if first <= h <= last)


class Gamut:
    """
    The sRGB gamut for ZCAM under some viewing conditions.

    Args:
        viewing: are the viewing conditions
        config: are the tolerances and budgets

    All query methods work before the boundary is built, albeit more slowly.
    """

    def __init__(
        self,
        viewing: ViewingConditions = DEFAULT_VIEWING,
        config: GamutConfig = GamutConfig(),
    ) -> None:
        self._viewing = viewing
        self._config = config
        self._extrema: tuple[float, ...] = ()
        self._lightness_spline: None | SegmentedSpline = None
        self._chroma_spline: None | SegmentedSpline = None
        self._min_chroma = math.nan
        self._max_chroma = math.nan
        self._cache: None | Float64Table = None

    @property
    def viewing(self) -> ViewingConditions:
        return self._viewing

    @property
    def config(self) -> GamutConfig:
        return self._config

    @property
    def is_built(self) -> bool:
        return self._chroma_spline is not None

    @property
    def extrema(self) -> tuple[float, ...]:
        """The hues of the extrema of cusp lightness, empty before building."""
        return self._extrema

    @property
    def lightness_spline(self) -> None | SegmentedSpline:
        return self._lightness_spline

    @property
    def chroma_spline(self) -> None | SegmentedSpline:
        return self._chroma_spline

    @property
    def min_chroma(self) -> float:
        """The smallest cusp chroma amongst control points, NaN before building."""
        return self._min_chroma

    @property
    def max_chroma(self) -> float:
        """The largest cusp chroma amongst control points, NaN before building."""
        return self._max_chroma

    @property
    def cache(self) -> None | Float64Table:
        return self._cache

    # ----------------------------------------------------------------------------------
    # Colors

    def zcam(self, color: str | tuple[float, float, float]) -> PerceptualColor:
        """Compute the appearance attributes of a hex or sRGB color."""
        r, g, b = parse_hex(color) if isinstance(color, str) else color
        return srgb_to_zcam(r, g, b, self._viewing)

    def describe(self, color: PerceptualColor | CuspPoint) -> PerceptualColor:
        """Fill in all appearance attributes."""
        if isinstance(color, CuspPoint):
            color = color.to_color()
        return complete(color, self._viewing)

    def contains(self, color: PerceptualColor) -> tuple[float, float, float, bool]:
        """
        Convert the color to sRGB and determine whether it is within the 24-bit
        sRGB gamut.
        """
        linear = zcam_to_linear_srgb(color, self._viewing)
        r, g, b = linear_srgb_to_srgb(*linear)
        return r, g, b, linear_srgb_in_8bit_gamut(*linear)

    def inside(self, color: PerceptualColor) -> bool:
        """Determine whether the color is within the 24-bit sRGB gamut."""
        return linear_srgb_in_8bit_gamut(*zcam_to_linear_srgb(color, self._viewing))

    def _in_gamut(self, hue: float, lightness: float, chroma: float) -> bool:
        return linear_srgb_in_gamut(
            *jch_to_linear_srgb(hue, lightness, chroma, self._viewing)
        )

    # ----------------------------------------------------------------------------------
    # Building the boundary

    def build_steps(self) -> Iterator[BuildStep]:
        """
        Build the gamut boundary incrementally. This method returns a generator
        that performs one bounded unit of work per iteration: a search for one
        extremum, a batch of cusp samples, or a spline segment. Once the
        generator is exhausted, the boundary is built. If it already is, the
        generator finishes immediately.
        """
        if self.is_built:
            return

        config = self._config
        viewing = self._viewing
        dump = config.dump

        def cusp(hue: float) -> CuspPoint:
            return find_cusp(hue, config.cusp_epsilon, CHROMA_LIMIT, viewing)

        # Find hues with exact extrema of cusp lightness
        extrema: list[float] = []
        for index, guess in enumerate(HUE_GUESSES):
            extremum = golden_section_extremum(
                lambda h: cusp(h).lightness,
                guess - HUE_WINDOW,
                guess + HUE_WINDOW,
                want_min=index % 2 == 0,
                eps=config.extremum_epsilon,
            )
            extrema.append(extremum.x)
            logger.debug('cusp lightness extremum %.3f at hue %.7f', extremum.y, extremum.x)
            yield BuildStep('extrema', index + 1, len(HUE_GUESSES))

        # Sample cusps
        hues = sample_hues(extrema, config.hue_step, 100 * config.cusp_epsilon)
        lightness: list[float] = []
        chroma: list[float] = []
        for start in range(0, len(hues), config.batch_size):
            for hue in hues[start:start + config.batch_size]:
                point = cusp(hue)
                lightness.append(point.lightness)
                chroma.append(point.chroma)
            yield BuildStep('samples', len(lightness), len(hues))
        logger.debug('sampled %d cusps', len(hues))

        # Fit splines segment by segment
        splines: list[SegmentedSpline] = []
        for stage, values in (('lightness', lightness), ('chroma', chroma)):
            spline = SegmentedSpline()
            for segment, error in iter_spline_segments(
                hues, values, extrema, config.spline_epsilon,
                config.segment_points, extrema
            ):
                spline.append(segment)
                logger.debug(
                    '%s segment with %d points, residual %.2e',
                    stage, len(segment), error,
                )
                yield BuildStep(stage, len(spline), len(extrema) - 1)

            if dump is not None:
                prefix = 'xg-jz' if stage == 'lightness' else 'xg-cz'
                dump(prefix + 'f', format_points(hues, values))
                dump_spline(spline, lambda name, text: dump(prefix + name, text))
            splines.append(spline)

        # Commit
        self._extrema = tuple(extrema)
        self._lightness_spline, self._chroma_spline = splines
        self._min_chroma = min(self._chroma_spline.a)
        self._max_chroma = max(self._chroma_spline.a)
        if config.cache_bytes > 0:
            slots = config.cache_bytes // SLOT_BYTES
            maxsize = 1 << max(slots.bit_length() - 1, 5)
            self._cache = Float64Table(min(1024, maxsize), maxsize)

        logger.info(
            'built gamut boundary from %d samples with %d lightness and %d chroma knots',
            len(hues), len(self._lightness_spline.x), len(self._chroma_spline.x),
        )

    def build_boundary(self) -> None:
        """Build the gamut boundary synchronously."""
        for _ in self.build_steps():
            pass

    async def build_boundary_async(self) -> None:
        """Build the gamut boundary while yielding to the event loop."""
        await asyncio.sleep(0)
        for _ in self.build_steps():
            await asyncio.sleep(0)

    # ----------------------------------------------------------------------------------
    # Queries

    def _wrap_hue(self, hue: float) -> float:
        """Shift the hue into the range covered by the splines."""
        first, last = self._extrema[0], self._extrema[-1]
        while hue > last:
            hue -= 360
        while hue < first:
            hue += 360
        return hue

    def find_cusp(self, hue: float) -> CuspPoint:
        """
        Find the cusp for the hue. Before the boundary is built, that requires
        a full search.
        """
        if self._lightness_spline is None or self._chroma_spline is None:
            return find_cusp(
                hue % 360, self._config.cusp_epsilon, CHROMA_LIMIT, self._viewing
            )

        wrapped = self._wrap_hue(hue)
        return CuspPoint(
            hue % 360,
            self._lightness_spline.splint(wrapped),
            self._chroma_spline.splint(wrapped),
        )

    def maximize_chroma(self, hue: float, lightness: float, eps: float = 1e-3) -> float:
        """
        Find the largest chroma within gamut for the hue and lightness. The
        result is in gamut and at most ``eps`` from the boundary. Once the
        boundary is built, the search is bracketed by the cusp chroma, padded
        by the spline accuracy. Results are cached if the configuration has a
        cache budget.

        Cache entries are shared by nearby hues and lightnesses and may stem
        from a query with a different ``eps``. Hence a hit is used only after
        checking that it straddles the boundary within ``eps``.
        """
        key = pack_key(hue, lightness)
        if self._cache is not None:
            cached = self._cache.get(key)
            if (
                cached is not None
                and self._in_gamut(hue, lightness, cached)
                and not self._in_gamut(hue, lightness, cached + eps)
            ):
                return cached

        if self.is_built:
            upper = self.find_cusp(hue).chroma + self._config.spline_epsilon + eps
        else:
            upper = CHROMA_LIMIT

        chroma = bisect_inside(
            lambda c: self._in_gamut(hue, lightness, c), 0, upper, eps
        )
        if self._cache is not None:
            self._cache.set(key, chroma)
        return chroma

    def maximize_saturation(self, hue: float, lightness: float, eps: float = 2e-3) -> float:
        """Find the largest saturation within gamut for the hue and lightness."""
        chroma = self.maximize_chroma(hue, lightness, 0.5 * eps)
        color = complete(
            PerceptualColor(hue=hue, lightness=lightness, chroma=chroma), self._viewing
        )
        assert color.saturation is not None
        return color.saturation

    def maximize_lightness(self, hue: float, chroma: float, eps: float = 1e-3) -> float:
        """
        Find the largest lightness within gamut for the hue and chroma. If the
        chroma exceeds the cusp's, the result is the cusp lightness.
        """
        cusp = self.find_cusp(hue)
        if chroma >= cusp.chroma:
            return cusp.lightness
        return bisect_inside(
            lambda j: self._in_gamut(hue, j, chroma), cusp.lightness, 100, eps
        )

    def minimize_lightness(self, hue: float, chroma: float, eps: float = 1e-3) -> float:
        """
        Find the smallest lightness within gamut for the hue and chroma. If the
        chroma exceeds the cusp's, the result is the cusp lightness.
        """
        cusp = self.find_cusp(hue)
        if chroma >= cusp.chroma:
            return cusp.lightness
        return bisect_inside(
            lambda j: self._in_gamut(hue, j, chroma), cusp.lightness, 0, eps
        )

    def clamp_to_gamut(self, color: PerceptualColor, eps: float = 1e-3) -> PerceptualColor:
        """
        Clamp the color's chroma so that it is within gamut while preserving
        hue and lightness. Colors close to black or white become black or
        white, and colors close to gray become gray.
        """
        color = complete(color, self._viewing)
        hue, lightness, chroma = color.hue, color.lightness, color.chroma
        assert hue is not None and lightness is not None and chroma is not None

        if lightness <= eps:
            lightness, chroma = 0.0, 0.0
        elif lightness >= 100 - eps:
            lightness, chroma = 100.0, 0.0
        elif chroma <= eps:
            chroma = 0.0
        else:
            # The chroma search consults the cache first
            limit = self.maximize_chroma(hue, lightness, eps)
            if chroma <= limit:
                return color
            chroma = limit

        return complete(
            PerceptualColor(hue=hue, lightness=lightness, chroma=chroma), self._viewing
        )
