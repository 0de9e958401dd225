"""
Natural cubic splines and adaptive spline fitting.

The gamut engine samples expensive cusp computations across the hue circle and
compresses the samples into splines with few control points. Fitting is
greedy: it starts with the end points and keeps adding the sample with the
largest residual until all residuals are below epsilon.
"""
import bisect
from collections.abc import Iterable, Iterator, Sequence

from .spec import DumpSpec


class CubicSpline:
    """
    A natural cubic spline, i.e., one with zero second derivatives at both
    ends, through the given knots.

    Evaluating the spline outside the knot range extrapolates the first or
    last polynomial piece.
    """
    __slots__ = ('_x', '_a', '_m')

    def __init__(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        if len(xs) != len(ys):
            raise ValueError(f'spline has {len(xs)} knot positions but {len(ys)} values')
        if len(xs) < 2:
            raise ValueError(f'spline needs at least 2 knots, not {len(xs)}')
        for x0, x1 in zip(xs, xs[1:]):
            if not x0 < x1:
                raise ValueError(f'spline knots {x0} and {x1} are not increasing')

        self._x = tuple(float(x) for x in xs)
        self._a = tuple(float(y) for y in ys)
        self._m = self._solve()

    def _solve(self) -> tuple[float, ...]:
        """Solve the tridiagonal system for the second derivatives."""
        x, a = self._x, self._a
        n = len(x)
        m = [0.0] * n
        if n < 3:
            return tuple(m)

        # Forward sweep of the Thomas algorithm over the n - 2 interior knots
        cprime = [0.0] * n
        dprime = [0.0] * n
        for i in range(1, n - 1):
            h0 = x[i] - x[i - 1]
            h1 = x[i + 1] - x[i]
            lower = h0
            diagonal = 2 * (h0 + h1)
            upper = h1
            rhs = 6 * ((a[i + 1] - a[i]) / h1 - (a[i] - a[i - 1]) / h0)
            denominator = diagonal - lower * cprime[i - 1]
            cprime[i] = upper / denominator
            dprime[i] = (rhs - lower * dprime[i - 1]) / denominator

        # Back substitution; m[0] and m[n-1] stay zero
        for i in range(n - 2, 0, -1):
            m[i] = dprime[i] - cprime[i] * m[i + 1]
        return tuple(m)

    @property
    def x(self) -> tuple[float, ...]:
        """The knot positions."""
        return self._x

    @property
    def a(self) -> tuple[float, ...]:
        """The knot values."""
        return self._a

    def __len__(self) -> int:
        return len(self._x)

    def __repr__(self) -> str:
        return f'CubicSpline({len(self._x)} knots, {self._x[0]}..{self._x[-1]})'

    def splint(self, t: float) -> float:
        """Evaluate the spline at ``t``."""
        x = self._x
        i = bisect.bisect_right(x, t) - 1
        i = min(max(i, 0), len(x) - 2)

        x0, x1 = x[i], x[i + 1]
        y0, y1 = self._a[i], self._a[i + 1]
        m0, m1 = self._m[i], self._m[i + 1]

        # Keep the distances to both ends separate until the final division,
        # which preserves accuracy close to the knots
        h = x1 - x0
        d0 = t - x0
        d1 = x1 - t
        linear = d1 * y0 + d0 * y1
        cubic = (d1 * d1 - h * h) * d1 * m0 + (d0 * d0 - h * h) * d0 * m1
        return (linear + cubic / 6) / h

    __call__ = splint


class SegmentedSpline:
    """
    A sequence of independently fitted cubic splines over adjacent domains.
    Each segment owns the domain from its first knot up to the next segment's
    first knot. Positions before the first segment or after the last one are
    evaluated by the nearest segment.
    """
    __slots__ = ('_starts', '_segments')

    def __init__(self, segments: Iterable[CubicSpline] = ()) -> None:
        self._starts: list[float] = []
        self._segments: list[CubicSpline] = []
        for segment in segments:
            self.append(segment)

    def append(self, segment: CubicSpline) -> None:
        if self._segments and segment.x[0] < self._segments[-1].x[-1]:
            raise ValueError(
                f'segment starting at {segment.x[0]} overlaps previous segment '
                f'ending at {self._segments[-1].x[-1]}'
            )
        self._starts.append(segment.x[0])
        self._segments.append(segment)

    def add_segment(self, xs: Sequence[float], ys: Sequence[float]) -> None:
        self.append(CubicSpline(xs, ys))

    @property
    def segments(self) -> tuple[CubicSpline, ...]:
        return tuple(self._segments)

    @property
    def x(self) -> tuple[float, ...]:
        """The knot positions of all segments, without duplicate joints."""
        return tuple(x for x, _ in self._knots())

    @property
    def a(self) -> tuple[float, ...]:
        """The knot values of all segments, without duplicate joints."""
        return tuple(a for _, a in self._knots())

    def _knots(self) -> list[tuple[float, float]]:
        knots: list[tuple[float, float]] = []
        for segment in self._segments:
            for x, a in zip(segment.x, segment.a):
                if knots and knots[-1][0] == x:
                    continue
                knots.append((x, a))
        return knots

    def __len__(self) -> int:
        return len(self._segments)

    def splint(self, t: float) -> float:
        if not self._segments:
            raise ValueError('spline has no segments')
        i = max(bisect.bisect_right(self._starts, t) - 1, 0)
        return self._segments[i].splint(t)

    __call__ = splint


def spline_fit(
    xs: Sequence[float],
    ys: Sequence[float],
    eps: float,
    max_points: int,
    forced_knots: Iterable[float] = (),
) -> tuple[CubicSpline, float]:
    """
    Fit a cubic spline to the samples.

    The control points start out as the first and last samples as well as all
    samples whose positions appear in ``forced_knots``. Then, the sample with
    the largest residual becomes another control point, until that residual
    is below ``eps`` or the spline has ``max_points`` control points.

    Returns:
        the spline and the maximum residual across all samples
    """
    if len(xs) != len(ys):
        raise ValueError(f'{len(xs)} sample positions but {len(ys)} values')
    if len(xs) < 2:
        raise ValueError(f'fitting needs at least 2 samples, not {len(xs)}')

    forced = set(forced_knots)
    chosen = {0, len(xs) - 1}
    chosen.update(i for i, x in enumerate(xs) if x in forced)

    while True:
        indices = sorted(chosen)
        spline = CubicSpline([xs[i] for i in indices], [ys[i] for i in indices])

        worst, error = -1, 0.0
        for i, (x, y) in enumerate(zip(xs, ys)):
            residual = abs(spline.splint(x) - y)
            if residual > error:
                worst, error = i, residual

        if error < eps or len(chosen) >= max_points or worst in chosen:
            return spline, error
        chosen.add(worst)


def iter_spline_segments(
    xs: Sequence[float],
    ys: Sequence[float],
    boundaries: Sequence[float],
    eps: float,
    max_points: int,
    forced_knots: Iterable[float] = (),
) -> Iterator[tuple[CubicSpline, float]]:
    """
    Fit one spline per segment between consecutive boundaries, producing each
    segment's spline and maximum residual in turn. Each segment includes the
    samples at both of its boundaries, so that adjacent segments meet exactly.
    """
    forced = tuple(forced_knots)

    for start, end in zip(boundaries, boundaries[1:]):
        seg_xs: list[float] = []
        seg_ys: list[float] = []
        for x, y in zip(xs, ys):
            if start <= x <= end:
                seg_xs.append(x)
                seg_ys.append(y)

        yield spline_fit(seg_xs, seg_ys, eps, max_points, forced)


def fit_spline_segments(
    xs: Sequence[float],
    ys: Sequence[float],
    boundaries: Sequence[float],
    eps: float,
    max_points: int,
    forced_knots: Iterable[float] = (),
    dump: None | DumpSpec = None,
) -> SegmentedSpline:
    """
    Fit one spline per segment between consecutive boundaries and combine
    them. If ``dump`` is given, it receives the densely evaluated spline as
    ``s`` and the control points as ``p``.
    """
    result = SegmentedSpline(
        spline for spline, _ in iter_spline_segments(
            xs, ys, boundaries, eps, max_points, forced_knots
        )
    )
    if dump is not None:
        dump_spline(result, dump)
    return result


def dump_spline(spline: SegmentedSpline, dump: DumpSpec) -> None:
    """Emit the densely evaluated spline as ``s`` and its knots as ``p``."""
    dump('s', format_curve(spline))
    dump('p', format_points(spline.x, spline.a))


def format_points(xs: Iterable[float], ys: Iterable[float]) -> str:
    """Format the points as ``x y`` lines for plotting."""
    return ''.join(f'{x} {y}\n' for x, y in zip(xs, ys))


def format_curve(spline: SegmentedSpline, steps: int = 57) -> str:
    """Evaluate the spline densely between its knots and format as ``x y`` lines."""
    lines: list[str] = []
    knots = spline.x
    for x0, x1 in zip(knots, knots[1:]):
        for j in range(steps + 1):
            x = x0 + (x1 - x0) * j / steps
            lines.append(f'{x} {spline.splint(x)}\n')
    return ''.join(lines)
