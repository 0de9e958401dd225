"""
One-dimensional numerical searches. Both searches are stateless and evaluate
their function argument a logarithmic number of times in the ratio between
bracket width and epsilon.
"""
import dataclasses
import math
from collections.abc import Callable

from .spec import ConvergenceError


MAX_ITERATIONS = 257
"""The iteration limit for golden-section search."""

_INVPHI = (math.sqrt(5) - 1) / 2        # 1/φ
_INVPHI2 = (3 - math.sqrt(5)) / 2       # 1/φ²


def bisect_boundary(
    predicate: Callable[[float], bool],
    lo: float,
    hi: float,
    eps: float,
) -> float:
    """
    Find the boundary where the predicate transitions from true to false.

    The predicate must be true for ``lo`` and false for ``hi``, transitioning
    exactly once in between. If it isn't monotone, the result is undefined.
    ``lo`` may be larger than ``hi``, which finds the lower boundary of a
    region extending upwards. The search halves the bracket until its width is
    at most ``eps`` and returns the last midpoint.
    """
    mid = (lo + hi) / 2
    while math.fabs(hi - lo) > eps:
        mid = (lo + hi) / 2
        if predicate(mid):
            lo = mid
        else:
            hi = mid
    return mid


def bisect_inside(
    predicate: Callable[[float], bool],
    lo: float,
    hi: float,
    eps: float,
) -> float:
    """
    Find the boundary like :func:`bisect_boundary`, but return the last
    argument for which the predicate held. The result is ``lo`` if no probe
    satisfied the predicate.
    """
    inside = lo

    def probe(x: float) -> bool:
        nonlocal inside
        if predicate(x):
            inside = x
            return True
        return False

    bisect_boundary(probe, lo, hi, eps)
    return inside


@dataclasses.dataclass(frozen=True, slots=True)
class Extremum:
    """
    The result of golden-section search.

    Attributes:
        lo: is the lower end of the final bracket
        hi: is the upper end of the final bracket
        x: is the best argument found
        y: is the function value for ``x``
    """
    lo: float
    hi: float
    x: float
    y: float


def golden_section_extremum(
    f: Callable[[float], float],
    a: float,
    b: float,
    *,
    want_min: bool,
    eps: float,
) -> Extremum:
    """
    Find the minimum or maximum of a unimodal function with golden-section
    search.

    The function must have exactly one local extremum of the requested kind on
    ``[a, b]``. The search keeps two probes at ``1/φ²`` and ``1/φ`` of the
    bracket, so that each iteration reuses one function value. It stops once
    the bracket is narrower than ``eps``.

    Raises:
        ConvergenceError: if the bracket did not shrink below ``eps`` within
            :data:`MAX_ITERATIONS` iterations
    """
    if a > b:
        a, b = b, a

    def better(y1: float, y2: float) -> bool:
        return y1 < y2 if want_min else y1 > y2

    c = a + _INVPHI2 * (b - a)
    d = a + _INVPHI * (b - a)
    yc = f(c)
    yd = f(d)

    iterations = 0
    while b - a >= eps:
        if iterations == MAX_ITERATIONS:
            raise ConvergenceError(a, b, eps)
        iterations += 1
        if better(yc, yd):
            # Extremum in [a, d]: old c becomes new d
            b, d, yd = d, c, yc
            c = a + _INVPHI2 * (b - a)
            yc = f(c)
        else:
            # Extremum in [c, b]: old d becomes new c
            a, c, yc = c, d, yd
            d = a + _INVPHI * (b - a)
            yd = f(d)

    if better(yc, yd):
        return Extremum(a, b, c, yc)
    return Extremum(a, b, d, yd)


def golden_section_min(
    f: Callable[[float], float], a: float, b: float, eps: float = 1e-5
) -> Extremum:
    """Find the minimum of a unimodal function on ``[a, b]``."""
    return golden_section_extremum(f, a, b, want_min=True, eps=eps)


def golden_section_max(
    f: Callable[[float], float], a: float, b: float, eps: float = 1e-5
) -> Extremum:
    """Find the maximum of a unimodal function on ``[a, b]``."""
    return golden_section_extremum(f, a, b, want_min=False, eps=eps)
