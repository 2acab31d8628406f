"""Closed-form real roots of cubic equations."""

import math

from fit_power.constants import CUBIC_EPSILON, ROOT_TOLERANCE


class RootError(ValueError):
    """No single physically meaningful root could be selected."""

    def __init__(self, message: str, roots: list[float]):
        super().__init__(message)
        self.roots = roots


class NoPositiveRootError(RootError):
    pass


class AmbiguousRootError(RootError):
    pass


def _cbrt(x: float) -> float:
    """Real cube root, preserving sign."""
    return math.copysign(abs(x) ** (1.0 / 3.0), x)


def _solve_quadratic(b: float, c: float, d: float) -> list[float]:
    """Real roots of b*x^2 + c*x + d = 0, degrading to the linear case."""
    if abs(b) < CUBIC_EPSILON:
        if abs(c) < CUBIC_EPSILON:
            # Constant equation: no unique solution
            return []
        return [-d / c]

    disc = c * c - 4 * b * d
    if disc > CUBIC_EPSILON:
        sqrt_disc = math.sqrt(disc)
        return [(-c + sqrt_disc) / (2 * b), (-c - sqrt_disc) / (2 * b)]
    if abs(disc) <= CUBIC_EPSILON:
        return [-c / (2 * b)]
    return []


def solve_cubic(a: float, b: float, c: float, d: float) -> list[float]:
    """Return the real roots of a*x^3 + b*x^2 + c*x + d = 0.

    Near-zero leading coefficients (below 1e-6) fall through to the
    quadratic and then the linear equation. An empty list means there is no
    real solution (or no unique one, when every coefficient but d vanishes);
    that is a valid answer, not an error.

    The general case is normalized and depressed to t^3 + p*t + q = 0 with
    x = t - b/3, then split on the discriminant D = q^2/4 + p^3/27:
    - D > 0: one real root from Cardano's formula
    - D < 0: three distinct real roots from the trigonometric form
    - D ~ 0: a double root and a simple root (triple when p ~ 0)
    Repeated roots are returned once per multiplicity.
    """
    if abs(a) < CUBIC_EPSILON:
        return _solve_quadratic(b, c, d)

    b /= a
    c /= a
    d /= a

    shift = b / 3
    p = c - b * b / 3
    q = d + (2 * b * b * b - 9 * b * c) / 27
    disc = q * q / 4 + p * p * p / 27

    if disc > CUBIC_EPSILON:
        sqrt_disc = math.sqrt(disc)
        u = _cbrt(-q / 2 + sqrt_disc)
        v = _cbrt(-q / 2 - sqrt_disc)
        return [u + v - shift]

    if disc < -CUBIC_EPSILON:
        # p < 0 is implied by a negative discriminant
        ratio = (-q / 2) / math.sqrt(-p * p * p / 27)
        phi = math.acos(max(-1.0, min(1.0, ratio)))
        r = 2 * math.sqrt(-p / 3)
        return [r * math.cos((phi + 2 * math.pi * k) / 3) - shift for k in range(3)]

    if abs(p) < CUBIC_EPSILON:
        return [-shift, -shift, -shift]

    simple = 3 * q / p
    double = -3 * q / (2 * p)
    return [simple - shift, double - shift, double - shift]


def get_unique_positive_root(roots: list[float], tolerance: float = ROOT_TOLERANCE) -> float:
    """Select the single positive root from a list of real roots.

    Roots within `tolerance` of the smallest positive root are treated as
    numerical duplicates of it. Raises NoPositiveRootError when no root is
    positive and AmbiguousRootError when positive roots disagree.
    """
    positive = sorted(r for r in roots if r > 0)
    if not positive:
        raise NoPositiveRootError("No positive real roots found", list(roots))

    smallest = positive[0]
    if any(abs(r - smallest) > tolerance for r in positive[1:]):
        raise AmbiguousRootError(
            f"Multiple distinct positive real roots found: {positive}", list(roots)
        )
    return smallest
