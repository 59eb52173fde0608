"""
Safeguarded step selection for the More-Thuente line search.

Computes a new trial step from cubic and quadratic interpolants of the
best point and the current trial, and updates the interval of
uncertainty that must contain an acceptable step.

Reference: J. J. More and D. J. Thuente, "Line search algorithms with
guaranteed sufficient decrease", ACM TOMS 20 (1994) 286-307.
"""
import math
from dataclasses import dataclass
from typing import Tuple

from pylbfgs.core.constants import BISECTION_TRIGGER


@dataclass
class Interval:
    """
    Interval of uncertainty of a line search.

    Attributes:
        stx: Step with the least function value found so far.
        fx: Function value at stx.
        dx: Directional derivative at stx. Must point toward the
            current trial step, i.e. dx * (stp - stx) < 0.
        sty: Step at the other endpoint of the interval.
        fy: Function value at sty.
        dy: Directional derivative at sty.
        bracketed: Whether a minimizer has been bracketed.
    """

    stx: float
    fx: float
    dx: float
    sty: float
    fy: float
    dy: float
    bracketed: bool = False

    @property
    def width(self) -> float:
        return abs(self.sty - self.stx)

    def shift(self, slope: float) -> None:
        """
        Add ``-slope * step`` to both endpoint values and ``-slope`` to
        both derivatives.

        Used to switch between f and the modified function
        ψ(stp) = f(stp) - slope * stp. ``shift(-slope)`` undoes it.
        """
        self.fx -= self.stx * slope
        self.fy -= self.sty * slope
        self.dx -= slope
        self.dy -= slope


def _cubic_gamma(theta: float, d1: float, d2: float) -> float:
    # Scaled to avoid overflow; negative radicands come only from rounding.
    s = max(abs(theta), abs(d1), abs(d2))
    radicand = (theta / s) * (theta / s) - (d1 / s) * (d2 / s)
    return s * math.sqrt(max(0.0, radicand))


def safeguarded_step(
    interval: Interval,
    stp: float,
    fp: float,
    dp: float,
    stmin: float,
    stmax: float,
) -> Tuple[float, int]:
    """
    Compute a safeguarded step and update the interval of uncertainty.

    Four cases, by the function value and derivative at the trial:

    1. Higher value than at stx: the minimum is bracketed. Take the
       cubic step if it is closer to stx than the quadratic step,
       otherwise their average.
    2. Lower value, derivatives of opposite sign: bracketed. Take the
       cubic step if it is farther from stp than the secant step,
       otherwise the secant step.
    3. Lower value, same sign, decreasing derivative magnitude: the
       cubic step is used only if it tends to infinity in the direction
       of the step or its minimum lies beyond stp, otherwise stmin or
       stmax. If bracketed take the step closest to stp, else farthest.
    4. Lower value, same sign, non-decreasing magnitude: cubic step
       toward sty if bracketed, else stmin or stmax.

    Args:
        interval: Interval of uncertainty, updated in place.
        stp: Current trial step.
        fp: Function value at stp.
        dp: Directional derivative at stp.
        stmin: Lower bound for the new step.
        stmax: Upper bound for the new step.

    Returns:
        Tuple of (new_step, case). ``case`` is 1-4 on success and 0 if
        the inputs are inconsistent, in which case nothing is changed and
        ``stp`` is returned as is.
    """
    stx, fx, dx = interval.stx, interval.fx, interval.dx
    sty, fy, dy = interval.sty, interval.fy, interval.dy
    bracketed = interval.bracketed

    if (
        (bracketed and (stp <= min(stx, sty) or stp >= max(stx, sty)))
        or dx * (stp - stx) >= 0.0
        or stmax < stmin
    ):
        return stp, 0

    sgnd = dp * (dx / abs(dx))

    if fp > fx:
        case = 1
        bound = True
        theta = 3.0 * (fx - fp) / (stp - stx) + dx + dp
        gamma = _cubic_gamma(theta, dx, dp)
        if stp < stx:
            gamma = -gamma
        p = (gamma - dx) + theta
        q = ((gamma - dx) + gamma) + dp
        stpc = stx + (p / q) * (stp - stx)
        stpq = stx + ((dx / ((fx - fp) / (stp - stx) + dx)) / 2.0) * (stp - stx)
        if abs(stpc - stx) < abs(stpq - stx):
            stpf = stpc
        else:
            stpf = stpc + (stpq - stpc) / 2.0
        bracketed = True
    elif sgnd < 0.0:
        case = 2
        bound = False
        theta = 3.0 * (fx - fp) / (stp - stx) + dx + dp
        gamma = _cubic_gamma(theta, dx, dp)
        if stp > stx:
            gamma = -gamma
        p = (gamma - dp) + theta
        q = ((gamma - dp) + gamma) + dx
        stpc = stp + (p / q) * (stx - stp)
        stpq = stp + (dp / (dp - dx)) * (stx - stp)
        if abs(stpc - stp) > abs(stpq - stp):
            stpf = stpc
        else:
            stpf = stpq
        bracketed = True
    elif abs(dp) < abs(dx):
        case = 3
        bound = True
        theta = 3.0 * (fx - fp) / (stp - stx) + dx + dp
        gamma = _cubic_gamma(theta, dx, dp)
        if stp > stx:
            gamma = -gamma
        p = (gamma - dp) + theta
        q = (gamma + (dx - dp)) + gamma
        r = p / q
        if r < 0.0 and gamma != 0.0:
            stpc = stp + r * (stx - stp)
        elif stp > stx:
            stpc = stmax
        else:
            stpc = stmin
        stpq = stp + (dp / (dp - dx)) * (stx - stp)
        if bracketed:
            stpf = stpc if abs(stp - stpc) < abs(stp - stpq) else stpq
        else:
            stpf = stpc if abs(stp - stpc) > abs(stp - stpq) else stpq
    else:
        case = 4
        bound = False
        if bracketed:
            theta = 3.0 * (fp - fy) / (sty - stp) + dy + dp
            gamma = _cubic_gamma(theta, dy, dp)
            if stp > sty:
                gamma = -gamma
            p = (gamma - dp) + theta
            q = ((gamma - dp) + gamma) + dy
            stpf = stp + (p / q) * (sty - stp)
        elif stp > stx:
            stpf = stmax
        else:
            stpf = stmin

    # Update the interval of uncertainty. This does not depend on the
    # new step or the case analysis above.
    if fp > fx:
        interval.sty, interval.fy, interval.dy = stp, fp, dp
    else:
        if sgnd < 0.0:
            interval.sty, interval.fy, interval.dy = stx, fx, dx
        interval.stx, interval.fx, interval.dx = stp, fp, dp
    interval.bracketed = bracketed

    stpf = max(stmin, min(stmax, stpf))
    new_stp = stpf
    if bracketed and bound:
        stx, sty = interval.stx, interval.sty
        limit = stx + BISECTION_TRIGGER * (sty - stx)
        if sty > stx:
            new_stp = min(limit, new_stp)
        else:
            new_stp = max(limit, new_stp)

    return new_stp, case
