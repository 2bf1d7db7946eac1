import logging

import numpy as np
from numpy.polynomial import polynomial as P
from simd_msts.base.domain import ParametersDomain
from simd_msts.base.domain import ParamValidation
from simd_msts.base.interpreter import ParameterInterpreter

logger = logging.getLogger(__name__)

EPSILON = 1e-6
# roots of a stabilized polynomial have at least this modulus
RMIN = 1.0 + 1e-6


def _roots(coefficients):
    # coefficients of 1 + c1 z + ... + cp z^p, trailing zeros are trimmed
    return P.polyroots(np.r_[1.0, coefficients])


def check_stability(coefficients):
    """True if every root of ``1 + c1 z + ... + cp z^p`` lies outside
    the unit circle."""
    coefficients = np.asarray(coefficients, dtype=np.float64)
    if not np.all(np.isfinite(coefficients)):
        return False
    if coefficients.size == 0 or not np.any(coefficients):
        return True
    return bool(np.all(np.abs(_roots(coefficients)) > 1.0))


def stabilize(coefficients, rmin=RMIN):
    """Project ``coefficients`` in place onto the stable region.

    Roots inside or on the unit circle are reflected (r -> 1 / conj(r))
    and pushed to a modulus of at least ``rmin``. Stable coefficients are
    not touched. Non-finite coefficients reset the whole polynomial to 1.
    Returns True if the coefficients changed.
    """
    if not np.all(np.isfinite(coefficients)):
        coefficients[:] = 0.0
        return True
    if coefficients.size == 0 or not np.any(coefficients):
        return False

    roots = _roots(coefficients)
    moduli = np.abs(roots)
    unstable = moduli <= 1.0
    if not np.any(unstable):
        return False

    roots = roots.copy()
    roots[unstable] = 1.0 / np.conj(roots[unstable])
    moduli = np.abs(roots)
    small = moduli < rmin
    roots[small] *= rmin / moduli[small]

    # back to 1 + c1 z + ..., complex roots come in conjugate pairs
    poly = P.polyfromroots(roots)
    poly = np.real(poly / poly[0])
    n = poly.shape[0] - 1
    coefficients[:n] = poly[1:]
    coefficients[n:] = 0.0
    return True


class StablePolynomialDomain(ParametersDomain):
    def epsilon(self, params, idx):
        return EPSILON

    def check_boundaries(self, params):
        return check_stability(params)

    def validate(self, params):
        if stabilize(params):
            return ParamValidation.CHANGED
        return ParamValidation.VALID


class StablePolynomialInterpreter(ParameterInterpreter):
    """Coefficients of a polynomial ``1 + c1 z + ... + cp z^p`` whose
    roots must stay outside the unit circle (stationary AR / invertible
    MA operators). Feasibility is stability, not a box."""

    def __init__(self, name, values, fixed=False):
        values = np.array(values, dtype=np.float64).ravel()
        super().__init__(name, values, fixed, StablePolynomialDomain(values.shape[0]))
