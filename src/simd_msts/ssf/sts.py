"""Basic structural blocks: noise, level, trend, seasonal, cycle, AR, ARMA.

AR and MA polynomials are written ``1 + c1 B + ... + cp B^p``.
"""
import numpy as np
from simd_msts.parameters.polynomial import check_stability
from statsmodels.tsa.statespace.tools import companion_matrix
from statsmodels.tsa.statespace.tools import solve_discrete_lyapunov

from .component import StateComponent


def noise(var):
    return StateComponent([[0.0]], [[var]], initial_cov=[[var]])


def local_level(var):
    return StateComponent([[1.0]], [[var]])


def local_linear_trend(level_var, slope_var):
    transition = np.array([[1.0, 1.0], [0.0, 1.0]])
    return StateComponent(transition, np.diag([level_var, slope_var]))


def seasonal(period, var):
    """Dummy seasonal of ``period - 1`` states (sum over a period is 0)."""
    if period < 2:
        raise ValueError("Seasonal period must be at least 2: {!r}".format(period))
    n = period - 1
    transition = companion_matrix(np.r_[1, [1] * n]).transpose()
    innovation_cov = np.zeros((n, n))
    innovation_cov[0, 0] = var
    return StateComponent(transition, innovation_cov)


def cycle(factor, period, var):
    lambda_p = 2 * np.pi / float(period)
    cos_lambda = np.cos(lambda_p)
    sin_lambda = np.sin(lambda_p)
    transition = factor * np.array(
        [[cos_lambda, sin_lambda], [-sin_lambda, cos_lambda]]
    )
    innovation_cov = np.eye(2) * var
    if factor < 1:
        initial_cov = np.eye(2) * var / (1 - factor * factor)
    else:
        initial_cov = None
    return StateComponent(transition, innovation_cov, initial_cov=initial_cov)


def _initial_cov(transition, innovation_cov, stationary):
    if not stationary:
        return None
    return solve_discrete_lyapunov(transition, innovation_cov)


def ar(coefficients, var, nlags=0):
    """AR block whose states are y(t), y(t-1), ..., so that lagged values
    can be loaded directly."""
    coefficients = np.asarray(coefficients, dtype=np.float64)
    p = coefficients.shape[0]
    dim = max(p, nlags + 1, 1)
    poly = np.r_[1.0, coefficients, np.zeros(dim - p)]
    transition = companion_matrix(poly).transpose()
    innovation_cov = np.zeros((dim, dim))
    innovation_cov[0, 0] = var
    initial_cov = _initial_cov(
        transition, innovation_cov, check_stability(coefficients)
    )
    return StateComponent(transition, innovation_cov, initial_cov=initial_cov)


def arma(ar_poly, ma_poly, var):
    """ARMA block in Harvey's form. ``ar_poly`` and ``ma_poly`` hold the
    full polynomials, leading 1 included."""
    ar_poly = np.asarray(ar_poly, dtype=np.float64)
    ma_poly = np.asarray(ma_poly, dtype=np.float64)
    p = ar_poly.shape[0] - 1
    q = ma_poly.shape[0] - 1
    dim = max(p, q + 1)

    transition = companion_matrix(np.r_[ar_poly, np.zeros(dim - p)])
    selection = np.r_[ma_poly, np.zeros(dim - q - 1)]
    innovation_cov = var * np.outer(selection, selection)
    initial_cov = _initial_cov(
        transition, innovation_cov, check_stability(ar_poly[1:])
    )
    return StateComponent(transition, innovation_cov, initial_cov=initial_cov)


def seasonal_polynomial(coefficients, period):
    """``1 + c1 B^period + c2 B^(2 period) + ...`` in powers of B."""
    coefficients = np.asarray(coefficients, dtype=np.float64)
    poly = np.zeros(coefficients.shape[0] * period + 1)
    poly[0] = 1.0
    poly[period::period] = coefficients
    return poly


def sarima_polynomials(orders, phi, bphi, theta, btheta):
    """Expanded AR (differencing included) and MA polynomials."""
    ar_poly = np.convolve(np.r_[1.0, phi], seasonal_polynomial(bphi, orders.period))
    for _ in range(orders.d):
        ar_poly = np.convolve(ar_poly, [1.0, -1.0])
    for _ in range(orders.bd):
        ar_poly = np.convolve(ar_poly, seasonal_polynomial([-1.0], orders.period))
    ma_poly = np.convolve(np.r_[1.0, theta], seasonal_polynomial(btheta, orders.period))
    return ar_poly, ma_poly
