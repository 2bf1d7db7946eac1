from dataclasses import dataclass

import numpy as np
from simd_msts.base.domain import ParametersDomain
from simd_msts.base.domain import ParamValidation
from simd_msts.base.interpreter import ParameterInterpreter

from .polynomial import check_stability
from .polynomial import stabilize

EPSILON = 1e-6
# box used for first order polynomials, where stability is |c| < 1
BOUND = 0.99999
DEFAULT_AR = -0.1
DEFAULT_MA = -0.2


@dataclass(frozen=True)
class SarimaOrders:
    """Orders of a (p, d, q)(bp, bd, bq)_period model."""

    period: int = 1
    p: int = 0
    d: int = 0
    q: int = 0
    bp: int = 0
    bd: int = 0
    bq: int = 0

    def __post_init__(self):
        if self.period < 1:
            raise ValueError("Period must be positive: {!r}".format(self.period))
        for field in ("p", "d", "q", "bp", "bd", "bq"):
            if getattr(self, field) < 0:
                raise ValueError(
                    "Order {} must be non-negative: {!r}".format(
                        field, getattr(self, field)
                    )
                )
        if self.period == 1 and (self.bp or self.bd or self.bq):
            raise ValueError("Seasonal orders need a period greater than 1")

    @property
    def parameters_count(self):
        return self.p + self.bp + self.q + self.bq


class SarimaMapping(ParametersDomain):
    """Parameter domain of a SARIMA model of fixed orders.

    Parameters are laid out as phi (p), bphi (bp), theta (q), btheta (bq);
    each block holds the coefficients of ``1 + c1 B + ...`` (seasonal
    blocks in ``B^period``).
    """

    def __init__(self, orders):
        super().__init__(orders.parameters_count)
        self.orders = orders
        o = orders
        self._blocks = (
            ("phi", 0, o.p),
            ("bphi", o.p, o.p + o.bp),
            ("theta", o.p + o.bp, o.p + o.bp + o.q),
            ("btheta", o.p + o.bp + o.q, o.p + o.bp + o.q + o.bq),
        )

    def _block_of(self, idx):
        for name, start, end in self._blocks:
            if start <= idx < end:
                return start, end
        raise IndexError("Parameter index out of range: {!r}".format(idx))

    def default_parameters(self):
        o = self.orders
        return np.r_[
            [DEFAULT_AR] * (o.p + o.bp),
            [DEFAULT_MA] * (o.q + o.bq),
        ].astype(np.float64)

    def lbound(self, idx):
        start, end = self._block_of(idx)
        return -BOUND if end - start == 1 else -np.inf

    def ubound(self, idx):
        start, end = self._block_of(idx)
        return BOUND if end - start == 1 else np.inf

    def epsilon(self, params, idx):
        return EPSILON

    def polynomials(self, params):
        """Split ``params`` into the phi, bphi, theta and btheta blocks."""
        params = np.asarray(params, dtype=np.float64)
        return {name: params[start:end] for name, start, end in self._blocks}

    def check_boundaries(self, params):
        return all(
            check_stability(params[start:end]) for _, start, end in self._blocks
        )

    def validate(self, params):
        changed = False
        for _, start, end in self._blocks:
            if end > start and stabilize(params[start:end]):
                changed = True
        return ParamValidation.CHANGED if changed else ParamValidation.VALID


class SarimaInterpreter(ParameterInterpreter):
    """Coefficients of a SARIMA model of fixed orders. They are not
    variances, so rescaling passes them through."""

    def __init__(self, name, orders, values=None, fixed=False):
        mapping = SarimaMapping(orders)
        if values is None:
            values = mapping.default_parameters()
        super().__init__(name, values, fixed, mapping)

    @property
    def orders(self):
        return self.domain.orders
