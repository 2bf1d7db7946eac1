from simd_msts.parameters import BoundedParameterInterpreter
from simd_msts.parameters import SarimaInterpreter
from simd_msts.parameters import StablePolynomialInterpreter
from simd_msts.parameters import VarianceInterpreter
from simd_msts.ssf import Loading
from simd_msts.ssf import sts

from .base import StateItem


class NoiseItem(StateItem):
    """White noise, e.g. the irregular of a structural model."""

    def __init__(self, name, var, fixed=False):
        super().__init__(name)
        self.var = VarianceInterpreter(name + ".var", var, fixed)

    def parameters(self):
        return [self.var]

    def build(self, p):
        return sts.noise(p[0])

    def default_loading(self, m):
        if m > 0:
            return None
        return Loading([1.0])

    def state_dim(self):
        return 1


class LocalLevelItem(StateItem):
    def __init__(self, name, var, fixed=False):
        super().__init__(name)
        self.var = VarianceInterpreter(name + ".var", var, fixed)

    def parameters(self):
        return [self.var]

    def build(self, p):
        return sts.local_level(p[0])

    def default_loading(self, m):
        if m > 0:
            return None
        return Loading([1.0])

    def state_dim(self):
        return 1


class LocalLinearTrendItem(StateItem):
    def __init__(self, name, level_var, slope_var, fixed_level=False, fixed_slope=False):
        super().__init__(name)
        self.level_var = VarianceInterpreter(name + ".lvar", level_var, fixed_level)
        self.slope_var = VarianceInterpreter(name + ".svar", slope_var, fixed_slope)

    def parameters(self):
        return [self.level_var, self.slope_var]

    def build(self, p):
        return sts.local_linear_trend(p[0], p[1])

    def default_loading(self, m):
        if m > 0:
            return None
        return Loading([1.0, 0.0])

    def state_dim(self):
        return 2


class SeasonalItem(StateItem):
    """Dummy seasonal component."""

    def __init__(self, name, period, var, fixed=False):
        super().__init__(name)
        if period < 2:
            raise ValueError("Seasonal period must be at least 2: {!r}".format(period))
        self.period = period
        self.var = VarianceInterpreter(name + ".var", var, fixed)

    def parameters(self):
        return [self.var]

    def build(self, p):
        return sts.seasonal(self.period, p[0])

    def default_loading(self, m):
        if m > 0:
            return None
        return Loading.from_index(self.state_dim(), 0)

    def state_dim(self):
        return self.period - 1


class CycleItem(StateItem):
    """Stochastic cycle: damping factor in [0, 1], period above 2 and an
    innovation variance."""

    def __init__(self, name, factor, period, var, fixed_cycle=False, fixed_var=False):
        super().__init__(name)
        self.factor = BoundedParameterInterpreter(
            name + ".factor", factor, fixed_cycle, lbound=0, ubound=1
        )
        self.period = BoundedParameterInterpreter(
            name + ".period", period, fixed_cycle, lbound=2, lower_inclusive=False
        )
        self.var = VarianceInterpreter(name + ".var", var, fixed_var)

    def parameters(self):
        return [self.factor, self.period, self.var]

    def parameters_count(self):
        return 3

    def build(self, p):
        factor, period, var = p[0], p[1], p[2]
        return sts.cycle(factor, period, var)

    def default_loading(self, m):
        if m > 0:
            return None
        return Loading([1.0, 0.0])

    def state_dim(self):
        return 2

    def is_scalable(self):
        return not self.var.fixed


class ArItem(StateItem):
    """Autoregressive component ``(1 + c1 B + ... + cp B^p) y = e``.

    With ``nlags`` > 0 the lagged values y(t-1), ..., y(t-nlags) are
    exposed as additional default loadings.
    """

    def __init__(self, name, ar, var, fixed_ar=False, fixed_var=False, nlags=0):
        super().__init__(name)
        if nlags < 0:
            raise ValueError("Number of lags must be non-negative: {!r}".format(nlags))
        self.ar = StablePolynomialInterpreter(name + ".ar", ar, fixed_ar)
        self.var = VarianceInterpreter(name + ".var", var, fixed_var)
        self.nlags = nlags

    def parameters(self):
        return [self.ar, self.var]

    def build(self, p):
        n = self.ar.count
        return sts.ar(p[:n], p[n], self.nlags)

    def default_loading(self, m):
        if m < 0 or m > self.nlags:
            return None
        return Loading.from_index(self.state_dim(), m)

    def default_loading_count(self):
        return self.nlags + 1

    def state_dim(self):
        return max(self.ar.count, self.nlags + 1, 1)


class SarimaItem(StateItem):
    def __init__(self, name, orders, parameters=None, var=1.0, fixed=False, fixed_var=False):
        super().__init__(name)
        self.sarima = SarimaInterpreter(name + ".sarima", orders, parameters, fixed)
        self.var = VarianceInterpreter(name + ".var", var, fixed_var)

    @property
    def orders(self):
        return self.sarima.orders

    def parameters(self):
        return [self.sarima, self.var]

    def _polynomials(self, p):
        blocks = self.sarima.domain.polynomials(p[: self.sarima.count])
        return sts.sarima_polynomials(
            self.orders, blocks["phi"], blocks["bphi"], blocks["theta"], blocks["btheta"]
        )

    def build(self, p):
        ar_poly, ma_poly = self._polynomials(p)
        return sts.arma(ar_poly, ma_poly, p[self.sarima.count])

    def default_loading(self, m):
        if m > 0:
            return None
        return Loading.from_index(self.state_dim(), 0)

    def state_dim(self):
        o = self.orders
        p = o.p + o.d + o.period * (o.bp + o.bd)
        q = o.q + o.period * o.bq
        return max(p, q + 1)
