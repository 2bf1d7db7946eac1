import numpy as np
from simd_msts.base.domain import ParametersDomain
from simd_msts.base.domain import ParamValidation
from simd_msts.base.interpreter import ParameterInterpreter

EPSILON = 1e-6


class BoundedDomain(ParametersDomain):
    def __init__(self, lbound, ubound, lower_inclusive=True):
        super().__init__(1)
        if lbound > ubound:
            raise ValueError(
                "Empty interval: [{!r}, {!r}]".format(lbound, ubound)
            )
        self._lbound = lbound
        self._ubound = ubound
        self.lower_inclusive = lower_inclusive

    def lbound(self, idx):
        return self._lbound

    def ubound(self, idx):
        return self._ubound

    def epsilon(self, params, idx):
        return EPSILON

    def check_boundaries(self, params):
        x = params[0]
        if self.lower_inclusive:
            above = x >= self._lbound
        else:
            above = x > self._lbound
        return bool(np.isfinite(x) and above and x <= self._ubound)

    def validate(self, params):
        if self.check_boundaries(params):
            return ParamValidation.VALID
        x = params[0]
        if x > self._ubound:
            x = self._ubound
        elif x <= self._lbound:
            x = self._lbound if self.lower_inclusive else self._lbound + EPSILON
        # nan, or an infinite value on an unbounded side
        if not np.isfinite(x):
            return ParamValidation.INVALID
        params[0] = x
        return ParamValidation.CHANGED


class BoundedParameterInterpreter(ParameterInterpreter):
    """A single scalar constrained to an interval.

    The upper bound is always inclusive; ``lower_inclusive`` tells whether
    the lower one is. Out-of-range proposals are clamped.
    """

    def __init__(
        self,
        name,
        value,
        fixed=False,
        lbound=-np.inf,
        ubound=np.inf,
        lower_inclusive=True,
    ):
        super().__init__(
            name, [value], fixed, BoundedDomain(lbound, ubound, lower_inclusive)
        )

    @property
    def value(self):
        return float(self.values[0])
