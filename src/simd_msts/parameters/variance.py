import numpy as np
from simd_msts.base.domain import ParametersDomain
from simd_msts.base.domain import ParamValidation
from simd_msts.base.interpreter import ParameterInterpreter

EPSILON = 1e-6
# smallest admissible value of a variance that can't be zero
MIN_VARIANCE = 1e-9


class VarianceDomain(ParametersDomain):
    def __init__(self, nullable=True):
        super().__init__(1)
        self.nullable = nullable

    def lbound(self, idx):
        return 0.0 if self.nullable else MIN_VARIANCE

    def epsilon(self, params, idx):
        return EPSILON

    def check_boundaries(self, params):
        v = params[0]
        return bool((v >= 0 if self.nullable else v > 0) and np.isfinite(v))

    def validate(self, params):
        v = params[0]
        if not np.isfinite(v):
            return ParamValidation.INVALID
        if v < 0:
            params[0] = v = -v
            changed = True
        else:
            changed = False
        if v == 0 and not self.nullable:
            params[0] = MIN_VARIANCE
            changed = True
        return ParamValidation.CHANGED if changed else ParamValidation.VALID


class VarianceInterpreter(ParameterInterpreter):
    """A single variance. Variances scale with the square of the series."""

    def __init__(self, name, value, fixed=False, nullable=True):
        if value < 0:
            raise ValueError(
                "Variance {!r} must be non-negative, got {!r}".format(name, value)
            )
        super().__init__(name, [value], fixed, VarianceDomain(nullable))

    @property
    def value(self):
        return float(self.values[0])

    def is_scale_sensitive(self, variance):
        return True

    def rescale_variances(self, factor, buffer, pos):
        buffer[pos] *= factor * factor
        return pos + 1
