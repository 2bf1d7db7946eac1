from enum import Enum

import numpy as np


class ParamValidation(Enum):
    VALID = "valid"
    CHANGED = "changed"
    INVALID = "invalid"


class ParametersDomain:
    """Feasible region of a parameter sub-vector.

    ``validate`` may project its argument in place and reports whether it
    did so, or INVALID when there is no point to project to (a nan, say);
    it never raises. ``dim`` is fixed at construction.
    """

    def __init__(self, dim):
        self._dim = int(dim)

    @property
    def dim(self):
        return self._dim

    def lbound(self, idx):
        return -np.inf

    def ubound(self, idx):
        return np.inf

    def epsilon(self, params, idx):
        raise NotImplementedError

    def check_boundaries(self, params):
        raise NotImplementedError

    def validate(self, params):
        raise NotImplementedError
