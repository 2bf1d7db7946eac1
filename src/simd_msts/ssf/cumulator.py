import numpy as np

from .component import DIFFUSE_VARIANCE
from .component import Loading
from .component import StateComponent


def _opens_period(pos, period, start):
    return (start + pos) % period == 0


class CumulatorComponent(StateComponent):
    """Adds a cumulator c in front of a core block a.

    c(t+1) = 0 when t+1 opens a new period, c(t) + Z(t) a(t) otherwise,
    so that c(t) + Z(t) a(t) is the sum of the core signal since the
    beginning of the current period.
    """

    time_invariant = False

    def __init__(self, core, loading, period, start=0):
        if period < 1:
            raise ValueError("Period must be positive: {!r}".format(period))
        if loading.dim != core.dim:
            raise ValueError(
                "Loading of dimension {} doesn't match a core block of"
                " dimension {}".format(loading.dim, core.dim)
            )
        self.core = core
        self.loading = loading
        self.period = period
        self.start = start % period

        dim = core.dim + 1
        initial_cov = np.zeros((dim, dim))
        initial_cov[1:, 1:] = core.initial_cov
        # the partial sum before the first observation is unknown
        if not _opens_period(0, period, self.start):
            initial_cov[0, 0] = DIFFUSE_VARIANCE

        self.transition = np.zeros((dim, dim))
        self.transition[1:, 1:] = core.transition_at(0)
        self.innovation_cov = np.zeros((dim, dim))
        self.innovation_cov[1:, 1:] = core.innovation_cov_at(0)
        self.initial_state = np.r_[0.0, core.initial_state]
        self.initial_cov = initial_cov

    def transition_at(self, pos):
        n = self.core.dim
        T = np.zeros((n + 1, n + 1))
        T[1:, 1:] = self.core.transition_at(pos)
        if not _opens_period(pos + 1, self.period, self.start):
            T[0, 0] = 1.0
            T[0, 1:] = self.loading.design_at(pos)
        return T

    def innovation_cov_at(self, pos):
        n = self.core.dim
        V = np.zeros((n + 1, n + 1))
        V[1:, 1:] = self.core.innovation_cov_at(pos)
        return V


class CumulatorLoading(Loading):
    time_invariant = False

    def __init__(self, loading, period, start=0):
        self.loading = loading
        self.period = period
        self.start = start % period

    @property
    def dim(self):
        return self.loading.dim + 1

    @property
    def z(self):
        return self.design_at(0)

    def design_at(self, pos):
        c = 0.0 if _opens_period(pos, self.period, self.start) else 1.0
        return np.r_[c, self.loading.design_at(pos)]


def cumulator(component, loading, period, start=0):
    return CumulatorComponent(component, loading, period, start)


def cumulator_loading(loading, period, start=0):
    return CumulatorLoading(loading, period, start)
