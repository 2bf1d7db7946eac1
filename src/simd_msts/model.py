import logging

import numpy as np

from .backends.simd.kalman import kalman_filter
from .ssf import CompositeComponent
from .ssf import SumLoading

logger = logging.getLogger(__name__)


class ModelBuilder:
    """Collects named state blocks and their loadings into a
    :class:`CompositeModel`."""

    def __init__(self, obs_cov=0.0):
        self.obs_cov = obs_cov
        self._names = []
        self._components = []
        self._loadings = []

    def __len__(self):
        return len(self._names)

    def add(self, name, component, loading=None, offset_loading=None):
        if name in self._names:
            raise ValueError("Duplicate component name: {!r}".format(name))
        if offset_loading is not None:
            loading = offset_loading if loading is None else SumLoading(loading, offset_loading)
        if loading is not None and loading.dim != component.dim:
            raise ValueError(
                "Loading of {!r} has dimension {}, the component has {}".format(
                    name, loading.dim, component.dim
                )
            )
        self._names.append(name)
        self._components.append(component)
        self._loadings.append(loading)

    def build(self):
        logger.debug("Assembling components %s", self._names)
        return CompositeModel(
            self._names, self._components, self._loadings, obs_cov=self.obs_cov
        )


class CompositeModel:
    """Univariate state space model made of independent blocks.

    The transition and innovation covariance are block diagonal; the
    design row is the concatenation of the block loadings (zero for
    blocks added without a loading).
    """

    def __init__(self, names, components, loadings, obs_cov=0.0):
        self.names = tuple(names)
        self.components = tuple(components)
        self.loadings = tuple(loadings)
        self.obs_cov = obs_cov

        assert len(self.names) == len(self.components) == len(self.loadings)

        self.state = CompositeComponent(self.components)
        self.k_states = self.state.dim
        self.offsets = tuple(np.cumsum([0] + [c.dim for c in self.components])[:-1])
        self.time_invariant = self.state.time_invariant and all(
            l.time_invariant for l in self.loadings if l is not None
        )

    @property
    def initial_state(self):
        return self.state.initial_state

    @property
    def initial_cov(self):
        return self.state.initial_cov

    @property
    def transition(self):
        return self.state.transition_at(0)

    @property
    def state_cov(self):
        return self.state.innovation_cov_at(0)

    @property
    def design(self):
        return self.design_at(0)[np.newaxis, :]

    def component_range(self, name):
        idx = self.names.index(name)
        start = int(self.offsets[idx])
        return slice(start, start + self.components[idx].dim)

    def transition_at(self, pos):
        return self.state.transition_at(pos)

    def innovation_cov_at(self, pos):
        return self.state.innovation_cov_at(pos)

    def design_at(self, pos):
        z = np.zeros(self.k_states)
        for offset, cmp, loading in zip(self.offsets, self.components, self.loadings):
            if loading is not None:
                z[offset : offset + cmp.dim] = loading.design_at(pos)
        return z

    def filter(self, endog):
        return kalman_filter(self, endog)

    def loglikelihood(self, endog):
        """Log-likelihood summed over all the series of ``endog``."""
        return float(np.sum(self.filter(endog).llf))

    def __str__(self):
        return (
            "Components: "
            + ", ".join(self.names)
            + "\nTransition:\n"
            + str(self.transition)
            + "\nDesign:\n"
            + str(self.design)
            + "\nState cov:\n"
            + str(self.state_cov)
            + "\nObs cov:\n"
            + str(self.obs_cov)
        )
