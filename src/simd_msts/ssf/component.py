import numpy as np

# variance of the approximate diffuse initialisation of non-stationary states
DIFFUSE_VARIANCE = 1e6


class StateComponent:
    """One block of a linear Gaussian state space model.

    a(t+1) = T(t) a(t) + e(t),  e(t) ~ N(0, V(t))
    """

    time_invariant = True

    def __init__(self, transition, innovation_cov, initial_state=None, initial_cov=None):
        self.transition = np.atleast_2d(np.asarray(transition, dtype=np.float64))
        self.innovation_cov = np.atleast_2d(
            np.asarray(innovation_cov, dtype=np.float64)
        )
        dim = self.transition.shape[0]

        assert self.transition.shape == (dim, dim)
        assert self.innovation_cov.shape == (dim, dim)

        if initial_state is None:
            initial_state = np.zeros(dim)
        if initial_cov is None:
            initial_cov = np.eye(dim) * DIFFUSE_VARIANCE
        self.initial_state = np.asarray(initial_state, dtype=np.float64).ravel()
        self.initial_cov = np.atleast_2d(np.asarray(initial_cov, dtype=np.float64))

        assert self.initial_state.shape == (dim,)
        assert self.initial_cov.shape == (dim, dim)

    @property
    def dim(self):
        return self.transition.shape[0]

    def transition_at(self, pos):
        return self.transition

    def innovation_cov_at(self, pos):
        return self.innovation_cov

    def __str__(self):
        return (
            "Transition:\n"
            + str(self.transition)
            + "\nInnovation cov:\n"
            + str(self.innovation_cov)
        )


class Loading:
    """Row of the design matrix restricted to one state block."""

    time_invariant = True

    def __init__(self, z):
        self.z = np.asarray(z, dtype=np.float64).ravel()

    @property
    def dim(self):
        return self.z.shape[0]

    def design_at(self, pos):
        return self.z

    @classmethod
    def from_index(cls, dim, idx):
        if not 0 <= idx < dim:
            raise IndexError(
                "State {!r} is out of range for a block of dimension {}".format(
                    idx, dim
                )
            )
        z = np.zeros(dim)
        z[idx] = 1.0
        return cls(z)


class BlockLoading(Loading):
    """Loadings of consecutive state blocks, optionally weighted."""

    def __init__(self, loadings, weights=None):
        self.loadings = list(loadings)
        if weights is None:
            weights = [1.0] * len(self.loadings)
        if len(weights) != len(self.loadings):
            raise ValueError(
                "Got {} weight(s) for {} loading(s)".format(
                    len(weights), len(self.loadings)
                )
            )
        self.weights = [float(w) for w in weights]
        self.time_invariant = all(l.time_invariant for l in self.loadings)

    @property
    def dim(self):
        return sum(l.dim for l in self.loadings)

    @property
    def z(self):
        return self.design_at(0)

    def design_at(self, pos):
        return np.concatenate(
            [w * l.design_at(pos) for w, l in zip(self.weights, self.loadings)]
        )


class SumLoading(Loading):
    """Two loadings acting on the same state block."""

    def __init__(self, first, second):
        if first.dim != second.dim:
            raise ValueError(
                "Cannot add loadings of dimension {} and {}".format(
                    first.dim, second.dim
                )
            )
        self.first = first
        self.second = second
        self.time_invariant = first.time_invariant and second.time_invariant

    @property
    def dim(self):
        return self.first.dim

    @property
    def z(self):
        return self.design_at(0)

    def design_at(self, pos):
        return self.first.design_at(pos) + self.second.design_at(pos)


def block_diag(*blocks):
    n = sum(b.shape[0] for b in blocks)
    out = np.zeros((n, n))
    i = 0
    for b in blocks:
        k = b.shape[0]
        out[i : i + k, i : i + k] = b
        i += k
    return out


class CompositeComponent(StateComponent):
    """Concatenation of independent state blocks."""

    def __init__(self, components):
        self.components = list(components)
        self.time_invariant = all(c.time_invariant for c in self.components)
        self.transition = block_diag(*[c.transition_at(0) for c in self.components])
        self.innovation_cov = block_diag(
            *[c.innovation_cov_at(0) for c in self.components]
        )
        self.initial_state = np.concatenate(
            [np.zeros(0)] + [c.initial_state for c in self.components]
        )
        self.initial_cov = block_diag(*[c.initial_cov for c in self.components])

    def transition_at(self, pos):
        if self.time_invariant:
            return self.transition
        return block_diag(*[c.transition_at(pos) for c in self.components])

    def innovation_cov_at(self, pos):
        if self.time_invariant:
            return self.innovation_cov
        return block_diag(*[c.innovation_cov_at(pos) for c in self.components])
