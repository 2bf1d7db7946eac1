from simd_msts.ssf import BlockLoading
from simd_msts.ssf import CompositeComponent
from simd_msts.ssf import cumulator as ssf_cumulator
from simd_msts.ssf import cumulator_loading

from .base import StateItem


class CumulatorItem(StateItem):
    """Cumulates the signal of a core item over periods of ``period``
    observations, the first observation being at position ``start`` of a
    period. Adds no parameter of its own."""

    def __init__(self, name, core, period, start=0):
        super().__init__(name)
        if period < 1:
            raise ValueError("Period must be positive: {!r}".format(period))
        self.core = core
        self.period = period
        self.start = start

    def parameters(self):
        return self.core.parameters()

    def parameters_count(self):
        return self.core.parameters_count()

    def build(self, p):
        cmp = self.core.build(p)
        loading = self.core.default_loading(0)
        return ssf_cumulator(cmp, loading, self.period, self.start)

    def default_loading(self, m):
        if m != 0:
            return None
        return cumulator_loading(self.core.default_loading(0), self.period, self.start)

    def default_loading_count(self):
        return 1

    def state_dim(self):
        return 1 + self.core.state_dim()

    def is_scalable(self):
        return self.core.is_scalable()


class AggregationItem(StateItem):
    """Sum of several items. The state is the concatenation of the inner
    states and the loading sums the inner default loadings, weighted when
    ``weights`` are given."""

    def __init__(self, name, items, weights=None):
        super().__init__(name)
        self.items = list(items)
        if not self.items:
            raise ValueError("Aggregation {!r} needs at least one item".format(name))
        if weights is not None:
            weights = [float(w) for w in weights]
            if len(weights) != len(self.items):
                raise ValueError(
                    "Got {} weight(s) for {} item(s)".format(
                        len(weights), len(self.items)
                    )
                )
        self.weights = weights

    def parameters(self):
        return [p for item in self.items for p in item.parameters()]

    def parameters_count(self):
        return sum(item.parameters_count() for item in self.items)

    def build(self, p):
        components = []
        pos = 0
        for item in self.items:
            n = item.parameters_count()
            components.append(item.build(p[pos : pos + n]))
            pos += n
        return CompositeComponent(components)

    def default_loading(self, m):
        if m != 0:
            return None
        return BlockLoading(
            [item.default_loading(0) for item in self.items], self.weights
        )

    def state_dim(self):
        return sum(item.state_dim() for item in self.items)

    def is_scalable(self):
        return any(item.is_scalable() for item in self.items)


def cumulator(name, core, period, start=0):
    return CumulatorItem(name, core, period, start)


def aggregation(name, *items, weights=None):
    return AggregationItem(name, items, weights)
