import copy


class StateItem:
    """A named building block of a structural model.

    An item owns its parameter interpreters (and, for composites, its
    inner items), builds a state block from a slice of the full parameter
    vector and registers itself on a :class:`MstsMapping`.

    Items form a tree built bottom-up by the caller; an item must never
    wrap itself.
    """

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return "{}({!r})".format(type(self).__name__, self.name)

    def duplicate(self):
        return copy.deepcopy(self)

    def parameters(self):
        raise NotImplementedError

    def parameters_count(self):
        return sum(p.count for p in self.parameters())

    def build(self, p):
        raise NotImplementedError

    def default_loading(self, m):
        raise NotImplementedError

    def default_loading_count(self):
        return 1

    def state_dim(self):
        raise NotImplementedError

    def is_scalable(self):
        return any(
            p.is_scale_sensitive(True) and not p.fixed for p in self.parameters()
        )

    def add_to(self, mapping):
        for p in self.parameters():
            mapping.add(p)
        mapping.add(self._add_component)

    def _add_component(self, p, builder):
        builder.add(self.name, self.build(p), self.default_loading(0))
        return self.parameters_count()
