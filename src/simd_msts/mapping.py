"""Mapping between optimizer parameters and composite models.

Two flat layouts are derived from the registered interpreters, in
registration order:

- the full vector holds every parameter, fixed ones included; it is what
  :meth:`MstsMapping.build` turns into a model;
- the free vector skips fixed interpreters; it is what an optimizer
  searches over.

:meth:`MstsMapping.decode` goes from the free vector to the full one,
:meth:`MstsMapping.encode` the other way round.
"""
import logging

import numpy as np

from .base.cursor import Cursor
from .base.domain import ParamValidation
from .base.errors import CompositionError
from .base.interpreter import ParameterInterpreter
from .model import ModelBuilder

logger = logging.getLogger(__name__)


def _matcher(predicate):
    if predicate is None:
        return lambda name: True
    if callable(predicate):
        return predicate
    if isinstance(predicate, str):
        return lambda name: name == predicate
    names = set(predicate)
    return lambda name: name in names


class MstsMapping:
    """Registry of parameter interpreters and builder steps.

    A builder step is a callable ``step(p, builder) -> int``: it reads its
    values at the start of ``p`` (the full vector from its own position
    on), adds its blocks to ``builder`` and returns how many values it
    used. Steps run in registration order.
    """

    def __init__(self, obs_cov=0.0):
        self.obs_cov = obs_cov
        self._parameters = []
        self._names = {}
        self._builders = []

    @classmethod
    def of(cls, *items, obs_cov=0.0):
        mapping = cls(obs_cov=obs_cov)
        for item in items:
            item.add_to(mapping)
        return mapping

    def __repr__(self):
        return "MstsMapping({} parameter(s), {} free, {} step(s))".format(
            self.parameters_count(), self.free_parameters_count(), len(self._builders)
        )

    # registration

    def add(self, obj):
        if isinstance(obj, ParameterInterpreter):
            self.add_parameter(obj)
        elif callable(obj):
            self.add_builder(obj)
        else:
            raise TypeError(
                "Expected a ParameterInterpreter or a builder step, got {}".format(
                    type(obj).__name__
                )
            )

    def add_parameter(self, interpreter):
        if interpreter.name in self._names:
            raise ValueError("Duplicate parameter name: {!r}".format(interpreter.name))
        self._names[interpreter.name] = interpreter
        self._parameters.append(interpreter)
        logger.debug(
            "Registered %s (%d value(s), fixed=%s)",
            interpreter.name,
            interpreter.count,
            interpreter.fixed,
        )

    def add_builder(self, step):
        self._builders.append(step)

    # layout

    def parameters(self):
        return tuple(self._parameters)

    def parameter(self, name):
        return self._names[name]

    def parameters_count(self):
        return sum(p.count for p in self._parameters)

    def free_parameters_count(self):
        return sum(p.count for p in self._parameters if not p.fixed)

    def _free_mask(self):
        return np.concatenate(
            [np.zeros(0, dtype=bool)]
            + [np.full(p.count, not p.fixed) for p in self._parameters]
        )

    def _check_full(self, full):
        full = np.asarray(full, dtype=np.float64).ravel()
        if full.shape[0] != self.parameters_count():
            raise ValueError(
                "Expected {} model parameter(s), got {}".format(
                    self.parameters_count(), full.shape[0]
                )
            )
        return full

    def _check_free(self, free):
        if free.shape[0] != self.free_parameters_count():
            raise ValueError(
                "Expected {} free parameter(s), got {}".format(
                    self.free_parameters_count(), free.shape[0]
                )
            )

    # free <-> full

    def decode(self, free):
        reader = Cursor(free)
        full = np.empty(self.parameters_count())
        pos = 0
        for p in self._parameters:
            pos = p.decode(reader, full, pos)
        if not reader.exhausted:
            raise CompositionError(
                "{} free parameter(s) left after decoding".format(reader.remaining)
            )
        return full

    def encode(self, full):
        full = self._check_full(full)
        reader = Cursor(full)
        buffer = np.full(full.shape[0], np.nan)
        pos = 0
        for p in self._parameters:
            pos = p.encode(reader, buffer, pos)
        return buffer[self._free_mask()]

    def default_parameters(self):
        """Starting point of the optimizer: stored values of the free
        interpreters."""
        return np.concatenate(
            [np.zeros(0)] + [p.values for p in self._parameters if not p.fixed]
        )

    def fixed_parameters(self):
        """Stored values of the fixed interpreters, in layout order."""
        buffer = np.empty(self.parameters_count())
        pos = 0
        for p in self._parameters:
            pos = p.fill_default(buffer, pos)
        return buffer[:pos]

    def default_model_parameters(self):
        return self.decode(self.default_parameters())

    # models

    def build(self, full):
        full = np.array(self._check_full(full))
        full.setflags(write=False)

        builder = ModelBuilder(obs_cov=self.obs_cov)
        pos = 0
        for step in self._builders:
            pos += step(full[pos:], builder)
        if pos != full.shape[0]:
            raise CompositionError(
                "Builder steps used {} value(s) out of {} model parameter(s)".format(
                    pos, full.shape[0]
                )
            )
        return builder.build()

    def map(self, free):
        return self.build(self.decode(free))

    # optimizer domain

    def _free_slices(self, free):
        pos = 0
        for p in self._parameters:
            if p.fixed:
                continue
            yield p, free[pos : pos + p.count]
            pos += p.count

    def validate(self, free):
        """Project ``free`` in place onto the domains of the free
        interpreters. ``free`` must be a float64 ndarray.

        Stops at the first INVALID slice, which may leave later slices
        unprojected.
        """
        if not isinstance(free, np.ndarray) or free.dtype != np.float64:
            raise TypeError(
                "validate works in place on a float64 ndarray, got {}".format(
                    getattr(free, "dtype", type(free).__name__)
                )
            )
        self._check_free(free)
        rslt = ParamValidation.VALID
        for p, values in self._free_slices(free):
            status = p.domain.validate(values)
            if status == ParamValidation.INVALID:
                logger.debug("Parameters of %s are invalid: %s", p.name, values.tolist())
                return status
            if status == ParamValidation.CHANGED:
                logger.debug("Parameters of %s moved to %s", p.name, values.tolist())
                rslt = status
        return rslt

    def check_boundaries(self, free):
        free = np.asarray(free, dtype=np.float64)
        self._check_free(free)
        return all(p.domain.check_boundaries(values) for p, values in self._free_slices(free))

    def bounds(self):
        return [
            (p.domain.lbound(i), p.domain.ubound(i))
            for p in self._parameters
            if not p.fixed
            for i in range(p.count)
        ]

    def epsilons(self, free):
        free = np.asarray(free, dtype=np.float64)
        self._check_free(free)
        return np.array(
            [
                p.domain.epsilon(values, i)
                for p, values in self._free_slices(free)
                for i in range(p.count)
            ]
        )

    # scaling

    def is_scalable(self):
        return any(p.is_scale_sensitive(True) and not p.fixed for p in self._parameters)

    def rescale_variances(self, factor, full):
        buffer = np.array(self._check_full(full))
        pos = 0
        for p in self._parameters:
            pos = p.rescale_variances(factor, buffer, pos)
        return buffer

    # fixing

    def fix_model_parameters(self, predicate, full):
        """Fix the interpreters whose name matches ``predicate`` at their
        values in the full vector ``full``.

        ``predicate`` is a callable on names, a name, a collection of names
        or None (every interpreter).
        """
        match = _matcher(predicate)
        reader = Cursor(self._check_full(full))
        for p in self._parameters:
            if match(p.name):
                p.fix_model_parameter(reader)
            else:
                reader.skip(p.count)

    def free_model_parameters(self, predicate=None):
        match = _matcher(predicate)
        for p in self._parameters:
            if match(p.name):
                p.free()
