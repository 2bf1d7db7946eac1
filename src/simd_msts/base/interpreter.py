import copy
import logging

import numpy as np

logger = logging.getLogger(__name__)


class ParameterInterpreter:
    """Owner of one named slice of a model's parameter vector.

    An interpreter sits between the optimizer's free vector (free
    parameters only) and the full vector (every parameter, fixed values
    inlined). When fixed, the stored values are authoritative and the
    free vector is never read for this slice; when free, the free vector
    is.

    Buffers are flat float arrays addressed by an integer position; the
    free side is always read through a :class:`Cursor`.
    """

    def __init__(self, name, values, fixed, domain):
        self.name = name
        self.values = np.array(values, dtype=np.float64).ravel()
        self.fixed = bool(fixed)
        self._domain = domain

        if domain.dim != self.values.shape[0]:
            raise ValueError(
                "Domain of {!r} has dimension {}, but the interpreter holds"
                " {} parameter(s)".format(name, domain.dim, self.values.shape[0])
            )

    def __repr__(self):
        return "{}({!r}, values={}, fixed={})".format(
            type(self).__name__, self.name, self.values.tolist(), self.fixed
        )

    @property
    def count(self):
        return self.values.shape[0]

    def parameters_count(self):
        return self.count

    def is_fixed(self):
        return self.fixed

    @property
    def domain(self):
        return self._domain

    def get_domain(self):
        return self._domain

    def duplicate(self):
        return copy.deepcopy(self)

    def decode(self, reader, buffer, pos):
        n = self.count
        if self.fixed:
            buffer[pos : pos + n] = self.values
        else:
            buffer[pos : pos + n] = reader.take(n)
        return pos + n

    def encode(self, reader, buffer, pos):
        n = self.count
        if self.fixed:
            reader.skip(n)
        else:
            buffer[pos : pos + n] = reader.take(n)
        return pos + n

    def fix_model_parameter(self, reader):
        self.values[:] = reader.take(self.count)
        self.fixed = True
        logger.debug("Fixed %s at %s", self.name, self.values.tolist())

    def free(self):
        self.fixed = False
        logger.debug("Freed %s", self.name)

    def fill_default(self, buffer, pos):
        if not self.fixed:
            return pos
        buffer[pos : pos + self.count] = self.values
        return pos + self.count

    def is_scale_sensitive(self, variance):
        return False

    def rescale_variances(self, factor, buffer, pos):
        return pos + self.count
