import numpy as np

from .errors import CursorUnderflowError


class Cursor:
    """One-directional reader over a flat parameter vector.

    Reads never go past the end of the underlying vector: an overrun
    raises before anything is consumed, so a partially read slice can't
    leak into a buffer.
    """

    def __init__(self, values):
        self._values = np.asarray(values, dtype=np.float64).ravel()
        self._pos = 0

    def __len__(self):
        return self._values.shape[0]

    @property
    def position(self):
        return self._pos

    @property
    def remaining(self):
        return self._values.shape[0] - self._pos

    @property
    def exhausted(self):
        return self.remaining == 0

    def _check(self, n):
        if n < 0:
            raise ValueError("Cannot move a cursor backwards: {!r}".format(n))
        if n > self.remaining:
            raise CursorUnderflowError(
                "Cursor underflow: {} value(s) requested at position {},"
                " {} available".format(n, self._pos, self.remaining)
            )

    def next(self):
        self._check(1)
        value = self._values[self._pos]
        self._pos += 1
        return float(value)

    def take(self, n):
        self._check(n)
        values = self._values[self._pos : self._pos + n].copy()
        self._pos += n
        return values

    def skip(self, n):
        self._check(n)
        self._pos += n
