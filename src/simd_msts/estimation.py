import numpy as np

from .base.domain import ParamValidation
from .mapping import MstsMapping


class LikelihoodFunction:
    """Negative log-likelihood of a structural model as a function of its
    free parameters, for use by an external minimiser.

    The items are duplicated on construction, so that several functions
    (one per search trial or thread) never share interpreters. Proposals
    that can't be projected onto the parameter domains (nan, say) score
    an infinite negative log-likelihood.
    """

    def __init__(self, items, endog, obs_cov=0.0):
        self.items = [item.duplicate() for item in items]
        self.mapping = MstsMapping.of(*self.items, obs_cov=obs_cov)
        self.endog = np.asarray(endog, dtype=np.float64)
        self.obs_cov = obs_cov

    def duplicate(self):
        return LikelihoodFunction(self.items, self.endog, self.obs_cov)

    def start(self):
        return self.mapping.default_parameters()

    def bounds(self):
        return self.mapping.bounds()

    def _validated(self, free):
        free = np.array(free, dtype=np.float64)
        return free, self.mapping.validate(free)

    def model(self, free):
        free, status = self._validated(free)
        if status == ParamValidation.INVALID:
            raise ValueError("Invalid model parameters: {}".format(free.tolist()))
        return self.mapping.map(free)

    def loglikelihood(self, free):
        free, status = self._validated(free)
        if status == ParamValidation.INVALID:
            return -np.inf
        return self.mapping.map(free).loglikelihood(self.endog)

    def __call__(self, free):
        return -self.loglikelihood(free)
