from dataclasses import dataclass

import numpy as np


@dataclass
class FilterResult:
    filtered_state: np.ndarray
    filtered_state_cov: np.ndarray
    predicted_state: np.ndarray
    predicted_state_cov: np.ndarray
    forecast: np.ndarray
    forecast_cov: np.ndarray
    forecast_error: np.ndarray
    llf: np.ndarray
    llf_obs: np.ndarray
    model: object
