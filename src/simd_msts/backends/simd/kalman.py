import numpy as np
import simdkalman
from simd_msts.results import FilterResult
from simdkalman.primitives import ddot
from simdkalman.primitives import ddot_t_right
from simdkalman.primitives import dinv

LOG_2PI = np.log(2 * np.pi)


def update_with_nan_check(
    prior_mean,
    prior_covariance,
    observation_model,
    observation_noise,
    measurement,
    univariate=True,
):

    n = prior_mean.shape[1]
    m = observation_model.shape[1]

    assert measurement.shape[-2:] == (m, 1)
    assert prior_covariance.shape[-2:] == (n, n)
    assert observation_model.shape[-2:] == (m, n)
    assert observation_noise.shape[-2:] == (m, m)

    # y - H * mp
    v = measurement - ddot(observation_model, prior_mean)

    # H * Pp * H.t + R
    S = (
        ddot(observation_model, ddot_t_right(prior_covariance, observation_model))
        + observation_noise
    )
    if univariate:
        invS = 1.0 / S
    else:
        invS = dinv(S)

    # Kalman gain: Pp * H.t * invS
    K = ddot(ddot_t_right(prior_covariance, observation_model), invS)

    # K * v + mp
    posterior_mean = ddot(K, v) + prior_mean

    # Pp - K * H * Pp
    posterior_covariance = prior_covariance - ddot(
        K, ddot(observation_model, prior_covariance)
    )

    # gaussian log density of the innovation
    l = np.ravel(ddot(v.transpose((0, 2, 1)), ddot(invS, v)))
    l += np.log(np.linalg.det(S)) + m * LOG_2PI
    l *= -0.5

    # nan checks
    is_nan = np.ravel(np.any(np.isnan(posterior_mean), axis=1))

    posterior_mean[is_nan, ...] = prior_mean[is_nan, ...]
    posterior_covariance[is_nan, ...] = prior_covariance[is_nan, ...]
    K[is_nan, ...] = 0
    l[is_nan] = 0

    return posterior_mean, posterior_covariance, K, l


def kalman_filter(model, endog):
    """Run the filter of ``model`` over every series of ``endog`` at once.

    ``endog`` is either one series of shape (nobs,) or a batch of shape
    (n_series, nobs); all series share the model.
    """
    data = np.asarray(endog, dtype=np.float64)
    if data.ndim == 1:
        data = data[np.newaxis, :]
    assert data.ndim == 2

    n_vars, n_measurements = data.shape
    n_states = model.k_states

    m = np.vstack([model.initial_state.reshape((n_states, 1))[np.newaxis, ...]] * n_vars)
    P = np.vstack([model.initial_cov[np.newaxis, ...]] * n_vars)
    R = np.array([[model.obs_cov]])

    filtered_state_mean = np.empty((n_vars, n_measurements, n_states))
    filtered_state_cov = np.empty((n_vars, n_measurements, n_states, n_states))
    forecast_mean = np.empty((n_vars, n_measurements))
    forecast_cov = np.empty((n_vars, n_measurements))
    predicted_state_mean = np.empty((n_vars, n_measurements + 1, n_states))
    predicted_state_cov = np.empty((n_vars, n_measurements + 1, n_states, n_states))
    llf_obs = np.empty((n_vars, n_measurements))

    predicted_state_mean[:, 0, :] = m[..., 0]
    predicted_state_cov[:, 0, :, :] = P

    for i in range(n_measurements):
        H_t = model.design_at(i)[np.newaxis, np.newaxis, :]
        y = data[:, i].reshape((n_vars, 1, 1))

        # forecast of the endog var
        obs_mean, obs_cov = simdkalman.primitives.predict_observation(m, P, H_t, R)
        forecast_mean[:, i] = obs_mean[:, 0, 0]
        forecast_cov[:, i] = obs_cov[:, 0, 0]

        # update. R matrix is reshaped to be 3d, it's a requirement for the function
        m, P, K, l = update_with_nan_check(m, P, H_t, R[np.newaxis, ...], y)

        filtered_state_mean[:, i, :] = m[..., 0]
        filtered_state_cov[:, i, :, :] = P
        llf_obs[:, i] = l

        # predict
        m, P = simdkalman.primitives.predict(
            m, P, model.transition_at(i), model.innovation_cov_at(i)
        )

        predicted_state_mean[:, i + 1, :] = m[..., 0]
        predicted_state_cov[:, i + 1, :, :] = P

    return FilterResult(
        filtered_state=filtered_state_mean,
        filtered_state_cov=filtered_state_cov,
        predicted_state=predicted_state_mean,
        predicted_state_cov=predicted_state_cov,
        forecast=forecast_mean,
        forecast_cov=forecast_cov,
        forecast_error=data - forecast_mean,
        llf=llf_obs.sum(axis=1),
        llf_obs=llf_obs,
        model=model,
    )
