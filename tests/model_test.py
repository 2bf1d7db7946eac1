import numpy as np
import pytest
from simd_msts import ModelBuilder
from simd_msts import MstsMapping
from simd_msts.estimation import LikelihoodFunction
from simd_msts.items import ArItem
from simd_msts.items import LocalLevelItem
from simd_msts.items import NoiseItem
from simd_msts.items import cumulator
from simd_msts.ssf import DIFFUSE_VARIANCE
from simd_msts.ssf import Loading
from simd_msts.ssf import StateComponent
from statsmodels.tsa.statespace.structural import UnobservedComponents


def test_builder_rejects_duplicate_names():
    builder = ModelBuilder()
    builder.add("a", StateComponent([[1.0]], [[1.0]]), Loading([1.0]))
    with pytest.raises(ValueError):
        builder.add("a", StateComponent([[1.0]], [[1.0]]))
    assert len(builder) == 1


def test_builder_checks_loading_dim():
    builder = ModelBuilder()
    with pytest.raises(ValueError):
        builder.add("a", StateComponent([[1.0]], [[1.0]]), Loading([1.0, 0.0]))


def test_offset_loading_adds_up():
    builder = ModelBuilder(obs_cov=0.5)
    builder.add(
        "llt",
        StateComponent([[1.0, 1.0], [0.0, 1.0]], np.eye(2)),
        Loading([1.0, 0.0]),
        offset_loading=Loading([0.0, 2.0]),
    )
    builder.add("hidden", StateComponent([[0.5]], [[1.0]]))
    model = builder.build()

    assert model.k_states == 3
    assert model.obs_cov == 0.5
    assert np.allclose(model.design, [[1.0, 2.0, 0.0]])
    assert np.allclose(model.transition[2, 2], 0.5)
    assert model.component_range("hidden") == slice(2, 3)
    assert "llt" in str(model)


def test_filter_shapes(ts1ts2, bsm_items):
    mapping = MstsMapping.of(*bsm_items)
    model = mapping.map(mapping.default_parameters())
    endog = ts1ts2.copy()
    endog[:, 10:20] = np.nan

    r = model.filter(endog)
    n_series, nobs = endog.shape
    k = model.k_states
    assert r.filtered_state.shape == (n_series, nobs, k)
    assert r.filtered_state_cov.shape == (n_series, nobs, k, k)
    assert r.predicted_state.shape == (n_series, nobs + 1, k)
    assert r.forecast.shape == (n_series, nobs)
    assert r.forecast_cov.shape == (n_series, nobs)
    assert r.llf.shape == (n_series,)
    assert np.all(np.isfinite(r.llf))
    assert np.all(r.llf_obs[:, 10:20] == 0)
    # no observation: the filter keeps the prediction
    assert np.allclose(r.filtered_state[:, 10], r.predicted_state[:, 10])


def test_single_series(ts1ts2, llevel_items):
    mapping = MstsMapping.of(*llevel_items)
    model = mapping.map(mapping.default_parameters())
    r = model.filter(ts1ts2[0])
    assert r.llf.shape == (1,)
    assert model.loglikelihood(ts1ts2[0]) == pytest.approx(r.llf[0])


def test_local_level_matches_statsmodels(ts1ts2):
    level_var, irr_var = 0.5, 2.0
    mapping = MstsMapping.of(LocalLevelItem("l", level_var), NoiseItem("n", irr_var))
    r = mapping.map([level_var, irr_var]).filter(ts1ts2)

    for i in range(ts1ts2.shape[0]):
        m = UnobservedComponents(ts1ts2[i], level="llevel")
        m.ssm.initialization.set(
            index=None,
            initialization_type="known",
            constant=np.zeros(m.ssm.k_states),
            stationary_cov=np.eye(m.ssm.k_states) * DIFFUSE_VARIANCE,
        )
        params = np.array([irr_var, level_var])
        res = m.filter(params)

        assert np.allclose(m.loglikeobs(params)[1:], r.llf_obs[i, 1:])
        assert np.allclose(res.filtered_state[0, 1:], r.filtered_state[i, 1:, 0])
        assert np.allclose(res.forecasts[0, 1:], r.forecast[i, 1:])


def test_cumulated_flow_with_missing_periods(ts1ts2):
    # quarterly sums of a monthly level, observed at the end of each quarter
    mapping = MstsMapping.of(cumulator("q", LocalLevelItem("l", 0.1), 3), obs_cov=0.01)
    model = mapping.map(mapping.default_parameters())
    assert not model.time_invariant

    endog = np.full(ts1ts2.shape, np.nan)
    endog[:, 2::3] = ts1ts2[:, 2::3] * 3
    r = model.filter(endog)
    assert np.all(np.isfinite(r.llf))
    assert np.all(r.llf_obs[:, 0::3] == 0)


def test_likelihood_function(ts1ts2, llevel_items):
    f = LikelihoodFunction(llevel_items, ts1ts2[0])
    assert f.items[0] is not llevel_items[0]
    assert np.allclose(f.start(), [0.5, 2.0])
    assert f.bounds() == [(0.0, np.inf), (0.0, np.inf)]

    value = f(f.start())
    mapping = MstsMapping.of(*llevel_items)
    assert value == pytest.approx(-mapping.map([0.5, 2.0]).loglikelihood(ts1ts2[0]))

    # negative variances are projected back before mapping
    assert f([-0.5, 2.0]) == pytest.approx(value)

    g = f.duplicate()
    g.mapping.fix_model_parameters("l.var", [0.5, 2.0])
    assert f.mapping.free_parameters_count() == 2
    assert g.start().shape == (1,)


def test_likelihood_of_invalid_proposals(ts1ts2, llevel_items):
    f = LikelihoodFunction(llevel_items, ts1ts2[0])
    assert f([np.nan, 2.0]) == np.inf
    assert f.loglikelihood([0.5, np.inf]) == -np.inf
    with pytest.raises(ValueError):
        f.model([np.nan, 2.0])
    # an infinite AR coefficient is reset, not rejected
    g = LikelihoodFunction([ArItem("ar", [-0.5], 1.0), NoiseItem("n", 1.0)], ts1ts2[0])
    assert np.isfinite(g([np.inf, 1.0, 1.0]))
