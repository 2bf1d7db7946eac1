import numpy as np
import pytest
from simd_msts import MstsMapping
from simd_msts.base.domain import ParamValidation
from simd_msts.base.errors import CompositionError
from simd_msts.base.errors import CursorUnderflowError
from simd_msts.items import ArItem
from simd_msts.items import CycleItem
from simd_msts.items import LocalLevelItem
from simd_msts.items import NoiseItem
from simd_msts.items import aggregation
from simd_msts.items import cumulator
from simd_msts.parameters import BoundedParameterInterpreter
from simd_msts.parameters import VarianceInterpreter
from simd_msts.ssf import Loading
from simd_msts.ssf import StateComponent


@pytest.fixture
def scaled():
    """One free bounded parameter, one fixed variance, one step using
    both."""
    seen = []

    def step(p, builder):
        seen.append(np.array(p[:2]))
        builder.add("x", StateComponent([[p[0]]], [[p[1]]]), Loading([1.0]))
        return 2

    mapping = MstsMapping()
    mapping.add(BoundedParameterInterpreter("rho", 0.5, lbound=0, ubound=1))
    mapping.add(VarianceInterpreter("var", 2.0, fixed=True))
    mapping.add(step)
    return mapping, seen


def test_scenario(scaled):
    mapping, seen = scaled
    assert mapping.parameters_count() == 2
    assert mapping.free_parameters_count() == 1

    model = mapping.build([0.7, 2.0])
    assert np.allclose(seen[-1], [0.7, 2.0])
    assert model.k_states == 1
    assert model.transition[0, 0] == 0.7

    assert np.allclose(mapping.decode([0.7]), [0.7, 2.0])
    assert np.allclose(mapping.encode([0.7, 2.0]), [0.7])
    assert np.allclose(mapping.rescale_variances(3.0, [0.7, 2.0]), [0.7, 18.0])
    assert np.allclose(mapping.default_parameters(), [0.5])
    assert np.allclose(mapping.fixed_parameters(), [2.0])
    assert mapping.is_scalable() is False


def test_build_sees_a_read_only_vector():
    def step(p, builder):
        with pytest.raises(ValueError):
            p[0] = 1.0
        return 1

    mapping = MstsMapping()
    mapping.add(VarianceInterpreter("v", 1.0))
    mapping.add(step)
    mapping.build([1.0])


def test_step_count_mismatch():
    mapping = MstsMapping()
    mapping.add(VarianceInterpreter("v", 1.0))
    mapping.add(VarianceInterpreter("w", 1.0))
    mapping.add(lambda p, builder: 1)
    with pytest.raises(CompositionError):
        mapping.build([1.0, 1.0])


def test_full_vector_of_wrong_length(scaled):
    mapping, _ = scaled
    with pytest.raises(ValueError):
        mapping.build([0.7])
    with pytest.raises(ValueError):
        mapping.encode([0.7, 2.0, 1.0])


def test_decode_underflow_and_leftovers(scaled):
    mapping, _ = scaled
    with pytest.raises(CursorUnderflowError):
        mapping.decode([])
    with pytest.raises(CompositionError):
        mapping.decode([0.7, 0.1])


def test_add_rejects_other_objects():
    mapping = MstsMapping()
    with pytest.raises(TypeError):
        mapping.add(3.0)


def test_duplicate_parameter_names():
    mapping = MstsMapping()
    mapping.add(VarianceInterpreter("v", 1.0))
    with pytest.raises(ValueError):
        mapping.add(VarianceInterpreter("v", 2.0))
    with pytest.raises(ValueError):
        MstsMapping.of(NoiseItem("n", 1.0), NoiseItem("n", 2.0))


def test_layout_matches_the_built_model(bsm_items):
    mapping = MstsMapping.of(*bsm_items)
    assert mapping.parameters_count() == 2 + 1 + 3 + 1
    assert mapping.free_parameters_count() == 6

    model = mapping.map(mapping.default_parameters())
    assert model.names == ("llt", "seas", "cycle", "noise")
    assert model.k_states == sum(item.state_dim() for item in bsm_items)
    assert model.component_range("cycle") == slice(13, 15)


def test_decode_encode(bsm_items):
    mapping = MstsMapping.of(*bsm_items)
    free = np.array([0.2, 0.3, 0.7, 30.0, 0.4, 1.5])
    full = mapping.decode(free)
    assert full[1] == 0.01
    assert np.allclose(mapping.encode(full), free)
    assert np.allclose(mapping.default_model_parameters()[:2], [0.1, 0.01])


def test_nested_items_keep_their_order():
    core = aggregation("agg", LocalLevelItem("l", 1.0), CycleItem("c", 0.5, 10.0, 1.0))
    mapping = MstsMapping.of(cumulator("cum", core, 4), NoiseItem("n", 1.0))
    assert [p.name for p in mapping.parameters()] == [
        "l.var",
        "c.factor",
        "c.period",
        "c.var",
        "n.var",
    ]
    model = mapping.map(mapping.default_parameters())
    assert model.k_states == 1 + 1 + 2 + 1
    assert not model.time_invariant


def test_fix_and_free(bsm_items):
    mapping = MstsMapping.of(*bsm_items)
    full = mapping.default_model_parameters()
    full[0] = 0.3

    mapping.fix_model_parameters("llt.lvar", full)
    assert mapping.parameter("llt.lvar").fixed
    assert mapping.parameter("llt.lvar").value == 0.3
    assert mapping.free_parameters_count() == 5

    mapping.fix_model_parameters(lambda name: name.startswith("cycle."), full)
    assert mapping.free_parameters_count() == 2

    # idempotent
    mapping.fix_model_parameters(["llt.lvar"], full)
    assert mapping.free_parameters_count() == 2

    mapping.free_model_parameters({"cycle.var", "llt.svar"})
    assert mapping.free_parameters_count() == 4
    mapping.free_model_parameters()
    assert mapping.free_parameters_count() == 7


def test_validate_projects_in_place():
    mapping = MstsMapping.of(CycleItem("c", 0.5, 10.0, 1.0), ArItem("ar", [-0.5], 1.0))
    free = np.array([1.5, 1.0, -2.0, -2.5, 1.0])
    assert not mapping.check_boundaries(free)
    assert mapping.validate(free) == ParamValidation.CHANGED
    assert free[0] == 1.0
    assert free[1] == pytest.approx(2.0 + 1e-6)
    assert free[2] == 2.0
    assert free[3] == pytest.approx(-0.4)
    assert mapping.check_boundaries(free)
    assert mapping.validate(free) == ParamValidation.VALID


def test_validate_checks_the_length():
    mapping = MstsMapping.of(NoiseItem("n", 1.0))
    with pytest.raises(ValueError):
        mapping.validate(np.array([1.0, 2.0]))


def test_bounds_and_epsilons():
    mapping = MstsMapping.of(
        CycleItem("c", 0.5, 10.0, 1.0, fixed_cycle=True), NoiseItem("n", 1.0)
    )
    assert mapping.bounds() == [(0.0, np.inf), (0.0, np.inf)]
    assert np.allclose(mapping.epsilons([1.0, 1.0]), [1e-6, 1e-6])

    mapping.free_model_parameters()
    assert mapping.bounds()[:2] == [(0, 1), (2, np.inf)]


def test_scalability(llevel_items):
    mapping = MstsMapping.of(*llevel_items)
    assert mapping.is_scalable()
    mapping.fix_model_parameters(None, mapping.default_model_parameters())
    assert not mapping.is_scalable()
    assert np.allclose(mapping.fixed_parameters(), [0.5, 2.0])
    assert mapping.default_parameters().shape == (0,)
    assert np.allclose(mapping.decode([]), [0.5, 2.0])


def test_empty_mapping_builds_an_empty_model():
    mapping = MstsMapping()
    mapping.add(lambda p, builder: 0)
    model = mapping.build([])
    assert model.k_states == 0


@pytest.mark.parametrize(
    "free", [[0.5, 1.0], np.array([1, 2]), np.array([0.5, 1.0], dtype=np.float32)]
)
def test_validate_needs_a_float_array(free):
    mapping = MstsMapping.of(
        CycleItem("c", 0.5, 10.0, 1.0, fixed_cycle=True), NoiseItem("n", 1.0)
    )
    with pytest.raises(TypeError):
        mapping.validate(free)


def test_validate_reports_invalid_proposals():
    mapping = MstsMapping.of(NoiseItem("a", 1.0), ArItem("ar", [-0.5], 1.0))
    free = np.array([np.nan, -2.5, 1.0])
    assert mapping.validate(free) == ParamValidation.INVALID
    assert not mapping.check_boundaries(free)

    free = np.array([1.0, np.inf, 1.0])
    assert mapping.validate(free) == ParamValidation.CHANGED
    assert np.allclose(free, [1.0, 0.0, 1.0])
