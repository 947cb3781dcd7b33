import pytest

from growth_engine.assumptions import DEFAULT_ASSUMPTIONS, build_assumptions
from growth_engine.session import GrowthSession


def test_new_session_is_unmodified():
    s = GrowthSession()
    assert not s.is_modified
    assert not s.assumptions_edited
    assert s.effective("churn") == DEFAULT_ASSUMPTIONS.churn_rate


def test_override_equal_to_baseline_is_still_an_override():
    s = GrowthSession()
    s.set_lever("churn", DEFAULT_ASSUMPTIONS.churn_rate)
    assert s.is_modified
    assert s.overrides.churn == 5


def test_set_lever_clamps_to_lever_range():
    s = GrowthSession()
    s.set_lever("churn", 0)
    s.set_lever("arpu", 50)
    assert s.effective("churn") == 0.5
    assert s.effective("arpu") == 20


def test_set_lever_none_clears_it():
    s = GrowthSession()
    s.set_lever("arpu", 9)
    s.set_lever("arpu", None)
    assert not s.is_modified


def test_editing_a_baseline_clears_its_override_only():
    s = GrowthSession()
    s.set_lever("churn", 2)
    s.set_lever("arpu", 9)
    s.set_assumption("churn_rate", 7)
    assert s.overrides.churn is None
    assert s.overrides.arpu == 9
    assert s.effective("churn") == 7


def test_editing_a_funnel_field_keeps_overrides():
    s = GrowthSession()
    s.set_lever("activation", 60)
    s.set_assumption("leads_per_month", 100)
    assert s.overrides.activation == 60
    assert s.assumptions_edited


def test_set_assumption_clamps_and_rejects_unknown_keys():
    s = GrowthSession()
    s.set_assumption("activation_rate", 0)
    assert s.assumptions.activation_rate == 10
    with pytest.raises(ValueError, match="Unknown assumption"):
        s.set_assumption("burn_rate", 3)


def test_hit_all_targets_and_resets():
    s = GrowthSession()
    s.hit_all_targets()
    assert (s.effective("churn"), s.effective("arpu"), s.effective("activation")) == (2, 9, 60)

    s.set_assumption("customers", 40)
    s.reset_levers()
    assert not s.is_modified
    assert s.assumptions.customers == 40

    s.reset_all()
    assert s.assumptions == DEFAULT_ASSUMPTIONS


def test_unknown_lever_rejected():
    with pytest.raises(ValueError, match="Unknown lever"):
        GrowthSession().set_lever("pricing", 3)


def test_dashboard_reflects_session_state():
    s = GrowthSession()
    before = s.dashboard()
    s.set_lever("churn", 2)
    after = s.dashboard()
    assert before["headline"]["lift"] == 0
    assert after["headline"]["lift"] == 16
    assert after["insight"]["template"] == "single_lever"


def test_build_assumptions_defaults_missing_fields():
    a = build_assumptions({"arpu": 40, "customers": 20})
    assert a.arpu == 30
    assert a.customers == 20
    assert a.churn_rate == DEFAULT_ASSUMPTIONS.churn_rate


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_inputs_are_rejected(value):
    s = GrowthSession()
    with pytest.raises(ValueError, match="finite"):
        s.set_assumption("arpu", value)
    with pytest.raises(ValueError, match="finite"):
        s.set_lever("churn", value)
    assert s.assumptions == DEFAULT_ASSUMPTIONS
    assert not s.is_modified
