from growth_engine.assumptions import DEFAULT_ASSUMPTIONS
from growth_engine.levers import LeverOverrides, target_overrides
from growth_engine.plan import INITIATIVES, prioritize_initiatives

A = DEFAULT_ASSUMPTIONS


def test_declared_order():
    assert [i.lever_id for i in INITIATIVES] == ["churn", "activation", "arpu"]


def test_default_plan_ranked_by_upside():
    plan = prioritize_initiatives(A, LeverOverrides())
    assert plan["lever"].tolist() == ["arpu", "activation", "churn"]
    assert plan["remaining"].tolist() == [50, 27, 16]
    assert plan["slot"].tolist() == ["Week 1–2", "Week 2–3", "Week 3–4"]


def test_reaching_a_target_drops_it_to_the_bottom():
    plan = prioritize_initiatives(A, LeverOverrides(arpu=9))
    assert plan["lever"].tolist() == ["activation", "churn", "arpu"]
    assert plan.set_index("lever").loc["arpu", "remaining"] == 0


def test_overshooting_a_target_never_goes_negative():
    plan = prioritize_initiatives(A, LeverOverrides(arpu=12))
    row = plan.set_index("lever").loc["arpu"]
    assert row["current_impact"] == 100
    assert row["remaining"] == 0
    assert (plan["remaining"] >= 0).all()


def test_all_targets_reached_keeps_declared_order():
    plan = prioritize_initiatives(A, target_overrides())
    assert plan["remaining"].tolist() == [0, 0, 0]
    assert plan["lever"].tolist() == ["churn", "activation", "arpu"]


def test_partial_progress_shrinks_remaining():
    # churn 3 captures 10 of the 16 points available at churn 2
    plan = prioritize_initiatives(A, LeverOverrides(churn=3))
    row = plan.set_index("lever").loc["churn"]
    assert row["upside"] == 16
    assert row["current_impact"] == 10
    assert row["remaining"] == 6


def test_plan_rows_carry_display_copy():
    plan = prioritize_initiatives(A, LeverOverrides())
    for col in ("lever_label", "title", "what", "deliverable", "metric"):
        assert plan[col].map(bool).all()
