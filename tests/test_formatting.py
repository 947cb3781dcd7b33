import pytest

from growth_engine.formatting import format_impact, format_lever_value, format_mrr
from growth_engine.levers import LEVERS


@pytest.mark.parametrize(
    "value, expected",
    [
        (841635, "$842K"),
        (1848472, "$1.8M"),
        (1_000_000, "$1.0M"),
        (999, "$999"),
        (1000, "$1K"),
        (340_500, "$341K"),
        (0, "$0"),
        # halves round up, 19.5 -> 20
        (1_950_000, "$2.0M"),
    ],
)
def test_format_mrr(value, expected):
    assert format_mrr(value) == expected


def test_format_impact():
    assert format_impact(16) == "+16%"
    assert format_impact(-13) == "-13%"
    assert format_impact(0) == "0%"
    assert format_impact(None) == "n/a"


def test_format_lever_value():
    assert format_lever_value(LEVERS["arpu"], 9.0) == "$9K"
    assert format_lever_value(LEVERS["churn"], 2.5) == "2.5%"
