import pytest

from solarsite.core.models import CriteriaScores, LocationInput, ValidationError
from solarsite.scoring.comparison import compare_locations, comparison_table


def _loc(address, demand, grid, accessibility, competition, recommendation=None):
    scores = CriteriaScores(demand=demand, grid=grid, accessibility=accessibility, competition=competition)
    return LocationInput(address=address, scores=scores, recommendation=recommendation)


@pytest.fixture
def three_sites():
    return [
        _loc("A", 90, 80, 70, 60, recommendation="hybrid"),
        _loc("B", 60, 90, 80, 40),
        _loc("C", 50, 50, 90, 90),
    ]


def test_rankings_per_metric(three_sites):
    result = compare_locations(three_sites)
    by_address = {loc.address: loc for loc in result.locations}

    assert [loc.address for loc in result.locations] == ["A", "B", "C"]
    assert {a: by_address[a].scores["overall"] for a in "ABC"} == {"A": 77, "B": 69, "C": 68}
    assert {a: by_address[a].rankings["overall"] for a in "ABC"} == {"A": 1, "B": 2, "C": 3}
    assert by_address["C"].rankings["accessibility"] == 1
    assert by_address["A"].rankings["accessibility"] == 3
    assert result.best_overall == "A"


def test_strengths_and_weaknesses_are_rank_based(three_sites):
    a = compare_locations(three_sites).locations[0]
    assert a.strengths == ["High demand", "Grid readiness", "Low competition"]
    # with three sites rank 2 is also second-worst
    assert a.weaknesses == ["Grid", "Accessibility", "Competition"]
    assert a.recommendation == "hybrid"


def test_last_place_is_always_a_weakness(three_sites):
    c = compare_locations(three_sites).locations[2]
    assert "Demand" in c.weaknesses
    assert "Grid" in c.weaknesses
    assert c.recommendation == "fast-charging"


def test_best_in_categories_uses_raw_scores(three_sites):
    result = compare_locations(three_sites)
    assert result.best_in_categories == {"demand": "A", "grid": "B", "accessibility": "C", "competition": "C"}


def test_ties_keep_input_order():
    result = compare_locations([_loc("first", 60, 60, 60, 60), _loc("second", 60, 60, 60, 60)])
    first, second = result.locations
    assert first.rankings["overall"] == 1
    assert second.rankings["overall"] == 2
    assert result.best_overall == "first"
    assert result.best_in_categories["demand"] == "first"


def test_recommendation_narrative(three_sites):
    text = compare_locations(three_sites).recommendations
    assert text.startswith("Based on a comparison of 3 locations, A is the best overall choice with a score of 77/100.")
    assert "Key strengths: High demand, Grid readiness, Low competition." in text


@pytest.mark.parametrize("count", [1, 11])
def test_location_count_limits(count):
    with pytest.raises(ValidationError):
        compare_locations([_loc(f"site{i}", 50, 50, 50, 50) for i in range(count)])


def test_comparison_table_sorted_by_overall_rank():
    result = compare_locations([_loc("low", 10, 10, 10, 10), _loc("high", 90, 90, 90, 90)])
    df = comparison_table(result)
    assert list(df["address"]) == ["high", "low"]
    assert list(df["overall_rank"]) == [1, 2]
    assert {"demand", "demand_rank", "strengths", "weaknesses", "recommendation"} <= set(df.columns)


def test_uniform_sites_rank_by_overall():
    result = compare_locations([_loc("A", 90, 90, 90, 90), _loc("B", 70, 70, 70, 70), _loc("C", 50, 50, 50, 50)])
    a, b, c = result.locations
    assert [a.scores["overall"], b.scores["overall"], c.scores["overall"]] == [90, 70, 50]
    assert [a.rankings["overall"], b.rankings["overall"], c.rankings["overall"]] == [1, 2, 3]
    assert a.strengths == b.strengths == ["High demand", "Grid readiness", "Accessibility", "Low competition"]
    assert c.weaknesses == ["Demand", "Grid", "Accessibility", "Competition"]
