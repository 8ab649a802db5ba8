"""Side-by-side comparison and ranking of 2-10 scored locations."""
from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from solarsite.core.models import (
    CRITERIA,
    METRICS,
    ComparisonResult,
    InfrastructureType,
    LocationComparison,
    LocationInput,
    ValidationError,
)

MIN_LOCATIONS = 2
MAX_LOCATIONS = 10

STRENGTH_LABELS = {
    "demand": "High demand",
    "grid": "Grid readiness",
    "accessibility": "Accessibility",
    "competition": "Low competition",
}
WEAKNESS_LABELS = {
    "demand": "Demand",
    "grid": "Grid",
    "accessibility": "Accessibility",
    "competition": "Competition",
}


def _rank_by_metric(score_rows: Sequence[Dict[str, float]], metric: str) -> List[int]:
    """Rank per input position, 1 = highest. ``sorted`` is stable, so ties keep input order."""
    order = sorted(range(len(score_rows)), key=lambda i: score_rows[i][metric], reverse=True)
    ranks = [0] * len(score_rows)
    for rank, idx in enumerate(order, start=1):
        ranks[idx] = rank
    return ranks


def _narrative(count: int, best: LocationComparison) -> str:
    text = (
        f"Based on a comparison of {count} locations, {best.address} is the best overall choice "
        f"with a score of {best.scores['overall']}/100."
    )
    if best.strengths:
        text += f" Key strengths: {', '.join(best.strengths)}."
    if best.weaknesses:
        text += f" Watch out for: {', '.join(best.weaknesses)}."
    return text


def compare_locations(locations: Sequence[LocationInput]) -> ComparisonResult:
    """Rank locations on every metric and pick the best overall and per category.

    Raises
    ------
    ValidationError
        If fewer than 2 or more than 10 locations are given.
    """
    count = len(locations)
    if count < MIN_LOCATIONS:
        raise ValidationError(f"At least {MIN_LOCATIONS} locations required for comparison")
    if count > MAX_LOCATIONS:
        raise ValidationError(f"Maximum {MAX_LOCATIONS} locations allowed for comparison")

    score_rows = [loc.scores.as_dict() for loc in locations]
    ranks = {metric: _rank_by_metric(score_rows, metric) for metric in METRICS}
    worst_rank = count

    comparisons: List[LocationComparison] = []
    for idx, loc in enumerate(locations):
        rankings = {metric: ranks[metric][idx] for metric in METRICS}
        strengths = [STRENGTH_LABELS[c] for c in CRITERIA if rankings[c] <= 2]
        weaknesses = [WEAKNESS_LABELS[c] for c in CRITERIA if rankings[c] >= worst_rank - 1]
        comparisons.append(
            LocationComparison(
                address=loc.address,
                location_id=loc.location_id,
                scores=score_rows[idx],
                rankings=rankings,
                strengths=strengths,
                weaknesses=weaknesses,
                recommendation=loc.recommendation or InfrastructureType.FAST_CHARGING.value,
            )
        )

    best = comparisons[0]
    for current in comparisons[1:]:
        if current.rankings["overall"] < best.rankings["overall"]:
            best = current

    # Raw-score argmax, kept separate from the rank-based strengths.
    best_in_categories: Dict[str, str] = {}
    for criterion in CRITERIA:
        leader = comparisons[0]
        for current in comparisons[1:]:
            if current.scores[criterion] > leader.scores[criterion]:
                leader = current
        best_in_categories[criterion] = leader.address

    return ComparisonResult(
        locations=comparisons,
        best_overall=best.address,
        best_in_categories=best_in_categories,
        recommendations=_narrative(count, best),
    )


def comparison_table(result: ComparisonResult) -> pd.DataFrame:
    """Flatten a comparison into one row per location, sorted by overall rank."""
    rows = []
    for loc in result.locations:
        row = {"address": loc.address}
        for metric in METRICS:
            row[metric] = loc.scores[metric]
            row[f"{metric}_rank"] = loc.rankings[metric]
        row["strengths"] = ", ".join(loc.strengths)
        row["weaknesses"] = ", ".join(loc.weaknesses)
        row["recommendation"] = loc.recommendation
        rows.append(row)
    df = pd.DataFrame(rows)
    return df.sort_values("overall_rank", kind="stable").reset_index(drop=True)


__all__ = ["compare_locations", "comparison_table", "MIN_LOCATIONS", "MAX_LOCATIONS"]
