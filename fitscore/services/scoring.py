"""Fit score calculation.

Two scoring contracts exist; a deployment uses one of them, selected by
``FIT_SCORE_VARIANT``:

* ``skills``: seniority points plus per-skill weights, normalised to 0-100.
* ``ratings``: the rounded mean of three 0-100 ratings.

Both functions are total: unknown seniority or skill names fall back to
default weights instead of raising.
"""

import math
from fractions import Fraction
from typing import Iterable, NamedTuple

SENIORITY_POINTS = {"Junior": 10, "Mid": 20, "Senior": 30}
SKILL_POINTS = {"Next.js": 7, "Supabase": 7, "Docker": 7, "TypeScript": 5, "Node.js": 5}
DEFAULT_SKILL_POINTS = 3
# raw points that map to a score of 100
MAX_RAW_POINTS = 80

SKILL_THRESHOLDS = ((75, "Ideal"), (50, "Promising"))
RATING_THRESHOLDS = ((80, "Extremely high fit"), (60, "Approved fit"), (40, "Questionable fit"))
OUT_OF_PROFILE = "Out of profile"

# labels from best to worst, per variant
CLASSIFICATIONS = {
    "skills": [label for _, label in SKILL_THRESHOLDS] + [OUT_OF_PROFILE],
    "ratings": [label for _, label in RATING_THRESHOLDS] + [OUT_OF_PROFILE],
}


class FitScore(NamedTuple):
    score: int
    classification: str


def _round_half_up(value: Fraction) -> int:
    return math.floor(value + Fraction(1, 2))


def _classify(score: int, thresholds) -> str:
    for minimum, label in thresholds:
        if score >= minimum:
            return label
    return OUT_OF_PROFILE


def classify_skill_score(score: int) -> str:
    return _classify(score, SKILL_THRESHOLDS)


def classify_rating_score(score: int) -> str:
    return _classify(score, RATING_THRESHOLDS)


def calculate_fit_score(seniority: str, skills: Iterable[str]) -> FitScore:
    """Score a candidate from seniority and skill names."""
    raw = SENIORITY_POINTS.get(seniority, 0)
    raw += sum(SKILL_POINTS.get(name, DEFAULT_SKILL_POINTS) for name in skills)
    score = min(_round_half_up(Fraction(raw * 100, MAX_RAW_POINTS)), 100)
    return FitScore(score, classify_skill_score(score))


def calculate_rating_score(performance: int, energy: int, culture: int) -> FitScore:
    """Score a candidate from three 0-100 ratings."""
    ratings = [max(0, min(100, int(v))) for v in (performance, energy, culture)]
    score = _round_half_up(Fraction(sum(ratings), 3))
    return FitScore(score, classify_rating_score(score))
