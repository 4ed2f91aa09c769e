"""
Urgency scoring for incidents.

Urgency is an integer from 1 (lowest) to 10 (highest) derived from the
incident severity and how long ago it was reported:

- High severity starts at 8 and escalates over hours
- Medium severity starts at 5 and escalates over days
- Low severity starts at 2 and escalates over weeks

All functions here are pure; the caller supplies the age in hours.
"""

import math
from typing import Dict, Optional, Tuple

MIN_URGENCY = 1
MAX_URGENCY = 10
URGENT_THRESHOLD = 7

BASE_URGENCY: Dict[str, int] = {
    "High": 8,
    "Medium": 5,
    "Low": 2,
}
UNKNOWN_SEVERITY_BASE = 1

# (upper bound in hours, multiplier); None is the open-ended last tier
AGE_MULTIPLIER_TIERS: Dict[str, Tuple[Tuple[Optional[float], float], ...]] = {
    "High": (
        (1, 1.0),
        (4, 1.2),
        (24, 1.4),
        (48, 1.6),
        (None, 2.0),
    ),
    "Medium": (
        (24, 1.0),
        (72, 1.2),
        (168, 1.4),
        (None, 1.6),
    ),
    "Low": (
        (168, 1.0),
        (720, 1.2),
        (None, 1.4),
    ),
}
DEFAULT_MULTIPLIER = 1.0

# (minimum score, label), evaluated top-down
URGENCY_LABELS: Tuple[Tuple[int, str], ...] = (
    (9, "Critical - Immediate Action Required"),
    (7, "High - Action Required Today"),
    (5, "Medium - Action Required This Week"),
    (3, "Low - Action Required Soon"),
)
FALLBACK_LABEL = "Minimal - Action When Convenient"


def _key(severity) -> str:
    return getattr(severity, "value", severity)


def base_urgency(severity) -> int:
    return BASE_URGENCY.get(_key(severity), UNKNOWN_SEVERITY_BASE)


def age_multiplier(severity, age_hours: float) -> float:
    """Return the multiplier of the first tier whose upper bound is >= age_hours."""
    tiers = AGE_MULTIPLIER_TIERS.get(_key(severity))
    if tiers is None:
        return DEFAULT_MULTIPLIER
    for upper_bound, multiplier in tiers:
        if upper_bound is None or age_hours <= upper_bound:
            return multiplier
    return tiers[-1][1]


def calculate_urgency(severity, age_hours: float) -> int:
    """
    Calculate the urgency score for a severity and an age.

    Args:
        severity: A Severity or its canonical string value
        age_hours: Hours since the incident was reported

    Returns:
        ceil(base * multiplier), clamped to [1, 10]
    """
    raw = base_urgency(severity) * age_multiplier(severity, age_hours)
    # products such as 5 * 1.4 can land a hair above the integer
    score = math.ceil(round(raw, 6))
    return max(MIN_URGENCY, min(MAX_URGENCY, score))


def describe_urgency(score: int) -> str:
    for minimum, label in URGENCY_LABELS:
        if score >= minimum:
            return label
    return FALLBACK_LABEL


def is_urgent(score: int) -> bool:
    return score >= URGENT_THRESHOLD
