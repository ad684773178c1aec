"""Numeric scoring — any number in the response within tolerance of the expected value."""

import math
import re

from benchmaker.scoring.domain.result import ScoringResult

DEFAULT_TOLERANCE = 0.01
_PARTIAL_CREDIT_LIMIT = 0.25

_NUMBER = re.compile(r"-?\d+\.?\d*(?:[eE][+-]?\d+)?")


def extract_numbers(text: str) -> list[float]:
    """Every numeric token in ``text``: negatives, decimals, scientific notation."""
    numbers: list[float] = []
    for token in _NUMBER.findall(text):
        try:
            value = float(token)
        except ValueError:
            continue
        if math.isfinite(value):
            numbers.append(value)
    return numbers


def _parse_expected(expected: str) -> float | None:
    """Leading number of the expected text, or None when it does not start with one."""
    match = _NUMBER.match(expected.strip())
    if match is None:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def _relative_error(actual: float, expected: float) -> float:
    if expected == 0:
        return abs(actual)
    return abs(actual - expected) / abs(expected)


def numeric_tolerance(
    response: str, expected: str | None, tolerance: float | None = None
) -> ScoringResult:
    """Score by the closest number in ``response``.

    A number matches when its absolute or relative difference is within
    ``tolerance``. Otherwise the closest number earns partial credit that
    falls to zero at a relative error of 25%.
    """
    tol = DEFAULT_TOLERANCE if tolerance is None else tolerance

    if expected is None or not expected.strip():
        return ScoringResult(
            score=1.0, confidence=1.0, raw_score=100, max_score=100,
            notes="No expected value; auto pass",
        )

    target = _parse_expected(expected)
    if target is None:
        return ScoringResult(
            score=0.0, confidence=0.0, raw_score=0, max_score=100,
            notes=f"Expected value is not a number: {expected.strip()!r}",
        )

    found = extract_numbers(response)
    if not found:
        return ScoringResult(
            score=0.0, confidence=1.0, raw_score=0, max_score=100,
            notes="No numbers found in response",
        )

    for value in found:
        if abs(value - target) <= tol or _relative_error(value, target) <= tol:
            return ScoringResult(
                score=1.0, confidence=1.0, raw_score=100, max_score=100,
                notes=f"Exact: {value:g} within tolerance of {target:g}",
            )

    closest = min(found, key=lambda v: abs(v - target))
    rel = _relative_error(closest, target)
    if rel >= _PARTIAL_CREDIT_LIMIT:
        return ScoringResult(
            score=0.0, confidence=1.0, raw_score=0, max_score=100,
            notes=f"Off: closest {closest:g} vs {target:g} ({rel:.1%} error)",
        )

    score = 1.0 - math.sqrt(rel / _PARTIAL_CREDIT_LIMIT)
    label = "Close" if rel < 0.1 else "Partial"
    return ScoringResult(
        score=score,
        confidence=max(0.5, 1.0 - rel * 2),
        raw_score=round(score * 100),
        max_score=100,
        notes=f"{label}: closest {closest:g} vs {target:g} ({rel:.1%} error)",
    )
