"""Exact-match scoring with graded fallbacks for near misses."""

from benchmaker.scoring.domain.result import ScoringResult

_CONTAINS_FLOOR = 0.6
_CONTAINS_CEILING = 0.95
_CASE_INSENSITIVE_CONTAINS_CEILING = 0.90
_EXTRA_TEXT_PENALTY = 0.35


def levenshtein_distance(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity: 1 - distance / longer length."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


def _contains_score(response: str, expected: str, ceiling: float) -> float:
    extra_ratio = (len(response) - len(expected)) / len(response)
    return max(_CONTAINS_FLOOR, ceiling - extra_ratio * _EXTRA_TEXT_PENALTY)


def exact_match(response: str, expected: str | None) -> ScoringResult:
    """Score ``response`` against ``expected``.

    Bands, strongest first: trimmed exact 1.0, case-insensitive 0.95,
    containment 0.6..0.95 (less extra text scores higher), case-insensitive
    containment 0.6..0.90, then case-sensitive edit-distance similarity
    scaled into 0..0.7.
    """
    if expected is None or not expected.strip():
        return ScoringResult(score=1.0, confidence=1.0, notes="No expected output; auto pass")

    response_t = response.strip()
    expected_t = expected.strip()

    if response_t == expected_t:
        return ScoringResult(score=1.0, confidence=1.0, notes="Exact match")

    response_l = response_t.lower()
    expected_l = expected_t.lower()

    if response_l == expected_l:
        return ScoringResult(score=0.95, confidence=1.0, notes="Case-insensitive match")

    if expected_t in response_t:
        score = _contains_score(response_t, expected_t, _CONTAINS_CEILING)
        return ScoringResult(
            score=score, confidence=0.9, notes="Response contains expected output"
        )

    if expected_l in response_l:
        score = _contains_score(response_l, expected_l, _CASE_INSENSITIVE_CONTAINS_CEILING)
        return ScoringResult(
            score=score,
            confidence=0.85,
            notes="Response contains expected output (case-insensitive)",
        )

    sim = similarity(response_t, expected_t)
    if sim > 0.5:
        return ScoringResult(
            score=sim * 0.7,
            confidence=max(0.4, sim * 0.8),
            notes=f"Partial match ({sim:.0%} similar)",
        )
    if sim > 0.2:
        return ScoringResult(
            score=sim * 0.4,
            confidence=0.3,
            notes=f"Weak match ({sim:.0%} similar)",
        )
    return ScoringResult(score=0.0, confidence=1.0, notes="No match")
