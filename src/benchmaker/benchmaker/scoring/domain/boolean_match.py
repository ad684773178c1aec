"""Boolean scoring — pass when the expected text appears anywhere in the response."""

from benchmaker.scoring.domain.result import ScoringResult


def boolean_match(response: str, expected: str | None) -> ScoringResult:
    if expected is None or not expected.strip():
        return ScoringResult(score=1.0, confidence=1.0, notes="No expected output; auto pass")

    if expected.strip().lower() in response.lower():
        return ScoringResult(score=1.0, confidence=1.0, notes="Pass")
    return ScoringResult(score=0.0, confidence=1.0, notes="Fail")
