"""Regex scoring — patterns written as /pattern/flags or as a bare pattern."""

import re

from benchmaker.scoring.domain.result import ScoringResult

_DELIMITED = re.compile(r"^/(.*)/([a-z]*)$", re.DOTALL)

_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}
# Accepted for compatibility with JavaScript-style patterns; no effect on search.
_IGNORED_FLAGS = frozenset("guy")


class InvalidPatternError(ValueError):
    pass


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile ``/pattern/flags`` or a bare pattern.

    Raises:
        InvalidPatternError: for an unknown flag or a pattern ``re`` rejects.
    """
    delimited = _DELIMITED.match(pattern)
    if delimited:
        source, flag_letters = delimited.group(1), delimited.group(2)
    else:
        source, flag_letters = pattern, ""

    flags = re.RegexFlag(0)
    for letter in flag_letters:
        if letter in _FLAGS:
            flags |= _FLAGS[letter]
        elif letter not in _IGNORED_FLAGS:
            raise InvalidPatternError(f"unknown regex flag {letter!r}")

    try:
        return re.compile(source, flags)
    except re.error as exc:
        raise InvalidPatternError(str(exc)) from exc


def regex_match(response: str, pattern: str | None) -> ScoringResult:
    if pattern is None or not pattern.strip():
        return ScoringResult(
            score=1.0, confidence=1.0, raw_score=100, max_score=100,
            notes="No pattern specified; auto pass",
        )

    try:
        compiled = compile_pattern(pattern.strip())
    except InvalidPatternError as exc:
        return ScoringResult(
            score=0.0, confidence=0.0, raw_score=0, max_score=100,
            notes=f"Invalid regex pattern: {exc}",
        )

    matched = compiled.search(response) is not None
    score = 1.0 if matched else 0.0
    return ScoringResult(
        score=score,
        confidence=1.0,
        raw_score=round(score * 100),
        max_score=100,
        notes=f"Pattern {'matched' if matched else 'did not match'}: {pattern.strip()}",
    )
