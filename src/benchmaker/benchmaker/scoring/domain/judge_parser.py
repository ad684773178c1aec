"""Judge response parser — extracts a numeric verdict from a judge model's reply.

Judge replies come in whatever shape the model felt like producing, so the
parser is an ordered cascade of independent stages. The first stage that
returns a result wins; stages never merge partial findings.

Every result is expressed on a 0-100 scale (``raw_score``/``max_score``) and
normalized onto [0, 1] in ``score``. Values of 10 or less without an explicit
``/100`` denominator are read as a 0-10 scale and multiplied by 10.
"""

import json
import re
from collections.abc import Callable, Iterator
from typing import Any

from benchmaker.scoring.domain.result import ScoringResult

MAX_SCORE = 100.0
STRUCTURED_CONFIDENCE = 0.85
JSON_CONFIDENCE = 0.9
FREE_TEXT_CONFIDENCE = 0.7
RAW_REPLY_PREVIEW_CHARS = 200

_NUMBER = r"(\d+(?:\.\d+)?)"
_DENOMINATOR = r"(?:\s*/\s*(10|100)\b)?"

_CONSTRAINT = re.compile(
    r"\[?\s*constraint\s+satisfaction\s*\]?\s*[:=]\s*\[?\s*(yes|no)\b", re.IGNORECASE
)
_SEMANTIC = re.compile(
    r"\[?\s*semantic\s+score\s*\]?\s*[:=]\s*\[?\s*" + _NUMBER + r"\s*\]?" + _DENOMINATOR,
    re.IGNORECASE,
)
_PERSONA = re.compile(
    r"\[?\s*persona\s+score\s*\]?\s*[:=]\s*\[?\s*" + _NUMBER + r"\s*\]?" + _DENOMINATOR,
    re.IGNORECASE,
)
_RATIONALE = re.compile(r"final\s+rationale?\s*\]?\s*[:=]\s*([^\n\r]+)", re.IGNORECASE)

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_SCORE_KEYS = ("score", "rating")
_REASON_KEYS = ("reasoning", "rationale", "explanation", "notes", "reason")

_TEXT_SCORE = re.compile(
    r"\b(?:score|rating)\b['\"]?\s*(?:is\s*)?[:=\-]?\s*['\"]?" + _NUMBER + _DENOMINATOR,
    re.IGNORECASE,
)
_BARE_NUMBER = re.compile(r"^\s*" + _NUMBER + _DENOMINATOR + r"\s*$")
_TEXT_REASON = re.compile(
    r"\b(?:reasoning|rationale|explanation)\b\s*[:=\-]?\s*([^\n\r]+)", re.IGNORECASE
)


def to_hundred_scale(value: float, denominator: str | None = None) -> float:
    """Map a judge value onto 0-100 and clamp it."""
    if denominator == "10":
        scaled = value * 10
    elif denominator == "100":
        scaled = value
    else:
        scaled = value * 10 if value <= 10 else value
    return min(max(scaled, 0.0), MAX_SCORE)


def _result(raw: float, confidence: float, notes: str) -> ScoringResult:
    return ScoringResult(
        score=raw / MAX_SCORE,
        confidence=confidence,
        raw_score=raw,
        max_score=MAX_SCORE,
        notes=notes,
    )


# ---------------------------------------------------------------------------
# Stage 1: structured rubric
# ---------------------------------------------------------------------------


def parse_structured_rubric(text: str) -> ScoringResult | None:
    """Parse "Constraint Satisfaction / Semantic Score / Persona Score" replies.

    All three fields are required; a "no" constraint zeroes the score.
    """
    constraint = _CONSTRAINT.search(text)
    semantic = _SEMANTIC.search(text)
    persona = _PERSONA.search(text)
    if constraint is None or semantic is None or persona is None:
        return None

    satisfied = constraint.group(1).lower() == "yes"
    semantic_score = to_hundred_scale(float(semantic.group(1)), semantic.group(2))
    persona_score = to_hundred_scale(float(persona.group(1)), persona.group(2))
    final = (semantic_score + persona_score) / 2 if satisfied else 0.0

    parts = [
        f"Constraint: {'Yes' if satisfied else 'No'}",
        f"Semantic: {semantic_score:g}/100",
        f"Persona: {persona_score:g}/100",
    ]
    rationale = _RATIONALE.search(text)
    if rationale and rationale.group(1).strip():
        parts.append(f"Reason: {rationale.group(1).strip()}")

    return _result(final, STRUCTURED_CONFIDENCE, " | ".join(parts))


# ---------------------------------------------------------------------------
# Stage 2: JSON verdict
# ---------------------------------------------------------------------------


def _balanced_objects(text: str) -> Iterator[str]:
    """Yield each top-level ``{...}`` span, honouring strings and escapes."""
    start = -1
    depth = 0
    in_string = False
    escaped = False
    for i, char in enumerate(text):
        if escaped:
            escaped = False
            continue
        if in_string:
            if char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"' and depth > 0:
            in_string = True
        elif char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                yield text[start : i + 1]


def json_candidates(text: str) -> Iterator[str]:
    """Fenced code blocks first, then bare objects found by brace matching."""
    for fence in _FENCE.finditer(text):
        body = fence.group(1).strip()
        if body:
            yield body
    yield from _balanced_objects(text)


def safe_parse_json(raw: str) -> dict[str, Any] | None:
    """Parse leniently: a leading BOM and trailing commas are tolerated."""
    cleaned = raw.strip().lstrip("\ufeff")
    for attempt in (cleaned, _TRAILING_COMMA.sub(r"\1", cleaned)):
        try:
            parsed = json.loads(attempt)
        except json.JSONDecodeError:
            continue
        return parsed if isinstance(parsed, dict) else None
    return None


def _numeric(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        match = re.match(r"\s*(-?\d+(?:\.\d+)?)", value)
        if match:
            return float(match.group(1))
    return None


def _find_score(obj: dict[str, Any]) -> float | None:
    """First score/rating key: top level before nested objects."""
    for key, value in obj.items():
        if key.lower() in _SCORE_KEYS:
            number = _numeric(value)
            if number is not None:
                return number
    for value in obj.values():
        if isinstance(value, dict):
            number = _find_score(value)
            if number is not None:
                return number
    return None


def _find_reason(obj: dict[str, Any]) -> str | None:
    for key, value in obj.items():
        if key.lower() in _REASON_KEYS and isinstance(value, str) and value.strip():
            return value.strip()
    return None


def parse_json_verdict(text: str) -> ScoringResult | None:
    for candidate in json_candidates(text):
        parsed = safe_parse_json(candidate)
        if parsed is None:
            continue
        value = _find_score(parsed)
        if value is None:
            continue
        raw = to_hundred_scale(value)
        return _result(raw, JSON_CONFIDENCE, _find_reason(parsed) or "Judge evaluation complete")
    return None


# ---------------------------------------------------------------------------
# Stage 3: free text
# ---------------------------------------------------------------------------


def parse_free_text_score(text: str) -> ScoringResult | None:
    match = _TEXT_SCORE.search(text) or _BARE_NUMBER.match(text)
    if match is None:
        return None
    raw = to_hundred_scale(float(match.group(1)), match.group(2))
    reason = _TEXT_REASON.search(text)
    notes = (
        reason.group(1).strip()
        if reason and reason.group(1).strip()
        else f"Extracted score from text: {raw:g}/100"
    )
    return _result(raw, FREE_TEXT_CONFIDENCE, notes)


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------

STAGES: tuple[Callable[[str], ScoringResult | None], ...] = (
    parse_structured_rubric,
    parse_json_verdict,
    parse_free_text_score,
)


def unparseable(text: str) -> ScoringResult:
    preview = text.strip()[:RAW_REPLY_PREVIEW_CHARS]
    return ScoringResult(
        score=0.0,
        confidence=0.0,
        raw_score=0.0,
        max_score=MAX_SCORE,
        notes=f"Could not parse judge response: {preview!r}",
    )


def parse_judge_response(text: str) -> ScoringResult:
    """Run the stages in order and return the first verdict found.

    Never raises: a reply no stage understands scores 0 with confidence 0.
    """
    if not text or not text.strip():
        return ScoringResult(
            score=0.0,
            confidence=0.0,
            raw_score=0.0,
            max_score=MAX_SCORE,
            notes="Empty judge response",
        )
    for stage in STAGES:
        result = stage(text)
        if result is not None:
            return result
    return unparseable(text)
