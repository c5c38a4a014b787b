"""
Upstream Response Recoverer.

Models are asked for bare JSON but frequently wrap it in markdown fences or
surround it with commentary. Recovery is layered:

1. strip code fences
2. parse the stripped text directly
3. parse the span from the first "{" to the last "}"

The two call sites then apply different policies: appeal assessments fall
back to a fixed object, fine extraction fills missing keys per field.
"""

import json
import logging
import re
from dataclasses import dataclass
from numbers import Number
from typing import Any

from errors import RecoveryError
from schemas import RecoveryStatus

logger = logging.getLogger(__name__)

APPEAL_REQUIRED_KEYS = ("appeal_strength", "confidence_score", "reasoning_summary")

FALLBACK_REASONING_SUMMARY = (
    "Unable to analyze the appeal details properly. "
    "Please review your appeal reason and try again."
)

FINE_DATA_KEYS = (
    "fineAmount",
    "infractionDate",
    "locationAddress",
    "carRegistration",
    "fineReferenceNumber",
    "allegedContravention",
)

# Opening fence with an optional language tag, ending its line
_TAGGED_FENCE_RE = re.compile(r"```[\w+-]*[ \t]*\r?\n")
_BARE_FENCE = "```"


@dataclass
class RecoveryResult:
    """A recovered JSON object and how it was obtained."""

    data: dict[str, Any]
    status: RecoveryStatus


def fallback_assessment() -> dict[str, Any]:
    """Return a fresh copy of the appeal fallback object."""
    return {
        "appeal_strength": "medium",
        "confidence_score": 50,
        "reasoning_summary": FALLBACK_REASONING_SUMMARY,
    }


# =============================================================================
# Strategies
# =============================================================================


def strip_code_fences(text: str) -> str:
    """Remove language-tagged and bare markdown fence markers."""
    cleaned = _TAGGED_FENCE_RE.sub("", text)
    cleaned = cleaned.replace(_BARE_FENCE, "")
    return cleaned.strip()


def _reject_constant(name: str) -> Any:
    # NaN/Infinity are not valid JSON and cannot be sent back to clients
    raise ValueError(f"Non-finite number {name} is not allowed")


def parse_json_object(text: str) -> dict[str, Any]:
    """Parse text as a JSON object, raising RecoveryError otherwise."""
    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError) as e:
        raise RecoveryError(f"Invalid JSON: {e}", raw_text=text) from e

    if not isinstance(parsed, dict):
        raise RecoveryError(
            f"Expected a JSON object, got {type(parsed).__name__}", raw_text=text
        )
    return parsed


def extract_brace_span(text: str) -> str | None:
    """Return text from the first "{" to the last "}" inclusive."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return None
    return text[start : end + 1]


def recover_json(text: str | None) -> RecoveryResult:
    """
    Extract a single JSON object from free-form upstream text.

    Args:
        text: Raw assistant message content

    Returns:
        RecoveryResult with status PARSED or RECOVERED

    Raises:
        RecoveryError: If no strategy produced a JSON object
    """
    raw_text = text or ""
    cleaned = strip_code_fences(raw_text)

    try:
        return RecoveryResult(parse_json_object(cleaned), RecoveryStatus.PARSED)
    except RecoveryError as e:
        logger.debug(f"Direct parse failed, scanning for braces: {e}")

    span = extract_brace_span(cleaned)
    if span is None:
        raise RecoveryError("No JSON object found in upstream text", raw_text=raw_text)

    try:
        return RecoveryResult(parse_json_object(span), RecoveryStatus.RECOVERED)
    except RecoveryError as e:
        raise RecoveryError(
            f"Brace-delimited span is not valid JSON: {e}", raw_text=raw_text
        ) from e


# =============================================================================
# Call-site policies
# =============================================================================


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def missing_appeal_keys(data: dict[str, Any]) -> list[str]:
    """Return required assessment keys that are absent, null or empty."""
    return [key for key in APPEAL_REQUIRED_KEYS if _is_missing(data.get(key))]


def recover_appeal_assessment(text: str | None) -> RecoveryResult:
    """
    Recover an appeal assessment, substituting the fallback on any failure.

    Never raises. A valid object is returned verbatim, including any extra
    keys the model added.
    """
    try:
        result = recover_json(text)
    except RecoveryError as e:
        logger.warning(f"Appeal assessment unrecoverable, using fallback: {e}")
        logger.debug(f"Raw upstream text: {e.raw_text!r}")
        return RecoveryResult(fallback_assessment(), RecoveryStatus.FALLBACK)

    missing = missing_appeal_keys(result.data)
    if missing:
        logger.warning(
            f"Appeal assessment missing keys {missing}, using fallback. "
            f"Raw upstream text: {(text or '')[:500]!r}"
        )
        return RecoveryResult(fallback_assessment(), RecoveryStatus.FALLBACK)

    score = result.data["confidence_score"]
    if isinstance(score, bool) or not isinstance(score, Number):
        logger.warning(f"confidence_score is not numeric: {score!r}")
    elif not 0 <= score <= 100:
        logger.warning(f"confidence_score out of range: {score!r}")

    return result


def recover_fine_data(text: str | None) -> RecoveryResult:
    """
    Recover extracted fine data, defaulting missing keys to empty strings.

    Raises:
        RecoveryError: If the text holds no JSON object at all
    """
    result = recover_json(text)

    data = {}
    for key in FINE_DATA_KEYS:
        value = result.data.get(key)
        data[key] = "" if value is None else value

    empty = [key for key, value in data.items() if value == ""]
    if empty:
        logger.info(f"Extracted fine data missing fields: {empty}")

    return RecoveryResult(data, result.status)
