"""
Request Normalizer.

Turns the loosely shaped fineDetails / appealReason payloads sent by clients
into a flat record of display strings for the appeal prompt. Normalization
is total: every missing or oddly typed value resolves to a placeholder.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

UNKNOWN = "Unknown"
DEFAULT_CATEGORY = "General"
NO_NOTE = "None provided"

# Canonical field -> synonym keys, in order of preference
FINE_FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "contravention_code": (
        "contravention_code",
        "contraventionCode",
        "allegedContravention",
        "code",
    ),
    "location": ("location", "locationAddress", "address"),
    "date": ("date", "time", "infractionDate"),
    "amount": ("amount", "fineAmount"),
    "reason": ("reason", "description", "type"),
    "registration": ("carRegistration", "registration", "vrm"),
    "reference": ("fineReferenceNumber", "reference", "pcn_number"),
}


@dataclass(frozen=True)
class TextReason:
    """Appeal reason sent as a bare string."""

    text: str


@dataclass(frozen=True)
class StructuredReason:
    """Appeal reason sent as an object."""

    category: str | None
    selected_reason: str | None
    note: str | None


AppealReasonInput = TextReason | StructuredReason


@dataclass(frozen=True)
class NormalizedAppealInput:
    """Display strings embedded in the appeal prompt."""

    contravention_code: str
    location: str
    date: str
    amount: str
    fine_reason: str
    registration: str
    reference: str
    category: str
    selected_reason: str
    additional_details: str


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def _first_present(data: Mapping, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if _is_present(value):
            return value
    return None


def resolve_field(
    details: Any, synonyms: tuple[str, ...], default: str = UNKNOWN
) -> str:
    """Return the first present synonym value as a string, else default."""
    if not isinstance(details, Mapping):
        return default
    value = _first_present(details, synonyms)
    return default if value is None else str(value)


def parse_appeal_reason(value: Any) -> AppealReasonInput:
    """Resolve the polymorphic appealReason payload into one of two variants."""
    if isinstance(value, str):
        return TextReason(text=value)

    if isinstance(value, Mapping):
        category = value.get("category")
        selected = _first_present(value, ("selected_reason", "reason"))
        note = _first_present(value, ("user_note", "personal_note"))
        return StructuredReason(
            category=str(category) if _is_present(category) else None,
            selected_reason=None if selected is None else str(selected),
            note=None if note is None else str(note),
        )

    if value is None:
        return TextReason(text=UNKNOWN)
    return TextReason(text=str(value))


def normalize_appeal_input(
    fine_details: Any, appeal_reason: Any
) -> NormalizedAppealInput:
    """Build the prompt-input record from raw request values."""
    fields = {
        name: resolve_field(fine_details, synonyms)
        for name, synonyms in FINE_FIELD_SYNONYMS.items()
    }

    reason = parse_appeal_reason(appeal_reason)
    if isinstance(reason, TextReason):
        category = DEFAULT_CATEGORY
        selected_reason = reason.text
        note = NO_NOTE
    else:
        category = reason.category or DEFAULT_CATEGORY
        selected_reason = reason.selected_reason or UNKNOWN
        note = reason.note or NO_NOTE

    return NormalizedAppealInput(
        contravention_code=fields["contravention_code"],
        location=fields["location"],
        date=fields["date"],
        amount=fields["amount"],
        fine_reason=fields["reason"],
        registration=fields["registration"],
        reference=fields["reference"],
        category=category,
        selected_reason=selected_reason,
        additional_details=note,
    )
