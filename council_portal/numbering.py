"""
Sequential document numbers for assets, garage permits and requisition forms.

A number is a *group key* followed by a zero-padded sequence that counts
from 1 inside that group:

    asset           258-2026-04-01     group "258-2026-04"  (office-year-class)
    garage permit   258/2026/01        group "258/2026/"    (office/year/)
    requisition     RF258/2026/01      group "RF258/2026/"

Everything in this module is pure. The database-backed counter that makes
issuing a number atomic lives in ``council_portal.sequences``.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, Mapping, Optional

FALLBACK_CLASS_CODE = "99"
SEQUENCE_WIDTH = 2

KIND_ASSET = "asset"
KIND_GARAGE_PERMIT = "garage_permit"
KIND_REQUISITION = "requisition"


def period_of(effective_date) -> int:
    """
    Year of an effective date. Accepts date/datetime objects or ISO strings
    ("2026-02-14", "2026-02-14T09:30:00Z"). Raises ValueError otherwise.
    """
    if isinstance(effective_date, (date, datetime)):
        return effective_date.year
    if not effective_date:
        raise ValueError("Effective date is required.")
    return date.fromisoformat(str(effective_date).strip()[:10]).year


def format_sequence(seq: int) -> str:
    # widens to 3+ digits past 99 rather than failing
    return f"{seq:0{SEQUENCE_WIDTH}d}"


def sequence_of(number: Optional[str], group_key: str) -> Optional[int]:
    """Sequence part of ``number`` if it belongs to ``group_key``, else None."""
    if not number or not number.startswith(group_key):
        return None
    tail = number[len(group_key):].lstrip("-")
    if not tail.isdigit():
        return None
    return int(tail)


def allocate(
    existing_ids: Iterable[str],
    group_key_of: Callable[[Optional[str], object], str],
    format_id: Callable[[str, int], str],
    classification: Optional[str],
    effective_date,
) -> str:
    """
    Next number for a record, computed from every number issued so far for
    this kind of record (all groups mixed together).

    The sequence is one more than the count of existing numbers starting with
    the record's group key. Unique among ``existing_ids`` at the moment of the
    call only; two callers holding the same snapshot get the same answer.
    """
    group_key = group_key_of(classification, effective_date)
    count = sum(1 for existing in existing_ids if existing and existing.startswith(group_key))
    return format_id(group_key, count + 1)


class NumberingScheme:
    """How one kind of record derives its group key and renders its number."""

    def __init__(self, kind: str, group_key_of, format_id):
        self.kind = kind
        self._group_key_of = group_key_of
        self._format_id = format_id

    def group_key(self, classification, effective_date) -> str:
        return self._group_key_of(classification, effective_date)

    def format_id(self, group_key: str, seq: int) -> str:
        return self._format_id(group_key, seq)

    def allocate(self, existing_ids: Iterable[str], classification, effective_date) -> str:
        return allocate(existing_ids, self._group_key_of, self._format_id, classification, effective_date)

    def __repr__(self):
        return f"<NumberingScheme {self.kind}>"


def class_code_for(category: Optional[str], class_codes: Mapping[str, str]) -> str:
    return class_codes.get(category or "", FALLBACK_CLASS_CODE)


def asset_scheme(office_code: str, class_codes: Mapping[str, str]) -> NumberingScheme:
    """
    Format:
      {OfficeCode}-{Year}-{ClassCode}-{01}

    Example:
      258-2026-04-02

    ``class_codes`` maps category name -> 2-digit code. Unknown categories
    (including free-text "Other" categories) fall back to "99".
    """
    def group_key_of(category, effective_date):
        return f"{office_code}-{period_of(effective_date)}-{class_code_for(category, class_codes)}"

    def format_id(group_key, seq):
        return f"{group_key}-{format_sequence(seq)}"

    return NumberingScheme(KIND_ASSET, group_key_of, format_id)


def _slash_scheme(kind: str, prefix: str) -> NumberingScheme:
    def group_key_of(_classification, effective_date):
        return f"{prefix}/{period_of(effective_date)}/"

    def format_id(group_key, seq):
        return f"{group_key}{format_sequence(seq)}"

    return NumberingScheme(kind, group_key_of, format_id)


def garage_permit_scheme(office_code: str) -> NumberingScheme:
    """{OfficeCode}/{Year}/{01}, e.g. 258/2026/01."""
    return _slash_scheme(KIND_GARAGE_PERMIT, office_code)


def requisition_scheme(office_code: str) -> NumberingScheme:
    """RF{OfficeCode}/{Year}/{01}, e.g. RF258/2026/01."""
    return _slash_scheme(KIND_REQUISITION, f"RF{office_code}")
