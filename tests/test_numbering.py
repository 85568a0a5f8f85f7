"""
Tests for the pure document numbering rules
"""
from datetime import date, datetime

import pytest

from council_portal.numbering import (
    FALLBACK_CLASS_CODE,
    allocate,
    asset_scheme,
    format_sequence,
    garage_permit_scheme,
    period_of,
    requisition_scheme,
    sequence_of,
)

CLASS_CODES = {"Fleet": "04", "Furniture": "07"}


@pytest.fixture
def assets():
    return asset_scheme("258", CLASS_CODES)


def test_worked_example(assets):
    assert assets.allocate(["258-2026-04-01"], "Fleet", "2026-02-14") == "258-2026-04-02"


def test_allocate_accepts_plain_callables():
    number = allocate(
        ["X/1", "X/2"],
        lambda classification, when: "X/",
        lambda key, seq: f"{key}{seq}",
        None,
        "2026-01-01",
    )
    assert number == "X/3"


def test_sequential_calls_are_unique_and_contiguous(assets):
    existing = []
    for _ in range(12):
        existing.append(assets.allocate(existing, "Fleet", date(2026, 5, 1)))

    assert len(set(existing)) == 12
    assert existing[0] == "258-2026-04-01"
    assert existing[-1] == "258-2026-04-12"
    assert [sequence_of(n, "258-2026-04") for n in existing] == list(range(1, 13))


def test_sequence_widens_past_99(assets):
    existing = [f"258-2026-04-{n:02d}" for n in range(1, 100)]
    assert existing[-1] == "258-2026-04-99"

    hundredth = assets.allocate(existing, "Fleet", "2026-06-30")
    assert hundredth == "258-2026-04-100"

    existing.append(hundredth)
    assert assets.allocate(existing, "Fleet", "2026-06-30") == "258-2026-04-101"


def test_groups_are_independent(assets):
    existing = ["258-2026-07-01", "258-2026-07-02", "258-2026-07-03", "258-2026-04-01"]

    assert assets.allocate(existing, "Fleet", "2026-03-01") == "258-2026-04-02"
    assert assets.allocate(existing, "Furniture", "2026-03-01") == "258-2026-07-04"


def test_unknown_category_uses_fallback_code(assets):
    number = assets.allocate([], "Hovercraft", "2026-03-01")
    assert number == f"258-2026-{FALLBACK_CLASS_CODE}-01"
    assert assets.allocate([], None, "2026-03-01") == "258-2026-99-01"


def test_preview_is_stable_on_same_snapshot(assets):
    snapshot = ("258-2026-04-01", "258-2026-04-02")
    first = assets.allocate(snapshot, "Fleet", "2026-02-14")
    second = assets.allocate(snapshot, "Fleet", "2026-02-14")
    assert first == second == "258-2026-04-03"


def test_year_rollover_starts_new_group(assets):
    existing = [assets.allocate([], "Fleet", "2025-12-31")]
    new_year = assets.allocate(existing, "Fleet", "2026-01-01")

    assert existing == ["258-2025-04-01"]
    assert new_year == "258-2026-04-01"


def test_garage_permit_format():
    permits = garage_permit_scheme("258")
    existing = ["258/2025/01", "258/2026/01"]
    assert permits.allocate(existing, None, "2026-02-20") == "258/2026/02"
    assert permits.group_key(None, "2026-02-20") == "258/2026/"


def test_requisition_format_is_not_confused_with_permits():
    requisitions = requisition_scheme("258")
    # permit numbers share the digits but not the RF prefix
    existing = ["258/2026/01", "258/2026/02", "RF258/2026/01"]
    assert requisitions.allocate(existing, None, "2026-03-02") == "RF258/2026/02"


@pytest.mark.parametrize("value, expected", [
    (date(2026, 2, 14), 2026),
    (datetime(2025, 12, 31, 23, 59), 2025),
    ("2026-02-14", 2026),
    ("2026-02-14T09:30:00Z", 2026),
])
def test_period_of(value, expected):
    assert period_of(value) == expected


@pytest.mark.parametrize("value", ["", None, "14/02/2026", "not a date"])
def test_period_of_rejects_bad_dates(value):
    with pytest.raises(ValueError):
        period_of(value)


def test_format_and_parse_sequence():
    assert format_sequence(1) == "01"
    assert format_sequence(100) == "100"
    assert sequence_of("258-2026-04-07", "258-2026-04") == 7
    assert sequence_of("258/2026/12", "258/2026/") == 12
    assert sequence_of("258-2026-05-07", "258-2026-04") is None
    assert sequence_of("258-2026-04-xx", "258-2026-04") is None
