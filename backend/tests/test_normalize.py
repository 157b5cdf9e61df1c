"""Payload normalisation helpers."""

from __future__ import annotations

from datetime import timezone

import pytest

from argdash.providers.normalize import latest_record, parse_timestamp, pick, to_float, unwrap_records


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"success": True, "data": [{"a": 1}, {"a": 2}]}, [{"a": 1}, {"a": 2}]),
        ({"data": {"a": 1}}, [{"a": 1}]),
        ({"results": [{"a": 1}]}, [{"a": 1}]),
        ([{"a": 1}, "junk"], [{"a": 1}]),
        ({"a": 1}, [{"a": 1}]),
        ({"data": None}, []),
        ("text", []),
    ],
)
def test_unwrap_records_accepts_every_envelope(payload, expected):
    assert unwrap_records(payload) == expected


def test_pick_skips_missing_and_empty_values():
    record = {"oficial": "", "official": None, "OFICIAL": 1290}
    assert pick(record, "oficial", "official", "OFICIAL") == 1290
    assert pick(record, "nope", default="x") == "x"


@pytest.mark.parametrize(
    "raw, expected",
    [
        (1290, 1290.0),
        ("2.2", 2.2),
        ("2,2%", 2.2),
        ("1.290,50", 1290.5),
        ("", None),
        ("n/a", None),
        ("NaN", None),
        ("-Infinity", None),
        (float("inf"), None),
        (True, None),
        (None, None),
    ],
)
def test_to_float(raw, expected):
    assert to_float(raw) == expected


def test_parse_timestamp_handles_provider_formats():
    assert parse_timestamp("2024-05-31").date().isoformat() == "2024-05-31"
    assert parse_timestamp("31/05/2024").date().isoformat() == "2024-05-31"
    assert parse_timestamp("2024-05").month == 5
    zulu = parse_timestamp("2024-05-31T12:00:00Z")
    assert zulu.tzinfo is not None and zulu.hour == 12
    assert parse_timestamp("2024-05-31").tzinfo == timezone.utc
    assert parse_timestamp("mañana") is None


def test_latest_record_prefers_newest_date():
    records = [
        {"date": "2024-03-01", "v": 3},
        {"fecha": "2024-05-01", "v": 5},
        {"date": "2024-04-01", "v": 4},
    ]
    assert latest_record(records)["v"] == 5
    assert latest_record([{"v": 1}, {"v": 2}])["v"] == 2
    assert latest_record([]) is None
