import math
from datetime import date, datetime, timedelta, timezone

import pytest

from bono.core.normalize import normalize_metric, normalize_timestamp, parse_timestamp
from bono.schemas.bonus import RecordKey


@pytest.mark.parametrize("raw,expected", [
    ("2024-01-15T10:00:00Z", "2024-01-15T10:00:00.000Z"),
    ("2024-01-15T10:00:00.123456+00:00", "2024-01-15T10:00:00.123Z"),
    ("2024-01-15T12:00:00+02:00", "2024-01-15T10:00:00.000Z"),
    ("2024-01-15", "2024-01-15T00:00:00.000Z"),
    (datetime(2024, 1, 15, 10, 0), "2024-01-15T10:00:00.000Z"),
    (datetime(2024, 1, 15, 5, 0, tzinfo=timezone(timedelta(hours=-5))), "2024-01-15T10:00:00.000Z"),
    (date(2024, 1, 15), "2024-01-15T00:00:00.000Z"),
])
def test_valid_timestamps_become_canonical_utc(raw, expected):
    assert normalize_timestamp(raw) == expected


def test_normalizing_is_idempotent():
    once = normalize_timestamp("2024-01-15T10:00:00Z")
    assert normalize_timestamp(once) == once


@pytest.mark.parametrize("raw,expected", [
    ("not a date", "not a date"),
    ("15/01/2024", "15/01/2024"),
    (12345, "12345"),
    (None, ""),
])
def test_invalid_timestamps_fall_back_to_string(raw, expected):
    assert normalize_timestamp(raw) == expected
    assert parse_timestamp(raw) is None


@pytest.mark.parametrize("raw,expected", [
    (3, 3.0),
    (2.5, 2.5),
    ("7", 7.0),
    ("  ", 0.0),
    ("seven", 0.0),
    (None, 0.0),
    (True, 0.0),
    (math.nan, 0.0),
    (-math.inf, 0.0),
])
def test_normalize_metric(raw, expected):
    assert normalize_metric(raw) == expected


def test_record_keys_compare_on_normalized_fields():
    assert RecordKey(agent_id="A1", timestamp="2024-01-15T10:00:00Z") == RecordKey(
        agent_id="A1", timestamp="2024-01-15T10:00:00.000Z"
    )


def test_record_keys_do_not_collide_on_separator():
    # "A_1" + "x" and "A" + "1_x" would join to the same string
    assert RecordKey(agent_id="A_1", timestamp="x") != RecordKey(agent_id="A", timestamp="1_x")


def test_record_keys_are_hashable():
    keys = {
        RecordKey(agent_id="A1", timestamp="2024-01-15"),
        RecordKey(agent_id="A1", timestamp="2024-01-15T00:00:00.000Z"),
    }
    assert len(keys) == 1
