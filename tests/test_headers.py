from datetime import datetime, timedelta, timezone

import pytest

from bondvalues.headers import (
    HeaderError,
    format_bool_header,
    format_datetime_header,
    format_list_header,
    format_string_header,
    parse_bool_header,
    parse_datetime_header,
    parse_int_header,
    parse_list_header,
    parse_string_header,
)


@pytest.mark.parametrize("text, expected", [("42", 42), ("-7", -7), ("+3", 3), (b"100", 100)])
def test_parse_int_header(text, expected):
    assert parse_int_header(text) == expected


@pytest.mark.parametrize("text", ["abc", " 1", "1_000", "", "1.5"])
def test_parse_int_header_rejects(text):
    with pytest.raises(HeaderError):
        parse_int_header(text)


def test_parse_string_header_accepts_bytes_and_str():
    assert parse_string_header(b"text/csv") == "text/csv"
    assert parse_string_header("application/json") == "application/json"


def test_parse_string_header_rejects_non_ascii_bytes():
    with pytest.raises(HeaderError):
        parse_string_header("zażółć".encode("utf-8"))


def test_format_string_header_rejects_control_characters():
    assert format_string_header("a\tb") == "a\tb"
    with pytest.raises(HeaderError):
        format_string_header("a\nb")


def test_parse_list_header_trims_and_drops_empty():
    assert parse_list_header(" a, ,b ,") == ["a", "b"]
    assert parse_list_header("") == []


def test_list_header_round_trip():
    items = ["EDO0125", "ROD0837"]
    assert format_list_header(items) == "EDO0125, ROD0837"
    assert parse_list_header(format_list_header(items)) == items


def test_bool_header():
    assert parse_bool_header("true") is True
    assert parse_bool_header(b"false") is False
    assert format_bool_header(True) == "true"
    assert parse_bool_header(format_bool_header(False)) is False
    with pytest.raises(HeaderError):
        parse_bool_header("True")


def test_parse_datetime_header_zulu():
    parsed = parse_datetime_header("2024-01-02T03:04:05Z")
    assert parsed == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(0)


def test_parse_datetime_header_converts_offset_to_utc():
    parsed = parse_datetime_header("2024-01-02T03:04:05+01:00")
    assert parsed == datetime(2024, 1, 2, 2, 4, 5, tzinfo=timezone.utc)
    assert parsed.tzinfo == timezone.utc


@pytest.mark.parametrize("text", ["2024-01-02", "2024-13-02T00:00:00Z", "yesterday"])
def test_parse_datetime_header_rejects(text):
    with pytest.raises(HeaderError):
        parse_datetime_header(text)


def test_format_datetime_header():
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert format_datetime_header(moment) == "2024-01-02T03:04:05+00:00"


def test_datetime_header_round_trip_with_fraction():
    moment = datetime(2023, 12, 1, 23, 59, 58, 123456, tzinfo=timezone(timedelta(hours=2)))
    assert parse_datetime_header(format_datetime_header(moment)) == moment
    millis = datetime(2023, 12, 1, 0, 0, 0, 250000, tzinfo=timezone.utc)
    assert parse_datetime_header(format_datetime_header(millis)) == millis