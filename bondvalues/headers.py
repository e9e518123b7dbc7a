"""Conversions between HTTP header values and typed Python values."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Union

HeaderInput = Union[str, bytes]

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))"
)


class HeaderError(ValueError):
    """A header value cannot be converted."""


def _is_visible(code: int) -> bool:
    return code == 0x09 or 0x20 <= code < 0x7F


def _header_text(value: HeaderInput) -> str:
    """Return the header as text; only visible ASCII and tabs are accepted."""
    codes = value if isinstance(value, bytes) else [ord(char) for char in value]
    if not all(_is_visible(code) for code in codes):
        raise HeaderError(
            f"Unable to parse header {value!r} as a string - failed to convert header to a str"
        )
    return value.decode("ascii") if isinstance(value, bytes) else value


def _checked_header(text: str) -> str:
    """Return ``text`` when it is allowed as a header value."""
    for char in text:
        code = ord(char)
        if code != 0x09 and (code < 0x20 or code == 0x7F):
            raise HeaderError(
                f"Unable to convert {text!r} into a header - failed to parse header value"
            )
    return text


def parse_int_header(value: HeaderInput) -> int:
    """Parse a header holding a decimal integer with an optional sign."""
    text = _header_text(value)
    if not _INT_PATTERN.fullmatch(text):
        raise HeaderError(f"Unable to parse int as a string: invalid digit found in {text!r}")
    return int(text)


def parse_string_header(value: HeaderInput) -> str:
    """Return a header value as a string."""
    return _header_text(value)


def format_string_header(value: str) -> str:
    """Return ``value`` as a header value, rejecting control characters."""
    return _checked_header(value)


def parse_list_header(value: HeaderInput) -> list[str]:
    """Split a comma-separated header, trimming items and dropping empty ones."""
    return [item for item in (part.strip() for part in _header_text(value).split(",")) if item]


def format_list_header(values: list[str]) -> str:
    """Join items into a comma-separated header value."""
    return _checked_header(", ".join(values))


def parse_bool_header(value: HeaderInput) -> bool:
    """Parse exactly ``true`` or ``false``."""
    text = _header_text(value)
    if text == "true":
        return True
    if text == "false":
        return False
    raise HeaderError(f"Unable to parse bool from {text} - provided string was not `true` or `false`")


def format_bool_header(value: bool) -> str:
    """Render a boolean as ``true`` or ``false``; anything else is rejected."""
    if not isinstance(value, bool):
        raise HeaderError(f"Unable to convert: {value!r} into a header: expected a bool")
    return _checked_header(str(value).lower())


def parse_datetime_header(value: HeaderInput) -> datetime:
    """Parse an RFC 3339 timestamp and return it in UTC."""
    text = _header_text(value)
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise HeaderError(f"Unable to parse: {text} as date - input is not RFC 3339")
    year, month, day, hour, minute, second, fraction, zulu, sign, off_h, off_m = match.groups()
    micros = int((fraction or "0")[:6].ljust(6, "0"))
    if zulu:
        offset = timedelta(0)
    else:
        offset = timedelta(hours=int(off_h), minutes=int(off_m))
        if sign == "-":
            offset = -offset
    try:
        parsed = datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), micros,
            tzinfo=timezone(offset),
        )
    except ValueError as exc:
        raise HeaderError(f"Unable to parse: {text} as date - {exc}") from exc
    return parsed.astimezone(timezone.utc)


def format_datetime_header(value: datetime) -> str:
    """Render a datetime in UTC as RFC 3339; naive values are taken as UTC."""
    moment = value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value
    moment = moment.astimezone(timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        if moment.microsecond % 1000 == 0:
            text += f".{moment.microsecond // 1000:03d}"
        else:
            text += f".{moment.microsecond:06d}"
    return text + "+00:00"