"""Request and response models of the bonds HTTP API, with XSS checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

BASE_PATH = ""
API_VERSION = "0.0.1"

# Characters that would change when the text is escaped for safe HTML output.
_HTML_SENSITIVE = frozenset("<>\"'`/&= \t\n\x0c\r\0")


class ValidationError(ValueError):
    """A model field failed validation."""


def is_html(text: str) -> bool:
    """True when ``text`` holds characters that HTML escaping would change."""
    return any(char in _HTML_SENSITIVE for char in text)


def check_xss_string(value: str) -> None:
    """Raise ValidationError when the string looks like HTML."""
    if is_html(value):
        raise ValidationError("xss detected")


def check_xss_list(values: Iterable[str]) -> None:
    """Raise ValidationError when any string in ``values`` looks like HTML."""
    if any(is_html(value) for value in values):
        raise ValidationError("xss detected")


def check_xss_map(mapping: Mapping[str, Any]) -> None:
    """Raise ValidationError when a key, a string value or a nested model fails.

    Values that are neither strings nor have a ``validate`` method are not checked.
    """
    if any(is_html(key) for key in mapping):
        raise ValidationError("xss detected")
    for value in mapping.values():
        if isinstance(value, str):
            if is_html(value):
                raise ValidationError("xss detected")
        elif callable(getattr(value, "validate", None)):
            try:
                value.validate()
            except ValidationError as exc:
                raise ValidationError("xss detected") from exc


def _parse_pairs(text: str, model: str, fields: tuple[str, ...]) -> dict[str, str]:
    """Parse ``key,value,key,value`` text, keeping the first value of each key."""
    parts = iter(text.split(","))
    found: dict[str, str] = {}
    for key in parts:
        value = next(parts, None)
        if value is None:
            raise ValueError(f"Missing value while parsing {model}")
        if key not in fields:
            raise ValueError(f"Unexpected key while parsing {model}")
        found.setdefault(key, value)
    for name in fields:
        if name not in found:
            raise ValueError(f"{name} missing in {model}")
    return found


@dataclass(frozen=True)
class GetBondPathParams:
    """Path parameters of ``GET /bonds/{id}``."""

    id: str


@dataclass(frozen=True)
class GetBondCsvPathParams:
    """Path parameters of ``GET /bonds/{id}/csv``."""

    id: str


@dataclass(frozen=True)
class GetBond200Response:
    """A single bond: its ID and its name."""

    id: str
    name: str

    def validate(self) -> None:
        """Raise ValidationError when a field looks like HTML."""
        for field_name in ("id", "name"):
            try:
                check_xss_string(getattr(self, field_name))
            except ValidationError as exc:
                raise ValidationError(f"{field_name}: {exc}") from exc

    def to_query(self) -> str:
        """Return the form-style, non-exploded query representation."""
        return ",".join(["id", self.id, "name", self.name])

    @classmethod
    def from_query(cls, text: str) -> GetBond200Response:
        """Parse the form-style query representation; raise ValueError if malformed."""
        found = _parse_pairs(text, "GetBond200Response", ("id", "name"))
        return cls(id=found["id"], name=found["name"])

    def to_dict(self) -> dict[str, str]:
        """Return the JSON object form."""
        return {"id": self.id, "name": self.name}

    def __str__(self) -> str:
        return self.to_query()


@dataclass(frozen=True)
class GetBond404Response:
    """An error body returned when a bond is not found."""

    error: str

    def validate(self) -> None:
        """Raise ValidationError when the message looks like HTML."""
        try:
            check_xss_string(self.error)
        except ValidationError as exc:
            raise ValidationError(f"error: {exc}") from exc

    def to_query(self) -> str:
        """Return the form-style, non-exploded query representation."""
        return ",".join(["error", self.error])

    @classmethod
    def from_query(cls, text: str) -> GetBond404Response:
        """Parse the form-style query representation; raise ValueError if malformed."""
        found = _parse_pairs(text, "GetBond404Response", ("error",))
        return cls(error=found["error"])

    def to_dict(self) -> dict[str, str]:
        """Return the JSON object form."""
        return {"error": self.error}

    def __str__(self) -> str:
        return self.to_query()