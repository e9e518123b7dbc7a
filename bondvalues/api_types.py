"""Value types shared by the HTTP API: nullable values and base64 byte arrays."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from functools import total_ordering
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")

_MISSING: Any = object()


@total_ordering
class Nullable(Generic[T]):
    """A value that an API may send explicitly as null.

    This differs from an optional value that is simply absent. ``Nullable()``
    is the null value and ``Nullable(x)`` holds ``x``, which may itself be None.
    A null value orders before every present one.
    """

    __slots__ = ("_present", "_value")

    def __init__(self, value: T = _MISSING):
        self._present = value is not _MISSING
        self._value = value if self._present else None

    def __repr__(self) -> str:
        return f"Nullable({self._value!r})" if self._present else "Nullable()"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Nullable):
            return NotImplemented
        if self._present != other._present:
            return False
        return not self._present or self._value == other._value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Nullable):
            return NotImplemented
        if not self._present:
            return other._present
        if not other._present:
            return False
        return self._value < other._value

    __hash__ = None  # type: ignore[assignment]

    def is_present(self) -> bool:
        """True when a value is held."""
        return self._present

    def is_null(self) -> bool:
        """True when the value is null."""
        return not self._present

    def expect(self, msg: str) -> T:
        """Return the held value, or raise ValueError with ``msg`` when null."""
        if not self._present:
            raise ValueError(msg)
        return self._value

    def unwrap(self) -> T:
        """Return the held value, or raise ValueError when null."""
        return self.expect("called `Nullable.unwrap()` on a null value")

    def unwrap_or(self, default: T) -> T:
        """Return the held value, or ``default`` when null."""
        return self._value if self._present else default

    def unwrap_or_else(self, func: Callable[[], T]) -> T:
        """Return the held value, or the result of ``func()`` when null."""
        return self._value if self._present else func()

    def map(self, func: Callable[[T], U]) -> Nullable[U]:
        """Apply ``func`` to a held value; null stays null."""
        return Nullable(func(self._value)) if self._present else Nullable()

    def map_or(self, default: U, func: Callable[[T], U]) -> U:
        """Apply ``func`` to a held value, or return ``default`` when null."""
        return func(self._value) if self._present else default

    def map_or_else(self, default: Callable[[], U], func: Callable[[T], U]) -> U:
        """Apply ``func`` to a held value, or return ``default()`` when null."""
        return func(self._value) if self._present else default()

    def and_(self, other: Nullable[U]) -> Nullable[U]:
        """Return null when this is null, otherwise ``other``."""
        return other if self._present else Nullable()

    def and_then(self, func: Callable[[T], Nullable[U]]) -> Nullable[U]:
        """Return null when this is null, otherwise ``func`` of the held value."""
        return func(self._value) if self._present else Nullable()

    def or_(self, other: Nullable[T]) -> Nullable[T]:
        """Return this when it holds a value, otherwise ``other``."""
        return self if self._present else other

    def or_else(self, func: Callable[[], Nullable[T]]) -> Nullable[T]:
        """Return this when it holds a value, otherwise ``func()``."""
        return self if self._present else func()

    def take(self) -> Nullable[T]:
        """Move the content out into a new Nullable, leaving this one null."""
        taken = Nullable(self._value) if self._present else Nullable()
        self._present = False
        self._value = None
        return taken

    def to_optional(self) -> Optional[T]:
        """Return the held value, or None when null."""
        return self._value if self._present else None

    def to_json(self) -> Any:
        """Return the JSON form: the held value, or None for null."""
        return self.to_optional()

    @classmethod
    def from_json(cls, value: Any) -> Nullable[Any]:
        """Build from a decoded JSON value; None becomes null."""
        return cls() if value is None else cls(value)


@dataclass(frozen=True, order=True)
class ByteArray:
    """Binary data carried over JSON as standard base64 text."""

    data: bytes

    def to_json(self) -> str:
        """Encode the bytes as padded standard base64."""
        return base64.b64encode(self.data).decode("ascii")

    @classmethod
    def from_json(cls, text: str) -> ByteArray:
        """Decode padded standard base64; raise ValueError when it is invalid."""
        try:
            return cls(base64.b64decode(text.encode("ascii"), validate=True))
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise ValueError("invalid base64") from exc