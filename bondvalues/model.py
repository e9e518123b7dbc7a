"""Bond identifiers, bonds and their daily value series."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal


@dataclass(frozen=True, order=True)
class BondId:
    """Identifier of a single bond series, such as ``EDO0125``."""

    raw: str

    def value(self) -> str:
        """Return the identifier as a plain string."""
        return self.raw

    def __str__(self) -> str:
        return self.raw


def _format_number(value: float) -> str:
    """Format a float the shortest way, without a trailing ``.0``."""
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


@dataclass
class Bond:
    """A bond with its sale window and a value for every day from its start."""

    id: BondId
    initial_date: date
    sale_end: date
    buyout_date: date
    values: list[float] = field(default_factory=list)

    def to_csv(self) -> str:
        """Render the daily values as ``date,value`` CSV text."""
        lines = ["date,value\n"]
        lines.extend(
            f"{(self.initial_date + timedelta(days=offset)).isoformat()},{_format_number(value)}\n"
            for offset, value in enumerate(self.values)
        )
        return "".join(lines)


@dataclass
class AllBonds:
    """Every bond read from a workbook, grouped by type."""

    edo: dict[BondId, Bond] = field(default_factory=dict)
    rod: dict[BondId, Bond] = field(default_factory=dict)