"""Reading EDO and ROD bonds from the published bond workbook."""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal
from pathlib import Path
from typing import Sequence

from bondvalues.model import AllBonds, Bond, BondId
from bondvalues.value_generator import ValueGenerator
from bondvalues.xls import Cell, Workbook, XlsError, excel_serial_to_datetime, open_workbook

_RETURNS_COLUMN = 9
_RATE_PRECISION = Decimal("0.00001")


class BondsReadError(Exception):
    """The workbook does not hold the expected bond data."""


def _cell(row: Sequence[Cell], index: int) -> Cell:
    return row[index] if index < len(row) else None


def _as_datetime(cell: Cell) -> datetime | None:
    if isinstance(cell, datetime):
        return cell
    if isinstance(cell, bool):
        return None
    if isinstance(cell, (int, float)):
        if not math.isfinite(cell) or cell < 0:
            return None
        return excel_serial_to_datetime(cell)
    if isinstance(cell, str):
        try:
            return datetime.fromisoformat(cell)
        except ValueError:
            return None
    return None


def _required_date(row: Sequence[Cell], column: int, row_id: int) -> datetime:
    value = _as_datetime(_cell(row, column))
    if value is None:
        raise BondsReadError(
            f"Cannot extract date from cell [{_cell(row, column)!r}], "
            f"row id: [{row_id}], column: {column}"
        )
    return value


def _add_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError as exc:
        raise BondsReadError(f"Cannot move {day} by {years} years") from exc


def extract_bond_type(
    rows: Sequence[Sequence[Cell]], bond_type: str, bond_length_in_years: int
) -> dict[BondId, Bond]:
    """Build every bond of one type from worksheet rows.

    A row describes a bond when its first cell starts with the type name;
    columns 3 and 4 hold the sale window and the yearly returns start at column 9.
    """
    bonds: dict[BondId, Bond] = {}
    for row_id, row in enumerate(rows):
        first = _cell(row, 0)
        if not (isinstance(first, str) and first.startswith(bond_type)):
            continue

        sale_start = _required_date(row, 3, row_id)
        sale_end = _required_date(row, 4, row_id)
        bond_id = BondId(first)
        buyout_date = _add_years(sale_start.date(), bond_length_in_years)

        generator = ValueGenerator(100.0)
        returns = row[_RETURNS_COLUMN:_RETURNS_COLUMN + bond_length_in_years]
        for cell in returns:
            if isinstance(cell, float) and math.isfinite(cell):
                rate = Decimal(cell).quantize(_RATE_PRECISION, rounding=ROUND_HALF_EVEN)
                generator.add_yearly_return(float(rate))

        bonds[bond_id] = Bond(
            id=bond_id,
            initial_date=sale_start.date(),
            sale_end=sale_end.date(),
            buyout_date=buyout_date,
            values=generator.calculate_daily_bond_values(sale_start.date()),
        )
    return bonds


def _extract_sheet(workbook: Workbook, bond_type: str, years: int) -> dict[BondId, Bond]:
    try:
        rows = workbook.worksheet(bond_type)
    except XlsError as exc:
        raise BondsReadError(f"Failed to get worksheet [{bond_type}]") from exc
    return extract_bond_type(rows, bond_type, years)


def read_bonds(path: str | Path) -> AllBonds:
    """Read all EDO (10-year) and ROD (12-year) bonds from a workbook file."""
    try:
        workbook = open_workbook(path)
    except XlsError as exc:
        raise BondsReadError("Failed to open workbook") from exc
    edo = _extract_sheet(workbook, "EDO", 10)
    rod = _extract_sheet(workbook, "ROD", 12)
    return AllBonds(edo=edo, rod=rod)