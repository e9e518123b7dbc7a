from datetime import date, datetime

import pytest

from bondvalues.model import BondId
from bondvalues.reader import BondsReadError, extract_bond_type, read_bonds


def bond_row(name, start, end, rates):
    return [name, None, None, start, end, None, None, None, None, *rates]


def test_extract_rod_like_bond():
    rows = [
        ["Header", "x"],
        bond_row("ROD1235", datetime(2023, 12, 1), datetime(2023, 12, 31), [0.0725, 0.07]),
    ]
    bonds = extract_bond_type(rows, "ROD", 12)
    bond = bonds[BondId("ROD1235")]
    assert bond.initial_date == date(2023, 12, 1)
    assert bond.sale_end == date(2023, 12, 31)
    assert bond.buyout_date == date(2035, 12, 1)
    assert len(bond.values) == 1 + 366 + 365
    assert bond.values[366] == 107.25


def test_rates_are_rounded_to_five_places():
    rows = [bond_row("EDO0125", datetime(2015, 1, 1), datetime(2015, 1, 31), [0.0300000000001])]
    bond = extract_bond_type(rows, "EDO", 10)[BondId("EDO0125")]
    assert bond.values[365] == 103.0


def test_serial_numbers_are_read_as_dates():
    rows = [bond_row("EDO1224", 45261.0, 45291.0, [0.03])]
    bond = extract_bond_type(rows, "EDO", 10)[BondId("EDO1224")]
    assert bond.initial_date == date(2023, 12, 1)
    assert bond.buyout_date == date(2033, 12, 1)


def test_only_rows_of_the_type_are_taken():
    rows = [
        bond_row("EDO0125", datetime(2015, 1, 1), datetime(2015, 1, 31), []),
        bond_row("ROD0832", datetime(2020, 8, 1), datetime(2020, 8, 31), []),
        [None, "EDO"],
        [],
    ]
    assert list(extract_bond_type(rows, "EDO", 10)) == [BondId("EDO0125")]


def test_returns_beyond_bond_length_are_ignored():
    rows = [bond_row("EDO0125", datetime(2015, 1, 1), datetime(2015, 1, 31), [0.0] * 3 + ["x"])]
    bond = extract_bond_type(rows, "EDO", 2)[BondId("EDO0125")]
    assert len(bond.values) == 1 + 365 + 366


def test_missing_start_date_raises():
    rows = [bond_row("EDO0125", "not a date", datetime(2015, 1, 31), [])]
    with pytest.raises(BondsReadError, match="column: 3"):
        extract_bond_type(rows, "EDO", 10)


def test_missing_end_date_raises():
    rows = [["EDO0125", None, None, datetime(2015, 1, 1)]]
    with pytest.raises(BondsReadError, match="column: 4"):
        extract_bond_type(rows, "EDO", 10)


def test_read_bonds_missing_file(tmp_path):
    with pytest.raises(BondsReadError, match="Failed to open workbook"):
        read_bonds(tmp_path / "absent.xls")