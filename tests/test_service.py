from datetime import date

import pytest

from bondvalues.model import AllBonds, Bond, BondId
from bondvalues.reader import BondsReadError
from bondvalues.service import BondsService


def _bond(name: str) -> Bond:
    return Bond(
        id=BondId(name),
        initial_date=date(2023, 12, 1),
        sale_end=date(2023, 12, 31),
        buyout_date=date(2035, 12, 1),
        values=[100.0, 100.02],
    )


@pytest.fixture
def service() -> BondsService:
    edo = {BondId(n): _bond(n) for n in ("EDO1014", "EDO0732")}
    rod = {BondId(n): _bond(n) for n in ("ROD0837", "ROD0832")}
    return BondsService(AllBonds(edo=edo, rod=rod))


def test_get_bonds_is_sorted_and_merges_types(service):
    assert service.get_bonds() == [
        BondId("EDO0732"),
        BondId("EDO1014"),
        BondId("ROD0832"),
        BondId("ROD0837"),
    ]


def test_get_existing_bond(service):
    bond = service.get_bond(BondId("ROD0837"))
    assert bond is not None
    assert bond.id == BondId("ROD0837")
    assert bond.values == [100.0, 100.02]


def test_get_missing_bond_returns_none(service):
    assert service.get_bond(BondId("NONEXISTENT")) is None


def test_empty_service_has_no_bonds():
    assert BondsService(AllBonds()).get_bonds() == []


def test_load_missing_file_raises(tmp_path):
    path = tmp_path / "missing.xls"
    with pytest.raises(BondsReadError, match="Failed to read Bonds from directory"):
        BondsService.load(path)


def test_load_non_workbook_raises(tmp_path):
    path = tmp_path / "bonds.xls"
    path.write_bytes(b"not a workbook")
    with pytest.raises(BondsReadError) as info:
        BondsService.load(path)
    assert str(path) in str(info.value)