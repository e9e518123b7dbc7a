"""Lookup of bonds by ID, backed by the bonds read from a workbook."""

from __future__ import annotations

from itertools import chain
from pathlib import Path

from bondvalues.model import AllBonds, Bond, BondId
from bondvalues.reader import BondsReadError, read_bonds


class BondsService:
    """Holds every EDO and ROD bond and answers queries about them."""

    def __init__(self, all_bonds: AllBonds):
        self._bonds: dict[BondId, Bond] = {
            bond.id: bond for bond in chain(all_bonds.edo.values(), all_bonds.rod.values())
        }

    @classmethod
    def load(cls, path: str | Path) -> BondsService:
        """Read the bonds workbook at ``path``; raise BondsReadError on failure."""
        try:
            all_bonds = read_bonds(path)
        except BondsReadError as exc:
            raise BondsReadError(f"Failed to read Bonds from directory: {path}") from exc
        return cls(all_bonds)

    def get_bonds(self) -> list[BondId]:
        """Return the IDs of all bonds, sorted."""
        return sorted(self._bonds)

    def get_bond(self, bond_id: BondId) -> Bond | None:
        """Return the bond with the given ID, or None when there is none."""
        return self._bonds.get(bond_id)