"""Data models for tournament brackets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from thisorthat.core.constants import SLOT_A
from thisorthat.core.votes import Tally, check_slot


@dataclass(frozen=True)
class Item:
    """A competitor in a tournament."""

    id: str
    name: str
    image: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted form of the item."""
        return {"id": self.id, "name": self.name, "image": self.image}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Item:
        """Build an item from its persisted form."""
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            image=str(data.get("image") or ""),
        )


@dataclass(frozen=True)
class Matchup:
    """One bracket cell pitting at most two items against each other.

    Round 0 is the Finals; higher rounds are earlier in the tournament. A slot
    holding None is either a bye or a winner not yet determined.
    """

    id: str
    round: int
    position: int
    item_a: Optional[str] = None
    item_b: Optional[str] = None
    tally_a: Tally = field(default_factory=Tally)
    tally_b: Tally = field(default_factory=Tally)

    @property
    def votes_a(self) -> int:
        return self.tally_a.total

    @property
    def votes_b(self) -> int:
        return self.tally_b.total

    @property
    def total_votes(self) -> int:
        return self.tally_a.total + self.tally_b.total

    @property
    def is_bye(self) -> bool:
        """True when exactly one slot is filled."""
        return (self.item_a is None) != (self.item_b is None)

    @property
    def is_votable(self) -> bool:
        """True when both slots hold an item."""
        return self.item_a is not None and self.item_b is not None

    @property
    def is_finals(self) -> bool:
        return self.round == 0

    def item(self, slot: str) -> Optional[str]:
        check_slot(slot)
        return self.item_a if slot == SLOT_A else self.item_b

    def tally(self, slot: str) -> Tally:
        check_slot(slot)
        return self.tally_a if slot == SLOT_A else self.tally_b

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted form of the matchup."""
        data: dict[str, Any] = {
            "id": self.id,
            "round": self.round,
            "position": self.position,
            "itemA": self.item_a,
            "itemB": self.item_b,
        }
        data.update(self.tally_a.to_fields("A"))
        data.update(self.tally_b.to_fields("B"))
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Matchup:
        """Build a matchup from its persisted form."""
        return cls(
            id=str(data["id"]),
            round=int(data["round"]),
            position=int(data["position"]),
            item_a=data.get("itemA"),
            item_b=data.get("itemB"),
            tally_a=Tally.from_fields(data, "A"),
            tally_b=Tally.from_fields(data, "B"),
        )
