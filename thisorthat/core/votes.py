"""Vote tallies shared by survey questions and tournament matchups."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal

from .constants import (
    SLOTS,
    STRENGTH_BY_A_HAIR,
    STRENGTH_COMFORTABLY,
    STRENGTH_NO_BRAINER,
    VOTE_STRENGTHS,
)

Slot = Literal["A", "B"]
VoteStrength = Literal["by-a-hair", "comfortably", "no-brainer"]

# Persisted key suffix for each strength tier, e.g. votesAByHair.
_STRENGTH_SUFFIXES = {
    STRENGTH_BY_A_HAIR: "ByHair",
    STRENGTH_COMFORTABLY: "Comfortably",
    STRENGTH_NO_BRAINER: "NoBrainer",
}


def check_slot(slot: str) -> None:
    """Raise ValueError unless slot is 'A' or 'B'."""
    if slot not in SLOTS:
        raise ValueError(f"Unknown slot {slot!r}; expected 'A' or 'B'.")


def check_strength(strength: str) -> None:
    """Raise ValueError unless strength is a known tier."""
    if strength not in VOTE_STRENGTHS:
        raise ValueError(
            f"Unknown vote strength {strength!r}; expected one of {VOTE_STRENGTHS}."
        )


@dataclass(frozen=True)
class Tally:
    """Votes cast for one side of a comparison.

    ``total`` always equals the sum of the three strength counters when the
    tally is only ever changed through :meth:`add`.
    """

    total: int = 0
    by_a_hair: int = 0
    comfortably: int = 0
    no_brainer: int = 0

    def add(self, strength: str) -> Tally:
        """Return a new tally with one more vote of the given strength."""
        check_strength(strength)
        if strength == STRENGTH_BY_A_HAIR:
            return replace(self, total=self.total + 1, by_a_hair=self.by_a_hair + 1)
        if strength == STRENGTH_COMFORTABLY:
            return replace(
                self, total=self.total + 1, comfortably=self.comfortably + 1
            )
        return replace(self, total=self.total + 1, no_brainer=self.no_brainer + 1)

    def breakdown(self) -> dict[str, int]:
        """Return the strength counters keyed by strength name."""
        return {
            STRENGTH_BY_A_HAIR: self.by_a_hair,
            STRENGTH_COMFORTABLY: self.comfortably,
            STRENGTH_NO_BRAINER: self.no_brainer,
        }

    def to_fields(self, slot: str) -> dict[str, int]:
        """Flatten into the persisted ``votesA``/``votesAByHair``... keys."""
        prefix = f"votes{slot}"
        fields = {prefix: self.total}
        for strength, count in self.breakdown().items():
            fields[prefix + _STRENGTH_SUFFIXES[strength]] = count
        return fields

    @classmethod
    def from_fields(cls, data: dict[str, Any], slot: str) -> Tally:
        """Read a tally back from a persisted document."""
        prefix = f"votes{slot}"
        return cls(
            total=int(data.get(prefix) or 0),
            by_a_hair=int(data.get(prefix + "ByHair") or 0),
            comfortably=int(data.get(prefix + "Comfortably") or 0),
            no_brainer=int(data.get(prefix + "NoBrainer") or 0),
        )


def split_percentages(votes_a: int, votes_b: int) -> tuple[int, int]:
    """Return rounded percentages for each side, (0, 0) when nobody voted."""
    total = votes_a + votes_b
    if total == 0:
        return 0, 0
    pct_a = round(votes_a * 100 / total)
    return pct_a, 100 - pct_a
