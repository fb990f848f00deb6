"""Single-elimination bracket construction and advancement."""

from __future__ import annotations

import random
import uuid
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import replace
from typing import Any, Optional

from thisorthat.core.constants import SLOT_A
from thisorthat.core.votes import check_slot
from thisorthat.errors import InvalidInputError

from .models import Item, Matchup

ROUND_NAMES = {
    0: "Finals",
    1: "Semifinals",
    2: "Quarterfinals",
    3: "Round of 16",
    4: "Round of 32",
}


class Bracket:
    """All matchups of one tournament, indexed by (round, position).

    Iteration yields matchups from the first round down to the Finals, each
    round ordered by position. Instances are treated as immutable: operations
    that change a matchup return a new bracket.
    """

    def __init__(self, matchups: Iterable[Matchup] = ()) -> None:
        self._cells: dict[tuple[int, int], Matchup] = {}
        for matchup in matchups:
            self._cells[(matchup.round, matchup.position)] = matchup

    @classmethod
    def from_dicts(cls, rows: Iterable[dict[str, Any]] | None) -> Bracket:
        """Rebuild a bracket from persisted matchup documents.

        Rows that cannot be placed (missing id, round or position) are
        dropped so a damaged document still renders.
        """
        matchups = []
        for row in rows or []:
            try:
                matchups.append(Matchup.from_dict(row))
            except (KeyError, TypeError, ValueError):
                continue
        return cls(matchups)

    def to_dicts(self) -> list[dict[str, Any]]:
        """Return the persisted form of every matchup."""
        return [matchup.to_dict() for matchup in self]

    def __iter__(self) -> Iterator[Matchup]:
        for key in sorted(self._cells, key=lambda k: (-k[0], k[1])):
            yield self._cells[key]

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bracket):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"<Bracket rounds={self.num_rounds} matchups={len(self)}>"

    def get(self, round_number: int, position: int) -> Optional[Matchup]:
        return self._cells.get((round_number, position))

    def find(self, matchup_id: str) -> Optional[Matchup]:
        """Look up a matchup by its id."""
        for matchup in self._cells.values():
            if matchup.id == matchup_id:
                return matchup
        return None

    def round_matchups(self, round_number: int) -> list[Matchup]:
        """Return one round's matchups ordered by position."""
        cells = [m for (r, _), m in self._cells.items() if r == round_number]
        return sorted(cells, key=lambda m: m.position)

    @property
    def rounds(self) -> list[int]:
        """Round numbers present, first round first."""
        return sorted({r for r, _ in self._cells}, reverse=True)

    @property
    def first_round(self) -> Optional[int]:
        rounds = self.rounds
        return rounds[0] if rounds else None

    @property
    def num_rounds(self) -> int:
        first = self.first_round
        return first + 1 if first is not None else 0

    @property
    def finals(self) -> Optional[Matchup]:
        return self.get(0, 0)

    def replace(self, *matchups: Matchup) -> Bracket:
        """Return a copy with the given matchups swapped in at their cells."""
        updated = Bracket(self)
        for matchup in matchups:
            updated._cells[(matchup.round, matchup.position)] = matchup
        return updated


class BracketEngine:
    """Pure functions that build and progress tournament brackets."""

    MIN_BRACKET_SIZE = 2

    @staticmethod
    def bracket_size(item_count: int) -> int:
        """Smallest power of two holding item_count items (at least 2)."""
        if item_count < 1:
            raise InvalidInputError()
        return max(BracketEngine.MIN_BRACKET_SIZE, 1 << (item_count - 1).bit_length())

    @staticmethod
    def build_bracket(
        items: Sequence[Item],
        rng: random.Random | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> Bracket:
        """Seed items randomly into a bracket padded with byes.

        Pass a seeded ``random.Random`` for a reproducible draw.
        """
        if not items:
            raise InvalidInputError()
        item_ids = [item.id for item in items]
        if len(set(item_ids)) != len(item_ids):
            raise InvalidInputError("Tournament items must have unique ids.")

        rng = rng or random.Random()
        new_id = id_factory or (lambda: str(uuid.uuid4()))

        size = BracketEngine.bracket_size(len(items))
        num_rounds = size.bit_length() - 1

        seeded: list[Optional[str]] = list(item_ids)
        rng.shuffle(seeded)
        seeded.extend([None] * (size - len(items)))

        first_round = num_rounds - 1
        matchups = [
            Matchup(
                id=new_id(),
                round=first_round,
                position=i,
                item_a=seeded[2 * i],
                item_b=seeded[2 * i + 1],
            )
            for i in range(size // 2)
        ]
        for round_number in range(first_round - 1, -1, -1):
            matchups.extend(
                Matchup(id=new_id(), round=round_number, position=i)
                for i in range(2**round_number)
            )
        return Bracket(matchups)

    @staticmethod
    def record_vote(matchup: Matchup, slot: str, strength: str) -> Matchup:
        """Return the matchup with one more vote for slot at strength.

        Whether the vote is allowed (active round, not a bye) is for the
        caller to decide.
        """
        check_slot(slot)
        if slot == SLOT_A:
            return replace(matchup, tally_a=matchup.tally_a.add(strength))
        return replace(matchup, tally_b=matchup.tally_b.add(strength))

    @staticmethod
    def winner_of(matchup: Matchup) -> Optional[str]:
        """Return the item id currently winning the matchup, if decided.

        Byes go to the present item without a vote. Ties, including 0-0,
        have no winner.
        """
        if matchup.item_a is None:
            return matchup.item_b
        if matchup.item_b is None:
            return matchup.item_a
        if matchup.votes_a > matchup.votes_b:
            return matchup.item_a
        if matchup.votes_b > matchup.votes_a:
            return matchup.item_b
        return None

    @staticmethod
    def advance_round(bracket: Bracket) -> Bracket:
        """Fill every round's slots with the winners of the round before it.

        Rounds are processed from the first round toward the Finals, so a bye
        created by advancement is carried forward in the same call. Calling it
        again without new votes returns an equal bracket.
        """
        advanced = bracket
        for source_round in bracket.rounds:
            if source_round <= 0:
                continue
            updates = []
            for target in advanced.round_matchups(source_round - 1):
                feeder_a = advanced.get(source_round, 2 * target.position)
                feeder_b = advanced.get(source_round, 2 * target.position + 1)
                if feeder_a is None and feeder_b is None:
                    continue
                winner_a = BracketEngine.winner_of(feeder_a) if feeder_a else None
                winner_b = BracketEngine.winner_of(feeder_b) if feeder_b else None
                if (target.item_a, target.item_b) != (winner_a, winner_b):
                    updates.append(replace(target, item_a=winner_a, item_b=winner_b))
            if updates:
                advanced = advanced.replace(*updates)
        return advanced

    @staticmethod
    def round_vote_floor(bracket: Bracket, round_number: int) -> Optional[int]:
        """Fewest votes cast on any votable matchup of the round.

        Byes and empty matchups cannot receive votes and are left out; None
        means the round has nothing to vote on.
        """
        totals = [
            m.total_votes for m in bracket.round_matchups(round_number) if m.is_votable
        ]
        return min(totals) if totals else None

    @staticmethod
    def is_round_complete(
        bracket: Bracket, round_number: int, votes_required: int
    ) -> bool:
        """True once the round's slowest votable matchup reaches the threshold."""
        if not bracket.round_matchups(round_number):
            return False
        floor = BracketEngine.round_vote_floor(bracket, round_number)
        return floor is None or floor >= votes_required

    @staticmethod
    def round_name(round_number: int, total_rounds: int) -> str:
        """Display label for a round, counted back from the Finals."""
        if round_number in ROUND_NAMES:
            return ROUND_NAMES[round_number]
        return f"Round {total_rounds - round_number}"
