"""Display helpers for tournament results and progress."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Optional

from thisorthat.core.votes import split_percentages

from .bracket import Bracket, BracketEngine
from .models import Item, Matchup


def items_by_id(items: Iterable[Item]) -> dict[str, Item]:
    """Index items by id."""
    return {item.id: item for item in items}


def round_progress(bracket: Bracket, round_number: int, votes_required: int) -> int:
    """Percent completion of a round, driven by its slowest matchup."""
    if votes_required <= 0 or not bracket.round_matchups(round_number):
        return 100
    floor = BracketEngine.round_vote_floor(bracket, round_number)
    if floor is None:
        return 100
    return min(floor * 100 // votes_required, 100)


def _describe_slot(
    item_id: Optional[str], lookup: dict[str, Item]
) -> Optional[dict[str, Any]]:
    if item_id is None:
        return None
    item = lookup.get(item_id)
    if item is None:
        return {"id": item_id, "name": "Unknown item", "image": ""}
    return item.to_dict()


def matchup_summary(matchup: Matchup, items: Iterable[Item]) -> dict[str, Any]:
    """Summarize a matchup for the results view."""
    lookup = items_by_id(items)
    pct_a, pct_b = split_percentages(matchup.votes_a, matchup.votes_b)
    return {
        "id": matchup.id,
        "round": matchup.round,
        "position": matchup.position,
        "itemA": _describe_slot(matchup.item_a, lookup),
        "itemB": _describe_slot(matchup.item_b, lookup),
        "votesA": matchup.votes_a,
        "votesB": matchup.votes_b,
        "percentA": pct_a,
        "percentB": pct_b,
        "strengthA": matchup.tally_a.breakdown(),
        "strengthB": matchup.tally_b.breakdown(),
        "isBye": matchup.is_bye,
        "leader": BracketEngine.winner_of(matchup),
    }


def bracket_rounds(bracket: Bracket, items: Iterable[Item]) -> list[dict[str, Any]]:
    """Group matchup summaries by round, first round first."""
    items = list(items)
    total_rounds = bracket.num_rounds
    return [
        {
            "round": round_number,
            "name": BracketEngine.round_name(round_number, total_rounds),
            "matchups": [
                matchup_summary(m, items) for m in bracket.round_matchups(round_number)
            ],
        }
        for round_number in bracket.rounds
    ]


def champion(bracket: Bracket) -> Optional[str]:
    """Item id winning the Finals, if decided."""
    finals = bracket.finals
    if finals is None:
        return None
    return BracketEngine.winner_of(finals)
