"""Tests for tournament display helpers."""

from __future__ import annotations

import random
import unittest

from tests.conftest import make_items
from thisorthat.tournament import Bracket, BracketEngine, Matchup
from thisorthat.tournament.utils import (
    bracket_rounds,
    champion,
    matchup_summary,
    round_progress,
)


class TournamentUtilsTestCase(unittest.TestCase):
    """Test case for tournament utility functions."""

    def setUp(self) -> None:
        self.items = make_items("Pizza", "Tacos", "Sushi", "Curry")
        self.bracket = BracketEngine.build_bracket(self.items, rng=random.Random(0))

    def test_round_progress_tracks_slowest_matchup(self) -> None:
        m0, m1 = self.bracket.round_matchups(1)
        m0 = BracketEngine.record_vote(m0, "A", "comfortably")
        m0 = BracketEngine.record_vote(m0, "A", "comfortably")
        m1 = BracketEngine.record_vote(m1, "B", "comfortably")
        bracket = self.bracket.replace(m0, m1)
        self.assertEqual(round_progress(bracket, 1, 4), 25)
        self.assertEqual(round_progress(bracket, 1, 1), 100)

    def test_round_progress_edge_cases(self) -> None:
        self.assertEqual(round_progress(self.bracket, 1, 0), 100)
        self.assertEqual(round_progress(self.bracket, 7, 5), 100)
        self.assertEqual(round_progress(self.bracket, 0, 5), 100)

    def test_matchup_summary(self) -> None:
        matchup = Matchup(id="m", round=0, position=0, item_a="item-0", item_b="item-1")
        matchup = BracketEngine.record_vote(matchup, "A", "no-brainer")
        matchup = BracketEngine.record_vote(matchup, "A", "by-a-hair")
        matchup = BracketEngine.record_vote(matchup, "B", "comfortably")

        summary = matchup_summary(matchup, self.items)

        self.assertEqual(summary["itemA"]["name"], "Pizza")
        self.assertEqual(summary["itemB"]["name"], "Tacos")
        self.assertEqual((summary["votesA"], summary["votesB"]), (2, 1))
        self.assertEqual((summary["percentA"], summary["percentB"]), (67, 33))
        self.assertEqual(summary["strengthA"]["no-brainer"], 1)
        self.assertEqual(summary["leader"], "item-0")
        self.assertFalse(summary["isBye"])

    def test_matchup_summary_unknown_item(self) -> None:
        matchup = Matchup(id="m", round=0, position=0, item_a="gone", item_b=None)
        summary = matchup_summary(matchup, self.items)
        self.assertEqual(summary["itemA"]["name"], "Unknown item")
        self.assertIsNone(summary["itemB"])
        self.assertTrue(summary["isBye"])
        self.assertEqual((summary["percentA"], summary["percentB"]), (0, 0))

    def test_bracket_rounds(self) -> None:
        rounds = bracket_rounds(self.bracket, self.items)
        self.assertEqual([r["name"] for r in rounds], ["Semifinals", "Finals"])
        self.assertEqual(len(rounds[0]["matchups"]), 2)
        self.assertEqual(len(rounds[1]["matchups"]), 1)

    def test_champion(self) -> None:
        self.assertIsNone(champion(self.bracket))
        self.assertIsNone(champion(Bracket()))
        finals = Matchup(id="f", round=0, position=0, item_a="a", item_b="b")
        finals = BracketEngine.record_vote(finals, "B", "by-a-hair")
        self.assertEqual(champion(Bracket([finals])), "b")
