"""Tests for vote tallies and survey data models."""

import unittest

from thisorthat.core.votes import Tally, split_percentages
from thisorthat.survey.models import Question, SurveyResponse, TournamentResponse
from thisorthat.survey.utils import public_view, question_results, survey_results


class TallyTestCase(unittest.TestCase):
    def test_add_counts_strength(self) -> None:
        tally = Tally().add("by-a-hair").add("no-brainer").add("no-brainer")
        self.assertEqual(tally.total, 3)
        self.assertEqual(
            tally.breakdown(), {"by-a-hair": 1, "comfortably": 0, "no-brainer": 2}
        )

    def test_persisted_field_names(self) -> None:
        fields = Tally().add("comfortably").to_fields("B")
        self.assertEqual(
            fields,
            {
                "votesB": 1,
                "votesBByHair": 0,
                "votesBComfortably": 1,
                "votesBNoBrainer": 0,
            },
        )
        self.assertEqual(Tally.from_fields({}, "A"), Tally())

    def test_unknown_strength(self) -> None:
        with self.assertRaises(ValueError):
            Tally().add("maybe")

    def test_split_percentages(self) -> None:
        self.assertEqual(split_percentages(0, 0), (0, 0))
        self.assertEqual(split_percentages(1, 2), (33, 67))
        self.assertEqual(split_percentages(5, 0), (100, 0))


class ResponseModelsTestCase(unittest.TestCase):
    def test_survey_response_validate(self) -> None:
        SurveyResponse("q1", "A", "comfortably").validate()
        with self.assertRaises(ValueError):
            SurveyResponse("", "A", "comfortably").validate()
        with self.assertRaises(ValueError):
            SurveyResponse("q1", "a", "comfortably").validate()
        with self.assertRaises(ValueError):
            SurveyResponse("q1", "A", "strongly").validate()

    def test_tournament_response_from_dict(self) -> None:
        response = TournamentResponse.from_dict(
            {"matchupId": "m1", "choice": "B", "strength": "no-brainer"}
        )
        self.assertEqual(response, TournamentResponse("m1", "B", "no-brainer"))
        self.assertEqual(response.to_dict()["matchupId"], "m1")
        with self.assertRaises(ValueError):
            TournamentResponse.from_dict({}).validate()


class SurveyUtilsTestCase(unittest.TestCase):
    def test_question_results(self) -> None:
        question = Question(id="q", option_a="Sun", option_b="Rain")
        question = question.vote("A", "no-brainer").vote("B", "by-a-hair")
        question = question.vote("A", "comfortably")
        results = question_results(question)
        self.assertEqual((results["votesA"], results["votesB"]), (2, 1))
        self.assertEqual((results["percentA"], results["percentB"]), (67, 33))
        self.assertEqual(results["strengthB"]["by-a-hair"], 1)

    def test_survey_results_for_tournament(self) -> None:
        survey = {
            "id": "s",
            "surveyType": "tournament",
            "tournamentItems": [
                {"id": "a", "name": "Apple"},
                {"id": "b", "name": "Banana"},
            ],
            "tournamentMatchups": [
                {
                    "id": "f", "round": 0, "position": 0, "itemA": "a", "itemB": "b",
                    "votesA": 1, "votesANoBrainer": 1,
                }
            ],
            "currentTournamentRound": 0,
            "tournamentRoundVotesRequired": 2,
        }
        results = survey_results(survey)["tournament"]
        self.assertEqual(results["currentRoundName"], "Finals")
        self.assertEqual(results["roundProgress"], 50)
        self.assertEqual(results["champion"]["name"], "Apple")
        self.assertEqual(len(results["rounds"]), 1)

    def test_no_champion_before_finals(self) -> None:
        survey = {
            "surveyType": "tournament",
            "tournamentItems": [{"id": "e", "name": "Egg"}],
            "tournamentMatchups": [
                {"id": "s0", "round": 1, "position": 0},
                {"id": "s1", "round": 1, "position": 1, "itemA": "e"},
                {"id": "f", "round": 0, "position": 0, "itemB": "e"},
            ],
            "currentTournamentRound": 1,
        }
        self.assertIsNone(survey_results(survey)["tournament"]["champion"])

    def test_public_view_hides_invite_code(self) -> None:
        survey = {"id": "s", "creatorId": "owner", "inviteCode": "ABCDEFGH"}
        self.assertNotIn("inviteCode", public_view(survey, "guest"))
        self.assertEqual(public_view(survey, "owner")["inviteCode"], "ABCDEFGH")
