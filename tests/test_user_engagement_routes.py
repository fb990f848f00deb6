"""Tests for the user and engagement blueprints."""

from __future__ import annotations

from tests.conftest import FirestoreAppTestCase

USER_ID = "user-one"
OTHER_ID = "user-two"


class UserRoutesTestCase(FirestoreAppTestCase):
    def test_me_creates_profile(self) -> None:
        body = self.client.get("/user/me").get_json()
        profile = body["data"]["profile"]
        self.assertTrue(profile["id"].startswith("user-"))
        self.assertTrue(profile["name"].startswith("User"))
        with self.client.session_transaction() as sess:
            self.assertEqual(sess["user_id"], profile["id"])

    def test_session_user_is_stable(self) -> None:
        first = self.client.get("/user/me").get_json()["data"]["profile"]["id"]
        second = self.client.get("/user/me").get_json()["data"]["profile"]["id"]
        self.assertEqual(first, second)

    def test_update_me(self) -> None:
        self.set_session_user(USER_ID)
        response = self.client.post("/user/me", data={"name": "Jordan", "bio": "Hi!"})
        self.assertEqual(response.status_code, 200)
        profile = self.client.get("/user/me").get_json()["data"]["profile"]
        self.assertEqual((profile["name"], profile["bio"]), ("Jordan", "Hi!"))

        response = self.client.post("/user/me", data={"name": ""})
        self.assertEqual(response.status_code, 400)

    def test_follow_and_unfollow(self) -> None:
        self.set_session_user(OTHER_ID)
        self.client.get("/user/me")

        self.set_session_user(USER_ID)
        self.assertEqual(self.client.post(f"/user/{OTHER_ID}/follow").status_code, 200)
        body = self.client.get(f"/user/{OTHER_ID}").get_json()
        self.assertTrue(body["data"]["isFollowing"])
        self.assertEqual(body["data"]["profile"]["followers"], [USER_ID])
        self.assertNotIn("accessedPrivateSurveys", body["data"]["profile"])

        self.client.post(f"/user/{OTHER_ID}/unfollow")
        body = self.client.get(f"/user/{OTHER_ID}").get_json()
        self.assertFalse(body["data"]["isFollowing"])

    def test_cannot_follow_self(self) -> None:
        self.set_session_user(USER_ID)
        self.assertEqual(self.client.post(f"/user/{USER_ID}/follow").status_code, 400)

    def test_unknown_user(self) -> None:
        self.assertEqual(self.client.get("/user/nobody").status_code, 404)


class EngagementRoutesTestCase(FirestoreAppTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.set_session_user(USER_ID)
        response = self.client.post(
            "/surveys/create",
            data={
                "title": "Morning or night",
                "questions-0-option_a": "Morning",
                "questions-0-option_b": "Night",
            },
        )
        self.survey_id = response.get_json()["data"]["survey"]["id"]

    def test_comments(self) -> None:
        response = self.client.post(
            f"/engagement/{self.survey_id}/comments", data={"text": "Night owl here"}
        )
        self.assertEqual(response.status_code, 201)
        comment_id = response.get_json()["data"]["comment"]["id"]

        comments = self.client.get(f"/engagement/{self.survey_id}/comments").get_json()
        self.assertEqual(
            [c["text"] for c in comments["data"]["comments"]], ["Night owl here"]
        )

        self.set_session_user(OTHER_ID)
        response = self.client.post(f"/engagement/comments/{comment_id}/delete")
        self.assertEqual(response.status_code, 403)

        self.set_session_user(USER_ID)
        response = self.client.post(f"/engagement/comments/{comment_id}/delete")
        self.assertEqual(response.status_code, 200)

    def test_empty_comment(self) -> None:
        response = self.client.post(
            f"/engagement/{self.survey_id}/comments", data={"text": ""}
        )
        self.assertEqual(response.status_code, 400)

    def test_reactions(self) -> None:
        body = self.client.post(
            f"/engagement/{self.survey_id}/reactions", data={"reaction": "fire"}
        ).get_json()
        self.assertTrue(body["data"]["added"])
        self.assertEqual(body["data"]["counts"]["fire"], 1)

        body = self.client.get(f"/engagement/{self.survey_id}/reactions").get_json()
        self.assertEqual(body["data"]["mine"], "fire")

        body = self.client.post(
            f"/engagement/{self.survey_id}/reactions", data={"reaction": "fire"}
        ).get_json()
        self.assertFalse(body["data"]["added"])
        self.assertEqual(body["data"]["counts"]["fire"], 0)

    def test_unknown_reaction(self) -> None:
        response = self.client.post(
            f"/engagement/{self.survey_id}/reactions", data={"reaction": "angry"}
        )
        self.assertEqual(response.status_code, 400)

    def test_private_survey_engagement_needs_invite_code(self) -> None:
        response = self.client.post(
            "/surveys/create",
            data={
                "title": "Secret or not",
                "visibility": "private",
                "questions-0-option_a": "Tell",
                "questions-0-option_b": "Keep",
            },
        )
        survey = response.get_json()["data"]["survey"]
        base = f"/engagement/{survey['id']}"

        self.set_session_user(OTHER_ID)
        self.assertEqual(self.client.get(f"{base}/comments").status_code, 403)
        self.assertEqual(
            self.client.post(f"{base}/comments", data={"text": "Peek"}).status_code, 403
        )
        self.assertEqual(self.client.get(f"{base}/reactions").status_code, 403)
        self.assertEqual(
            self.client.post(f"{base}/reactions", data={"reaction": "eyes"}).status_code,
            403,
        )

        self.client.post("/surveys/access", data={"code": survey["inviteCode"]})
        self.assertEqual(
            self.client.post(f"{base}/comments", data={"text": "Keep"}).status_code, 201
        )
        self.assertEqual(self.client.get(f"{base}/reactions").status_code, 200)
