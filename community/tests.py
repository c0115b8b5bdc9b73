import json

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from django.urls import reverse

from .models import Question, Review
from .services import create_question, dislike_question, like_question, parse_rating


class VoteTests(TestCase):
    def setUp(self):
        user_model = get_user_model()
        self.author = user_model.objects.create_user(username="author", email="author@example.com", password="x")
        self.voter = user_model.objects.create_user(username="voter", email="voter@example.com", password="x")
        self.question = create_question(
            user=self.author, user_name="Author", title="Creatine?", content="Daily or cycled?"
        )

    def test_like_then_dislike_moves_the_vote(self):
        like_question(self.question, self.voter)
        like_question(self.question, self.voter)
        self.assertEqual(list(self.question.likes.all()), [self.voter])
        self.assertFalse(self.question.dislikes.exists())

        dislike_question(self.question, self.voter)
        self.assertFalse(self.question.likes.exists())
        self.assertEqual(list(self.question.dislikes.all()), [self.voter])

    def test_vote_endpoints(self):
        payload = {"questionId": str(self.question.pk), "userId": str(self.voter.pk)}
        response = self.client.post(reverse("community:like"), data=json.dumps(payload), content_type="application/json")
        self.assertEqual(response.json(), {"success": True})

        response = self.client.post(
            reverse("community:dislike"), data=json.dumps(payload), content_type="application/json"
        )
        self.assertEqual(response.status_code, 200)

        row = self.client.get(reverse("community:questions")).json()[0]
        self.assertEqual(row["likes"], [])
        self.assertEqual(row["dislikes"], [str(self.voter.pk)])

    def test_vote_requires_ids(self):
        response = self.client.post(reverse("community:like"), data="{}", content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Question ID and User ID are required")

    def test_vote_on_missing_question(self):
        payload = {"questionId": "424242", "userId": str(self.voter.pk)}
        response = self.client.post(reverse("community:like"), data=json.dumps(payload), content_type="application/json")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"], "Question not found")


class QuestionApiTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="kabir", email="kabir@example.com", password="x")

    def _post(self, name, payload):
        return self.client.post(reverse(name), data=json.dumps(payload), content_type="application/json")

    def test_ask_and_answer(self):
        response = self._post("community:questions", {
            "userId": str(self.user.pk),
            "userName": "Kabir",
            "title": "Knee pain on squats",
            "content": "Any tips?",
        })
        self.assertEqual(response.status_code, 200)
        question_id = response.json()["id"]

        response = self._post("community:answer", {
            "questionId": question_id,
            "userId": str(self.user.pk),
            "userName": "Kabir",
            "content": "Work on ankle mobility.",
        })
        self.assertEqual(response.json(), {"success": True})

        rows = self.client.get(reverse("community:questions")).json()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["answers"][0]["content"], "Work on ankle mobility.")

    def test_question_requires_all_fields(self):
        response = self._post("community:questions", {"userId": str(self.user.pk), "title": "Hi"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "All fields are required")
        self.assertFalse(Question.objects.exists())


class ReviewTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(username="nisha", email="nisha@example.com", password="x")

    def _post(self, rating):
        payload = {"userId": str(self.user.pk), "userName": "Nisha", "rating": rating, "comment": "Clean place"}
        return self.client.post(reverse("community:reviews"), data=json.dumps(payload), content_type="application/json")

    def test_parse_rating_bounds(self):
        self.assertEqual(parse_rating("4"), 4)
        for bad in (0, 6, "five", None):
            with self.assertRaises(ValidationError):
                parse_rating(bad)

    def test_review_is_created_and_listed(self):
        response = self._post(5)
        self.assertEqual(response.status_code, 200)

        rows = self.client.get(reverse("community:reviews")).json()
        self.assertEqual(rows[0]["rating"], 5)
        self.assertEqual(rows[0]["userName"], "Nisha")

    def test_out_of_range_rating_is_rejected(self):
        response = self._post(9)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Rating must be between 1 and 5")
        self.assertFalse(Review.objects.exists())
