from django.core.exceptions import ValidationError
from django.db import transaction

from .models import Answer, Question, Review


def create_question(*, user, user_name: str, title: str, content: str) -> Question:
    return Question.objects.create(
        user=user,
        user_name=user_name.strip(),
        title=title.strip(),
        content=content.strip(),
    )


def add_answer(*, question: Question, user, user_name: str, content: str) -> Answer:
    return Answer.objects.create(
        question=question,
        user=user,
        user_name=user_name.strip(),
        content=content.strip(),
    )


@transaction.atomic
def like_question(question: Question, user) -> None:
    """A like replaces a previous dislike by the same user; repeats are no-ops."""
    question.dislikes.remove(user)
    question.likes.add(user)


@transaction.atomic
def dislike_question(question: Question, user) -> None:
    question.likes.remove(user)
    question.dislikes.add(user)


def parse_rating(value) -> int:
    try:
        rating = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be between 1 and 5")
    if rating < 1 or rating > 5:
        raise ValidationError("Rating must be between 1 and 5")
    return rating


def create_review(*, user, user_name: str, rating, comment: str) -> Review:
    return Review.objects.create(
        user=user,
        user_name=user_name.strip(),
        rating=parse_rating(rating),
        comment=comment.strip(),
    )
