from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.api import isoformat


class Question(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="questions")
    user_name = models.CharField(max_length=255)
    title = models.CharField(max_length=255)
    content = models.TextField()

    likes = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name="liked_questions")
    dislikes = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name="disliked_questions")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def as_dict(self) -> dict:
        # likes/dislikes/answers are expected to be prefetched
        return {
            "id": str(self.pk),
            "userId": str(self.user_id),
            "userName": self.user_name,
            "title": self.title,
            "content": self.content,
            "answers": [a.as_dict() for a in self.answers.all()],
            "likes": [str(u.pk) for u in self.likes.all()],
            "dislikes": [str(u.pk) for u in self.dislikes.all()],
            "createdAt": isoformat(self.created_at),
        }

    def __str__(self):
        return self.title


class Answer(models.Model):
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name="answers")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="answers")
    user_name = models.CharField(max_length=255)
    content = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("created_at", "id")

    def as_dict(self) -> dict:
        return {
            "id": str(self.pk),
            "userId": str(self.user_id),
            "userName": self.user_name,
            "content": self.content,
            "createdAt": isoformat(self.created_at),
        }

    def __str__(self):
        return f"Answer({self.user_id}) to #{self.question_id}"


class Review(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    user_name = models.CharField(max_length=255)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def as_dict(self) -> dict:
        return {
            "id": str(self.pk),
            "userId": str(self.user_id),
            "userName": self.user_name,
            "rating": self.rating,
            "comment": self.comment,
            "createdAt": isoformat(self.created_at),
        }

    def __str__(self):
        return f"Review({self.user_id}) {self.rating}/5"
