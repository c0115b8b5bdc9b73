from django.contrib.auth import get_user_model
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods, require_POST

from core.api import get_or_404, json_view, read_json, require_fields

from .models import Question, Review
from .services import add_answer, create_question, create_review, dislike_question, like_question


ALL_FIELDS_REQUIRED = "All fields are required"


def _user(user_id):
    return get_or_404(get_user_model(), user_id, "User not found")


@require_http_methods(["GET", "POST"])
@json_view("Failed to process questions")
def questions(request: HttpRequest):
    if request.method == "GET":
        rows = Question.objects.prefetch_related("answers", "likes", "dislikes")
        return JsonResponse([q.as_dict() for q in rows], safe=False)

    data = read_json(request)
    require_fields(data, "userId", "userName", "title", "content", message=ALL_FIELDS_REQUIRED)
    question = create_question(
        user=_user(data["userId"]),
        user_name=str(data["userName"]),
        title=str(data["title"]),
        content=str(data["content"]),
    )
    return JsonResponse({"id": str(question.pk), "success": True})


@require_POST
@json_view("Failed to add answer")
def answer(request: HttpRequest):
    data = read_json(request)
    require_fields(data, "questionId", "userId", "userName", "content", message=ALL_FIELDS_REQUIRED)
    question = get_or_404(Question, data["questionId"], "Question not found")
    add_answer(
        question=question,
        user=_user(data["userId"]),
        user_name=str(data["userName"]),
        content=str(data["content"]),
    )
    return JsonResponse({"success": True})


def _vote(request: HttpRequest, vote):
    data = read_json(request)
    require_fields(data, "questionId", "userId", message="Question ID and User ID are required")
    question = get_or_404(Question, data["questionId"], "Question not found")
    vote(question, _user(data["userId"]))
    return JsonResponse({"success": True})


@require_POST
@json_view("Failed to like question")
def like(request: HttpRequest):
    return _vote(request, like_question)


@require_POST
@json_view("Failed to dislike question")
def dislike(request: HttpRequest):
    return _vote(request, dislike_question)


@require_http_methods(["GET", "POST"])
@json_view("Failed to process reviews")
def reviews(request: HttpRequest):
    if request.method == "GET":
        return JsonResponse([r.as_dict() for r in Review.objects.all()], safe=False)

    data = read_json(request)
    require_fields(data, "userId", "userName", "rating", "comment", message=ALL_FIELDS_REQUIRED)
    review = create_review(
        user=_user(data["userId"]),
        user_name=str(data["userName"]),
        rating=data["rating"],
        comment=str(data["comment"]),
    )
    return JsonResponse({"id": str(review.pk), "success": True})
