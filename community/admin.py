from django.contrib import admin
from .models import Answer, Question, Review


class AnswerInline(admin.TabularInline):
    model = Answer
    extra = 0
    fields = ("user", "user_name", "content", "created_at")
    readonly_fields = ("created_at",)
    raw_id_fields = ("user",)


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "user_name", "created_at")
    search_fields = ("title", "content", "user_name")
    raw_id_fields = ("user",)
    filter_horizontal = ("likes", "dislikes")
    inlines = [AnswerInline]
    ordering = ("-created_at",)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "user_name", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("user_name", "comment")
    ordering = ("-created_at",)
