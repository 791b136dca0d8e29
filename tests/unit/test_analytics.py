"""Tests for the engagement rollups."""
import pytest

from services.analytics import engagement_report, summarize_lesson


def test_summarize_lesson():
    lesson = {"id": "l1", "title": "Intro"}
    responses = [
        {"lessonId": "l1", "userId": "u1", "score": 1},
        {"lessonId": "l1", "userId": "u1", "score": 0.5},
        {"lessonId": "l1", "userId": "u2", "score": 0},
        {"lessonId": "other", "userId": "u3", "score": 1},
    ]
    progress = [
        {"lessonId": "l1", "status": "completed", "bookmarked": True},
        {"lessonId": "l1", "status": "in_progress", "bookmarked": True},
        {"lessonId": "l1", "status": "completed", "bookmarked": False},
        {"lessonId": "other", "status": "completed", "bookmarked": True},
    ]
    assert summarize_lesson(lesson, responses, progress) == {
        "lessonId": "l1",
        "title": "Intro",
        "totalResponses": 3,
        "uniqueUsers": 2,
        "avgScore": 0.5,
        "completionCount": 2,
        "bookmarkCount": 2,
    }


def test_average_is_rounded_to_two_places():
    responses = [{"lessonId": "l1", "userId": "u", "score": s} for s in (1, 0, 0)]
    assert summarize_lesson({"id": "l1"}, responses, [])["avgScore"] == 0.33


def test_lesson_without_responses():
    summary = summarize_lesson({"id": "l1", "title": "Empty"}, [], [])
    assert summary["totalResponses"] == 0
    assert summary["avgScore"] == 0
    assert summary["uniqueUsers"] == 0


@pytest.mark.asyncio
async def test_engagement_report(catalog, put):
    put(catalog, "responses", "r1", lessonId="les-1", userId="u1", score=1)
    put(catalog, "responses", "r2", lessonId="les-1", userId="u2", score=0.5)
    put(catalog, "progress", "u1_les-1", lessonId="les-1", userId="u1", status="completed", bookmarked=True)
    put(catalog, "progress", "u2_les-1", lessonId="les-1", userId="u2", status="in_progress", bookmarked=True)

    report = await engagement_report(catalog)

    assert [row["lessonId"] for row in report] == ["les-3", "les-2", "les-1"]
    les1 = report[-1]
    assert les1 == {
        "lessonId": "les-1",
        "title": "Prompt Foundations",
        "totalResponses": 2,
        "uniqueUsers": 2,
        "avgScore": 0.75,
        "completionCount": 1,
        "bookmarkCount": 2,
    }
    assert report[0]["avgScore"] == 0


@pytest.mark.asyncio
async def test_engagement_report_order_is_configurable(catalog):
    report = await engagement_report(catalog, order="asc")
    assert [row["lessonId"] for row in report] == ["les-1", "les-2", "les-3"]
