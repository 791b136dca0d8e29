# services/analytics.py
"""Per-lesson engagement rollups for the admin console.

``engagement_report`` issues one filtered read per lesson per metric
(responses, completions, bookmarks). That is linear in the number of lessons
and fine for a small catalog; a large one would want a single grouped pass
over the responses collection instead.
"""
import logging
import math
from typing import Any, Dict, Iterable, List

from config import ENGAGEMENT_ORDER
from database import ASC, DESC, LESSONS, PROGRESS, RESPONSES, Store

logger = logging.getLogger(__name__)


def _round2(value: float) -> float:
    return math.floor(value * 100 + 0.5) / 100


def summarize_lesson(
    lesson: Dict[str, Any],
    responses: Iterable[Dict[str, Any]],
    progress: Iterable[Dict[str, Any]],
) -> Dict[str, Any]:
    lesson_id = lesson["id"]
    scoped = [r for r in responses if r.get("lessonId") == lesson_id]
    records = [p for p in progress if p.get("lessonId") == lesson_id]

    total = len(scoped)
    score_sum = sum(r.get("score") or 0 for r in scoped)

    return {
        "lessonId": lesson_id,
        "title": lesson.get("title") or "",
        "totalResponses": total,
        "uniqueUsers": len({r.get("userId") for r in scoped}),
        "avgScore": _round2(score_sum / total) if total else 0,
        "completionCount": sum(1 for p in records if p.get("status") == "completed"),
        "bookmarkCount": sum(1 for p in records if p.get("bookmarked") is True),
    }


async def engagement_report(store: Store, order: str = ENGAGEMENT_ORDER) -> List[Dict[str, Any]]:
    direction = ASC if order == ASC else DESC
    lessons = await store.find(LESSONS, order=[("createdAt", direction)])

    report = []
    for lesson in lessons:
        lesson_id = lesson["id"]
        responses = await store.find(RESPONSES, {"lessonId": lesson_id})
        completed = await store.find(PROGRESS, {"lessonId": lesson_id, "status": "completed"})
        bookmarked = await store.find(PROGRESS, {"lessonId": lesson_id, "bookmarked": True})
        # a record can be both completed and bookmarked
        records = {p["id"]: p for p in completed + bookmarked}
        report.append(summarize_lesson(lesson, responses, records.values()))

    logger.info(f"Engagement report built for {len(report)} lessons")
    return report
