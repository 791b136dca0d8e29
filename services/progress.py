# services/progress.py
import asyncio
import logging
import math
import re
from typing import Any, Dict, Iterable

from database import DESC, LESSONS, MODULES, PROGRESS, QUESTIONS, Store, server_timestamp
from models.progress import PROGRESS_STATUSES
from services.errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def progress_id(user_id: str, lesson_id: str) -> str:
    return f"{user_id}_{lesson_id}"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percent_of(part: int, whole: int) -> int:
    """Whole-number percentage, 0 when there is nothing to measure against."""
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)


def clamp_percent(value: Any) -> int:
    """Read ``value`` as an integer percentage in [0, 100].

    Numbers are truncated, strings are read up to their first non-digit
    ("42%" is 42). Anything that does not yield a number counts as 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return 0
        number = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 0
        number = int(match.group(1))
    else:
        return 0
    return min(max(number, 0), 100)


def summarize_statuses(records: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    records = list(records)
    completed = sum(1 for r in records if r.get("status") == "completed")
    in_progress = sum(1 for r in records if r.get("status") == "in_progress")
    return {"completed": completed, "inProgress": in_progress, "total": len(records)}


async def _require_lesson(store: Store, lesson_id: str) -> Dict[str, Any]:
    lesson = await store.get(LESSONS, lesson_id)
    if not lesson:
        logger.warning(f"Lesson not found: {lesson_id}")
        raise NotFound("Lesson not found.")
    return lesson


async def save_progress(store: Store, user_id: str, lesson_id: str, status: str, percent: Any = None) -> Dict[str, Any]:
    """Record a learner's status on a lesson.

    Only status/percent are written, so an existing bookmark flag survives.
    """
    if status not in PROGRESS_STATUSES:
        raise InvalidInput(f"Invalid status. Must be one of: {', '.join(PROGRESS_STATUSES)}")
    pct = clamp_percent(percent)
    await _require_lesson(store, lesson_id)

    doc_id = progress_id(user_id, lesson_id)
    now = server_timestamp()
    await store.upsert_merge(
        PROGRESS,
        doc_id,
        {"userId": user_id, "lessonId": lesson_id, "status": status, "percent": pct, "updatedAt": now},
        on_insert={"bookmarked": False, "createdAt": now},
    )
    logger.info(f"Progress {doc_id} saved: {status} {pct}%")
    return {"message": "Progress saved.", "progressId": doc_id, "status": status, "percent": pct}


async def toggle_bookmark(store: Store, user_id: str, lesson_id: str, bookmarked: Any) -> Dict[str, Any]:
    if not isinstance(bookmarked, bool):
        raise InvalidInput("Field 'bookmarked' must be a boolean.")
    await _require_lesson(store, lesson_id)

    doc_id = progress_id(user_id, lesson_id)
    now = server_timestamp()
    await store.upsert_merge(
        PROGRESS,
        doc_id,
        {"userId": user_id, "lessonId": lesson_id, "bookmarked": bookmarked, "updatedAt": now},
        on_insert={"createdAt": now},
    )
    logger.info(f"Bookmark on {doc_id} set to {bookmarked}")
    return {"message": "Bookmark updated.", "lessonId": lesson_id, "bookmarked": bookmarked}


async def user_progress(store: Store, user_id: str) -> Dict[str, Any]:
    records = await store.find(PROGRESS, {"userId": user_id}, order=[("updatedAt", DESC)])
    return {"data": records, "summary": summarize_statuses(records)}


async def stats_overview(store: Store, user_id: str) -> Dict[str, Any]:
    modules, lessons, questions, records, bookmarks = await asyncio.gather(
        store.count(MODULES),
        store.count(LESSONS),
        store.count(QUESTIONS),
        store.find(PROGRESS, {"userId": user_id}),
        store.count(PROGRESS, {"userId": user_id, "bookmarked": True}),
    )
    summary = summarize_statuses(records)
    return {
        "totalModules": modules,
        "totalLessons": lessons,
        "totalQuestions": questions,
        "userCompleted": summary["completed"],
        "userInProgress": summary["inProgress"],
        "userBookmarks": bookmarks,
        # TODO: derive streakDays from response createdAt dates
        "streakDays": 0,
    }
