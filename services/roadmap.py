# services/roadmap.py
"""Ordered, gated view of the module catalog.

Modules run beginner → intermediate → advanced, keeping creation order
within a level. Module ``i > 0`` is locked while module ``i - 1`` sits below
the unlock threshold (50% by default, so exactly 50% unlocks). A module with
no lessons reports 0%, so the module after it stays locked.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from config import ROADMAP_UNLOCK_THRESHOLD
from database import ASC, LESSONS, MODULES, PROGRESS, Store
from services.progress import percent_of

logger = logging.getLogger(__name__)

LEVEL_ORDER = {"beginner": 0, "intermediate": 1, "advanced": 2}


def sort_modules(modules: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Order modules by level. Expects creation order on input; sort is stable."""
    return sorted(modules, key=lambda m: LEVEL_ORDER.get(m.get("level"), 99))


def module_progress(lessons: Iterable[Dict[str, Any]], completed_ids: Set[str]) -> Dict[str, int]:
    lessons = list(lessons)
    completed = sum(1 for lesson in lessons if lesson["id"] in completed_ids)
    return {"completed": completed, "total": len(lessons), "percent": percent_of(completed, len(lessons))}


def unlock_flags(progress: List[Dict[str, int]], threshold: int = ROADMAP_UNLOCK_THRESHOLD) -> List[bool]:
    """``locked`` for each module, given per-module progress in roadmap order."""
    locked = []
    for i in range(len(progress)):
        if i == 0:
            locked.append(False)
            continue
        locked.append(progress[i - 1]["percent"] < threshold)
    return locked


async def build_roadmap(store: Store, user_id: Optional[str] = None) -> Dict[str, Any]:
    modules = await store.find(MODULES, order=[("createdAt", ASC)])

    entries = []
    for module in modules:
        lessons = await store.find(
            LESSONS,
            {"moduleId": module["id"], "published": True},
            order=[("createdAt", ASC)],
        )
        entries.append({
            "id": module["id"],
            "title": module.get("title") or "",
            "description": module.get("description") or "",
            "level": module.get("level") or "beginner",
            "tags": module.get("tags") or [],
            "lessons": [{"id": lesson["id"], "title": lesson.get("title") or ""} for lesson in lessons],
        })
    entries = sort_modules(entries)

    result: Dict[str, Any] = {"modules": entries}
    if user_id is None:
        return result

    completed_records = await store.find(PROGRESS, {"userId": user_id, "status": "completed"})
    completed_ids = {record["lessonId"] for record in completed_records}

    progress = [module_progress(entry["lessons"], completed_ids) for entry in entries]
    for entry, prog, locked in zip(entries, progress, unlock_flags(progress)):
        entry["progress"] = prog
        entry["locked"] = locked

    total = sum(p["total"] for p in progress)
    done = sum(p["completed"] for p in progress)
    result["overall"] = {"completed": done, "total": total, "percent": percent_of(done, total)}
    logger.info(f"Roadmap for {user_id}: {done}/{total} lessons completed")
    return result
