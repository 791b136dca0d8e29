# services/catalog.py
import logging
from typing import Any, Dict, List, Optional

from config import BULK_IMPORT_MAX_DOCS, SEARCH_SCAN_LIMIT
from database import (
    DESC, LESSONS, MODULES, QUESTIONS, BatchOp, Store, chunked, new_id, server_timestamp,
)
from models.module import LEVELS
from models.question import QUESTION_TYPES
from services.errors import InvalidInput, NotFound
from services.pagination import page_after
from services.projections import to_public_lesson

logger = logging.getLogger(__name__)

IMPORTABLE_COLLECTIONS = [MODULES, LESSONS, QUESTIONS]


def normalize_level(level: str) -> str:
    value = (level or "").lower()
    if value not in LEVELS:
        raise InvalidInput(f"Invalid level. Must be one of: {', '.join(LEVELS)}")
    return value


def validate_question_type(question_type: str) -> None:
    if question_type not in QUESTION_TYPES:
        raise InvalidInput(f"Invalid type. Must be one of: {', '.join(QUESTION_TYPES)}")


def validate_answer_key(question: Dict[str, Any]) -> None:
    """mcq answer keys must name existing choice ids (compared case-insensitively,
    the same way answers are graded)."""
    if question.get("type") != "mcq":
        return
    choice_ids = {str(c.get("id", "")).upper().strip() for c in question.get("choices") or []}
    dangling = [k for k in question.get("answerKey") or [] if str(k).upper().strip() not in choice_ids]
    if dangling:
        raise InvalidInput(f"Answer key entries do not match any choice id: {', '.join(map(str, dangling))}")


def validate_imported_question(item: Dict[str, Any]) -> None:
    """Checks a raw question document gets before it is written as-is."""
    validate_question_type(item.get("type"))
    for field in ("choices", "answerKey"):
        if field in item and not isinstance(item[field], list):
            raise InvalidInput(f"Field '{field}' must be an array.")
    if not all(isinstance(choice, dict) for choice in item.get("choices") or []):
        raise InvalidInput("Field 'choices' must be an array of objects.")
    validate_answer_key(item)


def matches_text(doc: Dict[str, Any], needle: str, include_tags: bool = True) -> bool:
    needle = needle.lower()
    if needle in (doc.get("title") or "").lower():
        return True
    if needle in (doc.get("description") or "").lower():
        return True
    return include_tags and any(needle in str(tag).lower() for tag in doc.get("tags") or [])


async def search_catalog(
    store: Store,
    q: Optional[str],
    kind: Optional[str] = None,
    size: int = 20,
    cursor: Optional[str] = None,
):
    if not q or not q.strip():
        raise InvalidInput("Query parameter 'q' is required.")

    results: List[Dict[str, Any]] = []
    if not kind or kind == "lesson":
        lessons = await store.find(LESSONS, order=[("createdAt", DESC)], limit=SEARCH_SCAN_LIMIT)
        results.extend(
            {"type": "lesson", **to_public_lesson(lesson)} for lesson in lessons if matches_text(lesson, q)
        )
    if not kind or kind == "module":
        modules = await store.find(MODULES, order=[("createdAt", DESC)], limit=SEARCH_SCAN_LIMIT)
        results.extend({"type": "module", **module} for module in modules if matches_text(module, q))

    logger.info(f"Search '{q}' ({kind or 'all'}) matched {len(results)} documents")
    return page_after(results, size, cursor)


async def delete_lesson(store: Store, lesson_id: str) -> None:
    """Delete a lesson together with its questions."""
    if not await store.get(LESSONS, lesson_id):
        raise NotFound("Lesson not found.")
    questions = await store.find(QUESTIONS, {"lessonId": lesson_id})
    ops = [BatchOp("delete", LESSONS, lesson_id)]
    ops.extend(BatchOp("delete", QUESTIONS, q["id"]) for q in questions)
    for batch in chunked(ops):
        await store.batch_write(batch)
    logger.info(f"Deleted lesson {lesson_id} and {len(questions)} questions")


async def bulk_import(store: Store, collection: str, data: Any) -> Dict[str, Any]:
    if collection not in IMPORTABLE_COLLECTIONS:
        raise InvalidInput(f"Invalid collection. Must be one of: {', '.join(IMPORTABLE_COLLECTIONS)}")
    if not isinstance(data, list) or not data:
        raise InvalidInput("'data' must be a non-empty array.")
    if len(data) > BULK_IMPORT_MAX_DOCS:
        raise InvalidInput(f"Bulk import limited to {BULK_IMPORT_MAX_DOCS} documents per request.")
    if not all(isinstance(item, dict) for item in data):
        raise InvalidInput("Every item in 'data' must be an object.")
    if collection == QUESTIONS:
        for item in data:
            validate_imported_question(item)

    now = server_timestamp()
    ops = []
    for item in data:
        doc = {k: v for k, v in item.items() if k != "id"}
        doc["createdAt"] = now
        doc["updatedAt"] = now
        ops.append(BatchOp("set", collection, new_id(), doc))

    for batch in chunked(ops):
        await store.batch_write(batch)

    logger.info(f"Imported {len(ops)} documents into {collection}")
    return {
        "message": f"Imported {len(ops)} documents into {collection}.",
        "importedCount": len(ops),
        "ids": [op.id for op in ops],
    }
