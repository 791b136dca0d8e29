# routes/admin.py
from fastapi import APIRouter, HTTPException, Depends
import logging

from database import Store, get_store, MODULES, LESSONS, QUESTIONS, server_timestamp
from models.lesson import LessonCreate, LessonUpdate, PublishLesson, BulkImport
from models.module import ModuleCreate, ModuleUpdate
from models.question import QuestionCreate, QuestionUpdate
from services.analytics import engagement_report
from services.catalog import (
    bulk_import, delete_lesson, normalize_level, validate_answer_key, validate_question_type,
)
from .auth import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _updates(request) -> dict:
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields provided for update.")
    return updates


@router.get("/check")
async def check():
    return {"isAdmin": True}


# Modules

@router.post("/modules", status_code=201)
async def create_module(request: ModuleCreate, store: Store = Depends(get_store)):
    now = server_timestamp()
    module_id = await store.insert(MODULES, {
        "title": request.title,
        "description": request.description,
        "level": normalize_level(request.level),
        "tags": request.tags,
        "createdAt": now,
        "updatedAt": now,
    })
    logger.info(f"Module {module_id} created: {request.title}")
    return {"id": module_id, "message": "Module created."}


@router.put("/modules/{module_id}")
async def update_module(module_id: str, request: ModuleUpdate, store: Store = Depends(get_store)):
    if not await store.get(MODULES, module_id):
        raise HTTPException(status_code=404, detail="Module not found.")

    updates = _updates(request)
    if "level" in updates:
        updates["level"] = normalize_level(updates["level"])
    updates["updatedAt"] = server_timestamp()
    await store.update(MODULES, module_id, updates)
    logger.info(f"Module {module_id} updated: {sorted(updates)}")
    return {"message": "Module updated.", "id": module_id}


@router.delete("/modules/{module_id}")
async def delete_module(module_id: str, store: Store = Depends(get_store)):
    if not await store.delete(MODULES, module_id):
        raise HTTPException(status_code=404, detail="Module not found.")
    logger.info(f"Module {module_id} deleted")
    return {"message": "Module deleted.", "id": module_id}


# Lessons

@router.post("/lessons", status_code=201)
async def create_lesson(request: LessonCreate, store: Store = Depends(get_store)):
    if request.moduleId and not await store.get(MODULES, request.moduleId):
        raise HTTPException(status_code=404, detail="Module not found.")

    now = server_timestamp()
    lesson_id = await store.insert(LESSONS, {
        "moduleId": request.moduleId or None,
        "title": request.title,
        "content": request.content,
        "description": request.description,
        "level": request.level.lower() if request.level else "beginner",
        "tags": request.tags,
        "published": request.published if isinstance(request.published, bool) else False,
        "order": request.order,
        "topic": request.topic,
        "duration": request.duration,
        "createdAt": now,
        "updatedAt": now,
    })
    logger.info(f"Lesson {lesson_id} created: {request.title}")
    return {"id": lesson_id, "message": "Lesson created."}


@router.put("/lessons/{lesson_id}")
async def update_lesson(lesson_id: str, request: LessonUpdate, store: Store = Depends(get_store)):
    if not await store.get(LESSONS, lesson_id):
        raise HTTPException(status_code=404, detail="Lesson not found.")

    updates = _updates(request)
    if "level" in updates:
        updates["level"] = updates["level"].lower()
    if updates.get("moduleId") and not await store.get(MODULES, updates["moduleId"]):
        raise HTTPException(status_code=404, detail="Module not found.")
    updates["updatedAt"] = server_timestamp()
    await store.update(LESSONS, lesson_id, updates)
    logger.info(f"Lesson {lesson_id} updated: {sorted(updates)}")
    return {"message": "Lesson updated.", "id": lesson_id}


@router.delete("/lessons/{lesson_id}")
async def remove_lesson(lesson_id: str, store: Store = Depends(get_store)):
    await delete_lesson(store, lesson_id)
    return {"message": "Lesson deleted.", "id": lesson_id}


@router.post("/publish-lesson")
async def publish_lesson(request: PublishLesson, store: Store = Depends(get_store)):
    if not isinstance(request.published, bool):
        raise HTTPException(status_code=400, detail="Field 'published' must be a boolean.")
    if not await store.update(LESSONS, request.lessonId, {"published": request.published, "updatedAt": server_timestamp()}):
        raise HTTPException(status_code=404, detail="Lesson not found.")
    logger.info(f"Lesson {request.lessonId} published={request.published}")
    return {
        "message": "Lesson published." if request.published else "Lesson unpublished.",
        "lessonId": request.lessonId,
        "published": request.published,
    }


# Questions

@router.post("/lessons/{lesson_id}/questions", status_code=201)
async def create_question(lesson_id: str, request: QuestionCreate, store: Store = Depends(get_store)):
    if not await store.get(LESSONS, lesson_id):
        raise HTTPException(status_code=404, detail="Lesson not found.")

    validate_question_type(request.type)
    question = {
        "lessonId": lesson_id,
        "type": request.type,
        "prompt": request.prompt,
        "choices": [choice.model_dump() for choice in request.choices],
        "answerKey": request.answerKey,
        "explanation": request.explanation,
        "points": request.points if isinstance(request.points, (int, float)) and not isinstance(request.points, bool) else 1,
    }
    validate_answer_key(question)

    now = server_timestamp()
    question["createdAt"] = now
    question["updatedAt"] = now
    question_id = await store.insert(QUESTIONS, question)
    logger.info(f"Question {question_id} added to lesson {lesson_id}")
    return {"id": question_id, "message": "Question added.", "lessonId": lesson_id}


@router.put("/questions/{question_id}")
async def update_question(question_id: str, request: QuestionUpdate, store: Store = Depends(get_store)):
    existing = await store.get(QUESTIONS, question_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Question not found.")

    updates = _updates(request)
    if "type" in updates:
        validate_question_type(updates["type"])
    validate_answer_key({**existing, **updates})

    updates["updatedAt"] = server_timestamp()
    await store.update(QUESTIONS, question_id, updates)
    logger.info(f"Question {question_id} updated: {sorted(updates)}")
    return {"message": "Question updated.", "id": question_id}


@router.delete("/questions/{question_id}")
async def delete_question(question_id: str, store: Store = Depends(get_store)):
    if not await store.delete(QUESTIONS, question_id):
        raise HTTPException(status_code=404, detail="Question not found.")
    logger.info(f"Question {question_id} deleted")
    return {"message": "Question deleted.", "id": question_id}


# Bulk import & analytics

@router.post("/bulk-import", status_code=201)
async def import_documents(request: BulkImport, store: Store = Depends(get_store)):
    return await bulk_import(store, request.collection, request.data)


@router.get("/analytics/engagement")
async def engagement(store: Store = Depends(get_store)):
    return {"data": await engagement_report(store)}
