# routes/catalog.py
from fastapi import APIRouter, HTTPException, Depends
from typing import Optional
import logging

from database import Store, get_store, MODULES, LESSONS, QUESTIONS, ASC, DESC
from services.catalog import matches_text
from services.pagination import page_size, build_page
from services.projections import to_public_lesson, to_learner_question

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["catalog"])


@router.get("/modules")
async def list_modules(
    level: Optional[str] = None,
    q: Optional[str] = None,
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    store: Store = Depends(get_store),
):
    size = page_size(limit)
    query = {"level": level.lower()} if level else {}
    modules = await store.find(MODULES, query, order=[("createdAt", DESC)], limit=size + 1, cursor=cursor)

    # text filter applies to the fetched page only
    if q:
        modules = [m for m in modules if matches_text(m, q, include_tags=False)]

    data, pagination = build_page(modules, size)
    return {"data": data, "pagination": pagination}


@router.get("/modules/{module_id}")
async def get_module(module_id: str, store: Store = Depends(get_store)):
    module = await store.get(MODULES, module_id)
    if not module:
        raise HTTPException(status_code=404, detail="Module not found.")
    module["lessonCount"] = await store.count(LESSONS, {"moduleId": module_id})
    return module


@router.get("/modules/{module_id}/lessons")
async def list_module_lessons(
    module_id: str,
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    store: Store = Depends(get_store),
):
    if not await store.get(MODULES, module_id):
        raise HTTPException(status_code=404, detail="Module not found.")

    size = page_size(limit)
    lessons = await store.find(LESSONS, {"moduleId": module_id}, order=[("order", ASC)], limit=size + 1, cursor=cursor)
    data, pagination = build_page([to_public_lesson(lesson) for lesson in lessons], size)
    return {"data": data, "pagination": pagination}


@router.get("/lessons")
async def list_lessons(
    level: Optional[str] = None,
    tag: Optional[str] = None,
    q: Optional[str] = None,
    limit: Optional[str] = None,
    cursor: Optional[str] = None,
    store: Store = Depends(get_store),
):
    size = page_size(limit)
    query = {}
    if level:
        query["level"] = level
    if tag:
        query["tags"] = tag
    lessons = await store.find(LESSONS, query, order=[("createdAt", DESC)], limit=size + 1, cursor=cursor)
    lessons = [to_public_lesson(lesson) for lesson in lessons]

    if q:
        lessons = [lesson for lesson in lessons if matches_text(lesson, q)]

    data, pagination = build_page(lessons, size)
    return {"data": data, "pagination": pagination}


@router.get("/lessons/{lesson_id}")
async def get_lesson(lesson_id: str, store: Store = Depends(get_store)):
    lesson = await store.get(LESSONS, lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Lesson not found.")

    questions = await store.find(QUESTIONS, {"lessonId": lesson_id}, order=[("createdAt", ASC)])
    lesson["questions"] = [to_learner_question(question) for question in questions]
    return lesson
