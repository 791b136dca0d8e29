# routes/progress.py
from fastapi import APIRouter, Depends

from database import Store, get_store
from models.progress import SaveProgress, BookmarkUpdate
from models.user import AuthUser
from services import progress as progress_service
from .auth import authenticate

router = APIRouter(prefix="/v1", tags=["progress"])


@router.post("/save-progress")
async def save_progress(request: SaveProgress, current_user: AuthUser = Depends(authenticate), store: Store = Depends(get_store)):
    return await progress_service.save_progress(store, current_user.uid, request.lessonId, request.status, request.percent)


@router.get("/user-progress")
async def user_progress(current_user: AuthUser = Depends(authenticate), store: Store = Depends(get_store)):
    return await progress_service.user_progress(store, current_user.uid)


@router.get("/stats/overview")
async def stats_overview(current_user: AuthUser = Depends(authenticate), store: Store = Depends(get_store)):
    return await progress_service.stats_overview(store, current_user.uid)


@router.patch("/lessons/{lesson_id}/bookmark")
async def toggle_bookmark(
    lesson_id: str,
    request: BookmarkUpdate,
    current_user: AuthUser = Depends(authenticate),
    store: Store = Depends(get_store),
):
    return await progress_service.toggle_bookmark(store, current_user.uid, lesson_id, request.bookmarked)
