# routes/roadmap.py
from fastapi import APIRouter, Depends
from typing import Optional

from database import Store, get_store
from models.user import AuthUser
from services.roadmap import build_roadmap
from .auth import optional_user

router = APIRouter(prefix="/v1", tags=["roadmap"])


@router.get("/roadmap")
async def roadmap(current_user: Optional[AuthUser] = Depends(optional_user), store: Store = Depends(get_store)):
    """Modules in learning order. Signed-in callers also get per-module
    progress and lock state."""
    return await build_roadmap(store, current_user.uid if current_user else None)
