# models/progress.py
from pydantic import BaseModel, Field
from typing import Any

PROGRESS_STATUSES = ["in_progress", "completed"]

class SaveProgress(BaseModel):
    lessonId: str = Field(..., min_length=1)
    status: str = Field(..., min_length=1)
    percent: Any = None  # coerced and clamped by the progress service

class BookmarkUpdate(BaseModel):
    bookmarked: Any = None
