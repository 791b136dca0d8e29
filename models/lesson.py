# models/lesson.py
from pydantic import BaseModel, Field
from typing import Any, List, Optional

class LessonCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    moduleId: Optional[str] = None
    description: str = ""
    level: Optional[str] = None
    tags: List[str] = []
    published: Any = None
    order: int = 0
    topic: str = ""
    duration: str = ""

class LessonUpdate(BaseModel):
    moduleId: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    description: Optional[str] = None
    level: Optional[str] = None
    tags: Optional[List[str]] = None
    published: Optional[bool] = None
    order: Optional[int] = None
    topic: Optional[str] = None
    duration: Optional[str] = None

class PublishLesson(BaseModel):
    lessonId: str = Field(..., min_length=1)
    published: Any = None

class BulkImport(BaseModel):
    collection: str = Field(..., min_length=1)
    data: Any
