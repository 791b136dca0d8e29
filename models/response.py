# models/response.py
from pydantic import BaseModel, Field
from typing import Optional

FEEDBACK_MODES = ["hint", "rubric", "improve"]

class SubmitResponse(BaseModel):
    lessonId: str = Field(..., min_length=1)
    questionId: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    timeMs: Optional[int] = None

class FeedbackRequest(BaseModel):
    lessonId: str = Field(..., min_length=1)
    questionId: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    mode: str = Field(..., min_length=1)
