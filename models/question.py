# models/question.py
from pydantic import BaseModel, Field
from typing import Any, List, Optional

QUESTION_TYPES = ["mcq", "short", "code"]

class Choice(BaseModel):
    id: str
    text: str = ""

class QuestionCreate(BaseModel):
    type: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    choices: List[Choice] = []
    answerKey: List[str] = []
    explanation: str = ""
    points: Any = None

class QuestionUpdate(BaseModel):
    type: Optional[str] = None
    prompt: Optional[str] = None
    choices: Optional[List[Choice]] = None
    answerKey: Optional[List[str]] = None
    explanation: Optional[str] = None
    points: Optional[float] = None
