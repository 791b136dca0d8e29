# models/module.py
from pydantic import BaseModel, Field
from typing import List, Optional

LEVELS = ["beginner", "intermediate", "advanced"]

class ModuleCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    level: str = Field(..., min_length=1)
    tags: List[str] = []

class ModuleUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    level: Optional[str] = None
    tags: Optional[List[str]] = None
