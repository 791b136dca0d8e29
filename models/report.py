# models/report.py
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

REPORT_TYPES = ["bug", "content", "feature"]

class ReportCreate(BaseModel):
    type: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    context: Optional[Dict[str, Any]] = None
