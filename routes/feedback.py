# routes/feedback.py
from fastapi import APIRouter, HTTPException, Depends
import logging

from config import REPORT_MESSAGE_MAX_LENGTH
from database import Store, get_store, REPORTS, server_timestamp
from models.report import ReportCreate, REPORT_TYPES
from models.user import AuthUser
from .auth import authenticate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["feedback"])


@router.post("/report", status_code=201)
async def report(request: ReportCreate, current_user: AuthUser = Depends(authenticate), store: Store = Depends(get_store)):
    if request.type not in REPORT_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid type. Must be one of: {', '.join(REPORT_TYPES)}")
    if len(request.message) > REPORT_MESSAGE_MAX_LENGTH:
        raise HTTPException(status_code=400, detail=f"Message must be under {REPORT_MESSAGE_MAX_LENGTH} characters.")

    now = server_timestamp()
    report_id = await store.insert(REPORTS, {
        "userId": current_user.uid,
        "email": current_user.email,
        "type": request.type,
        "message": request.message,
        "context": request.context or {},
        "status": "open",
        "createdAt": now,
        "updatedAt": now,
    })
    logger.info(f"Report {report_id} ({request.type}) filed by {current_user.uid}")
    return {"message": "Report submitted. Thank you!", "reportId": report_id}
