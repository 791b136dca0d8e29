# routes/practice.py
from fastapi import APIRouter, Depends

from database import Store, get_store
from models.response import SubmitResponse, FeedbackRequest
from models.user import AuthUser
from services.evaluation import submit_response
from services.feedback import feedback_for
from .auth import authenticate

router = APIRouter(prefix="/v1", tags=["practice"])


@router.post("/submit-response")
async def submit(request: SubmitResponse, current_user: AuthUser = Depends(authenticate), store: Store = Depends(get_store)):
    return await submit_response(
        store,
        current_user.uid,
        request.lessonId,
        request.questionId,
        request.answer,
        request.timeMs,
    )


@router.post("/llm-feedback")
async def llm_feedback(request: FeedbackRequest, current_user: AuthUser = Depends(authenticate), store: Store = Depends(get_store)):
    return await feedback_for(store, request.questionId, request.answer, request.mode)
