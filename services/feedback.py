# services/feedback.py
# Template feedback for the practice screen. No model is called.
import logging
from typing import Any, Dict

from database import QUESTIONS, Store
from models.response import FEEDBACK_MODES
from services.errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)


def build_feedback(mode: str, question: Dict[str, Any], answer: str) -> Dict[str, Any]:
    if mode == "hint":
        prompt = question.get("prompt") or "the question"
        feedback = (
            "Hint: Re-read the lesson material carefully. "
            f'Think about what "{prompt}" is really asking. '
            "Focus on the key concepts mentioned."
        )
        improvements = ["Review the lesson content", "Consider each option carefully"]
    elif mode == "rubric":
        feedback = (
            f'Rubric evaluation for your answer "{answer}":\n'
            "- Relevance: Does your answer address the question?\n"
            "- Completeness: Did you consider all aspects?\n"
            "- Accuracy: Is the information factually correct?"
        )
        improvements = [
            "Ensure your answer addresses all parts of the question",
            "Provide specific examples where possible",
            "Check factual accuracy",
        ]
    elif mode == "improve":
        feedback = (
            "To improve your answer, consider:\n"
            "1. Being more specific in your response.\n"
            "2. Referencing concepts from the lesson material.\n"
            "3. Structuring your answer more clearly."
        )
        improvements = [
            "Add more specific details",
            "Reference lesson concepts explicitly",
            "Improve answer structure",
        ]
    else:
        raise InvalidInput(f"Invalid mode. Must be one of: {', '.join(FEEDBACK_MODES)}")

    return {"feedback": feedback, "suggested_improvements": improvements}


async def feedback_for(store: Store, question_id: str, answer: str, mode: str) -> Dict[str, Any]:
    if mode not in FEEDBACK_MODES:
        raise InvalidInput(f"Invalid mode. Must be one of: {', '.join(FEEDBACK_MODES)}")
    question = await store.get(QUESTIONS, question_id)
    if not question:
        logger.warning(f"Feedback requested for unknown question {question_id}")
        raise NotFound("Question not found.")
    return build_feedback(mode, question, answer)
