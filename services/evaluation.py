# services/evaluation.py
"""Answer grading and response recording.

Grading rules by question type:

- ``mcq``: answer and key entries are upper-cased and trimmed; an exact match
  with any key entry is ``correct`` (1), anything else ``incorrect`` (0).
- ``short`` / ``code``: answer and key entries are lower-cased and trimmed; an
  exact match is ``correct`` (1); if either side contains the other the answer
  is ``partial`` (0.5); otherwise ``incorrect`` (0).

The containment check runs in both directions, so a very short key (say
``"a"``) gives partial credit to almost any answer. This leniency is kept as
is; tightening it changes how free text is graded.

An empty answer never earns credit, and neither does an empty key entry.

A question without an answer key, or of a type not listed above, is graded
``incorrect`` with a fixed explanation.
"""
import logging
from typing import Any, Dict, Optional

from database import LESSONS, QUESTIONS, RESPONSES, Store, server_timestamp
from services.errors import InvalidInput, NotFound

logger = logging.getLogger(__name__)

NO_ANSWER_KEY_EXPLANATION = "No answer key found for this question."


def _ungraded() -> Dict[str, Any]:
    return {"result": "incorrect", "score": 0, "explanation": NO_ANSWER_KEY_EXPLANATION}


def evaluate_answer(answer: Optional[str], question: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not question or not question.get("answerKey"):
        return _ungraded()

    question_type = question.get("type") or "mcq"
    answer_key = [str(entry) for entry in question["answerKey"]]
    given = answer or ""

    if question_type == "mcq":
        normalized = given.upper().strip()
        if normalized in [entry.upper().strip() for entry in answer_key]:
            result, score = "correct", 1
        else:
            result, score = "incorrect", 0
    elif question_type in ("short", "code"):
        normalized = given.lower().strip()
        keys = [entry.lower().strip() for entry in answer_key]
        if normalized in keys:
            result, score = "correct", 1
        elif normalized and any(key and (normalized in key or key in normalized) for key in keys):
            result, score = "partial", 0.5
        else:
            result, score = "incorrect", 0
    else:
        return _ungraded()

    return {"result": result, "score": score, "explanation": question.get("explanation") or ""}


async def submit_response(
    store: Store,
    user_id: str,
    lesson_id: str,
    question_id: str,
    answer: str,
    time_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """Grade ``answer`` and append a Response document for the attempt."""
    if not isinstance(answer, str):
        raise InvalidInput("Field 'answer' must be a string.")

    lesson = await store.get(LESSONS, lesson_id)
    if not lesson:
        logger.warning(f"Submission for unknown lesson {lesson_id} by {user_id}")
        raise NotFound("Lesson not found.")

    question = await store.get(QUESTIONS, question_id)
    if not question:
        logger.warning(f"Submission for unknown question {question_id} by {user_id}")
        raise NotFound("Question not found.")

    evaluation = evaluate_answer(answer, question)

    response_id = await store.insert(RESPONSES, {
        "userId": user_id,
        "lessonId": lesson_id,
        "questionId": question_id,
        "answer": answer,
        "result": evaluation["result"],
        "score": evaluation["score"],
        "timeMs": time_ms,
        "createdAt": server_timestamp(),
    })
    logger.info(f"Response {response_id} by {user_id} on question {question_id}: {evaluation['result']}")

    return {
        "result": evaluation["result"],
        "score": evaluation["score"],
        "explanation": evaluation["explanation"],
        "nextHintId": None,
        "responseId": response_id,
    }
