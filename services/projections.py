# services/projections.py
"""Learner-facing views of catalog documents.

These sets are the only place that decides which stored fields a learner
never sees.
"""
from typing import Any, Dict

LESSON_LIST_HIDDEN_FIELDS = frozenset({"content"})
LEARNER_QUESTION_HIDDEN_FIELDS = frozenset({"answerKey"})


def _without(doc: Dict[str, Any], hidden) -> Dict[str, Any]:
    return {key: value for key, value in doc.items() if key not in hidden}


def to_public_lesson(lesson: Dict[str, Any]) -> Dict[str, Any]:
    """Lesson as shown in list views: everything except the heavy body."""
    return _without(lesson, LESSON_LIST_HIDDEN_FIELDS)


def to_learner_question(question: Dict[str, Any]) -> Dict[str, Any]:
    """Question as served to learners: the answer key is stripped."""
    return _without(question, LEARNER_QUESTION_HIDDEN_FIELDS)
