"""
Quiz data models for generated sustainability quizzes.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class QuizQuestion:
    question: str
    options: List[str]
    answer: str


@dataclass(frozen=True)
class Quiz:
    quiz_id: str
    topic: str
    questions: List[QuizQuestion] = field(default_factory=list)


@dataclass(frozen=True)
class QuizResult:
    """Either a parsed quiz or a failure message.

    raw_text keeps the model output when it could not be parsed.
    """
    success: bool
    quiz: Optional[Quiz] = None
    message: str = ""
    raw_text: Optional[str] = None
