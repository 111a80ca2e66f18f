"""
Quiz service

Generates short multiple-choice sustainability quizzes through an
OpenRouter-compatible chat completions endpoint, scores submitted answers,
and logs the points earned as a QuizCompleted activity.
"""

import asyncio
import json
import logging
import re
import uuid
from typing import List, Optional

import aiohttp

from greenbot.config import Config
from greenbot.constants import ValidationConstants
from greenbot.data_models.activity import OperationResult
from greenbot.data_models.quiz import Quiz, QuizQuestion, QuizResult
from greenbot.database.models import ActivityType
from greenbot.services.base import BaseService

logger = logging.getLogger(__name__)

_FENCE_START = re.compile(r"^```(?:json)?\s*")
_FENCE_END = re.compile(r"\s*```$")

PROMPT_TEMPLATE = (
    "Generate {count} multiple-choice quiz questions about {topic}.\n"
    "Format the response strictly as JSON:\n"
    '{{"questions":[{{"question":"...","options":["A","B","C","D"],"answer":"..."}}]}}'
)


def extract_questions(content: str) -> Optional[List[QuizQuestion]]:
    """
    Parse the model's reply into questions.

    Markdown code fences around the JSON are tolerated. Returns None when the
    reply is not the expected JSON shape or a question's answer is not one of
    its options. Only as many questions as a quiz view can show are kept, so
    every scored question is also answerable.
    """
    cleaned = _FENCE_END.sub("", _FENCE_START.sub("", content.strip()))
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        return None

    if not isinstance(payload, dict) or not isinstance(payload.get("questions"), list):
        return None

    questions = []
    for item in payload["questions"]:
        if not isinstance(item, dict):
            return None
        question, options, answer = item.get("question"), item.get("options"), item.get("answer")
        if not isinstance(question, str) or not isinstance(options, list) or not isinstance(answer, str):
            return None
        options = [str(o) for o in options]
        # Every question must be answerable from its own dropdown
        if not options or len(options) > ValidationConstants.MAX_QUIZ_OPTIONS or answer not in options:
            return None
        questions.append(QuizQuestion(question=question, options=options, answer=answer))
    return questions[:ValidationConstants.MAX_QUIZ_QUESTIONS]


class QuizService(BaseService):
    """Quiz generation and completion."""

    def __init__(self, activity_ops, http_session: Optional[aiohttp.ClientSession] = None,
                 api_url: Optional[str] = None, api_key: Optional[str] = None):
        super().__init__(activity_ops)
        self.api_url = api_url if api_url is not None else Config.OPENROUTER_URL
        self.api_key = api_key if api_key is not None else Config.OPENROUTER_API_KEY
        self.points_per_correct = Config.QUIZ_POINTS_PER_CORRECT
        self._session = http_session
        self._owns_session = http_session is None

    async def get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def generate_quiz(self, topic: Optional[str] = None) -> QuizResult:
        """
        Ask the model for a quiz about topic.

        Never raises for remote failures: the result carries a message, and
        raw_text when the model answered with something unparseable.
        """
        topic = (topic or "").strip() or Config.QUIZ_DEFAULT_TOPIC

        if not self.api_key:
            return QuizResult(success=False, message="OPENROUTER_API_KEY environment variable is not set.")
        if not self.api_url:
            return QuizResult(success=False, message="OPENROUTER_URL environment variable is not set.")

        payload = {
            "model": Config.QUIZ_MODEL,
            "messages": [
                {
                    "role": "user",
                    "content": PROMPT_TEMPLATE.format(count=Config.QUIZ_QUESTION_COUNT, topic=topic),
                }
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            session = await self.get_session()
            timeout = aiohttp.ClientTimeout(total=Config.QUIZ_TIMEOUT)
            async with session.post(self.api_url, json=payload, headers=headers, timeout=timeout) as response:
                if response.status >= 400:
                    body = await response.text()
                    logger.warning(f"Quiz API returned HTTP {response.status} for topic '{topic}'")
                    return QuizResult(
                        success=False,
                        message=f"OpenRouter API call failed (Status {response.status}): {body[:100]}..."
                    )
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError) as e:
            logger.error(f"Quiz API request failed: {e}")
            return QuizResult(success=False, message=f"Network or Request Setup Error: {e or type(e).__name__}")

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not content:
            return QuizResult(success=False, message="API response received but contained no content.")

        questions = extract_questions(content)
        if not questions:
            logger.warning(f"Unparseable quiz content for topic '{topic}'")
            return QuizResult(
                success=False,
                message="Failed to parse quiz JSON from LLM response.",
                raw_text=content
            )

        quiz = Quiz(quiz_id=str(uuid.uuid4()), topic=topic, questions=questions)
        logger.info(f"Generated quiz {quiz.quiz_id} with {len(questions)} questions on '{topic}'")
        return QuizResult(success=True, quiz=quiz)

    def points_for(self, quiz: Quiz, answers: List[Optional[str]]) -> int:
        """points = correct answers * points per correct answer; unanswered counts as wrong"""
        correct = sum(
            1 for question, answer in zip(quiz.questions, answers)
            if answer is not None and answer == question.answer
        )
        return correct * self.points_per_correct

    async def complete_quiz(self, user_id: int, quiz: Quiz, answers: List[Optional[str]]) -> OperationResult:
        """
        Score the answers and log the points earned as QuizCompleted.

        A quiz with no correct answers is not logged.

        Returns:
            OperationResult whose data is the points earned
        """
        points = self.points_for(quiz, answers)
        if points <= 0:
            return OperationResult.ok(0, message="No points earned")

        result = await self.activity_ops.log_activity(user_id, ActivityType.QUIZ_COMPLETED, points)
        if not result.success:
            return result
        return OperationResult.ok(points, message=result.message)
