"""
QuizService tests with a stubbed HTTP session.
"""

import json

import aiohttp
import pytest

from greenbot.data_models.quiz import Quiz, QuizQuestion
from greenbot.database.models import ActivityType
from greenbot.services.quiz import QuizService, extract_questions

QUESTIONS = {
    "questions": [
        {"question": "Which bin takes cardboard?", "options": ["Blue", "Black", "Green", "Red"], "answer": "Blue"},
        {"question": "Best thermostat setting?", "options": ["60", "72", "85", "90"], "answer": "72"},
        {"question": "Lowest-carbon commute?", "options": ["Car", "Bike", "Plane", "Taxi"], "answer": "Bike"},
    ]
}


class StubResponse:
    def __init__(self, status=200, payload=None, text=""):
        self.status = status
        self._payload = payload
        self._text = text

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def json(self, content_type=None):
        return self._payload

    async def text(self):
        return self._text


class StubSession:
    closed = False

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.requests.append({"url": url, "json": json, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response


def completion(content):
    return {"choices": [{"message": {"content": content}}]}


def make_service(ops, session, api_url="https://llm.example/v1/chat", api_key="test-key"):
    return QuizService(ops, http_session=session, api_url=api_url, api_key=api_key)


def make_quiz():
    return Quiz(
        quiz_id="q-1",
        topic="recycling",
        questions=[QuizQuestion(**q) for q in QUESTIONS["questions"]]
    )


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------

def test_extract_questions_plain_json():
    questions = extract_questions(json.dumps(QUESTIONS))

    assert len(questions) == 3
    assert questions[1].answer == "72"


def test_extract_questions_strips_code_fences():
    content = "```json\n" + json.dumps(QUESTIONS) + "\n```"

    questions = extract_questions(content)

    assert [q.answer for q in questions] == ["Blue", "72", "Bike"]


@pytest.mark.parametrize("content", [
    "Sure! Here is your quiz.",
    json.dumps({"items": []}),
    json.dumps({"questions": [{"question": "No options", "answer": "x"}]}),
    json.dumps(["not", "an", "object"]),
])
def test_extract_questions_rejects_bad_shapes(content):
    assert extract_questions(content) is None


@pytest.mark.parametrize("item", [
    {"question": "Empty options?", "options": [], "answer": "x"},
    {"question": "Answer missing?", "options": ["A", "B"], "answer": "C"},
    {"question": "Too many options?", "options": [str(n) for n in range(26)], "answer": "0"},
])
def test_extract_questions_rejects_unanswerable_questions(item):
    content = json.dumps({"questions": QUESTIONS["questions"] + [item]})

    assert extract_questions(content) is None


@pytest.mark.asyncio
async def test_quiz_keeps_only_the_questions_a_view_can_show(ops):
    extra = [
        {"question": f"Extra {n}?", "options": ["Yes", "No"], "answer": "Yes"}
        for n in range(3)
    ]
    content = json.dumps({"questions": QUESTIONS["questions"] + extra})
    service = make_service(ops, StubSession(StubResponse(payload=completion(content))))

    result = await service.generate_quiz("recycling")

    assert len(result.quiz.questions) == 4
    answers = [q.answer for q in result.quiz.questions]
    assert service.points_for(result.quiz, answers) == 40


# ----------------------------------------------------------------------
# Generation
# ----------------------------------------------------------------------

@pytest.mark.asyncio
async def test_missing_api_key(ops):
    service = make_service(ops, StubSession(), api_key="")

    result = await service.generate_quiz("energy")

    assert not result.success
    assert result.message == "OPENROUTER_API_KEY environment variable is not set."


@pytest.mark.asyncio
async def test_missing_api_url(ops):
    service = make_service(ops, StubSession(), api_url="")

    result = await service.generate_quiz("energy")

    assert not result.success
    assert result.message == "OPENROUTER_URL environment variable is not set."


@pytest.mark.asyncio
async def test_generate_quiz_success(ops):
    session = StubSession(StubResponse(payload=completion(json.dumps(QUESTIONS))))
    service = make_service(ops, session)

    result = await service.generate_quiz("recycling")

    assert result.success
    assert result.quiz.topic == "recycling"
    assert len(result.quiz.questions) == 3
    request = session.requests[0]
    assert request["url"] == "https://llm.example/v1/chat"
    assert request["headers"]["Authorization"] == "Bearer test-key"
    assert "recycling" in request["json"]["messages"][0]["content"]


@pytest.mark.asyncio
async def test_blank_topic_uses_default(ops):
    session = StubSession(StubResponse(payload=completion(json.dumps(QUESTIONS))))
    service = make_service(ops, session)

    result = await service.generate_quiz("   ")

    assert result.quiz.topic == "carbon footprint"


@pytest.mark.asyncio
async def test_http_error_status(ops):
    session = StubSession(StubResponse(status=500, text="upstream exploded"))
    service = make_service(ops, session)

    result = await service.generate_quiz("water")

    assert not result.success
    assert result.message == "OpenRouter API call failed (Status 500): upstream exploded..."


@pytest.mark.asyncio
async def test_network_error(ops):
    session = StubSession(error=aiohttp.ClientConnectionError("connection refused"))
    service = make_service(ops, session)

    result = await service.generate_quiz("water")

    assert not result.success
    assert result.message.startswith("Network or Request Setup Error: ")


@pytest.mark.asyncio
async def test_empty_content(ops):
    session = StubSession(StubResponse(payload=completion("")))
    service = make_service(ops, session)

    result = await service.generate_quiz("water")

    assert result.message == "API response received but contained no content."


@pytest.mark.asyncio
async def test_unparseable_content_keeps_raw_text(ops):
    session = StubSession(StubResponse(payload=completion("I cannot do that")))
    service = make_service(ops, session)

    result = await service.generate_quiz("water")

    assert not result.success
    assert result.message == "Failed to parse quiz JSON from LLM response."
    assert result.raw_text == "I cannot do that"


# ----------------------------------------------------------------------
# Completion
# ----------------------------------------------------------------------

def test_points_for_counts_correct_answers(ops):
    service = make_service(ops, StubSession())

    assert service.points_for(make_quiz(), ["Blue", "72", "Bike"]) == 30
    assert service.points_for(make_quiz(), ["Blue", None, "Car"]) == 10
    assert service.points_for(make_quiz(), [None, None, None]) == 0


@pytest.mark.asyncio
async def test_complete_quiz_logs_points(db, ops, clock):
    user = await db.create_user("alice")
    service = make_service(ops, StubSession())

    result = await service.complete_quiz(user.id, make_quiz(), ["Blue", "72", "Car"])

    assert result.success
    assert result.data == 20
    entries = (await ops.get_activities(user.id, ActivityType.QUIZ_COMPLETED)).data
    assert [e.value for e in entries] == [20]


@pytest.mark.asyncio
async def test_complete_quiz_without_points_logs_nothing(db, ops):
    user = await db.create_user("alice")
    service = make_service(ops, StubSession())

    result = await service.complete_quiz(user.id, make_quiz(), ["Red", "90", "Plane"])

    assert result.success
    assert result.data == 0
    assert (await ops.get_activities(user.id, ActivityType.QUIZ_COMPLETED)).data == []


@pytest.mark.asyncio
async def test_complete_quiz_for_unknown_user(ops):
    service = make_service(ops, StubSession())

    result = await service.complete_quiz(77, make_quiz(), ["Blue", "72", "Bike"])

    assert not result.success
    assert result.message == "User not found"
