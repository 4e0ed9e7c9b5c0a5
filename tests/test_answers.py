import json
import logging

import pytest

from app.main import app
from app.services.insights import FALLBACK_INSIGHTS, InsightService, get_insight_service
from app.services.llm import LLMConfig, LLMProvider, LLMService

ANSWER_TEXT = "Start by writing down three stories that show how you solve problems under pressure."


class ScriptedProvider(LLMProvider):
    PROVIDER_NAME = "scripted"
    DEFAULT_MODEL = "scripted-1"

    def _init_client(self, reply: str = "", **kwargs):
        self.reply = reply
        self.calls = 0

    def _call_api(self, messages, config):
        self.calls += 1
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply, 10, 20

    def is_available(self) -> bool:
        return True


@pytest.fixture
def question(client, mentee_headers):
    resp = client.post(
        "/api/questions",
        json={"text": "How do I prepare for behavioral interviews?", "category": "career"},
        headers=mentee_headers,
    )
    assert resp.status_code == 201
    return resp.json()


def _answer(client, headers, question_id, text=ANSWER_TEXT):
    return client.post("/api/answers", json={"questionId": question_id, "text": text}, headers=headers)


def test_answer_gets_fallback_insights_without_llm(client, mentor_headers, question):
    resp = _answer(client, mentor_headers, question["id"])
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["mentorId"] == "mock-mentor-1"
    assert body["questionId"] == question["id"]
    assert body["aiInsights"] == FALLBACK_INSIGHTS
    assert len(body["aiInsights"]["keyTakeaways"]) == 3
    assert len(body["aiInsights"]["actionSteps"]) == 5


def test_answer_marks_question_answered(client, mentee_headers, mentor_headers, question):
    _answer(client, mentor_headers, question["id"])

    pending = client.get("/api/questions/pending", headers=mentor_headers).json()
    assert question["id"] not in [q["id"] for q in pending]

    mine = client.get("/api/questions/mentee", headers=mentee_headers).json()
    assert mine[0]["status"] == "answered"
    answers = mine[0]["answers"]
    assert len(answers) == 1
    assert answers[0]["text"] == ANSWER_TEXT
    assert answers[0]["mentor"]["id"] == "mock-mentor-1"
    assert answers[0]["mentor"]["mentorProfile"]["title"] == "Senior Software Engineer"


def test_answer_to_missing_question(client, mentor_headers):
    resp = _answer(client, mentor_headers, "does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Question not found"


def test_short_answer_rejected(client, mentor_headers, question):
    resp = _answer(client, mentor_headers, question["id"], text="Just practice.")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Answer must be at least 20 characters"


def test_answer_uses_llm_insights(client, mentor_headers, question):
    reply = json.dumps({
        "keyTakeaways": ["Stories beat claims", "Structure answers", "Practice aloud", "Know your audience", "Extra"],
        "actionSteps": ["Write 3 STAR stories", "Rehearse twice", "Record yourself", "Ask a peer", "Review", "More"],
    })
    provider = ScriptedProvider(reply=reply)
    service = InsightService(LLMService(primary=provider), LLMConfig(max_retries=1, retry_base_delay=0))
    app.dependency_overrides[get_insight_service] = lambda: service

    resp = _answer(client, mentor_headers, question["id"])
    assert resp.status_code == 201
    insights = resp.json()["aiInsights"]
    assert provider.calls == 1
    assert insights["keyTakeaways"] == ["Stories beat claims", "Structure answers", "Practice aloud", "Know your audience"]
    assert len(insights["actionSteps"]) == 5


def test_answer_falls_back_on_malformed_llm_output(client, mentor_headers, question):
    provider = ScriptedProvider(reply="I'm sorry, I can't help with that.")
    service = InsightService(LLMService(primary=provider), LLMConfig(max_retries=1, retry_base_delay=0))
    app.dependency_overrides[get_insight_service] = lambda: service

    resp = _answer(client, mentor_headers, question["id"])
    assert resp.status_code == 201
    assert resp.json()["aiInsights"] == FALLBACK_INSIGHTS


def test_list_mentor_answers(client, mentor_headers, both_headers, question):
    _answer(client, mentor_headers, question["id"])

    resp = client.get("/api/answers/mentor", headers=mentor_headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 1

    assert client.get("/api/answers/mentor", headers=both_headers).json() == []


def test_mentee_marks_answer_helpful(client, mentee_headers, mentor_headers, question):
    answer = _answer(client, mentor_headers, question["id"]).json()
    assert answer["isHelpful"] is None

    resp = client.patch(f"/api/answers/{answer['id']}/helpful", json={"isHelpful": True}, headers=mentee_headers)
    assert resp.status_code == 200
    assert resp.json()["isHelpful"] is True


def test_only_asking_mentee_can_rate(client, mentor_headers, question):
    answer = _answer(client, mentor_headers, question["id"]).json()

    resp = client.patch(f"/api/answers/{answer['id']}/helpful", json={"isHelpful": False}, headers=mentor_headers)
    assert resp.status_code == 403


def test_rate_missing_answer(client, mentee_headers):
    resp = client.patch("/api/answers/nope/helpful", json={"isHelpful": True}, headers=mentee_headers)
    assert resp.status_code == 404


def _insights_audit_lines(caplog):
    return [r.getMessage() for r in caplog.records if "event='answer.insights'" in r.getMessage()]


def test_audit_records_llm_source(client, mentor_headers, question, caplog):
    reply = json.dumps({"keyTakeaways": ["a", "b", "c"], "actionSteps": ["1", "2", "3"]})
    service = InsightService(LLMService(primary=ScriptedProvider(reply=reply)), LLMConfig(retry_base_delay=0))
    app.dependency_overrides[get_insight_service] = lambda: service
    caplog.set_level(logging.INFO, logger="app.audit")

    _answer(client, mentor_headers, question["id"])
    lines = _insights_audit_lines(caplog)
    assert len(lines) == 1
    assert "source='llm'" in lines[0]


def test_audit_records_fallback_when_provider_fails(client, mentor_headers, question, caplog):
    provider = ScriptedProvider(reply=RuntimeError("invalid api key"))
    service = InsightService(LLMService(primary=provider), LLMConfig(retry_base_delay=0))
    app.dependency_overrides[get_insight_service] = lambda: service
    caplog.set_level(logging.INFO, logger="app.audit")

    resp = _answer(client, mentor_headers, question["id"])
    assert resp.status_code == 201
    assert resp.json()["aiInsights"] == FALLBACK_INSIGHTS
    lines = _insights_audit_lines(caplog)
    assert len(lines) == 1
    assert "source='fallback'" in lines[0]


def test_mentor_answers_newest_first(client, mentee_headers, mentor_headers):
    question_ids = []
    for topic in ("salary talks", "public speaking", "switching teams"):
        resp = client.post(
            "/api/questions",
            json={"text": f"How should I approach {topic}?", "category": "career"},
            headers=mentee_headers,
        )
        question_ids.append(resp.json()["id"])

    answer_ids = [_answer(client, mentor_headers, qid).json()["id"] for qid in question_ids]

    listed = client.get("/api/answers/mentor", headers=mentor_headers).json()
    assert [a["id"] for a in listed] == list(reversed(answer_ids))
