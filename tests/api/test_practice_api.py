"""Route tests for answer submission and template feedback."""


def test_submit_correct_mcq(client, catalog, learner_headers):
    r = client.post("/v1/submit-response", headers=learner_headers,
                    json={"lessonId": "les-1", "questionId": "q-mcq", "answer": "B", "timeMs": 43000})
    assert r.status_code == 200
    body = r.json()
    assert body["result"] == "correct"
    assert body["score"] == 1
    assert body["explanation"] == "Specific instructions lead to better output"
    assert body["nextHintId"] is None

    stored = catalog.collections["responses"][body["responseId"]]
    assert stored["result"] == "correct"
    assert stored["userId"] == "learner-1"


def test_submit_partial_short_answer(client, catalog, learner_headers):
    r = client.post("/v1/submit-response", headers=learner_headers,
                    json={"lessonId": "les-1", "questionId": "q-short", "answer": "Few-shot"})
    assert r.status_code == 200
    assert (r.json()["result"], r.json()["score"]) == ("partial", 0.5)


def test_submit_requires_auth(client, catalog):
    r = client.post("/v1/submit-response", json={"lessonId": "les-1", "questionId": "q-mcq", "answer": "B"})
    assert r.status_code == 401
    assert r.json() == {"error": "Missing or malformed Authorization header."}


def test_submit_rejects_bad_token(client, catalog):
    r = client.post("/v1/submit-response", headers={"Authorization": "Bearer not-a-jwt"},
                    json={"lessonId": "les-1", "questionId": "q-mcq", "answer": "B"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid or expired token."}


def test_submit_missing_fields(client, catalog, learner_headers):
    r = client.post("/v1/submit-response", headers=learner_headers, json={"lessonId": "les-1", "answer": ""})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing required field(s): questionId, answer"
    assert "responses" not in catalog.collections


def test_submit_unknown_question(client, catalog, learner_headers):
    r = client.post("/v1/submit-response", headers=learner_headers,
                    json={"lessonId": "les-1", "questionId": "nope", "answer": "B"})
    assert r.status_code == 404
    assert r.json() == {"error": "Question not found."}


def test_llm_feedback_hint(client, catalog, learner_headers):
    r = client.post("/v1/llm-feedback", headers=learner_headers,
                    json={"lessonId": "les-1", "questionId": "q-mcq", "answer": "A", "mode": "hint"})
    assert r.status_code == 200
    body = r.json()
    assert "Which prompt is clearer?" in body["feedback"]
    assert body["suggested_improvements"] == ["Review the lesson content", "Consider each option carefully"]


def test_llm_feedback_rubric_quotes_answer(client, catalog, learner_headers):
    r = client.post("/v1/llm-feedback", headers=learner_headers,
                    json={"lessonId": "les-1", "questionId": "q-short", "answer": "my try", "mode": "rubric"})
    assert r.status_code == 200
    assert 'your answer "my try"' in r.json()["feedback"]
    assert len(r.json()["suggested_improvements"]) == 3


def test_llm_feedback_invalid_mode(client, catalog, learner_headers):
    r = client.post("/v1/llm-feedback", headers=learner_headers,
                    json={"lessonId": "les-1", "questionId": "q-mcq", "answer": "A", "mode": "grade"})
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid mode. Must be one of: hint, rubric, improve"}
