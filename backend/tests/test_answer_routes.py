"""
StarPrep Backend — Answer & Comment Route Tests
=================================================

What:  Tests for POST /api/questions/{id}/answers and .../comments.
How:   HTTPX AsyncClient against an in-memory SQLite database; storage
       failures are simulated by patching the data-access helpers.

What we test:
    ✅ Incomplete answers and bad question ids are rejected with 401, nothing stored
    ✅ Answers to unknown questions are rejected with 401, nothing stored
    ✅ Lookup and insert failures report different 500 messages
    ✅ Comments: id/comment validation (400), unknown or foreign answers (404)
    ✅ Non-string fields and malformed JSON count as missing fields
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.exceptions import DatabaseError
from app.models.forum import MAX_ID, Answer, Comment
from app.services.result import StorageResult

STAR = {
    "situation": "Our on-call rota kept burning people out",
    "task": "Make on-call sustainable",
    "action": "Introduced follow-the-sun handovers",
    "result": "Pages outside hours dropped by 70%",
}


@pytest.fixture
def question_id(test_client, auth_headers):
    async def _create():
        response = await test_client.post(
            "/api/questions", json={"question": "Tell me about yourself"},
            headers=auth_headers(),
        )
        return response.json()["id"]
    return _create


async def _create_answer(client, question_id):
    response = await client.post(f"/api/questions/{question_id}/answers", json=STAR)
    assert response.status_code == 200
    return response.json()


class TestCreateAnswer:

    @pytest.mark.asyncio
    async def test_creates_answer(self, test_client, question_id):
        qid = await question_id()

        response = await test_client.post(f"/api/questions/{qid}/answers", json=STAR)

        assert response.status_code == 200
        data = response.json()
        assert data["questionId"] == qid
        assert isinstance(data["id"], int)
        for field, value in STAR.items():
            assert data[field] == value

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["situation", "task", "action", "result"])
    @pytest.mark.parametrize("blank", [None, "", "  "])
    async def test_incomplete_answer_is_rejected(
        self, test_client, question_id, count_rows, missing, blank
    ):
        qid = await question_id()
        body = dict(STAR)
        if blank is None:
            del body[missing]
        else:
            body[missing] = blank

        response = await test_client.post(f"/api/questions/{qid}/answers", json=body)

        assert response.status_code == 401
        assert response.json()["error"] == "Your answer was not complete"
        assert await count_rows(Answer) == 0

    @pytest.mark.asyncio
    async def test_empty_body_is_rejected(self, test_client, question_id):
        qid = await question_id()

        response = await test_client.post(f"/api/questions/{qid}/answers")

        assert response.status_code == 401
        assert response.json()["error"] == "Your answer was not complete"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_kwargs", [
        {"json": {**STAR, "situation": 1}},
        {"json": {**STAR, "result": ["a", "b"]}},
        {"json": [STAR]},
        {"content": b"situation=s", "headers": {"Content-Type": "application/json"}},
    ])
    async def test_malformed_body_is_incomplete(
        self, test_client, question_id, count_rows, request_kwargs
    ):
        qid = await question_id()

        response = await test_client.post(f"/api/questions/{qid}/answers", **request_kwargs)

        assert response.status_code == 401
        assert response.json()["error"] == "Your answer was not complete"
        assert await count_rows(Answer) == 0

    @pytest.mark.asyncio
    async def test_oversized_question_id_is_unknown_question(self, test_client):
        oversized = MAX_ID + 1

        response = await test_client.post(f"/api/questions/{oversized}/answers", json=STAR)

        assert response.status_code == 401
        assert response.json()["error"] == f"There is no question with id {oversized}"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["0", "abc", "1.5"])
    async def test_bad_question_id_is_rejected(self, test_client, bad_id):
        response = await test_client.post(f"/api/questions/{bad_id}/answers", json=STAR)

        assert response.status_code == 401
        assert response.json()["error"] == "You did not include a question id"

    @pytest.mark.asyncio
    async def test_unknown_question_is_rejected(self, test_client, count_rows):
        response = await test_client.post("/api/questions/999/answers", json=STAR)

        assert response.status_code == 401
        assert response.json()["error"] == "There is no question with id 999"
        assert await count_rows(Answer) == 0

    @pytest.mark.asyncio
    async def test_lookup_failure_is_server_error(self, test_client):
        failed = StorageResult.failure(DatabaseError())
        with patch("app.routes.questions.question_service") as mock_questions, \
             patch("app.routes.questions.answer_service") as mock_answers:
            mock_questions.find_question = AsyncMock(return_value=failed)
            mock_answers.create_answer = AsyncMock()

            response = await test_client.post("/api/questions/1/answers", json=STAR)

            assert response.status_code == 500
            assert response.json()["error"] == "Server error"
            mock_answers.create_answer.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_failure_has_its_own_message(self, test_client, question_id):
        qid = await question_id()
        failed = StorageResult.failure(DatabaseError())
        with patch("app.routes.questions.answer_service") as mock_answers:
            mock_answers.create_answer = AsyncMock(return_value=failed)

            response = await test_client.post(f"/api/questions/{qid}/answers", json=STAR)

        assert response.status_code == 500
        assert response.json()["error"] == "Error adding your answer to the database"


class TestCreateComment:

    @pytest.mark.asyncio
    async def test_creates_comment(self, test_client, question_id):
        qid = await question_id()
        answer = await _create_answer(test_client, qid)

        response = await test_client.post(
            f"/api/questions/{qid}/answers/{answer['id']}/comments",
            json={"comment": "Strong ending"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["answerId"] == answer["id"]
        assert data["comment"] == "Strong ending"

    @pytest.mark.asyncio
    async def test_unknown_answer_is_not_found(self, test_client, question_id, count_rows):
        qid = await question_id()

        response = await test_client.post(
            f"/api/questions/{qid}/answers/404/comments", json={"comment": "Hello"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Answer not found"
        assert await count_rows(Comment) == 0

    @pytest.mark.asyncio
    async def test_answer_of_another_question_is_not_found(
        self, test_client, question_id, count_rows
    ):
        first = await question_id()
        second = await question_id()
        answer = await _create_answer(test_client, first)

        response = await test_client.post(
            f"/api/questions/{second}/answers/{answer['id']}/comments",
            json={"comment": "Wrong thread"},
        )

        assert response.status_code == 404
        assert await count_rows(Comment) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path, message", [
        ("/api/questions/0/answers/1/comments", "Invalid question id provided"),
        ("/api/questions/abc/answers/1/comments", "Invalid question id provided"),
        ("/api/questions/1/answers/0/comments", "Invalid answer id provided"),
        ("/api/questions/1/answers/xyz/comments", "Invalid answer id provided"),
    ])
    async def test_bad_ids_are_rejected(self, test_client, path, message):
        response = await test_client.post(path, json={"comment": "Hello"})

        assert response.status_code == 400
        assert response.json()["error"] == message

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"comment": ""}, {"comment": " "}, None])
    async def test_empty_comment_is_rejected(self, test_client, question_id, body):
        qid = await question_id()
        answer = await _create_answer(test_client, qid)

        response = await test_client.post(
            f"/api/questions/{qid}/answers/{answer['id']}/comments", json=body
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid comment provided"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_kwargs", [
        {"content": b'{"comment": ', "headers": {"Content-Type": "application/json"}},
        {"json": {"comment": 42}},
        {"json": "Strong ending"},
    ])
    async def test_malformed_comment_body_is_rejected(
        self, test_client, question_id, count_rows, request_kwargs
    ):
        qid = await question_id()
        answer = await _create_answer(test_client, qid)

        response = await test_client.post(
            f"/api/questions/{qid}/answers/{answer['id']}/comments", **request_kwargs
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Invalid comment provided"
        assert "request_id" in data
        assert await count_rows(Comment) == 0

    @pytest.mark.asyncio
    async def test_oversized_answer_id_is_not_found(self, test_client, question_id):
        qid = await question_id()

        response = await test_client.post(
            f"/api/questions/{qid}/answers/{MAX_ID + 1}/comments", json={"comment": "Hello"}
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Answer not found"

    @pytest.mark.asyncio
    async def test_lookup_failure_is_server_error(self, test_client):
        failed = StorageResult.failure(DatabaseError())
        with patch("app.routes.questions.answer_service") as mock_answers:
            mock_answers.find_answer_in_question = AsyncMock(return_value=failed)
            mock_answers.create_comment = AsyncMock()

            response = await test_client.post(
                "/api/questions/1/answers/1/comments", json={"comment": "Hello"}
            )

            assert response.status_code == 500
            assert response.json()["error"] == "Server error"
            mock_answers.create_comment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_failure_is_server_error(self, test_client, question_id):
        qid = await question_id()
        answer = await _create_answer(test_client, qid)
        failed = StorageResult.failure(DatabaseError())
        with patch(
            "app.routes.questions.answer_service.create_comment",
            AsyncMock(return_value=failed),
        ):
            response = await test_client.post(
                f"/api/questions/{qid}/answers/{answer['id']}/comments",
                json={"comment": "Hello"},
            )

        assert response.status_code == 500
        assert response.json()["error"] == "Server error"
