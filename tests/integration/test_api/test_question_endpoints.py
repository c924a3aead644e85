"""Integration tests for psychometric question endpoints."""

from unittest.mock import AsyncMock

import pytest

from hrpulse.utils.exceptions import ResourceNotFoundError, ValidationError

API = "/api/v1/psychometric-questions"


class TestQuestionEndpoints:
    """Integration tests for question endpoints."""

    @pytest.mark.asyncio
    async def test_create_question(self, client, mock_test_service, stored_question):
        mock_test_service.create_question = AsyncMock(return_value=stored_question)

        response = await client.post(API, json={
            "test_id": 1,
            "question_text": "Which number completes 2, 4, 8, ...?",
            "question_type": "multiple_choice",
            "options": ["10", "12", "16"],
            "correct_answer": "16",
            "category": "numerical_reasoning",
            "order": 1,
        })

        assert response.status_code == 201
        assert response.json()["data"]["correct_answer"] == "16"
        request = mock_test_service.create_question.await_args.args[0]
        assert request.question_type == "multiple_choice"

    @pytest.mark.asyncio
    async def test_create_question_for_missing_test(self, client, mock_test_service):
        mock_test_service.create_question = AsyncMock(
            side_effect=ResourceNotFoundError("Psychometric test 9 not found")
        )

        response = await client.post(API, json={
            "test_id": 9,
            "question_text": "Rate your focus",
            "question_type": "scale",
        })

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_create_question_with_inconsistent_answer(self, client, mock_test_service):
        mock_test_service.create_question = AsyncMock(side_effect=ValidationError("Invalid question"))

        response = await client.post(API, json={
            "test_id": 1,
            "question_text": "Pick one",
            "question_type": "multiple_choice",
            "options": ["A"],
            "correct_answer": "B",
        })

        assert response.status_code == 422
        assert response.json()["error"]["message"] == "Invalid question"

    @pytest.mark.asyncio
    async def test_empty_update_is_rejected(self, client, mock_test_service):
        response = await client.put(f"{API}/10", json={})

        assert response.status_code == 422
        mock_test_service.update_question.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_question(self, client, mock_test_service, stored_question):
        mock_test_service.update_question = AsyncMock(
            return_value=stored_question.model_copy(update={"order": 4})
        )

        response = await client.put(f"{API}/10", json={"order": 4})

        assert response.status_code == 200
        assert response.json()["data"]["order"] == 4

    @pytest.mark.asyncio
    async def test_delete_question(self, client, mock_test_service, stored_question):
        mock_test_service.delete_question = AsyncMock(return_value=stored_question)

        response = await client.delete(f"{API}/10")

        assert response.status_code == 200
        assert response.json()["message"] == "Question deleted successfully"
        mock_test_service.delete_question.assert_awaited_once_with(10)
