"""
StarPrep Backend — Question, Answer & Comment Route Handlers
==============================================================

What:  The forum endpoints: questions, STAR answers, and comments on answers.
How:   Each handler
       1. extracts and validates path ids, body fields and the caller identity,
          returning a 4xx response straight away when the request is malformed;
       2. calls one data-access helper per storage step;
       3. maps a failed StorageResult to a 500 whose message names the phase
          that failed, and a successful one to the JSON body.
Who:   Called by the frontend question list, question detail and answer forms.

Route Inventory:
    POST   /api/questions                                     create question
    GET    /api/questions                                     list all questions
    GET    /api/users/{user_id}/questions                     list a user's questions
    GET    /api/questions/{question_id}                       question + answers + comments
    DELETE /api/questions/{question_id}                       delete question (cascades)
    POST   /api/questions/{question_id}/answers               add STAR answer
    POST   /api/questions/{question_id}/answers/{answer_id}/comments   add comment

Path ids are taken as raw strings and parsed here, and JSON bodies are read
with read_body(), so each endpoint can answer with its own status and message
instead of FastAPI's generic 422. A body that is not JSON, not an object, or
has a field of the wrong type counts as missing those fields.

Status codes worth knowing:
    Create answer reports a bad question id, an incomplete answer, and a
    missing question with 401, not 400. Clients already depend on it.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.middleware.identity import Identity, get_identity
from app.middleware.request_id import request_id_var
from app.schemas.forum import (
    AnswerCreate,
    AnswerResponse,
    CommentCreate,
    CommentResponse,
    ErrorResponse,
    QuestionCreate,
    QuestionDetail,
    QuestionResponse,
)
from app.services.answer_service import answer_service
from app.services.question_service import question_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Questions"])

SERVER_ERROR = "Server error"

BodyT = TypeVar("BodyT", bound=BaseModel)


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, message: str) -> JSONResponse:
    """The `{"error": ...}` envelope shared by every failure response."""
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "request_id": request_id_var.get("")},
    )


def parse_id(raw: Optional[str]) -> Optional[int]:
    """
    Parse a path id as a plain non-negative decimal integer.

    Returns None for anything else ("abc", "1.5", "-3", "", "١٢").
    """
    if raw is None:
        return None
    raw = raw.strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


async def read_body(request: Request, model: Type[BodyT]) -> BodyT:
    """
    Read the JSON body into `model`, falling back to an empty `model`.

    Malformed JSON, an empty body, a non-object body, and fields of the wrong
    type all yield the empty model, whose fields are None.
    """
    try:
        data = await request.json()
    except ValueError:
        return model()
    if not isinstance(data, dict):
        return model()
    try:
        return model.model_validate(data)
    except ValidationError:
        return model()


def json_body(model: Type[BaseModel]) -> Dict[str, Any]:
    """OpenAPI request body for a route that reads its body with read_body()."""
    return {
        "requestBody": {
            "content": {"application/json": {"schema": model.model_json_schema()}},
        },
    }


# ══════════════════════════════════════════════════════════════════════════
# Questions
# ══════════════════════════════════════════════════════════════════════════

@router.post(
    "/questions",
    response_model=QuestionResponse,
    responses={
        400: {"description": "No question text", "model": ErrorResponse},
        500: {"description": "No identity attached, or server error", "model": ErrorResponse},
    },
    summary="Ask a question",
    openapi_extra=json_body(QuestionCreate),
)
async def add_question(
    request: Request,
    identity: Optional[Identity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Create a question owned by the calling user.

    The identity check comes first: a request that reached this handler
    without one means the identity middleware is missing from the chain,
    which is a server fault whatever the body holds.
    """
    if identity is None:
        logger.error("add_question reached without an identity attached")
        return error_response(500, "No user attached to the request")

    payload = await read_body(request, QuestionCreate)
    if is_blank(payload.question):
        return error_response(400, "No question on the request body")

    result = await question_service.create_question(db, identity.id, payload.question)
    if not result.ok:
        return error_response(500, SERVER_ERROR)

    return QuestionResponse.model_validate(result.value)


@router.get(
    "/questions",
    response_model=List[QuestionResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all questions",
)
async def get_all_questions(db: AsyncSession = Depends(get_db_session)):
    result = await question_service.list_questions(db)
    if not result.ok:
        return error_response(500, SERVER_ERROR)

    return [QuestionResponse.model_validate(q) for q in result.value]


@router.get(
    "/users/{user_id}/questions",
    response_model=List[QuestionResponse],
    responses={
        400: {"description": "User id is not a number", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List the questions asked by one user",
)
async def find_all_questions_by_user(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
):
    parsed_user_id = parse_id(user_id)
    if parsed_user_id is None:
        return error_response(400, "Invalid user id format")

    result = await question_service.list_questions_by_user(db, parsed_user_id)
    if not result.ok:
        return error_response(500, SERVER_ERROR)

    return [QuestionResponse.model_validate(q) for q in result.value]


@router.get(
    "/questions/{question_id}",
    response_model=QuestionDetail,
    responses={
        400: {"description": "Question id is not a number", "model": ErrorResponse},
        404: {"description": "No question with that id", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a question with its answers and their comments",
)
async def find_one_question(
    question_id: str,
    db: AsyncSession = Depends(get_db_session),
):
    parsed_id = parse_id(question_id)
    if parsed_id is None:
        return error_response(400, "Invalid question id format")

    result = await question_service.get_question_with_answers_and_comments(db, parsed_id)
    if not result.ok:
        return error_response(500, SERVER_ERROR)
    if result.value is None:
        return error_response(404, "No question found")

    return QuestionDetail.model_validate(result.value)


@router.delete(
    "/questions/{question_id}",
    status_code=204,
    responses={
        400: {"description": "Missing or non-numeric question id", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a question with its answers and comments",
)
async def delete_question(
    question_id: str,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Idempotent: deleting an id that does not exist is still a 204.

    The empty-id branch is unreachable through routing (`DELETE /api/questions/`
    matches no route); it guards direct calls to the handler.
    """
    if not question_id:
        return error_response(400, "No question id provided")

    parsed_id = parse_id(question_id)
    if parsed_id is None:
        return error_response(400, "Invalid question id format")

    result = await question_service.delete_question(db, parsed_id)
    if not result.ok:
        return error_response(500, SERVER_ERROR)

    return Response(status_code=204)


# ══════════════════════════════════════════════════════════════════════════
# Answers & Comments
# ══════════════════════════════════════════════════════════════════════════

@router.post(
    "/questions/{question_id}/answers",
    response_model=AnswerResponse,
    responses={
        401: {"description": "Bad question id, incomplete answer, or no such question",
              "model": ErrorResponse},
        500: {"description": "Lookup or insert failed", "model": ErrorResponse},
    },
    summary="Answer a question in STAR form",
    openapi_extra=json_body(AnswerCreate),
)
async def create_answer(
    question_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Add a situation/task/action/result answer to a question.

    Phases and their failure messages:
        validate  → 401 "You did not include a question id"
                    401 "Your answer was not complete"
        lookup    → 401 "There is no question with id N" / 500 "Server error"
        insert    → 500 "Error adding your answer to the database"
    """
    parsed_id = parse_id(question_id)
    if not parsed_id:
        return error_response(401, "You did not include a question id")

    payload = await read_body(request, AnswerCreate)
    fields = (payload.situation, payload.task, payload.action, payload.result)
    if any(is_blank(field) for field in fields):
        return error_response(401, "Your answer was not complete")

    lookup = await question_service.find_question(db, parsed_id)
    if not lookup.ok:
        return error_response(500, SERVER_ERROR)
    if lookup.value is None:
        return error_response(401, f"There is no question with id {parsed_id}")

    created = await answer_service.create_answer(
        db,
        question_id=parsed_id,
        situation=payload.situation,
        task=payload.task,
        action=payload.action,
        result=payload.result,
    )
    if not created.ok:
        return error_response(500, "Error adding your answer to the database")

    return AnswerResponse.model_validate(created.value)


@router.post(
    "/questions/{question_id}/answers/{answer_id}/comments",
    response_model=CommentResponse,
    responses={
        400: {"description": "Bad ids or empty comment", "model": ErrorResponse},
        404: {"description": "No such answer on this question", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Comment on an answer",
    openapi_extra=json_body(CommentCreate),
)
async def create_comment(
    question_id: str,
    answer_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Add a comment to an answer of the question named in the path.

    An answer that exists but belongs to a different question is reported
    as not found.
    """
    parsed_question_id = parse_id(question_id)
    if not parsed_question_id:
        return error_response(400, "Invalid question id provided")

    parsed_answer_id = parse_id(answer_id)
    if not parsed_answer_id:
        return error_response(400, "Invalid answer id provided")

    payload = await read_body(request, CommentCreate)
    if is_blank(payload.comment):
        return error_response(400, "Invalid comment provided")

    lookup = await answer_service.find_answer_in_question(
        db, parsed_question_id, parsed_answer_id
    )
    if not lookup.ok:
        return error_response(500, SERVER_ERROR)
    if lookup.value is None:
        return error_response(404, "Answer not found")

    created = await answer_service.create_comment(db, parsed_answer_id, payload.comment)
    if not created.ok:
        return error_response(500, SERVER_ERROR)

    return CommentResponse.model_validate(created.value)
