"""
StarPrep Backend — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between frontend and backend.
Why:   Automatic serialization and OpenAPI doc generation.
How:   Response models read ORM objects (from_attributes) and serialize with
       camelCase aliases (userId, questionId, answerId).

Request bodies declare every field optional: the route handlers parse them
with read_body() and report missing fields with their own status codes and
messages (400 or 401) instead of FastAPI's generic 422.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends in the body
# ══════════════════════════════════════════════════════════════════════════


class QuestionCreate(CamelModel):
    question: Optional[str] = Field(default=None, description="Question text")


class AnswerCreate(CamelModel):
    """
    What:  A STAR answer. All four fields are required together; the
           handler rejects the request (401) when any of them is blank.
    """
    situation: Optional[str] = Field(default=None, description="The context you were in")
    task: Optional[str] = Field(default=None, description="What you had to achieve")
    action: Optional[str] = Field(default=None, description="What you did")
    result: Optional[str] = Field(default=None, description="What came out of it")


class CommentCreate(CamelModel):
    comment: Optional[str] = Field(default=None, description="Comment text")


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class QuestionResponse(CamelModel):
    id: int = Field(description="Question id")
    user_id: int = Field(description="Id of the user who asked the question")
    body: str = Field(description="Question text")


class CommentResponse(CamelModel):
    id: int = Field(description="Comment id")
    answer_id: int = Field(description="Id of the answer this comment belongs to")
    comment: str = Field(description="Comment text")


class AnswerResponse(CamelModel):
    id: int = Field(description="Answer id")
    question_id: int = Field(description="Id of the answered question")
    situation: str
    task: str
    action: str
    result: str


class AnswerWithComments(AnswerResponse):
    comments: List[CommentResponse] = Field(default_factory=list)


class QuestionDetail(QuestionResponse):
    """
    What:  Composite read returned by GET /api/questions/{id}.
    How:   The question, its answers, and each answer's comments, nested.
    """
    answers: List[AnswerWithComments] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error envelope shared by all endpoints.

    Example:
        {"error": "Answer not found", "request_id": "a1b2c3d4"}
    """
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
