"""
StarPrep Backend — Forum SQLAlchemy Models
============================================

What:  ORM models for the `questions`, `answers` and `comments` tables.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by the data-access helpers in app.services and by Alembic.

Ownership:
    Question ──< Answer ──< Comment

    A child's lifecycle is bound to its parent: deleting a Question removes
    its Answers and their Comments. The data-access helper deletes them
    explicitly, child tables first; the foreign keys also carry
    ON DELETE CASCADE for engines that enforce it.

    questions.user_id has no foreign key: users live in the auth service.
"""

from typing import List

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

# Ids are 32-bit INTEGER columns on PostgreSQL.
MAX_ID = 2**31 - 1


def fits_id_column(*ids: int) -> bool:
    """True when every id can be stored in (and so matched against) an id column."""
    return all(0 <= value <= MAX_ID for value in ids)


class Question(Base):
    """A question posted by a user. The body is immutable once created."""

    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Id of the posting user in the auth service",
    )

    body: Mapped[str] = mapped_column(Text, nullable=False)

    answers: Mapped[List["Answer"]] = relationship(
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Answer.id",
    )

    # Serves GET /api/users/{id}/questions
    __table_args__ = (
        Index("idx_questions_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, user_id={self.user_id})>"


class Answer(Base):
    """
    A STAR answer to a question.

    All four narrative fields are required; the route handler rejects
    partial answers before anything reaches this model.
    """

    __tablename__ = "answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    question_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
    )

    situation: Mapped[str] = mapped_column(Text, nullable=False)
    task: Mapped[str] = mapped_column(Text, nullable=False)
    action: Mapped[str] = mapped_column(Text, nullable=False)
    result: Mapped[str] = mapped_column(Text, nullable=False)

    question: Mapped["Question"] = relationship(back_populates="answers")

    comments: Mapped[List["Comment"]] = relationship(
        back_populates="answer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Comment.id",
    )

    __table_args__ = (
        Index("idx_answers_question_id", "question_id"),
    )

    def __repr__(self) -> str:
        return f"<Answer(id={self.id}, question_id={self.question_id})>"


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    answer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=False,
    )

    comment: Mapped[str] = mapped_column(Text, nullable=False)

    answer: Mapped["Answer"] = relationship(back_populates="comments")

    __table_args__ = (
        Index("idx_comments_answer_id", "answer_id"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, answer_id={self.answer_id})>"
