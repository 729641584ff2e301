"""
StarPrep Backend — Question Data-Access Helpers
=================================================

What:  One storage operation per method for questions: insert, list, list by
       user, lookup, composite read, cascading delete.
Why:   Keeps query construction and deletion ordering out of the handlers.
How:   Each method takes an AsyncSession plus already-validated primitives and
       returns a StorageResult. Storage exceptions never propagate; they are
       logged and returned as a failed result (see app.services.result).
Who:   Called by the question and answer route handlers.

Design Decision:
    QuestionService is stateless — it receives the db session for each call,
    so tests can hand it a mocked session and requests never share state.

Ids outside the id column range match no row. Lookups and deletes with such
an id return "not found" without sending a statement the driver would reject.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.forum import Answer, Comment, Question, fits_id_column
from app.services.result import STORAGE_ERRORS, StorageResult, storage_failure

logger = logging.getLogger(__name__)


class QuestionService:
    """Data-access helpers for the `questions` table and its dependents."""

    async def create_question(
        self, db: AsyncSession, user_id: int, body: str
    ) -> StorageResult[Question]:
        """
        Insert a question owned by `user_id`.

        Query plan:
            INSERT INTO questions (user_id, body) VALUES (:user_id, :body)
            flush() assigns the generated id without committing; the
            request-scoped session commits when the handler returns.
        """
        try:
            question = Question(user_id=user_id, body=body)
            db.add(question)
            await db.flush()
        except STORAGE_ERRORS as e:
            return await storage_failure(db, "create_question", e, user_id=user_id)

        logger.info("Question %s created by user %s", question.id, user_id)
        return StorageResult.success(question)

    async def list_questions(self, db: AsyncSession) -> StorageResult[List[Question]]:
        """All questions, oldest first. Unpaginated."""
        try:
            result = await db.execute(select(Question).order_by(Question.id))
            return StorageResult.success(list(result.scalars().all()))
        except STORAGE_ERRORS as e:
            return await storage_failure(db, "list_questions", e)

    async def list_questions_by_user(
        self, db: AsyncSession, user_id: int
    ) -> StorageResult[List[Question]]:
        if not fits_id_column(user_id):
            return StorageResult.success([])
        try:
            result = await db.execute(
                select(Question)
                .where(Question.user_id == user_id)
                .order_by(Question.id)
            )
            return StorageResult.success(list(result.scalars().all()))
        except STORAGE_ERRORS as e:
            return await storage_failure(db, "list_questions_by_user", e, user_id=user_id)

    async def find_question(
        self, db: AsyncSession, question_id: int
    ) -> StorageResult[Optional[Question]]:
        """Existence lookup; a successful result with value None means no such row."""
        if not fits_id_column(question_id):
            return StorageResult.success(None)
        try:
            result = await db.execute(
                select(Question).where(Question.id == question_id)
            )
            return StorageResult.success(result.scalar_one_or_none())
        except STORAGE_ERRORS as e:
            return await storage_failure(db, "find_question", e, question_id=question_id)

    async def get_question_with_answers_and_comments(
        self, db: AsyncSession, question_id: int
    ) -> StorageResult[Optional[Question]]:
        """
        Composite read: the question with its answers, each with its comments.

        How:
            selectinload issues one extra SELECT per level (answers, then
            comments) with an IN clause, and SQLAlchemy assembles the nesting.
            Rows never come back as one flat join row per answer/comment.

        Returns:
            A successful result holding the fully loaded Question, or None if
            no question has that id.
        """
        if not fits_id_column(question_id):
            return StorageResult.success(None)
        try:
            result = await db.execute(
                select(Question)
                .where(Question.id == question_id)
                .options(
                    selectinload(Question.answers).selectinload(Answer.comments)
                )
            )
            return StorageResult.success(result.scalar_one_or_none())
        except STORAGE_ERRORS as e:
            return await storage_failure(
                db, "get_question_with_answers_and_comments", e, question_id=question_id
            )

    async def delete_question(
        self, db: AsyncSession, question_id: int
    ) -> StorageResult[None]:
        """
        Delete a question together with its answers and their comments.

        Deletion order (children first, so no row is ever orphaned):
            1. DELETE FROM comments WHERE answer_id IN
                   (SELECT id FROM answers WHERE question_id = :id)
            2. DELETE FROM answers WHERE question_id = :id
            3. DELETE FROM questions WHERE id = :id

        All three statements run in the request's transaction, so they
        commit or roll back together. Deleting an id that does not exist
        affects zero rows and still succeeds.
        """
        if not fits_id_column(question_id):
            return StorageResult.success(None)

        answer_ids = select(Answer.id).where(Answer.question_id == question_id)
        try:
            comments = await db.execute(
                delete(Comment)
                .where(Comment.answer_id.in_(answer_ids))
                .execution_options(synchronize_session=False)
            )
            answers = await db.execute(
                delete(Answer)
                .where(Answer.question_id == question_id)
                .execution_options(synchronize_session=False)
            )
            questions = await db.execute(
                delete(Question)
                .where(Question.id == question_id)
                .execution_options(synchronize_session=False)
            )
        except STORAGE_ERRORS as e:
            return await storage_failure(db, "delete_question", e, question_id=question_id)

        logger.info(
            "Deleted question %s (%d question, %d answers, %d comments removed)",
            question_id,
            questions.rowcount,
            answers.rowcount,
            comments.rowcount,
        )
        return StorageResult.success(None)


question_service = QuestionService()
