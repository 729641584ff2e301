"""
StarPrep Backend — Answer & Comment Data-Access Helpers
=========================================================

What:  Insert STAR answers, look answers up within a question, insert comments.
How:   Same contract as QuestionService: AsyncSession + validated primitives
       in, StorageResult out.

Known race:
    Handlers check that the parent row exists and then insert the child in a
    separate statement. The parent may be deleted in between by a concurrent
    request; the insert then fails on the foreign key (where the engine
    enforces it) and comes back as a failed result.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.forum import Answer, Comment, Question, fits_id_column
from app.services.result import STORAGE_ERRORS, StorageResult, storage_failure

logger = logging.getLogger(__name__)


class AnswerService:

    async def create_answer(
        self,
        db: AsyncSession,
        question_id: int,
        situation: str,
        task: str,
        action: str,
        result: str,
    ) -> StorageResult[Answer]:
        try:
            answer = Answer(
                question_id=question_id,
                situation=situation,
                task=task,
                action=action,
                result=result,
            )
            db.add(answer)
            await db.flush()
        except STORAGE_ERRORS as e:
            return await storage_failure(db, "create_answer", e, question_id=question_id)

        logger.info("Answer %s added to question %s", answer.id, question_id)
        return StorageResult.success(answer)

    async def find_answer_in_question(
        self, db: AsyncSession, question_id: int, answer_id: int
    ) -> StorageResult[Optional[Answer]]:
        """
        Look up an answer that belongs to the given question.

        Query plan:
            SELECT answers.* FROM questions
            JOIN answers ON questions.id = answers.question_id
            WHERE answers.id = :answer_id AND questions.id = :question_id

        An answer attached to a different question is treated as missing.
        """
        if not fits_id_column(question_id, answer_id):
            return StorageResult.success(None)
        try:
            query = (
                select(Answer)
                .join(Question, Question.id == Answer.question_id)
                .where(Answer.id == answer_id, Question.id == question_id)
            )
            result = await db.execute(query)
            return StorageResult.success(result.scalar_one_or_none())
        except STORAGE_ERRORS as e:
            return await storage_failure(
                db, "find_answer_in_question", e,
                question_id=question_id, answer_id=answer_id,
            )

    async def create_comment(
        self, db: AsyncSession, answer_id: int, comment: str
    ) -> StorageResult[Comment]:
        try:
            row = Comment(answer_id=answer_id, comment=comment)
            db.add(row)
            await db.flush()
        except STORAGE_ERRORS as e:
            return await storage_failure(db, "create_comment", e, answer_id=answer_id)

        logger.info("Comment %s added to answer %s", row.id, answer_id)
        return StorageResult.success(row)


answer_service = AnswerService()
