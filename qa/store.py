"""
qa/store.py -- SQLAlchemy-backed persistence for questions and answers.

Uses SQLAlchemy Core (not ORM) so the dataclasses in qa/models.py remain the
authoritative domain representation.

Pattern: Repository + Data Mapper. QAStore is the repository; _row_to_*
functions are the mappers. Use cases in qa/questions.py and qa/answers.py
never touch SQL directly.

Deletes return the affected row count. Because uuid columns are UNIQUE, a
delete-by-uuid affects at most one row of its own table.

Content updates write the content column only. There is deliberately no
"update whole record" method: id, uuid, owner and created_at are immutable.

Usage:
    store = QAStore()
    store.create_question(Question(uuid=..., content="Why?", owner_uuid=user.uuid))
    store.list_questions()
    store.delete_question(question_uuid)
    store.close()
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, delete, select
from sqlalchemy.engine import Connection, Engine

from auth.store import make_engine
from core.config import get_settings
from qa.models import Answer, Question

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_questions = Table(
    "questions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("uuid", String(36), nullable=False, unique=True),
    Column("content", Text, nullable=False),
    Column("owner_uuid", String(36), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
)

_answers = Table(
    "answers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("uuid", String(36), nullable=False, unique=True),
    Column("content", Text, nullable=False),
    Column("question_uuid", String(36), nullable=False, index=True),
    Column("owner_uuid", String(36), nullable=False, index=True),
    Column("created_at", String(32), nullable=False),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class QAStore:
    """Repository for Question and Answer entities."""

    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    def create_question(self, question: Question) -> int:
        """Insert a question and return its database ID. created_at is stamped here."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _questions.insert().values(
                    uuid=question.uuid,
                    content=question.content,
                    owner_uuid=question.owner_uuid,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_question(self, question_uuid: str) -> Optional[Question]:
        with self.engine.connect() as conn:
            row = conn.execute(_questions.select().where(_questions.c.uuid == question_uuid)).fetchone()
        return _row_to_question(row) if row is not None else None

    def list_questions(self) -> list[Question]:
        """Return every question, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(_questions.select().order_by(_questions.c.id)).fetchall()
        return [_row_to_question(r) for r in rows]

    def list_questions_by_owner(self, owner_uuid: str) -> list[Question]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                _questions.select().where(_questions.c.owner_uuid == owner_uuid).order_by(_questions.c.id)
            ).fetchall()
        return [_row_to_question(r) for r in rows]

    def update_question_content(self, question_uuid: str, content: str) -> int:
        """Replace a question's content. Returns the number of rows updated."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _questions.update().where(_questions.c.uuid == question_uuid).values(content=content)
            )
            conn.commit()
        return result.rowcount

    def delete_question(self, question_uuid: str) -> int:
        """Delete a question and every answer posted to it.

        Returns the number of question rows removed (0 or 1).
        """
        with self.engine.begin() as conn:
            conn.execute(delete(_answers).where(_answers.c.question_uuid == question_uuid))
            result = conn.execute(delete(_questions).where(_questions.c.uuid == question_uuid))
        return result.rowcount

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------

    def create_answer(self, answer: Answer) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(
                _answers.insert().values(
                    uuid=answer.uuid,
                    content=answer.content,
                    question_uuid=answer.question_uuid,
                    owner_uuid=answer.owner_uuid,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_answer(self, answer_uuid: str) -> Optional[Answer]:
        with self.engine.connect() as conn:
            row = conn.execute(_answers.select().where(_answers.c.uuid == answer_uuid)).fetchone()
        return _row_to_answer(row) if row is not None else None

    def list_answers(self, question_uuid: str) -> list[Answer]:
        """Return the answers posted to a question, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(
                _answers.select().where(_answers.c.question_uuid == question_uuid).order_by(_answers.c.id)
            ).fetchall()
        return [_row_to_answer(r) for r in rows]

    def update_answer_content(self, answer_uuid: str, content: str) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(_answers.update().where(_answers.c.uuid == answer_uuid).values(content=content))
            conn.commit()
        return result.rowcount

    def delete_answer(self, answer_uuid: str) -> int:
        with self.engine.connect() as conn:
            result = conn.execute(delete(_answers).where(_answers.c.uuid == answer_uuid))
            conn.commit()
        return result.rowcount

    # ------------------------------------------------------------------
    # Account removal
    # ------------------------------------------------------------------

    def delete_content_by_owner(self, owner_uuid: str, conn: Optional[Connection] = None) -> tuple[int, int]:
        """Remove everything a user posted, in one transaction.

        Deletes the user's answers, the answers other users posted to the
        user's questions, and the user's questions. Returns
        (questions_removed, answers_removed).

        Pass `conn` to join a caller's transaction, e.g. one that also deletes
        the user row; otherwise a transaction of its own is used.
        """
        if conn is not None:
            return _delete_owned(conn, owner_uuid)
        with self.engine.begin() as own:
            return _delete_owned(own, owner_uuid)

    def close(self) -> None:
        self.engine.dispose()


def _delete_owned(conn: Connection, owner_uuid: str) -> tuple[int, int]:
    owned_questions = select(_questions.c.uuid).where(_questions.c.owner_uuid == owner_uuid)
    answers_removed = conn.execute(
        delete(_answers).where((_answers.c.owner_uuid == owner_uuid) | (_answers.c.question_uuid.in_(owned_questions)))
    ).rowcount
    questions_removed = conn.execute(delete(_questions).where(_questions.c.owner_uuid == owner_uuid)).rowcount
    return questions_removed, answers_removed


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_question(row) -> Question:
    return Question(
        id=row.id,
        uuid=row.uuid,
        content=row.content,
        owner_uuid=row.owner_uuid,
        created_at=row.created_at,
    )


def _row_to_answer(row) -> Answer:
    return Answer(
        id=row.id,
        uuid=row.uuid,
        content=row.content,
        question_uuid=row.question_uuid,
        owner_uuid=row.owner_uuid,
        created_at=row.created_at,
    )
