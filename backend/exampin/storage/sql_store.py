from typing import Callable, List, Optional
import logging

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..db import create_engine, create_session_maker, create_db_and_tables
from ..errors import PinTaken, StorageError
from ..models.exam_model import Exam
from ..models.result_model import ExamResult
from ..services.exam_service import _iso, _to_naive_utc
from .base import ExamStore

logger = logging.getLogger(__name__)


def _exam_to_dict(exam: Exam) -> dict:
    return {
        "examId": exam.id,
        "pin": exam.pin,
        "title": exam.title or "",
        "description": exam.description or "",
        "settings": dict(exam.settings or {}),
        "questions": list(exam.questions or []),
        "createdAt": _iso(exam.created_at),
        "updatedAt": _iso(exam.updated_at) if exam.updated_at else None,
    }


def _result_to_dict(row: ExamResult) -> dict:
    return {
        "resultId": row.id,
        "examId": row.exam_id,
        "student": row.student or {},
        "totals": row.totals or {},
        "responses": row.responses or [],
        "submittedAt": _iso(row.submitted_at),
    }


class SqlExamStore(ExamStore):
    """SQLAlchemy async backend. Each operation is one short transaction."""

    supports_delete = True

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = create_engine(database_url, echo=echo)
        self.async_session_maker = create_session_maker(self.engine)

    async def startup(self) -> None:
        try:
            await create_db_and_tables(self.engine)
        except SQLAlchemyError as e:
            raise StorageError("Cannot initialise database") from e
        logger.info("Database store ready (%s)", self.engine.url.render_as_string(hide_password=True))

    async def shutdown(self) -> None:
        await self.engine.dispose()

    async def list_exams(self) -> List[dict]:
        try:
            async with self.async_session_maker() as session:
                res = await session.execute(select(Exam).order_by(Exam.created_at.desc()))
                return [_exam_to_dict(e) for e in res.scalars().all()]
        except SQLAlchemyError as e:
            raise StorageError("Cannot list exams") from e

    async def get_exam(self, exam_id: str) -> Optional[dict]:
        try:
            async with self.async_session_maker() as session:
                exam = await session.get(Exam, exam_id)
                return _exam_to_dict(exam) if exam else None
        except SQLAlchemyError as e:
            raise StorageError("Cannot read exam") from e

    async def get_exam_by_pin(self, pin: str) -> Optional[dict]:
        try:
            async with self.async_session_maker() as session:
                res = await session.execute(select(Exam).where(Exam.pin == pin))
                exam = res.scalar_one_or_none()
                return _exam_to_dict(exam) if exam else None
        except SQLAlchemyError as e:
            raise StorageError("Cannot read exam") from e

    async def pin_exists(self, pin: str) -> bool:
        try:
            async with self.async_session_maker() as session:
                res = await session.execute(select(Exam.id).where(Exam.pin == pin))
                return res.first() is not None
        except SQLAlchemyError as e:
            raise StorageError("Cannot read exam") from e

    async def create_exam(self, record: dict) -> None:
        exam = Exam(
            id=record["examId"],
            pin=record["pin"],
            title=record["title"],
            description=record["description"],
            settings=record["settings"],
            questions=record["questions"],
            created_at=_to_naive_utc(record["createdAt"]),
            updated_at=_to_naive_utc(record["updatedAt"]),
        )
        async with self.async_session_maker() as session:
            session.add(exam)
            try:
                await session.commit()
            except IntegrityError as ie:
                # ids are fresh uuids, so the unique pin is the only constraint a new row can break
                await session.rollback()
                raise PinTaken() from ie
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError("Cannot save exam") from e

    async def update_exam(self, exam_id: str, mutate: Callable[[dict], dict]) -> Optional[dict]:
        async with self.async_session_maker() as session:
            try:
                exam = await session.get(Exam, exam_id)
                if exam is None:
                    return None
                updated = mutate(_exam_to_dict(exam))
                exam.title = updated["title"]
                exam.description = updated["description"]
                exam.settings = updated["settings"]
                exam.questions = updated["questions"]
                exam.updated_at = _to_naive_utc(updated["updatedAt"])
                session.add(exam)
                await session.commit()
                return updated
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError("Cannot update exam") from e

    async def delete_exam(self, exam_id: str) -> bool:
        async with self.async_session_maker() as session:
            try:
                exam = await session.get(Exam, exam_id)
                if exam is None:
                    return False
                # delete the submissions first; not every backend enforces ON DELETE CASCADE
                await session.execute(delete(ExamResult).where(ExamResult.exam_id == exam_id))
                await session.delete(exam)
                await session.commit()
                return True
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError("Cannot delete exam") from e

    async def append_result(self, exam_id: str, record: dict) -> None:
        row = ExamResult(
            id=record["resultId"],
            exam_id=exam_id,
            student=record["student"],
            totals=record["totals"],
            responses=record["responses"],
            submitted_at=_to_naive_utc(record["submittedAt"]),
        )
        async with self.async_session_maker() as session:
            session.add(row)
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise StorageError("Cannot save result") from e

    async def list_results(self, exam_id: str) -> List[dict]:
        try:
            async with self.async_session_maker() as session:
                res = await session.execute(
                    select(ExamResult).where(ExamResult.exam_id == exam_id).order_by(ExamResult.seq)
                )
                return [_result_to_dict(r) for r in res.scalars().all()]
        except SQLAlchemyError as e:
            raise StorageError("Cannot read results") from e
