import logging

from ..errors import ExamNotFound, PinMismatch
from ..schemas.result_schema import ResultSubmit
from ..storage.base import ExamStore
from .exam_service import _utcnow_iso, new_id

logger = logging.getLogger(__name__)


def build_result_record(payload: ResultSubmit, result_id: str) -> dict:
    body = payload.model_dump(by_alias=True, exclude={"pin"})
    return {
        "resultId": result_id,
        "examId": body["examId"],
        "student": body["student"],
        "totals": body["totals"],
        "responses": body["responses"],
        "submittedAt": _utcnow_iso(),
    }


async def submit_result(store: ExamStore, payload: ResultSubmit, enforce_pin_check: bool = True) -> str:
    """
    Append one student's submission to the exam's result set and return its id.

    The PIN is compared against the stored exam as a tamper check only; on
    mismatch nothing is written.
    """
    exam = await store.get_exam(payload.exam_id)
    if exam is None:
        raise ExamNotFound()

    if enforce_pin_check and exam["pin"] != payload.pin:
        logger.warning("PIN mismatch on submission for exam_id=%s", payload.exam_id)
        raise PinMismatch()

    record = build_result_record(payload, new_id())
    await store.append_result(payload.exam_id, record)
    logger.info("Result %s saved for exam_id=%s (%s)", record["resultId"], payload.exam_id, payload.student.name)
    return record["resultId"]
