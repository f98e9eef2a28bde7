from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
import logging

from ..config import Settings
from ..dependencies import get_store, get_app_settings, http_errors
from ..schemas.exam_schema import ExamDraft, ExamUpdate, ExamRead, ExamPublic, ExamSummary, PublishResponse, OkResponse
from ..services.exam_service import apply_exam_update, _exam_to_public_dict, _exam_to_summary_dict
from ..services.pin_service import is_valid_pin, publish_exam
from ..storage.base import ExamStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exams", tags=["Exams"])


@router.get("", response_model=List[ExamSummary])
async def list_exams(store: ExamStore = Depends(get_store)):
    with http_errors("listing exams"):
        exams = await store.list_exams()
    return [_exam_to_summary_dict(e) for e in exams]


@router.post("", response_model=PublishResponse)
async def create_exam(
    payload: ExamDraft,
    store: ExamStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    # client-supplied ids, pin and timestamps never reach the record
    with http_errors("publishing exam"):
        record = await publish_exam(store, payload, max_attempts=settings.pin_max_attempts)
    logger.info("Published exam %r (id=%s, PIN %s)", record["title"], record["examId"], record["pin"])
    return {"examId": record["examId"], "pin": record["pin"]}


@router.get("/pin/{pin}", response_model=ExamPublic)
async def get_exam_by_pin(pin: str, store: ExamStore = Depends(get_store)):
    # reduced view for students: no pin, no timestamps
    if not is_valid_pin(pin):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found")
    with http_errors("looking up exam by PIN"):
        exam = await store.get_exam_by_pin(pin)
    if not exam:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found")
    return _exam_to_public_dict(exam)


@router.get("/{exam_id}", response_model=ExamRead)
async def get_exam(exam_id: str, store: ExamStore = Depends(get_store)):
    with http_errors("reading exam"):
        exam = await store.get_exam(exam_id)
    if not exam:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found")
    return exam


@router.put("/{exam_id}", response_model=OkResponse)
async def update_exam(exam_id: str, payload: ExamUpdate, store: ExamStore = Depends(get_store)):
    # update only fields sent; id and pin are kept from the stored exam
    with http_errors("updating exam"):
        updated = await store.update_exam(exam_id, lambda current: apply_exam_update(current, payload))
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found")
    logger.info("Updated exam %s", exam_id)
    return {"ok": True}


@router.delete("/{exam_id}", response_model=OkResponse)
async def delete_exam(exam_id: str, store: ExamStore = Depends(get_store)):
    # delete exam and its results (database backend only)
    with http_errors("deleting exam"):
        deleted = await store.delete_exam(exam_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found")
    logger.info("Deleted exam %s and its results", exam_id)
    return {"ok": True}
