from typing import List
from datetime import datetime, timezone
import logging
import uuid

from ..schemas.exam_schema import ExamDraft, ExamUpdate

logger = logging.getLogger(__name__)

UNTITLED = "(Sense títol)"


def _utcnow_iso() -> str:
    return _iso(datetime.now(timezone.utc))


def _iso(dt: datetime) -> str:
    """ISO 8601 UTC with millisecond precision and a trailing Z. Naive datetimes are taken as UTC."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat(timespec="milliseconds") + "Z"


def _to_naive_utc(value: str | datetime | None) -> datetime | None:
    """Parse an ISO string (or take a datetime) and return it as naive UTC. None stays None."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return uuid.uuid4().hex


def build_exam_record(draft: ExamDraft, exam_id: str, pin: str) -> dict:
    now = _utcnow_iso()
    body = draft.model_dump(by_alias=True)
    return {
        "examId": exam_id,
        "pin": pin,
        "title": body["title"],
        "description": body["description"],
        "settings": body["settings"],
        "questions": body["questions"],
        "createdAt": now,
        "updatedAt": now,
    }


def apply_exam_update(record: dict, update: ExamUpdate) -> dict:
    # id, pin and createdAt always come from the stored record
    changes = update.model_dump(by_alias=True, exclude_none=True)
    updated = dict(record)
    if "title" in changes:
        updated["title"] = changes["title"].strip()
    if "description" in changes:
        updated["description"] = changes["description"].strip()
    if "settings" in changes:
        settings = dict(record.get("settings") or {})
        settings.update(changes["settings"])
        updated["settings"] = settings
    if "questions" in changes:
        updated["questions"] = changes["questions"]
    updated["examId"] = record["examId"]
    updated["pin"] = record["pin"]
    updated["createdAt"] = record["createdAt"]
    updated["updatedAt"] = _utcnow_iso()
    return updated


def _exam_to_public_dict(record: dict) -> dict:
    return {
        "examId": record["examId"],
        "title": record.get("title", ""),
        "description": record.get("description", ""),
        "settings": record.get("settings") or {},
        "questions": record.get("questions") or [],
    }


def _exam_to_summary_dict(record: dict) -> dict:
    return {
        "examId": record["examId"],
        "title": record.get("title") or UNTITLED,
        "pin": record["pin"],
        "createdAt": record.get("createdAt", ""),
    }


def _sort_newest_first(records: List[dict]) -> List[dict]:
    return sorted(records, key=lambda r: r.get("createdAt") or "", reverse=True)
