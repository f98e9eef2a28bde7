import logging
import re
import secrets

from ..errors import PinAllocationError, PinTaken
from ..schemas.exam_schema import ExamDraft
from ..storage.base import ExamStore
from .exam_service import build_exam_record, new_id

logger = logging.getLogger(__name__)

PIN_RE = re.compile(r"^\d{6}$")


def generate_pin() -> str:
    """Random 6-digit PIN in 100000..999999 (never a leading zero)."""
    return str(100000 + secrets.randbelow(900000))


def is_valid_pin(pin: str) -> bool:
    return bool(PIN_RE.match(pin or ""))


async def publish_exam(store: ExamStore, draft: ExamDraft, max_attempts: int = 1000) -> dict:
    """
    Persist a new exam under a fresh id and an unused PIN.

    A PIN already known to the store is skipped before writing; a PIN taken by a
    concurrent publish is reported by the store as PinTaken and retried as well.
    Returns the stored record.
    """
    exam_id = new_id()
    for attempt in range(1, max_attempts + 1):
        pin = generate_pin()
        if await store.pin_exists(pin):
            logger.debug("PIN %s already in use (attempt %d)", pin, attempt)
            continue
        record = build_exam_record(draft, exam_id, pin)
        try:
            await store.create_exam(record)
        except PinTaken:
            logger.debug("PIN %s taken while saving (attempt %d)", pin, attempt)
            continue
        return record

    raise PinAllocationError(f"Could not allocate a free PIN after {max_attempts} attempts")
