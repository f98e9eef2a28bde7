import asyncio
import pytest

from exampin.errors import PinAllocationError, PinTaken
from exampin.schemas.exam_schema import ExamDraft
from exampin.services import pin_service
from exampin.storage.base import ExamStore


class DummyStore(ExamStore):
    """Keeps exams in a dict; pins listed in `racing` are reported as taken at write time."""

    def __init__(self, existing_pins=(), racing=()):
        self.exams = {}
        self.existing_pins = set(existing_pins)
        self.racing = set(racing)

    async def list_exams(self):
        return list(self.exams.values())

    async def get_exam(self, exam_id):
        return self.exams.get(exam_id)

    async def get_exam_by_pin(self, pin):
        return next((e for e in self.exams.values() if e["pin"] == pin), None)

    async def pin_exists(self, pin):
        return pin in self.existing_pins

    async def create_exam(self, record):
        if record["pin"] in self.racing:
            raise PinTaken()
        self.existing_pins.add(record["pin"])
        self.exams[record["examId"]] = record

    async def update_exam(self, exam_id, mutate):
        return None

    async def append_result(self, exam_id, record):
        pass

    async def list_results(self, exam_id):
        return []


DRAFT = ExamDraft.model_validate({"title": "Quiz", "questions": [{"type": "tf", "text": "?", "answer": True}]})


def _pins(monkeypatch, *pins):
    it = iter(pins)
    monkeypatch.setattr(pin_service, "generate_pin", lambda: next(it))


def test_generate_pin_is_six_digits():
    for _ in range(200):
        pin = pin_service.generate_pin()
        assert pin_service.is_valid_pin(pin)
        assert 100000 <= int(pin) <= 999999


def test_is_valid_pin():
    assert pin_service.is_valid_pin("123456")
    assert not pin_service.is_valid_pin("12345")
    assert not pin_service.is_valid_pin("1234567")
    assert not pin_service.is_valid_pin("12a456")
    assert not pin_service.is_valid_pin("")


def test_publish_skips_pins_already_in_use(monkeypatch):
    store = DummyStore(existing_pins={"111111", "222222"})
    _pins(monkeypatch, "111111", "222222", "333333")

    record = asyncio.run(pin_service.publish_exam(store, DRAFT))
    assert record["pin"] == "333333"
    assert store.exams[record["examId"]]["title"] == "Quiz"


def test_publish_retries_when_store_reports_taken_pin(monkeypatch):
    store = DummyStore(racing={"444444"})
    _pins(monkeypatch, "444444", "555555")

    record = asyncio.run(pin_service.publish_exam(store, DRAFT))
    assert record["pin"] == "555555"
    assert len(store.exams) == 1


def test_publish_gives_up_after_max_attempts(monkeypatch):
    store = DummyStore(existing_pins={"111111"})
    monkeypatch.setattr(pin_service, "generate_pin", lambda: "111111")

    with pytest.raises(PinAllocationError):
        asyncio.run(pin_service.publish_exam(store, DRAFT, max_attempts=5))
    assert store.exams == {}
