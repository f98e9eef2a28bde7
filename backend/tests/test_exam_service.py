import re
from pydantic import ValidationError
import pytest

from exampin.schemas.exam_schema import ExamDraft, ExamUpdate
from exampin.services.exam_service import (
    apply_exam_update,
    build_exam_record,
    _exam_to_public_dict,
    _exam_to_summary_dict,
    _iso,
    _to_naive_utc,
    new_id,
)


def _draft(**extra):
    body = {
        "title": "  Història  ",
        "questions": [
            {"id": "q-from-client", "type": "num", "text": "pi?", "answer": 3.14, "tolerance": 0.01, "options": ["x"]},
        ],
    }
    body.update(extra)
    return ExamDraft.model_validate(body)


def test_build_record_sanitizes_draft():
    record = build_exam_record(_draft(examId="fake", pin="000000"), "abc", "654321")

    assert record["examId"] == "abc"
    assert record["pin"] == "654321"
    assert record["title"] == "Història"
    assert record["settings"] == {"showScore": True, "shuffle": False, "time": 0}
    # client question ids and fields of other kinds are dropped
    assert record["questions"] == [{"text": "pi?", "points": 1.0, "type": "num", "answer": 3.14, "tolerance": 0.01}]
    assert record["createdAt"] == record["updatedAt"]


def test_draft_requires_questions():
    with pytest.raises(ValidationError):
        ExamDraft.model_validate({"title": "x", "questions": []})
    with pytest.raises(ValidationError):
        ExamDraft.model_validate({"title": "x"})


def test_question_kinds_validate_their_own_fields():
    with pytest.raises(ValidationError):
        ExamDraft.model_validate({"questions": [{"type": "short", "text": "?", "accepted": ["  "]}]})
    with pytest.raises(ValidationError):
        ExamDraft.model_validate({"questions": [{"type": "num", "text": "?", "answer": 1, "tolerance": -1}]})
    with pytest.raises(ValidationError):
        ExamDraft.model_validate({"questions": [{"type": "order", "text": "?", "items": ["only"]}]})
    with pytest.raises(ValidationError):
        ExamDraft.model_validate({"questions": [{"type": "tf", "text": "?"}]})


def test_update_preserves_identity():
    record = build_exam_record(_draft(), "abc", "654321")
    update = ExamUpdate.model_validate({"title": "New", "settings": {"shuffle": True}, "pin": "111111"})

    updated = apply_exam_update(record, update)
    assert updated["examId"] == "abc"
    assert updated["pin"] == "654321"
    assert updated["createdAt"] == record["createdAt"]
    assert updated["title"] == "New"
    assert updated["settings"] == {"showScore": True, "shuffle": True, "time": 0}
    assert updated["questions"] == record["questions"]
    # the stored record itself is left alone
    assert record["title"] == "Història"


def test_projections():
    record = build_exam_record(_draft(title=""), "abc", "654321")
    public = _exam_to_public_dict(record)
    assert set(public) == {"examId", "title", "description", "settings", "questions"}

    summary = _exam_to_summary_dict(record)
    assert summary == {"examId": "abc", "title": "(Sense títol)", "pin": "654321", "createdAt": record["createdAt"]}


def test_timestamps_round_trip():
    stamp = "2026-10-19T08:30:00.123Z"
    assert _iso(_to_naive_utc(stamp)) == stamp
    assert _to_naive_utc(None) is None


def test_null_settings_fall_back_to_defaults():
    draft = _draft(settings={"showScore": None, "shuffle": True}, title=None)
    assert draft.settings.show_score is True
    assert draft.settings.shuffle is True
    assert draft.title == ""

    assert _draft(settings=None).settings.time == 0


def test_new_ids_are_32_hex_chars():
    ids = {new_id() for _ in range(20)}
    assert len(ids) == 20
    for exam_id in ids:
        assert re.match(r"^[0-9a-f]{32}$", exam_id)
