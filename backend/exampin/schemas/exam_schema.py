from pydantic import Field, field_validator, model_validator
from typing import Optional, List

from .question_schema import CamelModel, Question


class ExamSettings(CamelModel):
    show_score: bool = True
    shuffle: bool = False
    time: int = Field(0, ge=0, description="Time limit in minutes, 0 means unlimited.")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        # a null setting falls back to its default
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ExamSettingsUpdate(CamelModel):
    show_score: Optional[bool] = None
    shuffle: Optional[bool] = None
    time: Optional[int] = Field(None, ge=0)


def _questions_not_empty(v):
    if v is not None and len(v) == 0:
        raise ValueError("an exam needs at least one question")
    return v


class ExamDraft(CamelModel):
    # examId, pin and timestamps sent by the client are ignored
    title: str = ""
    description: str = ""
    settings: ExamSettings = Field(default_factory=ExamSettings)
    questions: List[Question]

    @field_validator("questions")
    def questions_not_empty(cls, v):
        return _questions_not_empty(v)

    @field_validator("settings", mode="before")
    def default_settings(cls, v):
        return {} if v is None else v

    @field_validator("title", "description", mode="before")
    def strip_text(cls, v):
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v


class ExamUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    settings: Optional[ExamSettingsUpdate] = None
    # replaces the whole question list when provided
    questions: Optional[List[Question]] = None

    @field_validator("questions")
    def questions_not_empty(cls, v):
        return _questions_not_empty(v)


class ExamRead(CamelModel):
    exam_id: str
    pin: str
    title: str
    description: str = ""
    settings: ExamSettings
    questions: List[Question]
    created_at: str
    updated_at: Optional[str] = None


class ExamPublic(CamelModel):
    """What a student receives after entering the PIN."""
    exam_id: str
    title: str
    description: str = ""
    settings: ExamSettings
    questions: List[Question]


class ExamSummary(CamelModel):
    exam_id: str
    title: str
    pin: str
    created_at: str


class PublishResponse(CamelModel):
    exam_id: str
    pin: str


class OkResponse(CamelModel):
    ok: bool = True
