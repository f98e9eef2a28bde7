from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional

from .question_schema import CamelModel


class StudentInfo(CamelModel):
    name: str
    group: str = ""

    @field_validator("name")
    def name_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("student name is required")
        return v.strip()

    @field_validator("group", mode="before")
    def strip_group(cls, v):
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v


class Totals(CamelModel):
    score: float = 0
    max: float = 0

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ResponseItem(CamelModel):
    # extra keys (question index, type, ...) are kept as sent by the client
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    answer: Any = None
    correct: Optional[bool] = None


class ResultSubmit(CamelModel):
    exam_id: str
    pin: str
    student: StudentInfo
    totals: Totals = Field(default_factory=Totals)
    responses: List[ResponseItem]

    @field_validator("totals", mode="before")
    def default_totals(cls, v):
        return {} if v is None else v

    @field_validator("exam_id", "pin", mode="before")
    def coerce_to_str(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            v = str(v)
        return v

    @field_validator("exam_id", "pin")
    def not_blank(cls, v):
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class ResultRead(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    result_id: str
    exam_id: str
    student: StudentInfo
    totals: Totals
    responses: List[ResponseItem]
    submitted_at: str


class ResultSet(CamelModel):
    exam_id: str
    items: List[ResultRead] = []


class SubmitResponse(CamelModel):
    ok: bool = True
    result_id: str
