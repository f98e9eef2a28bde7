from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Literal, Union
import enum


class QuestionType(str, enum.Enum):
    """Tags for the supported question kinds."""
    mc = "mc"
    tf = "tf"
    short = "short"
    num = "num"
    long = "long"
    order = "order"
    match = "match"


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case in python; unknown client fields are dropped
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class QuestionBase(CamelModel):
    text: str = Field(..., description="The statement shown to the student.")
    points: float = Field(1, ge=0, description="Weight of the question in the total score.")


class Option(CamelModel):
    text: str
    correct: bool = False


class MatchPair(CamelModel):
    left: str
    right: str


class MultipleChoiceQuestion(QuestionBase):
    type: Literal["mc"] = "mc"
    options: List[Option] = Field(..., min_length=2)


class TrueFalseQuestion(QuestionBase):
    type: Literal["tf"] = "tf"
    answer: bool


class ShortAnswerQuestion(QuestionBase):
    type: Literal["short"] = "short"
    accepted: List[str] = Field(..., min_length=1, description="Accepted answers.")
    case_sensitive: bool = False

    @field_validator("accepted")
    def accepted_not_blank(cls, v):
        cleaned = [a.strip() for a in v if a and a.strip()]
        if not cleaned:
            raise ValueError("short answer questions need at least one non-empty accepted answer")
        return cleaned


class NumericQuestion(QuestionBase):
    type: Literal["num"] = "num"
    answer: float
    tolerance: float = Field(0, ge=0)


class LongAnswerQuestion(QuestionBase):
    type: Literal["long"] = "long"
    rubric: str = ""


class OrderingQuestion(QuestionBase):
    type: Literal["order"] = "order"
    items: List[str] = Field(..., min_length=2, description="Items in their correct order.")


class MatchingQuestion(QuestionBase):
    type: Literal["match"] = "match"
    pairs: List[MatchPair] = Field(..., min_length=1)


Question = Annotated[
    Union[
        MultipleChoiceQuestion,
        TrueFalseQuestion,
        ShortAnswerQuestion,
        NumericQuestion,
        LongAnswerQuestion,
        OrderingQuestion,
        MatchingQuestion,
    ],
    Field(discriminator="type"),
]
