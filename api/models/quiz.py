"""Quiz request Pydantic models."""
from typing import Literal

from pydantic import BaseModel, Field

ModeName = Literal["sequential", "random"]


class TextSourceRequest(BaseModel):
    """Raw question text pasted by the user."""

    text: str
    mode: ModeName = "sequential"
    start: bool = True


class RecordsSourceRequest(BaseModel):
    """Structured question records (index/question/options/answer)."""

    records: list[object]
    mode: ModeName = "sequential"
    start: bool = True


class SampleSourceRequest(BaseModel):
    """Load the bundled sample questions."""

    mode: ModeName = "sequential"


class StartRequest(BaseModel):
    """Start a quiz over the full parsed set."""

    mode: ModeName = "sequential"


class AnswerRequest(BaseModel):
    """Select an option for the current question."""

    optionId: str = Field(..., min_length=1, max_length=1)


class JumpRequest(BaseModel):
    """Jump to a question by its index in the active set."""

    index: int = Field(..., ge=0)


class FilterRequest(BaseModel):
    """Section and mistake filter."""

    sections: list[str] = Field(default_factory=list)
    mistakesOnly: bool = False
