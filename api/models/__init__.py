"""Pydantic models."""
from api.models.quiz import (
    AnswerRequest,
    FilterRequest,
    JumpRequest,
    RecordsSourceRequest,
    SampleSourceRequest,
    StartRequest,
    TextSourceRequest,
)

__all__ = [
    "AnswerRequest",
    "FilterRequest",
    "JumpRequest",
    "RecordsSourceRequest",
    "SampleSourceRequest",
    "StartRequest",
    "TextSourceRequest",
]
