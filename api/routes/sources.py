"""Question source endpoints."""
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from api.config import UPLOAD_ALLOWED_EXTENSIONS, UPLOAD_MAX_SIZE_BYTES
from api.models import RecordsSourceRequest, SampleSourceRequest, TextSourceRequest
from api.services.quiz_service import QuizController, get_controller
from api.utils import to_http_exception
from errors import QuizError
from question_parser import SAMPLE_TEXT
from serialization import serialize_parse_report, serialize_view
from session import Mode, available_sections

router = APIRouter(prefix="/api/sources", tags=["sources"])

Controller = Annotated[QuizController, Depends(get_controller)]


def _loaded_payload(controller: QuizController) -> dict[str, object]:
    return {
        "report": serialize_parse_report(controller.report),
        "view": serialize_view(controller.state),
    }


@router.post("/text")
def load_text(payload: TextSourceRequest, controller: Controller) -> dict[str, object]:
    """Parse pasted question text and start a quiz."""
    try:
        controller.load_text(payload.text, Mode(payload.mode), payload.start)
    except QuizError as exc:
        raise to_http_exception(exc) from exc
    return _loaded_payload(controller)


@router.post("/records")
def load_records(payload: RecordsSourceRequest, controller: Controller) -> dict[str, object]:
    """Map structured question records and start a quiz."""
    try:
        controller.load_records(payload.records, Mode(payload.mode), payload.start)
    except QuizError as exc:
        raise to_http_exception(exc) from exc
    return _loaded_payload(controller)


@router.post("/sample")
def load_sample(payload: SampleSourceRequest, controller: Controller) -> dict[str, object]:
    """Start a quiz over the bundled sample questions."""
    try:
        controller.load_text(SAMPLE_TEXT, Mode(payload.mode))
    except QuizError as exc:
        raise to_http_exception(exc) from exc
    return _loaded_payload(controller)


@router.post("/upload")
def upload_source(
    controller: Controller,
    file: UploadFile = File(...),
    mode: str = Form("sequential"),
) -> dict[str, object]:
    """Upload a .txt, .json or .docx question file."""
    file_name = Path(file.filename or "").name
    suffix = Path(file_name).suffix.lower()
    if suffix not in UPLOAD_ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type; use one of {', '.join(sorted(UPLOAD_ALLOWED_EXTENSIONS))}",
        )
    try:
        quiz_mode = Mode(mode)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid mode") from exc

    data = file.file.read(UPLOAD_MAX_SIZE_BYTES + 1)
    if len(data) > UPLOAD_MAX_SIZE_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        controller.load_bytes(data, file_name, quiz_mode)
    except QuizError as exc:
        raise to_http_exception(exc) from exc
    return _loaded_payload(controller)


@router.get("/sections")
def list_sections(controller: Controller) -> list[str]:
    """Sections of the loaded question set, in order of appearance."""
    return available_sections(controller.state.all_questions)
