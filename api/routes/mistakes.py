"""Mistake review endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends

from api.services.quiz_service import QuizController, get_controller

router = APIRouter(prefix="/api/mistakes", tags=["mistakes"])


@router.get("")
def list_mistakes(
    controller: Annotated[QuizController, Depends(get_controller)],
) -> dict[str, object]:
    """Question ids answered wrong and not corrected since."""
    ids = controller.mistakes()
    return {"ids": ids, "count": len(ids)}


@router.delete("")
def reset_mistakes(
    controller: Annotated[QuizController, Depends(get_controller)],
) -> dict[str, str]:
    """Forget every remembered mistake."""
    controller.clear_mistakes()
    return {"status": "cleared"}
