from fastapi import APIRouter, Depends

from clerva.ai.adapter import DEFAULT_QUESTION_TYPES, StudyAIAdapter
from clerva.ai.factory import get_ai_adapter
from clerva.api import deps
from clerva.models.user import User
from clerva.schemas import ai as ai_schema

router = APIRouter()


@router.post("/summaries", response_model=ai_schema.SummaryResponse)
def create_summary(
    payload: ai_schema.SummaryRequest,
    _user: User = Depends(deps.get_current_user),  # noqa: B008
    adapter: StudyAIAdapter = Depends(get_ai_adapter),  # noqa: B008
) -> ai_schema.SummaryResponse:
    summary = adapter.summarize(payload.content, payload.max_length, payload.style)
    return ai_schema.SummaryResponse(
        summary=summary,
        metadata=ai_schema.SummaryMetadata(
            original_length=len(payload.content),
            summary_length=len(summary),
            style=payload.style or "paragraph",
        ),
    )


@router.post("/flashcards", response_model=ai_schema.FlashcardResponse)
def create_flashcards(
    payload: ai_schema.FlashcardRequest,
    _user: User = Depends(deps.get_current_user),  # noqa: B008
    adapter: StudyAIAdapter = Depends(get_ai_adapter),  # noqa: B008
) -> ai_schema.FlashcardResponse:
    cards = adapter.generate_flashcards(payload.content, payload.count, payload.difficulty)
    return ai_schema.FlashcardResponse(
        flashcards=cards,
        metadata=ai_schema.FlashcardMetadata(
            original_length=len(payload.content),
            card_count=len(cards),
            difficulty=payload.difficulty or "medium",
        ),
    )


@router.post("/quiz", response_model=ai_schema.QuizResponse)
def create_quiz(
    payload: ai_schema.QuizRequest,
    _user: User = Depends(deps.get_current_user),  # noqa: B008
    adapter: StudyAIAdapter = Depends(get_ai_adapter),  # noqa: B008
) -> ai_schema.QuizResponse:
    types = payload.question_types or DEFAULT_QUESTION_TYPES
    questions = adapter.generate_quiz(
        payload.content, payload.question_count, types, payload.difficulty
    )
    return ai_schema.QuizResponse(
        questions=questions,
        metadata=ai_schema.QuizMetadata(
            original_length=len(payload.content),
            question_count=len(questions),
            difficulty=payload.difficulty or "medium",
            types=types,
        ),
    )
