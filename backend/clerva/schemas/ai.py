from typing import Literal

from pydantic import BaseModel, Field


Difficulty = Literal["easy", "medium", "hard"]
SummaryStyle = Literal["bullet", "paragraph", "outline"]
QuestionType = Literal["multiple-choice", "true-false", "short-answer"]


class SummaryRequest(BaseModel):
    content: str = Field(min_length=10, max_length=10000)
    max_length: int | None = Field(default=None, ge=50, le=500)
    style: SummaryStyle | None = None


class SummaryMetadata(BaseModel):
    original_length: int
    summary_length: int
    style: SummaryStyle


class SummaryResponse(BaseModel):
    summary: str
    metadata: SummaryMetadata


class FlashcardRequest(BaseModel):
    content: str = Field(min_length=10, max_length=10000)
    count: int | None = Field(default=None, ge=1, le=20)
    difficulty: Difficulty | None = None


class Flashcard(BaseModel):
    id: str
    front: str
    back: str
    difficulty: str


class FlashcardMetadata(BaseModel):
    original_length: int
    card_count: int
    difficulty: Difficulty


class FlashcardResponse(BaseModel):
    flashcards: list[Flashcard]
    metadata: FlashcardMetadata


class QuizRequest(BaseModel):
    content: str = Field(min_length=10, max_length=10000)
    question_count: int | None = Field(default=None, ge=1, le=15)
    question_types: list[QuestionType] | None = None
    difficulty: Difficulty | None = None


class QuizQuestion(BaseModel):
    id: str
    type: QuestionType
    question: str
    options: list[str] | None = None
    correct_answer: str
    explanation: str = ""


class QuizMetadata(BaseModel):
    original_length: int
    question_count: int
    difficulty: Difficulty
    types: list[QuestionType]


class QuizResponse(BaseModel):
    questions: list[QuizQuestion]
    metadata: QuizMetadata
