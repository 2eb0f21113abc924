from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

from clerva.ai import fallback

logger = logging.getLogger(__name__)

DEFAULT_SUMMARY_WORDS = 200
DEFAULT_FLASHCARD_COUNT = 10
DEFAULT_QUESTION_COUNT = 5
DEFAULT_QUESTION_TYPES = ["multiple-choice", "true-false"]

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")


def parse_json_array(reply: str | None) -> list[dict[str, Any]] | None:
    """Decode a model reply that should hold a JSON array.

    Markdown code fences are stripped first. Returns None when the reply is
    empty, not JSON, or not a list of objects.
    """
    if not reply:
        return None
    cleaned = _FENCE.sub("", reply.strip())
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        return None
    # json_object responses wrap the list, e.g. {"questions": [...]}
    if isinstance(parsed, dict):
        parsed = next((value for value in parsed.values() if isinstance(value, list)), None)
    if not isinstance(parsed, list):
        return None
    items = [item for item in parsed if isinstance(item, dict)]
    return items or None


class StudyAIAdapter(ABC):
    """Interface for study-material AI providers.

    Subclasses only supply ``_complete``; prompting, parsing and the offline
    fallback live here.
    """

    provider: str = "unknown"

    @property
    @abstractmethod
    def is_fallback(self) -> bool:
        """True when no provider client is configured."""

    @abstractmethod
    def _complete(self, prompt: str, *, max_tokens: int | None = None) -> str | None:
        """Send one prompt to the provider and return its raw text reply."""

    def _ask(self, prompt: str, *, max_tokens: int | None = None) -> str | None:
        if self.is_fallback:
            return None
        try:
            return self._complete(prompt, max_tokens=max_tokens)
        except Exception:
            logger.error(f"{self.provider} request failed; using fallback content", exc_info=True)
            return None

    def summarize(self, content: str, max_length: int | None = None, style: str | None = None) -> str:
        words = max_length or DEFAULT_SUMMARY_WORDS
        style = style or "paragraph"
        prompt = (
            f"Create a {style} style summary of the following content.\n"
            f"Keep it under {words} words.\n"
            "Focus on key concepts and main points.\n\n"
            f"Content: {content}"
        )
        reply = self._ask(prompt, max_tokens=words * 2)
        if reply and reply.strip():
            return reply.strip()
        return fallback.demo_summary(content)

    def generate_flashcards(
        self, content: str, count: int | None = None, difficulty: str | None = None
    ) -> list[dict[str, Any]]:
        count = count or DEFAULT_FLASHCARD_COUNT
        difficulty = difficulty or "medium"
        prompt = (
            f"Create {count} flashcards from the following content.\n"
            "Format as a JSON array of objects with the keys front, back, difficulty.\n"
            f"Make them {difficulty} difficulty level.\n\n"
            f"Content: {content}\n\n"
            "Return only a valid JSON array."
        )
        cards = parse_json_array(self._ask(prompt))
        if cards is None:
            return fallback.demo_flashcards(count, difficulty)
        return [
            {
                "id": f"flashcard-{index}",
                "front": str(card.get("front") or card.get("question", "")),
                "back": str(card.get("back") or card.get("answer", "")),
                "difficulty": card.get("difficulty") or difficulty,
            }
            for index, card in enumerate(cards[:count], start=1)
        ]

    def generate_quiz(
        self,
        content: str,
        question_count: int | None = None,
        question_types: list[str] | None = None,
        difficulty: str | None = None,
    ) -> list[dict[str, Any]]:
        question_count = question_count or DEFAULT_QUESTION_COUNT
        question_types = question_types or DEFAULT_QUESTION_TYPES
        difficulty = difficulty or "medium"
        prompt = (
            f"Generate {question_count} quiz questions from this content.\n"
            f"Question types: {', '.join(question_types)}\n"
            f"Difficulty: {difficulty}\n\n"
            f"Content: {content}\n\n"
            "Return a JSON array of objects with:\n"
            "- type: question type\n"
            "- question: the question text\n"
            "- options: array of options (for multiple choice)\n"
            "- correct_answer: the correct answer\n"
            "- explanation: why this is correct"
        )
        raw = parse_json_array(self._ask(prompt))
        questions = []
        for item in raw or []:
            question_type = item.get("type")
            answer = item.get("correct_answer") or item.get("correctAnswer")
            if question_type not in question_types or not item.get("question") or answer is None:
                continue
            options = item.get("options")
            questions.append(
                {
                    "id": f"question-{len(questions) + 1}",
                    "type": question_type,
                    "question": str(item["question"]),
                    "options": [str(option) for option in options] if options else None,
                    "correct_answer": str(answer),
                    "explanation": str(item.get("explanation") or ""),
                }
            )
        if not questions:
            return fallback.demo_quiz(question_count, question_types)
        return questions[:question_count]
