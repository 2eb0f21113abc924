from __future__ import annotations

import os

from openai import OpenAI

from clerva.ai.adapter import StudyAIAdapter

SYSTEM_PROMPT = (
    "You are Clerva, a study assistant that turns course material into summaries, "
    "flashcards and practice quizzes.\n"
    "Stay faithful to the provided content and do not invent facts it does not support.\n"
    "When asked for JSON, return only JSON with no commentary or markdown."
)


class OpenAIStudyAdapter(StudyAIAdapter):
    provider = "openai"

    def __init__(self, api_key: str | None = None, model: str = "gpt-4o-mini"):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.model = model
        self.client = OpenAI(api_key=self.api_key) if self.api_key else None

    @property
    def is_fallback(self) -> bool:
        return self.client is None

    def _complete(self, prompt: str, *, max_tokens: int | None = None) -> str | None:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.4,
            max_tokens=max_tokens,
        )
        return completion.choices[0].message.content
