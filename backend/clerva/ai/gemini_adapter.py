from __future__ import annotations

import os

import google.generativeai as genai

from clerva.ai.adapter import StudyAIAdapter
from clerva.ai.openai_adapter import SYSTEM_PROMPT

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


class GeminiStudyAdapter(StudyAIAdapter):
    provider = "gemini"

    def __init__(self, api_key: str | None = None, model: str = DEFAULT_GEMINI_MODEL):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if self.api_key:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(model)
        else:
            self.model = None

    @property
    def is_fallback(self) -> bool:
        return self.model is None

    def _complete(self, prompt: str, *, max_tokens: int | None = None) -> str | None:
        config = {"temperature": 0.4}
        if max_tokens:
            config["max_output_tokens"] = max_tokens
        result = self.model.generate_content(
            SYSTEM_PROMPT + "\n\nRequest:\n" + prompt,
            generation_config=config,
        )
        return result.text
