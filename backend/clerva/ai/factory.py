from functools import lru_cache

from clerva.ai.adapter import StudyAIAdapter
from clerva.ai.gemini_adapter import DEFAULT_GEMINI_MODEL, GeminiStudyAdapter
from clerva.ai.openai_adapter import OpenAIStudyAdapter
from clerva.core.config import get_settings


@lru_cache
def get_ai_adapter() -> StudyAIAdapter:
    settings = get_settings()
    if settings.ai_provider == "gemini":
        model = settings.ai_model if settings.ai_model.startswith("gemini") else DEFAULT_GEMINI_MODEL
        return GeminiStudyAdapter(api_key=settings.gemini_api_key, model=model)
    return OpenAIStudyAdapter(api_key=settings.openai_api_key, model=settings.ai_model)
