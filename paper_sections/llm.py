# paper_sections/llm.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional
import logging
import os

import google.generativeai as genai

from paper_sections.config.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class GeminiConfig:
    """
    Configuration for the Gemini generative-text service.
    """

    api_key: Optional[str]
    model_name: str = "gemini-1.5-flash"

    @classmethod
    def from_env(cls) -> "GeminiConfig":
        """
        Priority for api_key:
        - PAPER_SECTIONS_GOOGLE_API_KEY
        - GOOGLE_API_KEY
        - settings.GOOGLE_API_KEY
        """
        api_key = (
            os.getenv("PAPER_SECTIONS_GOOGLE_API_KEY")
            or os.getenv("GOOGLE_API_KEY")
            or (settings.GOOGLE_API_KEY.get_secret_value() if settings.GOOGLE_API_KEY else None)
        )
        model_name = os.getenv("PAPER_SECTIONS_LLM_MODEL_NAME") or settings.LLM_MODEL_NAME
        return cls(api_key=api_key, model_name=model_name)


class LlmClientError(RuntimeError):
    """
    Error raised when the generative-text step cannot run or fails.
    """


def build_prompt(prompt: str, sections: Mapping[str, str]) -> str:
    """
    Lay out the user prompt followed by each selected section, in order.
    """
    formatted = f"User Prompt: {prompt}\n\n"
    formatted += "Selected Document Sections:\n---\n"
    for name, text in sections.items():
        formatted += f"Section: {name}\n{text}\n---\n"
    return formatted


class GeminiClient:
    """
    Thin wrapper around google-generativeai for answering a prompt over
    document sections.
    """

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        *,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
    ) -> None:
        if config is None:
            config = GeminiConfig.from_env()

        if api_key is not None:
            config.api_key = api_key
        if model_name is not None:
            config.model_name = model_name

        if not config.api_key:
            logger.error("GOOGLE_API_KEY is not configured in environment variables.")
            raise LlmClientError("Missing Google API Key configuration.")

        self.config = config
        self.model_name: str = config.model_name
        genai.configure(api_key=config.api_key)
        self._model: Any = None

    def _get_model(self) -> Any:
        if self._model is None:
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def generate(self, prompt: str, sections: Mapping[str, str]) -> str:
        """
        Send the formatted prompt to the model and return its text.
        """
        formatted = build_prompt(prompt, sections)

        try:
            response = self._get_model().generate_content(formatted)
            text = response.text
        except Exception as exc:
            logger.error("Error calling Google Generative AI: %s", exc)
            feedback = getattr(getattr(exc, "response", None), "prompt_feedback", None)
            if feedback:
                logger.error("LLM prompt feedback: %s", feedback)
            raise LlmClientError(f"Failed to get response from LLM: {exc}") from exc

        logger.info("Successfully received response from LLM.")
        return text
