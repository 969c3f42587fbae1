"""
LLM Client for Groq and Google Gemini.

This module provides the single text-completion call the orchestrator
needs: system instructions plus a user prompt in, answer text out.

One provider is used per process (LLM_PROVIDER). Each question is one
best-effort request: there is no fallback cascade and SDK-level retries
are disabled, so a failure surfaces immediately as LLMError.
"""
from typing import Optional

import google.generativeai as genai
from groq import Groq

from src.core.config import Settings, get_settings
from src.core.exceptions import LLMError
from src.core.logging_config import get_logger

logger = get_logger(__name__)


class LLMClient:
    """
    Client for the configured LLM provider.

    Example:
        >>> client = LLMClient()
        >>> client.complete("You are helpful.", "Say hi", temperature=0.0)
        'Hi!'
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the provider SDK from settings."""
        self.settings = settings or get_settings()
        self.provider = self.settings.llm_provider
        self.model_name = self.settings.llm_model
        self.max_tokens = self.settings.llm_max_tokens
        self.timeout = self.settings.llm_timeout_seconds

        if self.provider == "groq":
            groq_kwargs = {"api_key": self.settings.groq_api_key, "max_retries": 0}
            if self.timeout is not None:
                groq_kwargs["timeout"] = self.timeout
            self.groq_client = Groq(**groq_kwargs)
        else:
            genai.configure(api_key=self.settings.google_api_key)

        logger.info(
            f"LLM Client initialized: provider={self.provider}, "
            f"model={self.model_name}, timeout={self.timeout or 'none'}"
        )

    def complete(
        self,
        system_instructions: str,
        user_prompt: str,
        temperature: float = 0.0
    ) -> str:
        """
        Run one completion.

        Args:
            system_instructions: System prompt including grounding context
            user_prompt: The user's question, unmodified
            temperature: Sampling temperature

        Returns:
            Raw model output

        Raises:
            LLMError: On any provider failure or an empty completion
        """
        try:
            if self.provider == "google":
                text = self._complete_google(system_instructions, user_prompt, temperature)
            else:
                text = self._complete_groq(system_instructions, user_prompt, temperature)
        except LLMError:
            raise
        except Exception as e:
            error_msg = str(e).lower()
            is_rate_limit = "429" in error_msg or "quota" in error_msg or "rate limit" in error_msg
            log_level = logger.warning if is_rate_limit else logger.error
            log_level(f"Provider failed ({self.provider}/{self.model_name}): {e}")
            raise LLMError(f"{self.provider} request failed: {e}") from e

        if not text or not text.strip():
            raise LLMError(f"{self.provider} returned an empty completion")

        return text

    def _complete_groq(self, system_instructions: str, user_prompt: str, temperature: float) -> str:
        response = self.groq_client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_instructions},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content

    def _complete_google(self, system_instructions: str, user_prompt: str, temperature: float) -> str:
        model = genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=system_instructions
        )
        generation_config = genai.types.GenerationConfig(
            temperature=temperature,
            max_output_tokens=self.max_tokens,
        )
        request_options = {"timeout": self.timeout} if self.timeout is not None else None

        response = model.generate_content(
            user_prompt,
            generation_config=generation_config,
            request_options=request_options,
        )
        # response.text raises ValueError when the answer was blocked
        try:
            return response.text
        except ValueError as e:
            raise LLMError("Content blocked by Google safety filters") from e
