# raw-style-advisor/utils/openai_handler.py

import time
from typing import Any, Dict, List, Optional

import openai
from openai import OpenAI

from .errors import RemoteAPIError
from .logger import SimpleLogger

DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 500
DEFAULT_TIMEOUT_SECONDS = 120.0


class OpenAIHandler:
    """Sends a single chat completion request to the OpenAI vision API. No retries."""

    def __init__(self, api_key: str, logger: SimpleLogger, model_name: str = DEFAULT_MODEL,
                 max_tokens: int = DEFAULT_MAX_TOKENS, timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 client: Optional[Any] = None):
        if not api_key and client is None:
            raise ValueError("An API key is required for OpenAIHandler.")
        self.model_name = model_name or DEFAULT_MODEL
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.logger = logger
        self.client = client or OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.logger.info(f"OpenAIHandler configured with model '{self.model_name}' (timeout {timeout:.0f}s)")

    def send_request(self, messages: List[Dict[str, Any]]) -> str:
        """Returns the first choice's text. Every failure is raised as RemoteAPIError."""
        self.logger.info("Sending request to OpenAI API...")
        start_time = time.perf_counter()
        try:
            completion = self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                max_tokens=self.max_tokens,
            )
        except openai.APITimeoutError as e:
            self.logger.error("OpenAI request timed out.", exception=e)
            raise RemoteAPIError(
                f"Error calling OpenAI: request timed out after {self.timeout:.0f} seconds.", timed_out=True
            ) from e
        except openai.APIStatusError as e:
            self.logger.error(f"OpenAI API returned status {e.status_code}.", exception=e)
            raise RemoteAPIError(
                f"Error calling OpenAI: OpenAI API Error: {e.status_code} {type(e).__name__} - {e.message}",
                status_code=e.status_code,
            ) from e
        except openai.OpenAIError as e:
            self.logger.error("Error during OpenAI API call.", exception=e)
            raise RemoteAPIError(f"Error calling OpenAI: {type(e).__name__} - {e}") from e

        self.logger.info(f"OpenAI response received in {time.perf_counter() - start_time:.2f}s.")
        text = self._extract_text(completion)
        if not text:
            self.logger.error(f"Received no text content from OpenAI response: {completion}")
            raise RemoteAPIError("Received empty or invalid response content from OpenAI (empty response).")
        return text

    @staticmethod
    def _extract_text(completion: Any) -> str:
        choices = getattr(completion, 'choices', None) or []
        if not choices:
            return ""
        message = getattr(choices[0], 'message', None)
        content = getattr(message, 'content', None)
        return content if isinstance(content, str) and content.strip() else ""
