"""
Google Gemini implementation of the geocoder and the admin assistant.

Constraints:
  - One chat per context snapshot; the chat is re-created only when the data
    changes, so follow-up questions keep their history.
  - Every call carries a request timeout; errors (a timeout included) are
    raised to the caller, and LocationResolver / AssistantService turn them
    into degraded output.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import google.generativeai as genai

from ..core.constants import DEFAULT_ASSISTANT_TIMEOUT_SECONDS
from .service import map_link

logger = logging.getLogger(__name__)

MODEL_NAME = "gemini-1.5-flash"

_GEOCODE_PROMPT = (
    "Give the most precise and concise address or place name for the coordinates "
    "{latitude}, {longitude}. Answer in a single line."
)

_ASSISTANT_INSTRUCTION = (
    "You are a helpful assistant for a company administrator. You answer questions about "
    "employee time tracking and contractor submissions. Use only the data provided to answer "
    "accurately. The data is: {context}"
)


class GeminiAssistant:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model_name: str = MODEL_NAME,
        request_timeout: float = DEFAULT_ASSISTANT_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")
        if not self.api_key:
            raise RuntimeError("GOOGLE_API_KEY not configured")

        genai.configure(api_key=self.api_key)
        self.model_name = model_name
        self.request_timeout = request_timeout
        self._model = genai.GenerativeModel(model_name)
        self._chat: Any = None
        self._chat_context: Optional[str] = None
        logger.info("GeminiAssistant initialized (model=%s, timeout=%ss)", model_name, request_timeout)

    def describe(self, latitude: float, longitude: float) -> tuple[str, Optional[str]]:
        response = self._model.generate_content(
            _GEOCODE_PROMPT.format(latitude=latitude, longitude=longitude),
            request_options=self._request_options(),
        )
        return (response.text or "").strip(), map_link(latitude, longitude)

    def respond(self, question: str, context: str) -> str:
        if self._chat is None or context != self._chat_context:
            model = genai.GenerativeModel(
                self.model_name,
                system_instruction=_ASSISTANT_INSTRUCTION.format(context=context),
            )
            self._chat = model.start_chat(history=[])
            self._chat_context = context

        response = self._chat.send_message(question, request_options=self._request_options())
        return response.text.strip()

    def _request_options(self) -> dict[str, Any]:
        return {"timeout": self.request_timeout}
