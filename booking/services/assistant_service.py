"""
AssistantService
----------------
Purpose:
- Service suggestions and a small receptionist chat backed by Gemini
  (generateContent REST endpoint, called with httpx).

How it behaves:
- No GEMINI_API_KEY configured: answers with fixed, rule-based text.
- Any HTTP error, timeout or unexpected payload: logs it and answers with the
  same fallback text. These calls never raise into the booking flow.
"""

import logging

import httpx
from django.conf import settings

from .catalog import list_services

logger = logging.getLogger(__name__)

CHAT_FALLBACK = (
    "Our assistant is taking a break right now. "
    "You can still book any service from the booking page, or call the salon."
)


class AssistantUnavailable(Exception):
    """Raised internally when Gemini cannot give us an answer."""


class GeminiClient:
    """Thin wrapper around the generateContent endpoint."""

    def __init__(self, api_key=None, model=None, base_url=None, timeout=None, transport=None):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_API_URL).rstrip("/")
        self.timeout = settings.SALON_ASSISTANT_TIMEOUT if timeout is None else timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def generate(self, contents, system_instruction=None) -> str:
        if not self.configured:
            raise AssistantUnavailable("GEMINI_API_KEY is not set")

        payload = {"contents": contents}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        url = f"{self.base_url}/{self.model}:generateContent"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(url, json=payload, headers={"x-goog-api-key": self.api_key})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise AssistantUnavailable(f"Gemini request failed: {e}") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(p.get("text", "") for p in parts).strip()
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise AssistantUnavailable(f"Unexpected Gemini response: {e}") from e

        if not text:
            raise AssistantUnavailable("Gemini returned an empty answer")
        return text


def _service_names(appointment):
    return ", ".join(s.name for s in appointment.ordered_services())


class SuggestionProvider:
    def __init__(self, client=None):
        self.client = client or GeminiClient()

    def fallback(self, customer, last_visit):
        if last_visit is not None:
            return (
                f"Welcome back, {customer.name}! Based on your last visit for "
                f"{_service_names(last_visit)}, we recommend a trim today to keep you looking sharp."
            )
        return f"Welcome, {customer.name}! Try our popular 'Groom Package' for a complete makeover."

    def build_prompt(self, customer, history):
        if history:
            history_text = "; ".join(f"{a.date}: {_service_names(a)}" for a in history)
        else:
            history_text = "No previous history."
        available = ", ".join(s.name for s in list_services())
        return (
            f"You are an expert salon receptionist AI for {settings.SALON_NAME}.\n"
            f"Customer Name: {customer.name}\n"
            f"Visit History: {history_text}\n"
            f"Available Services: {available}\n\n"
            "Suggest the next best service for this customer in 1-2 sentences.\n"
            "If they are new, suggest a popular combo.\n"
            "Tone: Professional, warm, and inviting."
        )

    def suggest(self, customer, last_visit=None, history=None) -> str:
        if not self.client.configured:
            return self.fallback(customer, last_visit)

        prompt = self.build_prompt(customer, history or ([last_visit] if last_visit else []))
        try:
            return self.client.generate([{"role": "user", "parts": [{"text": prompt}]}])
        except AssistantUnavailable as e:
            logger.warning("Suggestion fell back to static text: %s", e)
            return f"Welcome back, {customer.name}! We're ready to make you look your best."


class ChatSession:
    """
    One conversation. `history` holds Gemini-style turns and can be stored
    in the web session between requests.
    """

    def __init__(self, history=None, client=None):
        self.history = list(history or [])
        self.client = client or GeminiClient()

    def system_instruction(self):
        services = "; ".join(
            f"{s.name} (₹{s.price}, {s.duration_minutes} min)" for s in list_services()
        )
        return (
            f"You are the friendly receptionist of {settings.SALON_NAME}. "
            f"Answer briefly. Services on offer: {services}. "
            f"Opening hours {settings.SALON_OPEN_HOUR}:00 to {settings.SALON_CLOSE_HOUR}:00."
        )

    def send_message(self, text) -> str:
        text = (text or "").strip()
        if not text:
            return CHAT_FALLBACK

        turn = {"role": "user", "parts": [{"text": text}]}
        try:
            reply = self.client.generate(self.history + [turn], self.system_instruction())
        except AssistantUnavailable as e:
            logger.warning("Chat fell back to static text: %s", e)
            return CHAT_FALLBACK

        self.history.append(turn)
        self.history.append({"role": "model", "parts": [{"text": reply}]})
        return reply
