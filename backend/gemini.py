"""Relay client for the Gemini generateContent API.

Sends one composed prompt per call and pulls the first candidate's first text
part out of the reply. Provider-side failures never raise: they come back as a
RelayResult whose text is a human-readable description of what went wrong.
"""

import enum
import json
import logging
from dataclasses import dataclass

import httpx

from config import GeminiConfig

logger = logging.getLogger(__name__)

# httpx logs every request URL at INFO, and ours carry the API key.
logging.getLogger("httpx").setLevel(logging.WARNING)

NO_CANDIDATES_TEXT = "No candidates returned by Gemini."
NO_PARTS_TEXT = "No parts found in the response."
COMMUNICATION_ERROR_PREFIX = "Error while communicating with Gemini: "


class RelayOutcome(enum.Enum):
    ANSWER = "answer"
    NO_CANDIDATES = "no_candidates"
    NO_PARTS = "no_parts"
    COMMUNICATION_ERROR = "communication_error"


@dataclass(frozen=True)
class RelayResult:
    kind: RelayOutcome
    text: str

    @property
    def ok(self) -> bool:
        return self.kind is RelayOutcome.ANSWER


def build_request_document(prompt: str) -> str:
    """Serialize the prompt into the provider's request shape.

    json.dumps handles escaping, so embedded quotes can't break the document.
    """
    return json.dumps({"contents": [{"parts": [{"text": prompt}]}]})


def extract_answer(document) -> RelayResult:
    """Walk candidates[0].content.parts[0].text, checking each level."""
    candidates = document.get("candidates") if isinstance(document, dict) else None
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return RelayResult(RelayOutcome.NO_CANDIDATES, NO_CANDIDATES_TEXT)

    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return RelayResult(RelayOutcome.NO_PARTS, NO_PARTS_TEXT)

    text = parts[0].get("text")
    if isinstance(text, str):
        return RelayResult(RelayOutcome.ANSWER, text)
    # Scalars render as their JSON text ("42", "true"); anything else is empty.
    if isinstance(text, (bool, int, float)):
        return RelayResult(RelayOutcome.ANSWER, json.dumps(text))
    return RelayResult(RelayOutcome.ANSWER, "")


def _describe(exc: Exception) -> str:
    # Status errors carry the request URL, which includes the API key.
    if isinstance(exc, httpx.HTTPStatusError):
        return f"{exc.response.status_code} {exc.response.reason_phrase}".strip()
    return str(exc) or type(exc).__name__


class GeminiClient:
    def __init__(self, config: GeminiConfig, transport: httpx.BaseTransport | None = None):
        self.config = config
        self._transport = transport

    def relay(self, prompt: str) -> RelayResult:
        body = build_request_document(prompt)
        try:
            with httpx.Client(transport=self._transport, timeout=self.config.timeout) as client:
                resp = client.post(
                    self.config.url,
                    params={"key": self.config.api_key},
                    headers={"Content-Type": "application/json"},
                    content=body,
                )
            resp.raise_for_status()
            logger.debug("Gemini response: %s", resp.text)
            document = resp.json()
        except Exception as exc:
            description = _describe(exc)
            # No traceback: status errors embed the request URL.
            logger.error("Gemini call failed (%s): %s", type(exc).__name__, description)
            return RelayResult(RelayOutcome.COMMUNICATION_ERROR, COMMUNICATION_ERROR_PREFIX + description)

        result = extract_answer(document)
        if not result.ok:
            logger.warning("Unexpected Gemini response shape: %s", result.text)
        return result
