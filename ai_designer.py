"""
AI Designer
===========

Turns a free-text style prompt into a validated four-color scheme by
asking a hosted Gemini model. One request per call: no retries, no
streaming, no timeout beyond what requests does by default.

Every failure is raised as an AIDesignerError subclass carrying the HTTP
status and category the API layer reports to the browser.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

import requests

from colors import validate_color_scheme

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a sneaker designer AI. Based on the user's mood, theme, or style description, generate a color scheme for a sneaker.

You MUST respond with ONLY a valid JSON object in this exact format, no other text:
{
  "sole": "#hexcolor",
  "upper": "#hexcolor",
  "laces": "#hexcolor",
  "logo": "#hexcolor"
}

Rules:
- All colors must be valid 6-digit hex codes starting with #
- Choose colors that work well together and match the described mood
- Keep good contrast; the logo must stay visible against the upper"""

QUOTA_EXCEEDED_PHRASE = "exceeded your current quota"

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


class AIDesignerError(Exception):
    status_code = 500
    category = "error"


class ConfigurationError(AIDesignerError):
    category = "configuration"


class UpstreamError(AIDesignerError):
    status_code = 502
    category = "upstream"

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class RateLimitedError(UpstreamError):
    status_code = 429
    category = "rate_limited"


class QuotaExceededError(UpstreamError):
    status_code = 402
    category = "quota_exceeded"


class InvalidResponseError(AIDesignerError):
    status_code = 502
    category = "invalid_response"


class EmptyReplyError(InvalidResponseError):
    pass


class MalformedReplyError(InvalidResponseError):
    pass


class InvalidColorSchemeError(InvalidResponseError):
    def __init__(self, field: Optional[str], reason: str):
        self.field = field
        self.reason = reason
        if field:
            message = f"Invalid AI response: {reason} color for '{field}'"
        else:
            message = "Invalid AI response: expected a JSON object"
        super().__init__(message)


def build_prompt(prompt: str) -> str:
    return SYSTEM_PROMPT + "\n\nUser Request: " + prompt


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if the model added one."""
    text = text.strip()
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text


def extract_json_object(text: str) -> Any:
    """Parse the reply as JSON, falling back to the first balanced top-level {...}."""
    try:
        return json.loads(text)
    except ValueError:
        pass

    start = text.find("{")
    while start != -1:
        end = _matching_brace(text, start)
        if end is None:
            break
        try:
            return json.loads(text[start:end + 1])
        except ValueError:
            start = text.find("{", start + 1)
    raise MalformedReplyError("AI returned invalid JSON format")


def _matching_brace(text: str, start: int) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def reply_text(payload: Any) -> Optional[str]:
    """Pull the generated text out of a generateContent response."""
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list):
        return None
    text = "".join(
        p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
    )
    return text if text.strip() else None


def _is_quota_exhausted(body: str) -> bool:
    """Tell a billing quota 429 from a plain rate-limit 429.

    Gemini sends RESOURCE_EXHAUSTED for both; only the quota case says
    "exceeded your current quota" in the error message.
    """
    message = body
    try:
        error = json.loads(body).get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            message = error["message"]
    except (ValueError, AttributeError):
        pass
    return QUOTA_EXCEEDED_PHRASE in message.lower()


def parse_colors(text: str) -> Dict[str, str]:
    parsed = extract_json_object(strip_code_fence(text))
    result = validate_color_scheme(parsed)
    if not result.ok:
        logger.warning("Rejected AI color scheme: %s (%s)", result.field, result.reason)
        raise InvalidColorSchemeError(result.field, result.reason)
    return result.colors


class AIDesigner:
    """Client for the Gemini generateContent endpoint."""

    def __init__(self, api_key: Optional[str], model: str, base_url: str,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.session = session or requests.Session()

    def __repr__(self) -> str:
        return f"<AIDesigner model={self.model} has_api_key={'yes' if self.api_key else 'no'}>"

    def suggest(self, prompt: str) -> Dict[str, str]:
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured")

        url = f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": build_prompt(prompt)}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        try:
            resp = self.session.post(url, json=body, headers={"x-goog-api-key": self.api_key})
        except requests.RequestException as e:
            logger.error("Gemini request failed: %s", e)
            raise UpstreamError(f"Could not reach the AI service: {e}") from e

        if not resp.ok:
            raise self._status_error(resp)

        try:
            payload = resp.json()
        except ValueError as e:
            raise MalformedReplyError("AI service returned a non-JSON body") from e

        text = reply_text(payload)
        if text is None:
            raise EmptyReplyError("No content in AI response")
        return parse_colors(text)

    def _status_error(self, resp: requests.Response) -> UpstreamError:
        detail = resp.text
        logger.error("Gemini API error: %s %s", resp.status_code, detail[:500])
        if resp.status_code == 402 or (resp.status_code == 429 and _is_quota_exhausted(detail)):
            return QuotaExceededError("AI quota exceeded. Please try again later.", resp.status_code)
        if resp.status_code == 429:
            return RateLimitedError("Too many AI requests. Please wait a moment and try again.", resp.status_code)
        return UpstreamError(f"Gemini API returned {resp.status_code}", resp.status_code)
