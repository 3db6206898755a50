import base64
from typing import Any, Dict, List, Optional
import httpx

from config import settings, logger
from config.constants import LLM_CONFIG
from exceptions import GenerationFailure
from models import InlineImagePart, TextPart, PromptParts


def build_gemini_parts(parts: PromptParts) -> List[Dict[str, Any]]:
    """Convert prompt parts to Gemini REST parts, keeping caller order."""
    out = []
    for part in parts:
        if isinstance(part, InlineImagePart):
            out.append({
                "inline_data": {
                    "mime_type": part.mime_type,
                    "data": base64.b64encode(part.data).decode("ascii"),
                }
            })
        elif isinstance(part, TextPart):
            out.append({"text": part.text})
        else:
            raise TypeError(f"Unsupported prompt part: {type(part).__name__}")
    return out


def extract_candidate_text(data: Any) -> str:
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content")
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        return ""
    return "".join(
        p["text"] for p in parts
        if isinstance(p, dict) and isinstance(p.get("text"), str)
    )


class GenerativeTextClient:
    """Thin async client for Gemini ``generateContent``.

    Returns the model's text verbatim, fences included. Does not retry.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: float = LLM_CONFIG.REQUEST_TIMEOUT,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.endpoint = endpoint or settings.GEMINI_ENDPOINT
        self.timeout = timeout

    async def generate(self, parts: PromptParts) -> str:
        if not self.api_key:
            logger.critical("GEMINI_API_KEY not configured.")
            raise GenerationFailure("API key not configured")

        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        body = {"contents": [{"role": "user", "parts": build_gemini_parts(parts)}]}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint, headers=headers, json=body)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Gemini HTTP error %s: %s", e.response.status_code, e.response.text)
            raise GenerationFailure(f"HTTP {e.response.status_code}", cause=e) from e
        except httpx.TimeoutException as e:
            logger.error("Gemini request timed out after %.1fs", self.timeout)
            raise GenerationFailure("Request timed out", cause=e) from e
        except httpx.RequestError as e:
            logger.error("Gemini request error: %s", str(e))
            raise GenerationFailure(f"Request failed: {str(e)}", cause=e) from e
        except ValueError as e:
            logger.error("Gemini returned a non-JSON body: %s", str(e))
            raise GenerationFailure("Response was not JSON", cause=e) from e

        try:
            text = extract_candidate_text(data)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            logger.error("Error parsing Gemini response structure: %s. Response: %s", e, data)
            raise GenerationFailure("Unexpected response shape", cause=e) from e

        if not text.strip():
            logger.error("Gemini returned no text. Response: %s", data)
            raise GenerationFailure("Empty response")
        return text
