from typing import Any, Dict, List, Optional
import httpx

from config import settings, logger
from config.constants import SEARCH_CONFIG
from exceptions import InvalidQuery, SearchFailure
from models import EvidenceBundle, EvidenceItem


def to_evidence_bundle(payload: Dict[str, Any]) -> EvidenceBundle:
    """Map a Tavily response to ranked evidence, keeping provider order."""
    raw_results = payload.get("results") or []
    items: List[EvidenceItem] = []
    for position, result in enumerate(raw_results, start=1):
        if not isinstance(result, dict):
            logger.warning("Skipping non-object search result at position %d", position)
            continue
        items.append(EvidenceItem(
            rank=len(items) + 1,
            title=str(result.get("title") or ""),
            snippet=str(result.get("content") or ""),
            source_url=str(result.get("url") or ""),
        ))

    answer = payload.get("answer")
    summary = answer.strip() if isinstance(answer, str) and answer.strip() else None
    return EvidenceBundle(items=items, summary=summary)


class EvidenceSearchClient:
    """Web evidence search backed by the Tavily REST API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: float = SEARCH_CONFIG.REQUEST_TIMEOUT,
        max_results: int = SEARCH_CONFIG.MAX_RESULTS,
    ):
        self.api_key = api_key if api_key is not None else settings.TAVILY_API_KEY
        self.endpoint = endpoint or settings.TAVILY_SEARCH_ENDPOINT
        self.timeout = timeout
        self.max_results = max_results

    async def search(self, query: str, include_answer_summary: bool = True) -> EvidenceBundle:
        if not query or not query.strip():
            raise InvalidQuery(query)
        if not self.api_key:
            logger.critical("TAVILY_API_KEY not configured.")
            raise SearchFailure("API key not configured")

        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {self.api_key}"}
        body = {
            "query": query.strip(),
            "include_answer": include_answer_summary,
            "max_results": self.max_results,
            "search_depth": SEARCH_CONFIG.SEARCH_DEPTH,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.post(self.endpoint, headers=headers, json=body)
                r.raise_for_status()
                payload = r.json()
        except httpx.HTTPStatusError as e:
            logger.error("Tavily HTTP error %s: %s", e.response.status_code, e.response.text)
            raise SearchFailure(f"HTTP {e.response.status_code}", cause=e) from e
        except httpx.TimeoutException as e:
            logger.error("Tavily request timed out after %.1fs", self.timeout)
            raise SearchFailure("Request timed out", cause=e) from e
        except httpx.RequestError as e:
            logger.error("Tavily request error: %s", str(e))
            raise SearchFailure(f"Request failed: {str(e)}", cause=e) from e
        except ValueError as e:
            logger.error("Tavily returned a non-JSON body: %s", str(e))
            raise SearchFailure("Response was not JSON", cause=e) from e

        if not isinstance(payload, dict):
            raise SearchFailure(f"Unexpected response type {type(payload).__name__}")

        bundle = to_evidence_bundle(payload)
        if not include_answer_summary:
            bundle.summary = None
        logger.info("Retrieved %d evidence items (summary: %s).", len(bundle.items), bundle.summary is not None)
        return bundle
