"""
Web Search Client

Tavily search API over httpx. Optional: without an API key every search
returns an empty result and callers fall back to model knowledge.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from ..config import Config

logger = logging.getLogger("expocrm.services.web_search")


@dataclass
class SearchResult:
    title: str
    url: str
    content: str


@dataclass
class SearchResponse:
    answer: Optional[str] = None
    results: List[SearchResult] = field(default_factory=list)

    @property
    def urls(self) -> List[str]:
        return [r.url for r in self.results if r.url]

    def as_context(self) -> str:
        """Results rendered as 'title: content (url)' paragraphs"""
        return "\n\n".join(f"{r.title}: {r.content} ({r.url})" for r in self.results)


class WebSearchClient:
    """Client for the Tavily search endpoint"""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: float = 30.0):
        self.api_key = api_key if api_key is not None else Config.TAVILY_API_KEY
        self.base_url = (base_url or Config.TAVILY_BASE_URL).rstrip("/")
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=10.0))

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def search(
        self,
        query: str,
        search_depth: str = "basic",
        max_results: int = 3,
        include_answer: bool = False,
        include_domains: Optional[List[str]] = None,
    ) -> SearchResponse:
        """
        Run a search. Failures are logged and yield an empty response.
        """
        if not self.enabled:
            logger.warning("TAVILY_API_KEY is missing, skipping web search")
            return SearchResponse()

        payload = {
            "api_key": self.api_key,
            "query": query,
            "search_depth": search_depth,
            "max_results": max_results,
            "include_answer": include_answer,
        }
        if include_domains:
            payload["include_domains"] = include_domains

        try:
            response = await self.client.post(f"{self.base_url}/search", json=payload)
            if response.status_code != 200:
                logger.error(f"Tavily search failed: {response.status_code} - {response.text[:200]}")
                return SearchResponse()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Web search error: {e}")
            return SearchResponse()

        return SearchResponse(
            answer=data.get("answer") or None,
            results=[
                SearchResult(
                    title=item.get("title", ""),
                    url=item.get("url", ""),
                    content=item.get("content", ""),
                )
                for item in data.get("results", [])
            ],
        )

    async def close(self):
        """Close HTTP client"""
        await self.client.aclose()
