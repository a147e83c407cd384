"""
Company Research Service

Web-search grounded company research and talking point generation.
"""
import logging
import re
from typing import List, Optional

from .ai_service import AIService
from .exceptions import AIServiceError
from .profile_service import ProfileService
from .web_search import WebSearchClient

logger = logging.getLogger("expocrm.services.research")

RESEARCH_SCHEMA = """{
    "companyName": "Official Full Name of the Company",
    "overview": "string",
    "industry": "string",
    "competitors": ["array of competitor names"],
    "recentNews": [{"title": "string", "summary": "string", "date": "string", "source": "string", "url": "string"}],
    "keyInsights": ["array of insights"],
    "sources": ["array of source references"],
    "confidence": 0.0-1.0,
    "location": "string",
    "products_services": "string"
}"""

TALKING_POINTS_SCHEMA = '["point 1", "point 2", ...]'
TALKING_POINTS_EXAMPLE = (
    '["Discuss how their security fabric integrates with your existing SD-WAN", '
    '"Explore synergy with their recent expansion into AI cloud"]'
)
TALKING_POINTS_FALLBACK_SYSTEM = (
    "You are a business development consultant. Generate relevant talking points for a meeting. "
    "Focus on synergy and history. Return ONLY the bullet points, one per line."
)

SEARCH_CONFIDENCE = 0.9

_BULLET_RE = re.compile(r"^[-•*]\s*")
_NUMBERED_BULLET_RE = re.compile(r"^[-•*]?\d*\.\s*")
_QUOTED_RE = re.compile(r'^"(.*)"$')


def clean_talking_points(points: List[str]) -> List[str]:
    """
    Drop list artifacts from generated talking points.

    Removes fences, lone brackets, the word 'json' and strings of two
    characters or fewer; strips bullets and surrounding quotes.
    """
    cleaned = []
    for point in points:
        text = (point or "").strip()
        if not text or text in ("json", "[", "]") or text.startswith("```") or len(text) <= 2:
            continue
        text = _BULLET_RE.sub("", text)
        text = _QUOTED_RE.sub(r"\1", text)
        cleaned.append(text)
    return cleaned


def format_talking_points(points: List[str]) -> str:
    """Talking points as stored on a target: one '- point' per line"""
    return "\n".join(f"- {point}" for point in clean_talking_points(points))


def _lines_to_points(text: str) -> List[str]:
    """Split a plain completion into talking points"""
    points = []
    for line in text.split("\n"):
        line = line.strip()
        if len(line) <= 5 or line[0] in "[]{}" or line.startswith("```"):
            continue
        points.append(_NUMBERED_BULLET_RE.sub("", line).strip())
    return points


class CompanyResearchService:
    """Service for AI company research"""

    def __init__(
        self,
        ai_service: AIService,
        web_search: WebSearchClient,
        profile_service: ProfileService,
    ):
        self.ai = ai_service
        self.web_search = web_search
        self.profile_service = profile_service

    async def research_company(
        self,
        name: str,
        website: Optional[str] = None,
        industry: Optional[str] = None,
        description: Optional[str] = None,
    ) -> dict:
        """
        Research a company.

        Search findings (when web search is configured) are handed to the
        model as context; their URLs are merged into the sources and lift
        the confidence to 0.9.

        Returns:
            Research dict (companyName, overview, industry, competitors,
            recentNews, keyInsights, sources, confidence, location,
            products_services, website)

        Raises:
            AIServiceError: If the model fails or returns unusable output
        """
        logger.info(f"Starting research for: {name}")

        search_context = ""
        sources: List[str] = []
        found_website = website

        if self.web_search.enabled:
            query = (
                f'Analyze the company "{name}" {f"({website})" if website else ""}. '
                f"Find their industry, key products, location, competitors, and recent news."
            )
            found = await self.web_search.search(
                query,
                search_depth="advanced",
                max_results=5,
                include_answer=True,
                include_domains=[website] if website else None,
            )
            search_context = found.answer or "\n\n".join(r.content for r in found.results)
            sources = found.urls
            if not found_website and sources:
                found_website = sources[0]

        if search_context:
            description = f"Search Findings:\n{search_context}\n\nOriginal Description: {description or ''}"

        prompt = self.ai.prompt(
            "company_research",
            name=name,
            website=found_website or "Not provided",
            industry=industry or "Unknown",
            description=description or "Not available",
        )
        result = await self.ai.extract_structured_data(prompt, RESEARCH_SCHEMA)
        if not isinstance(result, dict):
            raise AIServiceError("Failed to research company")

        result.setdefault("companyName", name)
        for key in ("competitors", "recentNews", "keyInsights", "sources"):
            if not isinstance(result.get(key), list):
                result[key] = []
        try:
            result["confidence"] = float(result.get("confidence") or 0)
        except (TypeError, ValueError):
            result["confidence"] = 0.0

        if sources:
            result["sources"] = list(dict.fromkeys(result["sources"] + sources))
            result["confidence"] = SEARCH_CONFIDENCE
        if found_website:
            result["website"] = found_website

        logger.info(f"Research complete for: {result.get('companyName')}")
        return result

    async def generate_talking_points(
        self,
        company: dict,
        past_interactions: Optional[List[str]] = None,
        previous_notes: Optional[List[str]] = None,
    ) -> List[str]:
        """
        Generate 5-7 talking points for a company.

        Falls back to a plain completion split into lines when structured
        extraction fails.

        Raises:
            AIServiceError: If the fallback completion fails too
        """
        memory = ""
        if past_interactions:
            memory += "\n\nPast Interactions:\n" + "\n".join(past_interactions)
        if previous_notes:
            memory += "\n\nPrevious Notes:\n" + "\n".join(previous_notes)

        recent_news = company.get("recentNews") or []
        prompt = self.ai.prompt(
            "talking_points",
            company_name=company.get("name", ""),
            industry=company.get("industry") or "Unknown",
            description=company.get("description") or "Not available",
            products_services=company.get("products_services") or "Unknown",
            recent_news=", ".join(str(n) for n in recent_news) or "None",
            profile_context=await self.profile_service.get_ai_context(),
            memory=memory,
        )

        try:
            points = await self.ai.extract_structured_data(prompt, TALKING_POINTS_SCHEMA, TALKING_POINTS_EXAMPLE)
            return [str(p) for p in points] if isinstance(points, list) else []
        except AIServiceError as e:
            logger.warning(f"Structured extraction failed, falling back to basic completion: {e}")

        response = await self.ai.complete(TALKING_POINTS_FALLBACK_SYSTEM, prompt, temperature=0.7)
        return _lines_to_points(response)
