"""
Enrichment Service

Fills in public information about a contact and their company: website,
company profile, LinkedIn URL and a short bio, each with its own
confidence score.
"""
import asyncio
import logging
import re
from typing import List, Optional
from uuid import UUID

from ..models.common import utcnow
from ..models.enrichment import EnrichmentJob, EnrichmentType
from ..storage.contact_storage import ContactStorage
from ..storage.enrichment_storage import EnrichmentStorage
from .ai_service import AIService
from .exceptions import AIServiceError, NotFoundError
from .web_search import WebSearchClient

logger = logging.getLogger("expocrm.services.enrichment")

FREE_MAIL_DOMAINS = {"gmail.com", "yahoo.com", "outlook.com", "hotmail.com", "icloud.com"}

LINKEDIN_RE = re.compile(r"https?://(?:www\.)?linkedin\.com/in/[\w%-]+", re.IGNORECASE)

COMPANY_SCHEMA = """{
    "industry": "string",
    "description": "string",
    "location": "string",
    "region": "string",
    "products_services": "string",
    "company_size": "string"
}"""

# (with search context, without)
COMPANY_FIELD_CONFIDENCE = {
    "industry": (0.9, 0.7),
    "description": (0.9, 0.7),
    "location": (0.85, 0.6),
    "region": (0.85, 0.6),
    "products_services": (0.9, 0.7),
    "company_size": (0.7, 0.5),
}

MIN_CONTEXT_LENGTH = 50
MIN_BIO_LENGTH = 20


def email_domain(email: Optional[str]) -> Optional[str]:
    if not email or "@" not in email:
        return None
    return email.split("@", 1)[1].strip().lower() or None


def is_corporate_domain(domain: Optional[str]) -> bool:
    return bool(domain) and domain.lower() not in FREE_MAIL_DOMAINS


def extract_linkedin_url(text: Optional[str]) -> Optional[str]:
    """First personal profile URL (linkedin.com/in/...) in text"""
    match = LINKEDIN_RE.search(text or "")
    return match.group(0) if match else None


def says_null(response: Optional[str]) -> bool:
    return not response or "null" in response.lower()


def overall_confidence(confidence: dict) -> Optional[float]:
    """Mean of the per-field confidences"""
    if not confidence:
        return None
    return round(sum(confidence.values()) / len(confidence), 2)


def normalize_contact_data(data: dict) -> dict:
    """Accept both snake_case and camelCase job titles"""
    return {
        "name": (data.get("name") or "").strip(),
        "company": data.get("company") or None,
        "email": data.get("email") or None,
        "job_title": data.get("job_title") or data.get("jobTitle") or None,
    }


class EnrichmentService:
    """Service for AI contact enrichment"""

    def __init__(
        self,
        ai_service: AIService,
        web_search: WebSearchClient,
        contact_storage: ContactStorage,
        enrichment_storage: EnrichmentStorage,
    ):
        self.ai = ai_service
        self.web_search = web_search
        self.contact_storage = contact_storage
        self.enrichment_storage = enrichment_storage

    async def _search(self, query: str) -> str:
        found = await self.web_search.search(query, search_depth="basic", max_results=3)
        return found.as_context()

    # ============================================
    # Field finders
    # ============================================

    async def find_company_website(self, company: str, domain: Optional[str], search_context: str = "") -> Optional[dict]:
        """
        Official website.

        A corporate email domain is trusted (0.95); otherwise the model
        picks one from the search results.
        """
        if is_corporate_domain(domain):
            return {"url": f"https://{domain}", "confidence": 0.95}

        try:
            response = await self.ai.complete(
                'You are a corporate data expert. Return only URLs or "null".',
                self.ai.prompt("company_website", company=company, search_context=search_context),
                temperature=0.1,
            )
        except AIServiceError as e:
            logger.error(f"Website finder error: {e}")
            return None
        if says_null(response):
            return None

        url = response.strip().lower()
        return {
            "url": url if url.startswith("http") else f"https://{url}",
            "confidence": 0.9 if search_context else 0.6,
        }

    async def enrich_company_info(self, company: str, domain: Optional[str], search_context: str = "") -> dict:
        """Industry, description, location, region, products and size"""
        prompt = self.ai.prompt(
            "company_enrichment",
            company=company,
            domain_hint=f' linked to domain "{domain}"' if domain else "",
            search_context=search_context,
        )
        try:
            info = await self.ai.extract_structured_data(prompt, COMPANY_SCHEMA)
        except AIServiceError as e:
            logger.error(f"Company info enrichment error: {e}")
            return {}
        if not isinstance(info, dict):
            return {}

        result = {key: info.get(key) for key in COMPANY_FIELD_CONFIDENCE}
        result["confidence"] = {
            key: with_search if search_context else without
            for key, (with_search, without) in COMPANY_FIELD_CONFIDENCE.items()
        }
        return result

    async def _linkedin_from(self, text: str, name: str, company: str, job_title: Optional[str]) -> Optional[str]:
        if not text or len(text) < MIN_CONTEXT_LENGTH:
            return None
        prompt = self.ai.prompt(
            "linkedin_lookup",
            name=name,
            company=company,
            title_hint=f' as "{job_title}"' if job_title else "",
            search_context=text,
        )
        response = await self.ai.complete(
            'You are an expert researcher. Return only the requested URL or "null".',
            prompt,
            temperature=0.1,
        )
        if says_null(response):
            return None
        return extract_linkedin_url(response)

    async def find_linkedin_profile(
        self,
        name: str,
        company: str,
        job_title: Optional[str] = None,
        search_context: str = "",
    ) -> Optional[dict]:
        """
        Personal LinkedIn profile.

        Tries the shared search context, then a site-restricted search,
        then a looser one. Only linkedin.com/in/ URLs are accepted.
        """
        try:
            url = await self._linkedin_from(search_context, name, company, job_title)
            if not url:
                logger.info("LinkedIn not found in general context, trying specific search")
                specific = await self._search(f'site:linkedin.com/in/ "{name}" "{company}"')
                url = await self._linkedin_from(specific, name, company, job_title)
            if not url:
                loose = await self._search(f"{name} {company} linkedin profile")
                url = await self._linkedin_from(loose, name, company, job_title)
        except AIServiceError as e:
            logger.error(f"LinkedIn finder error: {e}")
            return None

        return {"url": url, "confidence": 0.9} if url else None

    async def enrich_person_info(
        self,
        name: str,
        company: str,
        job_title: Optional[str] = None,
        search_context: str = "",
    ) -> Optional[dict]:
        """2-3 sentence professional bio"""
        prompt = self.ai.prompt(
            "person_bio",
            name=name,
            company=company,
            title_hint=f' as "{job_title}"' if job_title else "",
            search_context=search_context,
        )
        try:
            response = await self.ai.complete(
                'You are a professional biographer. Return a text summary or "null".',
                prompt,
                temperature=0.1,
            )
        except AIServiceError as e:
            logger.error(f"Person info error: {e}")
            return None
        if says_null(response) or len(response) < MIN_BIO_LENGTH:
            return None
        return {"bio": response.strip(), "confidence": 0.8 if search_context else 0.4}

    # ============================================
    # Enrichment
    # ============================================

    async def enrich_contact_data(self, contact_data: dict) -> dict:
        """
        Enrich raw contact data (name, company, email, job_title).

        Returns:
            Suggested fields plus 'confidence' (per field) and 'sources'
        """
        data = normalize_contact_data(contact_data)
        name, company, job_title = data["name"], data["company"], data["job_title"]
        domain = email_domain(data["email"])

        company_search = await self._search(f"{company} company official website and overview") if company else ""
        person_search = ""
        if name and company:
            person_search = await self._search(f"{name} {company} {job_title or ''} linkedin professional bio")

        async def nothing():
            return None

        website, company_info, linkedin, person = await asyncio.gather(
            self.find_company_website(company or "", domain, company_search) if domain else nothing(),
            self.enrich_company_info(company, domain, company_search) if company else nothing(),
            self.find_linkedin_profile(name, company, job_title, person_search) if name and company else nothing(),
            self.enrich_person_info(name, company or "", job_title, person_search) if name else nothing(),
        )

        result = {"confidence": {}, "sources": []}

        if website:
            result["website"] = website["url"]
            result["confidence"]["website"] = website["confidence"]
            result["sources"].append("AI Website Search")

        if company_info:
            result["confidence"].update(company_info.pop("confidence", {}))
            result.update(company_info)
            result["sources"].append("AI Company Research")

        if linkedin:
            result["linkedin_url"] = linkedin["url"]
            result["confidence"]["linkedin_url"] = linkedin["confidence"]
        elif name and company:
            result["linkedin_url"] = None
            result["confidence"]["linkedin_url"] = 0

        if person:
            result["bio"] = person["bio"]
            result["confidence"]["bio"] = person["confidence"]
            result["sources"].append("AI Profile Research")

        return result

    async def enrich_contact(self, contact_id: UUID) -> dict:
        """
        Enrich a stored contact and save the result as suggestions.

        Raises:
            NotFoundError: If the contact does not exist
        """
        contact = await self.contact_storage.get_by_id(contact_id)
        if not contact:
            raise NotFoundError("Contact", contact_id)

        result = await self.enrich_contact_data({
            "name": contact.full_name,
            "company": contact.company.name if contact.company else None,
            "email": contact.email,
            "job_title": contact.job_title,
        })

        await self.contact_storage.update(contact_id, {
            "enrichment_status": "completed",
            "enrichment_suggestions": result,
            "enrichment_confidence": overall_confidence(result["confidence"]),
            "last_enriched_at": utcnow(),
        })
        await self.enrichment_storage.create(EnrichmentJob(
            contact_id=contact_id,
            company_id=contact.company_id,
            status="completed",
            enrichment_type=EnrichmentType.FULL.value,
            result=result,
        ))
        logger.info(f"Enriched contact {contact.full_name}")
        return result

    async def enrich_batch(self, contacts: List[dict]) -> List[dict]:
        """Enrich several raw contacts one after another"""
        results = []
        for contact in contacts:
            results.append({"original": contact, "enrichment": await self.enrich_contact_data(contact)})
        return results
