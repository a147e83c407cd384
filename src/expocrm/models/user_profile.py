"""
User Profile Model

Who the user is and what they sell. Rendered into the context string given
to every AI generator.
"""
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso


@dataclass
class UserProfile:
    id: UUID = field(default_factory=uuid4)
    profile_type: str = "individual"                   # company | individual | employee
    name: str = ""
    tagline: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    products_services: Optional[str] = None
    value_proposition: Optional[str] = None
    target_audience: Optional[str] = None
    key_differentiators: Optional[str] = None
    company_size: Optional[str] = None
    founded_year: Optional[int] = None
    employee_role: Optional[str] = None
    employee_department: Optional[str] = None
    representing_company: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    additional_context: Optional[str] = None
    ai_tone: Optional[str] = "professional"            # professional | casual | formal | friendly
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # Columns written by upsert (everything but identity and timestamps)
    @classmethod
    def editable_fields(cls) -> list:
        return [f.name for f in fields(cls) if f.name not in ("id", "created_at", "updated_at")]

    def to_context(self) -> str:
        """
        Render the profile as an AI context sentence.

        Parts are joined with '. '; paragraph-style parts start with a newline.
        """
        parts = []
        if self.profile_type == "company":
            parts.append(f"I represent {self.name}")
        elif self.profile_type == "employee":
            parts.append(f"I am {self.name} from {self.representing_company or self.name}")
            if self.employee_role:
                parts.append(f"working as {self.employee_role}")
        else:
            parts.append(f"I am {self.name}")

        if self.industry:
            parts.append(f"in the {self.industry} industry")
        if self.location:
            parts.append(f"based in {self.location}")
        if self.value_proposition:
            parts.append(f"\nOur value proposition: {self.value_proposition}")
        if self.products_services:
            parts.append(f"\nWe offer: {self.products_services}")
        if self.target_audience:
            parts.append(f"\nOur target audience: {self.target_audience}")
        if self.key_differentiators:
            parts.append(f"\nWhat sets us apart: {self.key_differentiators}")
        if self.additional_context:
            parts.append(f"\nAdditional context: {self.additional_context}")

        return ". ".join(parts)

    def to_dict(self) -> dict:
        data = {name: getattr(self, name) for name in self.editable_fields()}
        data["id"] = str(self.id)
        data["created_at"] = iso(self.created_at)
        data["updated_at"] = iso(self.updated_at)
        return data
