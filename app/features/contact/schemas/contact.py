import re
from datetime import datetime
from typing import Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# Bare domain names such as kerit.com.ru are accepted without a scheme.
DOMAIN_RE = re.compile(
    r"^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
WEBSITE_ERROR = "Please enter a valid website URL (e.g., example.com or https://example.com)"


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    email: EmailStr
    website: str = Field(..., min_length=1, max_length=2048)
    phone: str = Field(..., min_length=7, max_length=32)

    @field_validator("website")
    @classmethod
    def validate_website(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Website URL is required")

        if trimmed.startswith(("http://", "https://")):
            try:
                parsed = urlsplit(trimmed)
                parsed.port
            except ValueError:
                raise ValueError(WEBSITE_ERROR)
            if not parsed.hostname:
                raise ValueError(WEBSITE_ERROR)
            return trimmed

        if not DOMAIN_RE.match(trimmed):
            raise ValueError(WEBSITE_ERROR)
        return trimmed

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str) -> str:
        """Country code plus number: digits, spaces, +, -, parentheses only."""
        cleaned = value.strip()

        if not re.match(r"^[\d\s\+\-\(\)]+$", cleaned):
            raise ValueError("Phone number can only contain digits, spaces, +, -, and parentheses")

        digits_only = re.sub(r"[^\d]", "", cleaned)
        if len(digits_only) < 7:
            raise ValueError("Phone number must contain at least 7 digits")
        if len(digits_only) > 15:
            raise ValueError("Phone number cannot exceed 15 digits")

        return cleaned


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    title: Optional[str] = None
    email: EmailStr
    website: str
    phone: str
    created_at: datetime
