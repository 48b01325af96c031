"""
Template Models

Defines schemas for website templates and template suggestions.
"""

import re
from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


TemplateStyle = Literal["modern", "classic", "minimalist", "vibrant", "professional"]

HEX_COLOR_PATTERN = re.compile(r"^#([0-9A-Fa-f]{3}){1,2}$")

_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
})


def escape_html(value: str) -> str:
    """Replace HTML-significant characters with entities."""
    return value.translate(_HTML_ESCAPES)


def clean_template_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Template name is required")
    return escape_html(value)


def check_hex_color(value: str) -> str:
    if not HEX_COLOR_PATTERN.match(value):
        raise ValueError("Please provide a valid HEX color code")
    return value


class TemplateBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TemplateCreate(TemplateBase):
    """Schema for creating a new template."""

    name: str = Field(..., description="Display name of the template")
    style: TemplateStyle = Field(..., description="Visual style")
    color: str = Field(..., description="Primary color as #RGB or #RRGGBB")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return clean_template_name(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        return check_hex_color(v)


class TemplateUpdate(TemplateBase):
    """Schema for updating a template (all fields optional)."""

    name: Optional[str] = None
    style: Optional[TemplateStyle] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return clean_template_name(v)

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return check_hex_color(v)


class TemplateResponse(TemplateBase):
    """Schema for template API response."""

    id: str
    name: str
    style: TemplateStyle
    color: str
    created_by: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, template: dict) -> "TemplateResponse":
        return cls(
            id=str(template["_id"]),
            name=template["name"],
            style=template["style"],
            color=template["color"],
            created_by=template["created_by"],
            created_at=template["created_at"],
            updated_at=template.get("updated_at", template["created_at"])
        )


class TemplateEnvelope(TemplateBase):
    message: str
    template: TemplateResponse


class TemplateListEnvelope(TemplateBase):
    message: str
    templates: list[TemplateResponse]


class SuggestionRequest(TemplateBase):
    """Schema for a template suggestion request."""

    website_type: Optional[str] = None
    industry: Optional[str] = None


class SuggestionResponse(TemplateBase):
    suggestions: str
