"""
Website Preferences Models

Defines schemas for the per-user website builder preferences.
"""

from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Theme = Literal["light", "dark", "custom"]
Layout = Literal["single-column", "multi-column"]


class WebsitePreferences(BaseModel):
    """Schema for a user's website preferences."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    theme: Theme = Field(default="light", description="Color theme of the generated site")
    layout: Layout = Field(default="single-column", description="Page layout")
    color_scheme: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Free-form color scheme name (e.g., 'Blue')"
    )


class PreferencesUpdate(BaseModel):
    """Schema for updating preferences (all fields optional)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    theme: Optional[Theme] = None
    layout: Optional[Layout] = None
    color_scheme: Optional[str] = Field(default=None, max_length=50)
