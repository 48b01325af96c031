"""User models for authentication and database storage."""

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from models.preferences import WebsitePreferences


MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72


def check_password(password: str) -> str:
    """Enforce the password length policy shared by registration and password change."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
    return password


class CamelModel(BaseModel):
    """Base schema that speaks camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreate(CamelModel):
    """Schema for user registration."""
    email: EmailStr
    password: str
    website_preferences: Optional[WebsitePreferences] = Field(
        default=None,
        validation_alias=AliasChoices("websitePreferences", "preferences", "website_preferences")
    )

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password(v)


class UserLogin(CamelModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class DescriptionUpdate(CamelModel):
    """Schema for updating the free-text profile description."""
    description: str = Field(..., max_length=1000)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        return v.strip()


class PasswordChange(CamelModel):
    """Schema for changing the account password."""
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v: str) -> str:
        return check_password(v)


class UserResponse(CamelModel):
    """Schema for user response (without sensitive data)."""
    id: str
    email: str
    website_preferences: WebsitePreferences
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, user: dict) -> "UserResponse":
        """Build a response from a stored user document, dropping the password hash."""
        return cls(
            id=str(user["_id"]),
            email=user["email"],
            website_preferences=WebsitePreferences(**user.get("website_preferences") or {}),
            description=user.get("description"),
            created_at=user["created_at"],
            updated_at=user.get("updated_at", user["created_at"])
        )


class UserSummary(CamelModel):
    """Schema for the compact user details view."""
    email: str
    website_preferences: WebsitePreferences
    description: Optional[str] = None


class AuthResponse(CamelModel):
    """Schema for register and login responses."""
    message: str
    user: UserResponse
    token: str


class ProfileResponse(CamelModel):
    """Schema for the profile endpoint."""
    user: UserResponse


class PreferencesResponse(CamelModel):
    """Schema for the preferences update response."""
    message: str
    website_preferences: WebsitePreferences


class DescriptionResponse(CamelModel):
    """Schema for the description update response."""
    message: str
    description: str


class Token(BaseModel):
    """Schema for JWT token response."""
    access_token: str
    token_type: str = "bearer"
