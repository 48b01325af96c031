"""Authentication router for registration, login, and account settings."""

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from api.dependencies import get_current_user_id, get_token_service, get_user_store
from api.errors import NotFoundError, ValidationError
from config.logging_utils import log_debug, log_success
from models.preferences import PreferencesUpdate, WebsitePreferences
from models.user import (
    AuthResponse,
    DescriptionResponse,
    DescriptionUpdate,
    PasswordChange,
    PreferencesResponse,
    Token,
    UserCreate,
    UserLogin,
    UserResponse,
    UserSummary,
)
from services.auth_service import CredentialValidationError, DuplicateEmailError, UserStore
from services.token_service import TokenService


router = APIRouter(prefix="/api/auth", tags=["Authentication"])

INVALID_CREDENTIALS = "Invalid Credentials"


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    users: UserStore = Depends(get_user_store),
    token_service: TokenService = Depends(get_token_service)
):
    """Register a new user account and return it with an access token."""
    try:
        user = await users.create(user_data.email, user_data.password, user_data.website_preferences)
    except DuplicateEmailError:
        raise ValidationError("User already exists", [{"field": "email", "msg": "User already exists"}])
    except CredentialValidationError as e:
        raise ValidationError(str(e))

    log_success(f"Registered user id={user['_id']}", prefix="AUTH")
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.from_document(user),
        token=token_service.issue(str(user["_id"]))
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    user_data: UserLogin,
    users: UserStore = Depends(get_user_store),
    token_service: TokenService = Depends(get_token_service)
):
    """Authenticate user and return JWT token."""
    user = await users.authenticate(user_data.email, user_data.password)
    if not user:
        log_debug("Login rejected", prefix="AUTH")
        raise ValidationError(INVALID_CREDENTIALS)

    return AuthResponse(
        message="Login successful",
        user=UserResponse.from_document(user),
        token=token_service.issue(str(user["_id"]))
    )


@router.post("/login/form", response_model=Token)
async def login_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    users: UserStore = Depends(get_user_store),
    token_service: TokenService = Depends(get_token_service)
):
    """Authenticate user via OAuth2 form and return JWT token (for Swagger UI)."""
    user = await users.authenticate(form_data.username, form_data.password)
    if not user:
        raise ValidationError(INVALID_CREDENTIALS)

    return Token(access_token=token_service.issue(str(user["_id"])))


@router.get("/user", response_model=UserSummary)
async def get_user_details(
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store)
):
    """Get the current user's email, preferences and description."""
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User")

    return UserSummary(
        email=user["email"],
        website_preferences=WebsitePreferences(**user.get("website_preferences") or {}),
        description=user.get("description")
    )


@router.put("/user/preferences", response_model=PreferencesResponse)
async def update_preferences(
    update: PreferencesUpdate,
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store)
):
    """Update any subset of theme, layout and color scheme."""
    fields = update.model_dump(exclude_none=True)
    if not fields:
        raise ValidationError("At least one preference field is required")

    user = await users.update_preferences(user_id, fields)
    if user is None:
        raise NotFoundError("User")

    return PreferencesResponse(
        message="Preferences updated successfully",
        website_preferences=WebsitePreferences(**user["website_preferences"])
    )


@router.put("/user/description", response_model=DescriptionResponse)
async def update_description(
    update: DescriptionUpdate,
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store)
):
    """Replace the free-text profile description."""
    user = await users.update_description(user_id, update.description)
    if user is None:
        raise NotFoundError("User")

    return DescriptionResponse(
        message="Description updated successfully",
        description=user["description"]
    )


@router.put("/user/change-password")
async def change_password(
    change: PasswordChange,
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store)
):
    """Change the password after checking the current one."""
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User")

    if not users.verify_password(user, change.current_password):
        raise ValidationError(
            "Current password is incorrect",
            [{"field": "currentPassword", "msg": "Current password is incorrect"}]
        )

    try:
        updated = await users.change_password(user_id, change.new_password)
    except CredentialValidationError as e:
        raise ValidationError(str(e), [{"field": "newPassword", "msg": str(e)}])
    if not updated:
        raise NotFoundError("User")

    log_success(f"Password changed for user_id={user_id}", prefix="AUTH")
    return {"message": "Password updated successfully"}
