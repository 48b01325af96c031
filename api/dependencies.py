"""API dependencies for authentication and access to the injected application components."""

import logging
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from typing import Optional

from api.errors import AuthError
from config.database import (
    Database,
    USERS_COLLECTION,
    TEMPLATES_COLLECTION,
    SUBSCRIPTIONS_COLLECTION,
    REVENUES_COLLECTION,
)
from config.logging_utils import log_debug
from config.settings import Settings
from services.auth_service import UserStore
from services.dashboard_service import DashboardService
from services.generation_service import TextGenerator
from services.template_service import TemplateStore
from services.token_service import TokenError, TokenService

logger = logging.getLogger(__name__)


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login/form", auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Dependency to get database instance."""
    return request.app.state.database


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_text_generator(request: Request) -> TextGenerator:
    return request.app.state.text_generator


def get_user_store(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_settings)
) -> UserStore:
    return UserStore(database.get_collection(USERS_COLLECTION), settings.BCRYPT_ROUNDS)


def get_template_store(database: Database = Depends(get_database)) -> TemplateStore:
    return TemplateStore(database.get_collection(TEMPLATES_COLLECTION))


def get_dashboard_service(database: Database = Depends(get_database)) -> DashboardService:
    return DashboardService(
        users=database.get_collection(USERS_COLLECTION),
        templates=database.get_collection(TEMPLATES_COLLECTION),
        subscriptions=database.get_collection(SUBSCRIPTIONS_COLLECTION),
        revenues=database.get_collection(REVENUES_COLLECTION),
    )


async def get_current_user_id(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    token_service: TokenService = Depends(get_token_service)
) -> str:
    """
    Resolve the authenticated user id from the Authorization bearer token.

    Only the id is attached to the request; profile data is always loaded from
    the store by the handler that needs it.
    """
    if not token:
        log_debug(f"Missing bearer token on {request.url.path}", prefix="AUTH")
        raise AuthError()

    try:
        user_id = token_service.verify(token)
    except TokenError as e:
        logger.info("Rejected token on %s: %s (%s)", request.url.path, e.kind, e)
        raise AuthError()

    request.state.user_id = user_id
    return user_id
