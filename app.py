"""Main FastAPI application entry point for the AI Website Builder backend."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.errors import install_error_handlers
from api.routers.auth import router as auth_router
from api.routers.dashboard import router as dashboard_router
from api.routers.profile import router as profile_router
from api.routers.templates import router as templates_router
from config.database import Database, USERS_COLLECTION, TEMPLATES_COLLECTION
from config.logging_utils import log_success
from config.settings import Settings, settings as default_settings
from services.auth_service import UserStore
from services.generation_service import TextGenerator, create_text_generator
from services.template_service import TemplateStore
from services.token_service import TokenService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle startup and shutdown events.

    A missing signing secret or an unreachable store raises here, which aborts
    startup.
    """
    state = app.state
    if state.token_service is None:
        state.token_service = TokenService.from_settings(state.settings)

    await state.database.connect()
    log_success(f"Connected to MongoDB: {state.settings.DATABASE_NAME}", prefix="STARTUP")
    await UserStore(state.database.get_collection(USERS_COLLECTION)).create_indexes()
    await TemplateStore(state.database.get_collection(TEMPLATES_COLLECTION)).create_indexes()
    log_success("Database indexes created", prefix="STARTUP")

    # No HTTP client is opened until the store has answered.
    if state.text_generator is None:
        state.text_generator = create_text_generator(state.settings)
    yield
    await state.text_generator.close()
    await state.database.disconnect()
    log_success("Disconnected from MongoDB", prefix="STARTUP")


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    token_service: Optional[TokenService] = None,
    text_generator: Optional[TextGenerator] = None
) -> FastAPI:
    """
    Build the application with explicitly supplied components.

    Components that are not supplied are created from settings during startup.
    """
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Backend for the AI website builder: accounts, templates and dashboard metrics",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.database = database or Database(settings.MONGODB_URL, settings.DATABASE_NAME)
    app.state.token_service = token_service
    app.state.text_generator = text_generator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    install_error_handlers(app)

    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(dashboard_router)
    app.include_router(templates_router)

    @app.get("/")
    async def root():
        """Service banner."""
        return {"message": "AI Builder Server is running!"}

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint for monitoring."""
        db_healthy = await request.app.state.database.health_check()
        return {
            "status": "healthy" if db_healthy else "unhealthy",
            "database": "connected" if db_healthy else "disconnected"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG
    )
