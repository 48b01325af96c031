import httpx
import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from app import create_app
from config.database import Database, USERS_COLLECTION, TEMPLATES_COLLECTION
from config.settings import Settings
from services.auth_service import UserStore
from services.template_service import TemplateStore
from services.token_service import TokenService

TEST_SECRET = "test-secret-key"
TEST_PASSWORD = "password123"


class StubTextGenerator:
    """Records prompts and returns canned text, or raises the configured error."""

    def __init__(self, text: str = "1. Storefront Pro - a clean shop layout", error: Exception = None):
        self.text = text
        self.error = error
        self.prompts = []
        self.closed = False

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=4,
        DATABASE_NAME="test_db",
        DEBUG=False,
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """In-memory database with the same indexes startup creates."""
    db = Database(test_settings.MONGODB_URL, test_settings.DATABASE_NAME, client=AsyncMongoMockClient())
    await UserStore(db.get_collection(USERS_COLLECTION)).create_indexes()
    await TemplateStore(db.get_collection(TEMPLATES_COLLECTION)).create_indexes()
    yield db


@pytest.fixture
def token_service():
    return TokenService(TEST_SECRET)


@pytest.fixture
def generator():
    return StubTextGenerator()


@pytest.fixture
def app(test_settings, database, token_service, generator):
    return create_app(
        settings=test_settings,
        database=database,
        token_service=token_service,
        text_generator=generator,
    )


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def register_user(client):
    """Register a user through the API and return the response body."""

    async def _register(email: str, password: str = TEST_PASSWORD, **extra) -> dict:
        response = await client.post(
            "/api/auth/register",
            json={"email": email, "password": password, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
