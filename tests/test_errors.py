import httpx
import pytest_asyncio
from bson import ObjectId
from pymongo.errors import PyMongoError

from conftest import auth_headers
from services.template_service import TemplateStore

SERVER_ERROR = {"message": "Server Error", "errors": [{"msg": "Server Error"}]}


@pytest_asyncio.fixture
async def unguarded_client(app):
    """Client that returns the 500 response instead of re-raising the app's exception."""
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest_asyncio.fixture
async def headers(token_service):
    return auth_headers(token_service.issue(str(ObjectId())))


async def test_unexpected_exception_renders_server_error(unguarded_client, headers, generator):
    generator.error = RuntimeError("boom at 10.0.0.5")

    response = await unguarded_client.post(
        "/api/templates/suggestions",
        json={"websiteType": "blog", "industry": "travel"},
        headers=headers,
    )

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == SERVER_ERROR
    assert "10.0.0.5" not in response.text


async def test_store_failure_renders_server_error(client, headers, monkeypatch):
    async def failing_list(self, owner_id):
        raise PyMongoError("connection reset by 10.0.0.7:27017")

    monkeypatch.setattr(TemplateStore, "list_for_owner", failing_list)

    response = await client.get("/api/templates", headers=headers)

    assert response.status_code == 500
    assert response.json() == SERVER_ERROR
    assert "27017" not in response.text


async def test_unknown_route_uses_error_body(client):
    response = await client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found", "errors": [{"msg": "Not Found"}]}


async def test_wrong_method_uses_error_body(client):
    response = await client.delete("/health")

    assert response.status_code == 405
    assert response.json()["message"] == "Method Not Allowed"
    assert response.json()["errors"] == [{"msg": "Method Not Allowed"}]
