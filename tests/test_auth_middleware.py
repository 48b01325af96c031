from datetime import timedelta

import pytest

from conftest import auth_headers
from config.database import TEMPLATES_COLLECTION
from services.token_service import TokenService

PROTECTED_ROUTES = [
    ("GET", "/api/auth/user"),
    ("PUT", "/api/auth/user/preferences"),
    ("PUT", "/api/auth/user/description"),
    ("PUT", "/api/auth/user/change-password"),
    ("GET", "/api/profile"),
    ("GET", "/api/dashboard"),
    ("GET", "/api/dashboard/metrics"),
    ("GET", "/api/dashboard/subscriptions"),
    ("GET", "/api/dashboard/revenue"),
    ("GET", "/api/dashboard/revenue-source"),
    ("GET", "/api/templates"),
    ("POST", "/api/templates"),
    ("GET", "/api/templates/64b7f0c2a1b2c3d4e5f60718"),
    ("PUT", "/api/templates/64b7f0c2a1b2c3d4e5f60718"),
    ("DELETE", "/api/templates/64b7f0c2a1b2c3d4e5f60718"),
    ("POST", "/api/templates/suggestions"),
]


@pytest.mark.parametrize("method,path", PROTECTED_ROUTES)
async def test_missing_authorization_header(client, method, path):
    response = await client.request(method, path)

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["message"] == "Could not validate credentials"


@pytest.mark.parametrize(
    "header",
    [
        "Token abc.def.ghi",
        "Bearer",
        "Bearer ",
        "Basic dXNlcjpwYXNz",
        "Bearer not-a-jwt",
    ],
)
async def test_malformed_authorization_header(client, header):
    response = await client.get("/api/profile", headers={"Authorization": header})

    assert response.status_code == 401


async def test_token_from_another_secret(client, register_user):
    registered = await register_user("forged@sitebuilder.io")
    forged = TokenService("some-other-secret").issue(registered["user"]["id"])

    response = await client.get("/api/profile", headers=auth_headers(forged))

    assert response.status_code == 401


async def test_rejection_bodies_do_not_reveal_the_cause(client, register_user, token_service):
    registered = await register_user("uniform@sitebuilder.io")
    user_id = registered["user"]["id"]
    tokens = [
        token_service.issue(user_id, expires_delta=timedelta(0)),
        TokenService("some-other-secret").issue(user_id),
        "garbage",
    ]

    bodies = []
    for token in tokens:
        response = await client.get("/api/profile", headers=auth_headers(token))
        assert response.status_code == 401
        bodies.append(response.json())

    assert bodies[0] == bodies[1] == bodies[2]


async def test_unauthenticated_request_never_reaches_handler(client, generator, database):
    suggestion = await client.post(
        "/api/templates/suggestions",
        json={"websiteType": "portfolio", "industry": "photography"},
    )
    creation = await client.post(
        "/api/templates",
        json={"name": "Sneaky", "style": "modern", "color": "#FFF"},
    )

    assert suggestion.status_code == 401
    assert creation.status_code == 401
    assert generator.prompts == []
    assert await database.get_collection(TEMPLATES_COLLECTION).count_documents({}) == 0


async def test_auth_runs_before_body_validation(client):
    response = await client.post("/api/templates", json={"style": "funky"})

    assert response.status_code == 401
