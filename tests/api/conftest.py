import pytest
from fastapi.testclient import TestClient

from auth_server.main import create_app
from auth_server.presentation.dependencies import get_code_cache, get_password_hasher
from auth_server.settings import Settings
from tests.fakes import SECRET, FakeHasher


@pytest.fixture()
def settings() -> Settings:
    return Settings(jwt_secret=SECRET)


@pytest.fixture()
def app_and_deps(directory, delivery, cache, settings):
    app = create_app(user_directory=directory, delivery=delivery, settings=settings)

    # the code store itself is still built from app settings
    app.dependency_overrides[get_code_cache] = lambda: cache
    app.dependency_overrides[get_password_hasher] = lambda: FakeHasher()

    try:
        yield app, directory, delivery, cache
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app_and_deps):
    app, _, _, _ = app_and_deps
    return TestClient(app, raise_server_exceptions=False)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def tokens(client: TestClient) -> dict[str, str]:
    r = client.post(
        "/auth/login", json={"email": "jeremy@example.com", "password": "s3cret"}
    )
    assert r.status_code == 200, r.text
    return r.json()
