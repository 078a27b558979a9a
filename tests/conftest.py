import json
import os

# Avant tout import de `app` : pas de Postgres pendant les tests
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["NUVEMSHOP_CLIENT_ID"] = "client-123"
os.environ["NUVEMSHOP_CLIENT_SECRET"] = "secret-456"

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.api import deps
from app.db.session import get_db
from app.main import create_app
from app.services.credential_store import StoreCredentialStore

class FakeNuvemshop:
    """
    Faux serveur Nuvemshop pour httpx.MockTransport : enregistre chaque
    requête et répond avec les réponses programmées par (méthode, chemin).
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def reply(self, method, path, status_code=200, json_body=None, text=None):
        self.routes[(method, path)] = (status_code, json_body, text)

    def calls(self, method=None):
        return [r for r in self.requests if method is None or r.method == method]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"code": 404, "message": "Not Found"})

        status_code, json_body, text = self.routes[key]
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=json_body)

    @staticmethod
    def body(request: httpx.Request):
        return json.loads(request.content)

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()

@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session

@pytest.fixture
def stores(db):
    return StoreCredentialStore(db)

@pytest.fixture
def nuvemshop():
    return FakeNuvemshop()

@pytest.fixture
def http_client(nuvemshop):
    with httpx.Client(transport=httpx.MockTransport(nuvemshop)) as client:
        yield client

@pytest.fixture
def store(stores):
    return stores.upsert("42", access_token="tok-42")

def _make_client(engine, http_client, description_source):
    app = create_app(description_source)

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_http_client] = lambda: http_client
    return TestClient(app)

@pytest.fixture
def local_api(engine, http_client):
    return _make_client(engine, http_client, "local")

@pytest.fixture
def platform_api(engine, http_client):
    return _make_client(engine, http_client, "platform")
