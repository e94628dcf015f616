import json
import os

os.environ.setdefault("TRUSTED_PROXIES", "10.0.0.0/8\n192.168.100.0/24\nnot-a-cidr\n2001:db8::/32")
os.environ.setdefault("PEER_IP_HEADER_NAME", "X-Client-IP")
os.environ.setdefault("PROXY_MODE", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gatekeeper.database import Base, get_db
from gatekeeper.main import app
from gatekeeper.utils.codec import base64_url_no_pad_encode

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Override dependency for test database session
def override_get_db() -> Session:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest_asyncio.fixture
async def make_client():
    """Factory for clients connecting from a chosen peer address."""
    clients = []

    def _make(peer: str = "203.0.113.7") -> httpx.AsyncClient:
        transport = httpx.ASGITransport(app=app, client=(peer, 40000))
        client = httpx.AsyncClient(transport=transport, base_url="http://testserver")
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.aclose()


@pytest_asyncio.fixture
async def client(make_client):
    async with make_client() as c:
        yield c


@pytest.fixture
def make_token():
    """Build header.body.signature tokens around arbitrary claims, unsigned."""

    def _make(claims, header: str = "eyJhbGciOiJIUzI1NiJ9", signature: str = "c2ln") -> str:
        body = base64_url_no_pad_encode(json.dumps(claims).encode("utf-8"))
        return f"{header}.{body}.{signature}"

    return _make
