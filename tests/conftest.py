"""
Test fixtures for cardex tests.

Provides an in-memory store, an executor bound to it, sample catalog data
and an HTTP client wired to the same store.
"""

import os

# Settings are read on import; fix the token key and keep logs plain
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production-0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from typing import Generator, List
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from cardex.core import security
from cardex.db import QueryExecutor, get_executor
from cardex.main import app
from cardex.models.card import Card
from cardex.models.user import User
from cardex.services.authenticator import Authenticator


TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Generator[Session, None, None]:
    """Provide a test database session."""
    with Session(test_engine) as session:
        yield session


@pytest.fixture
def executor(test_engine) -> QueryExecutor:
    return QueryExecutor(test_engine)


@pytest.fixture
def authenticator(executor: QueryExecutor) -> Authenticator:
    return Authenticator(executor)


@pytest.fixture
def client(executor: QueryExecutor) -> Generator[TestClient, None, None]:
    """HTTP client whose routes run against the in-memory store."""
    app.dependency_overrides[get_executor] = lambda: executor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============================================
# Catalog Fixtures
# ============================================

@pytest.fixture
def sample_cards(test_session: Session) -> List[Card]:
    """
    A small catalog covering every type family.

    Names containing "dragon" (any case): ids 1, 2, 5, 7, 8
    Monsters (neither spell nor trap): ids 1, 3, 5, 8
    Spell Cards: ids 2, 6, 7
    """
    cards = [
        Card(id=1, name="Blue-Eyes White Dragon", type="Normal Monster", set_rarity="Ultra Rare",
             set_price=25.0, atk=3000, defense=2500, level=8, attribute="LIGHT"),
        Card(id=2, name="Dragon's Mirror", type="Spell Card", set_rarity="Super Rare", set_price=3.5),
        Card(id=3, name="Dark Magician", type="Normal Monster", set_rarity="Ultra Rare",
             set_price=12.0, atk=2500, defense=2100, level=7, attribute="DARK"),
        Card(id=4, name="Mirror Force", type="Trap Card", set_rarity="Ultra Rare", set_price=8.0),
        Card(id=5, name="Red-Eyes Black Dragon", type="Normal Monster", set_rarity="Rare",
             set_price=15.0, atk=2400, defense=2000, level=7, attribute="DARK"),
        Card(id=6, name="Pot of Greed", type="Spell Card", set_rarity="Common", set_price=1.0),
        Card(id=7, name="Dragon Shrine", type="Spell Card", set_rarity="Common", set_price=2.0),
        Card(id=8, name="Dragon Spirit of White", type="Effect Monster", set_rarity="Ultra Rare",
             set_price=4.0, atk=2500, defense=2000, level=8, attribute="LIGHT"),
    ]
    for c in cards:
        test_session.add(c)
    test_session.commit()
    return cards


# ============================================
# User / Auth Fixtures
# ============================================

@pytest.fixture
def sample_user(test_session: Session) -> User:
    """Create a sample user for testing."""
    user = User(
        id=1,
        username="kaiba",
        hashed_password=security.get_password_hash("testpassword123"),
    )
    test_session.add(user)
    test_session.commit()
    test_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(client: TestClient, sample_user: User) -> dict:
    """Bearer header obtained through the login endpoint."""
    response = client.post("/connexion", json={"pseudo": "kaiba", "mot_de_passe": "testpassword123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}
