"""
Pytest configuration and fixtures for tests.

Every test gets a fresh in-memory SQLite database; the FastAPI app is
pointed at it through a ``get_session`` dependency override.
"""

import os

# must be set before pizzeria.config builds its settings
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from pizzeria.database import build_engine, create_db_and_tables, get_session
from pizzeria.main import app
from pizzeria.models.address import Address
from pizzeria.models.pizza import Pizza
from pizzeria.models.user import User
from pizzeria.utils.token import token_for


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# Domain Fixtures
# ============================================================================

def _sizes(small=900, medium=1200, large=1500):
    return [
        {"size": "Small", "price": small, "diameter": "8 inch"},
        {"size": "Medium", "price": medium, "diameter": "12 inch"},
        {"size": "Large", "price": large, "diameter": "14 inch"},
    ]


@pytest.fixture
def user(session):
    user = User(first_name="Nimal", last_name="Perera", email="nimal@example.com", phone="0771234567")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def other_user(session):
    user = User(first_name="Kamala", last_name="Silva", email="kamala@example.com")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def admin(session):
    admin = User(first_name="Admin", last_name="User", email="admin@example.com", role="admin")
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def other_headers(other_user):
    return {"Authorization": f"Bearer {token_for(other_user)}"}


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {token_for(admin)}"}


@pytest.fixture
def margherita(session):
    pizza = Pizza(
        name="Margherita",
        description="Tomato, mozzarella and basil",
        image="margherita.jpg",
        category="Vegetarian",
        sizes=_sizes(),
        ingredients=["Mozzarella", "Tomato Sauce", "Basil"],
        tags=["classic"],
        is_featured=True,
        rating_average=4.5,
    )
    session.add(pizza)
    session.commit()
    session.refresh(pizza)
    return pizza


@pytest.fixture
def pepperoni(session):
    pizza = Pizza(
        name="Pepperoni",
        description="Pepperoni and mozzarella",
        image="pepperoni.jpg",
        category="Non-Vegetarian",
        sizes=_sizes(1100, 1600, 2000),
        ingredients=["Pepperoni", "Mozzarella"],
        tags=["bestseller"],
        is_vegetarian=False,
        rating_average=4.8,
    )
    session.add(pizza)
    session.commit()
    session.refresh(pizza)
    return pizza


@pytest.fixture
def sold_out(session):
    pizza = Pizza(
        name="Truffle Special",
        description="Seasonal truffle pizza",
        image="truffle.jpg",
        category="Specialty",
        sizes=_sizes(2500, 3000, 3500),
        is_available=False,
    )
    session.add(pizza)
    session.commit()
    session.refresh(pizza)
    return pizza


@pytest.fixture
def address(session, user):
    address = Address(
        user_id=user.id,
        first_name="Nimal",
        last_name="Perera",
        phone="0771234567",
        address="12 Galle Road",
        city="Colombo 03",
        district="Colombo",
        province="Western",
        postal_code="00300",
        is_default=True,
    )
    session.add(address)
    session.commit()
    session.refresh(address)
    return address
