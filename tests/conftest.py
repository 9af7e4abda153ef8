import os

# Must be set before the app reads its settings
os.environ["TESTING"] = "1"
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.core.database import Base, get_db, get_redis
from app.core.security import UserRole, create_access_token
from app.models.account import Account
from app.services.identity_service import Identity
from app.services.store import Store

# Create test database
SQLALCHEMY_DATABASE_URL = os.environ["TEST_DATABASE_URL"]
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def store(db_session):
    return Store(db_session)

@pytest.fixture
def fake_redis():
    redis_client = fakeredis.FakeRedis(decode_responses=True)
    app.dependency_overrides[get_redis] = lambda: redis_client
    yield redis_client
    app.dependency_overrides.pop(get_redis, None)

@pytest.fixture
def client(test_db, fake_redis):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

def make_account(store, name, email, role, password="Secret123"):
    return store.create_account(
        Account(name=name, email=email, password=password, role=role)
    )

def identity_of(account):
    return Identity(id=account.id, role=account.role)

def auth_headers(account):
    return {"Authorization": f"Bearer {create_access_token(account.id)}"}

@pytest.fixture
def patient(store):
    return make_account(store, "Pat Patient", "pat@example.com", UserRole.PATIENT)

@pytest.fixture
def other_patient(store):
    return make_account(store, "Olga Other", "olga@example.com", UserRole.PATIENT)

@pytest.fixture
def doctor(store):
    return make_account(store, "Dana Doctor", "dana@example.com", UserRole.DOCTOR)

@pytest.fixture
def other_doctor(store):
    return make_account(store, "Dev Doctor", "dev@example.com", UserRole.DOCTOR)

@pytest.fixture
def admin(store):
    return make_account(store, "Ada Admin", "ada@example.com", UserRole.ADMIN)
