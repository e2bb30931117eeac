import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from agenda.auth import get_current_user
from agenda.database import Base, get_db
from agenda.main import app
from agenda.models import Service, User

# ------------------ engine ------------------
# One shared in-memory connection; pysqlite's deferred BEGIN lets the
# fixture session and the request sessions take turns on it.
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)

_current = {}


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def override_current_user():
    return _current["user"]


app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_current_user] = override_current_user

test_client = TestClient(app)


# ------------------ fixtures ------------------
@pytest.fixture
def client():
    return test_client


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        _current.clear()
        Base.metadata.drop_all(bind=engine)


def make_user(db, uid: str) -> User:
    user = User(firebase_uid=uid, email=f"{uid}@example.com", full_name=uid.title())
    db.add(user)
    db.commit()
    return user


def make_service(db, user: User, name: str = "Haircut", duration: int = 60, price: float = 25.0) -> Service:
    service = Service(user_id=user.id, name=name, duration=duration, price=price)
    db.add(service)
    db.commit()
    return service


@pytest.fixture
def owner(db):
    user = make_user(db, "owner")
    _current["user"] = user
    return user


@pytest.fixture
def other_owner(db):
    return make_user(db, "other")


@pytest.fixture
def service(db, owner):
    return make_service(db, owner)


@pytest.fixture
def act_as():
    def _act_as(user):
        _current["user"] = user

    return _act_as


@pytest.fixture
def book(client, service):
    """POST /appointments with sensible defaults"""

    def _book(start: str, **fields):
        body = {
            "serviceId": service.id,
            "clientName": "Ana Gomez",
            "clientPhone": "+57 300 123 4567",
            "startTime": start,
        }
        body.update(fields)
        return client.post("/appointments", json=body)

    return _book
