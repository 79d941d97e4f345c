import os
import sys
import threading
from datetime import datetime, timedelta, timezone

import pytest

CURRENT_DIR = os.path.dirname(__file__)
SERVICE_ROOT = os.path.dirname(CURRENT_DIR)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from membership_api.domain.entities import Role
from membership_api.infrastructure.db import enable_sqlite_foreign_keys, get_db
from membership_api.infrastructure.models import Base, SessionORM, UserORM
from membership_api.infrastructure.security import PasswordHasher, generate_session_token
from membership_api.infrastructure.storage import BlobStorage, StorageError, public_url_for
from membership_api.interfaces.http.deps import get_storage
from membership_api.interfaces.http.rate_limit import limiter
from membership_api.main import app

# In-memory SQLite shared across threads
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)
TestingSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, expire_on_commit=False)

PASSWORD = "secret1"
_password_hash = PasswordHasher().hash(PASSWORD)


class InMemoryBlobStorage(BlobStorage):
    """Blob store double: keeps objects in a dict, fails uploads for names in ``fail_names``."""

    base_url = "https://blobs.test"

    def __init__(self):
        self.objects: dict[tuple[str, str], bytes] = {}
        self.fail_names: set[str] = set()
        self._lock = threading.Lock()

    def upload(self, bucket, key, data, *, content_type=None):
        if any(key.endswith(f"-{name}") for name in self.fail_names):
            raise StorageError(f"simulated failure for {key}")
        with self._lock:
            self.objects[(bucket, key)] = data

    def public_url(self, bucket, key):
        return public_url_for(self.base_url, bucket, key)

    def remove(self, bucket, keys):
        with self._lock:
            for key in keys:
                self.objects.pop((bucket, key), None)

    def keys(self, bucket: str) -> list[str]:
        return sorted(k for b, k in self.objects if b == bucket)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def database():
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(autouse=True)
def disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def storage():
    return InMemoryBlobStorage()


@pytest.fixture
def db():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_client(storage):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    def _make(token: str | None = None, **kwargs) -> TestClient:
        client = TestClient(app, base_url="https://testserver", **kwargs)
        if token:
            client.cookies.set("token", token)
        return client

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


def create_user(db, email: str, role: Role = Role.MEMBER, name: str = "Test User", **fields) -> UserORM:
    row = UserORM(name=name, email=email, password_hash=_password_hash, role=role, **fields)
    db.add(row); db.commit(); db.refresh(row)
    return row


def create_session(db, user: UserORM, expires_in: timedelta = timedelta(hours=24)) -> str:
    token = generate_session_token()
    db.add(SessionORM(user_id=user.id, token=token, expires_at=datetime.now(timezone.utc) + expires_in))
    db.commit()
    return token


@pytest.fixture
def admin(db):
    return create_user(db, "admin@x.com", Role.ADMIN, name="Admin User")


@pytest.fixture
def member(db):
    return create_user(db, "member@x.com", Role.MEMBER, name="Member User")


@pytest.fixture
def admin_client(make_client, db, admin):
    return make_client(create_session(db, admin))


@pytest.fixture
def member_client(make_client, db, member):
    return make_client(create_session(db, member))
