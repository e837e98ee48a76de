import asyncio
import itertools
import os
from unittest.mock import MagicMock

# Configure before any catermatch module reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest
from fastapi import BackgroundTasks
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catermatch.auth import AuthContext
from catermatch.database import Base
from catermatch.models import EVENT_OPEN, ROLE_CATERER, ROLE_OWNER
from catermatch.storage import FileAssetClient
from catermatch.store import EntityStore


class FakeSender:
    """Records every send instead of calling Resend"""

    def __init__(self):
        self.sent = []

    async def send(self, to, subject, html):
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"ok": True, "id": f"fake-{len(self.sent)}"}


def ctx_for(user) -> AuthContext:
    return AuthContext(caller_id=user.id, caller_role=user.role)


def run_background(tasks: BackgroundTasks) -> None:
    asyncio.run(tasks())


@pytest.fixture(autouse=True)
def mjml(mocker):
    """Compile MJML to a predictable HTML wrapper"""
    return mocker.patch(
        "catermatch.email_service.mjml_to_html",
        side_effect=lambda source: {"html": f"<html>{source}</html>", "errors": []},
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return EntityStore(db)


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def r2_client():
    client = MagicMock()
    client.generate_presigned_url.side_effect = (
        lambda operation, Params, ExpiresIn: f"https://r2.test/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"
    )
    client.list_objects_v2.return_value = {"Contents": []}
    return client


@pytest.fixture
def assets(r2_client):
    return FileAssetClient(client=r2_client, public_base_url="https://files.test")


@pytest.fixture
def background_tasks():
    return BackgroundTasks()


@pytest.fixture
def make_user(store):
    counter = itertools.count(1)

    def _make(role=ROLE_OWNER, **fields):
        n = next(counter)
        data = {
            "firebase_uid": f"uid-{role}-{n}",
            "email": f"{role}{n}@example.com",
            "role": role,
            "display_name": f"{role.title()} {n}",
            "specialties": [],
        }
        data.update(fields)
        return store.insert("users", data)

    return _make


@pytest.fixture
def owner(make_user):
    return make_user(ROLE_OWNER, city="Utrecht")


@pytest.fixture
def caterer(make_user):
    return make_user(ROLE_CATERER, company_name="Smaak & Co")


@pytest.fixture
def other_caterer(make_user):
    return make_user(ROLE_CATERER, company_name="De Keukenbrigade")


@pytest.fixture
def make_event(store, owner):
    def _make(**fields):
        data = {
            "owner_id": owner.id,
            "title": "Bruiloft Jansen",
            "city": "Utrecht",
            "guests": 80,
            "budget": 4000.0,
            "photos": [],
            "status": EVENT_OPEN,
        }
        data.update(fields)
        return store.insert("events", data)

    return _make


@pytest.fixture
def event(make_event):
    return make_event()
