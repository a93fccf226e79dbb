import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="food_delivery_tests_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ["ENV_MODE"] = "development"
os.environ["PRIVATE_KEY"] = "test-private-key-that-is-long-enough-for-hs256"
os.environ["UPLOADS_BUCKET"] = "test-bucket"

import pytest
from httpx import ASGITransport, AsyncClient

from food_delivery.database import Base, async_session_maker, engine
from food_delivery.main import app
from food_delivery.services.jwt import get_jwt_service
from food_delivery.services.mail import MockMailService, get_mail_service
from food_delivery.services.payment import MockPaymentService, get_payment_service
from food_delivery.services.pubsub import InMemoryPubSub, get_pubsub
from food_delivery.services.storage import MockStorageService, get_storage_service


@pytest.fixture
async def db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(db):
    async with async_session_maker() as session:
        yield session


@pytest.fixture
def mail_service():
    return MockMailService()


@pytest.fixture
def payment_service():
    return MockPaymentService()


@pytest.fixture
def pubsub():
    return InMemoryPubSub()


@pytest.fixture
def storage_service():
    return MockStorageService("test-bucket")


@pytest.fixture
def jwt_service():
    return get_jwt_service()


@pytest.fixture
async def client(db, mail_service, payment_service, pubsub, storage_service):
    app.dependency_overrides[get_mail_service] = lambda: mail_service
    app.dependency_overrides[get_payment_service] = lambda: payment_service
    app.dependency_overrides[get_pubsub] = lambda: pubsub
    app.dependency_overrides[get_storage_service] = lambda: storage_service
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
