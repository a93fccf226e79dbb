import asyncio
from types import SimpleNamespace
from unittest.mock import MagicMock

import jwt
import pytest
import stripe

from food_delivery.core.config import Settings
from food_delivery.services.jwt import JwtService
from food_delivery.services.mail import MockMailService, SendGridMailService
from food_delivery.services.payment import MockPaymentService, StripePaymentService
from food_delivery.services.pubsub import NEW_PENDING_ORDER, InMemoryPubSub
from food_delivery.services.storage import MockStorageService, S3StorageService


# =============================================================================
# JWT
# =============================================================================

def test_jwt_round_trip():
    service = JwtService("a-private-key-that-is-long-enough-for-hs256")

    token = service.sign(42)

    assert service.verify(token) == {"id": 42}


def test_jwt_rejects_foreign_signature():
    token = JwtService("another-private-key-long-enough-for-hs256").sign(42)

    with pytest.raises(jwt.InvalidTokenError):
        JwtService("a-private-key-that-is-long-enough-for-hs256").verify(token)


# =============================================================================
# MAIL
# =============================================================================

async def test_mock_mail_verification_email():
    service = MockMailService()

    assert await service.send_verification_email("a@example.com", "code-1") is True
    assert service.outbox[0]["subject"] == "Verify Your Email"
    assert service.outbox[0]["template"] == "verify_email"
    assert service.outbox[0]["variables"] == {"code": "code-1", "username": "a@example.com"}


async def test_mock_mail_failure_is_reported():
    service = MockMailService(failure_rate=1.0)

    assert await service.send_verification_email("a@example.com", "code-1") is False
    assert service.outbox == []


async def test_sendgrid_uses_dynamic_template():
    service = SendGridMailService()
    service.sendgrid_client = MagicMock()
    service.sendgrid_client.send.return_value = SimpleNamespace(status_code=202)
    service.templates = {"verify_email": "d-template"}

    sent = await service.send_verification_email("a@example.com", "code-1")

    assert sent is True
    message = service.sendgrid_client.send.call_args.args[0]
    payload = message.get()
    assert payload["template_id"] == "d-template"
    data = payload["personalizations"][0]["dynamic_template_data"]
    assert data["code"] == "code-1"
    assert data["username"] == "a@example.com"


async def test_sendgrid_never_raises():
    service = SendGridMailService()
    service.sendgrid_client = MagicMock()
    service.sendgrid_client.send.side_effect = RuntimeError("boom")
    service.templates = {"verify_email": "d-template"}

    assert await service.send_mail("Hi", "a@example.com", "verify_email", {}) is False
    assert await service.send_mail("Hi", "a@example.com", "unknown", {}) is False


# =============================================================================
# PAYMENT
# =============================================================================

async def test_mock_payment():
    service = MockPaymentService()

    paid = await service.verify_transaction("pi_ok")
    declined = await service.verify_transaction("declined_123")

    assert paid.success is True
    assert paid.transaction_id == "pi_ok"
    assert declined.success is False
    assert declined.error_code in {code for code, _ in MockPaymentService.DECLINE_REASONS}


def test_stripe_requires_secret_key(monkeypatch):
    monkeypatch.setattr(
        "food_delivery.services.payment.stripe.get_settings",
        lambda: Settings(stripe_secret_key=None),
    )

    with pytest.raises(ValueError):
        StripePaymentService()


async def test_stripe_verify_transaction(monkeypatch):
    monkeypatch.setattr(
        "food_delivery.services.payment.stripe.get_settings",
        lambda: Settings(stripe_secret_key="sk_test_123"),
    )
    intents = {
        "pi_paid": SimpleNamespace(
            id="pi_paid", status="succeeded", amount_received=1999, currency="usd"
        ),
        "pi_pending": SimpleNamespace(
            id="pi_pending", status="processing", amount_received=0, currency="usd"
        ),
    }
    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", lambda transaction_id: intents[transaction_id])
    service = StripePaymentService()

    paid = await service.verify_transaction("pi_paid")
    pending = await service.verify_transaction("pi_pending")

    assert paid.success is True
    assert paid.amount == 19.99
    assert pending.success is False
    assert pending.error_code == "not_settled"


# =============================================================================
# STORAGE
# =============================================================================

async def test_mock_storage_upload():
    service = MockStorageService("bucket")

    url = await service.upload(b"png-bytes", "cover.png", "image/png")

    key = url.rsplit("/", 1)[1]
    assert url.startswith("https://bucket.s3.amazonaws.com/")
    assert key.endswith("cover.png")
    assert key[:-len("cover.png")].isdigit()
    assert service.objects[key] == {"body": b"png-bytes", "content_type": "image/png"}


async def test_s3_upload_is_public(monkeypatch):
    client = MagicMock()
    monkeypatch.setattr("food_delivery.services.storage.s3.boto3.client", lambda *a, **kw: client)
    service = S3StorageService()

    url = await service.upload(b"data", "photo.jpg", "image/jpeg")

    kwargs = client.put_object.call_args.kwargs
    assert kwargs["ACL"] == "public-read"
    assert kwargs["Bucket"] == service.bucket
    assert kwargs["Body"] == b"data"
    assert kwargs["ContentType"] == "image/jpeg"
    assert url == f"https://{service.bucket}.s3.amazonaws.com/{kwargs['Key']}"


# =============================================================================
# PUB/SUB
# =============================================================================

async def test_memory_pubsub_fan_out():
    pubsub = InMemoryPubSub()
    first = pubsub.subscribe(NEW_PENDING_ORDER)
    second = pubsub.subscribe(NEW_PENDING_ORDER)
    pending = [asyncio.ensure_future(first.__anext__()), asyncio.ensure_future(second.__anext__())]
    await asyncio.sleep(0)

    assert pubsub.subscriber_count(NEW_PENDING_ORDER) == 2
    await pubsub.publish(NEW_PENDING_ORDER, {"order_id": 1, "owner_id": 2})
    received = await asyncio.wait_for(asyncio.gather(*pending), timeout=1)

    assert received == [{"order_id": 1, "owner_id": 2}] * 2

    await first.aclose()
    await second.aclose()
    assert pubsub.subscriber_count(NEW_PENDING_ORDER) == 0
