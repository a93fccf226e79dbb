from datetime import timedelta

from sqlalchemy import func, select

from food_delivery.models import Payment, Restaurant, UserRole, utcnow
from food_delivery.services.payments import PaymentsService
from tests.factories import create_restaurant, create_user


async def test_create_payment_promotes_restaurant(session, payment_service):
    owner = await create_user(session, "owner@example.com", role=UserRole.OWNER)
    restaurant = await create_restaurant(session, owner)
    service = PaymentsService(session, payment_service, promotion_days=7)

    output = await service.create_payment(
        owner, {"transaction_id": "pi_123", "restaurant_id": restaurant.id}
    )

    assert output.ok is True
    assert restaurant.is_promoted is True
    remaining = restaurant.promoted_until - utcnow()
    assert timedelta(days=6, hours=23) < remaining <= timedelta(days=7)

    payments = await service.get_payments(owner)
    assert [p.transaction_id for p in payments.payments] == ["pi_123"]
    assert payments.payments[0].restaurant_id == restaurant.id


async def test_create_payment_errors(session, payment_service):
    owner = await create_user(session, "owner@example.com", role=UserRole.OWNER)
    intruder = await create_user(session, "intruder@example.com", role=UserRole.OWNER)
    restaurant = await create_restaurant(session, owner)
    service = PaymentsService(session, payment_service)

    missing = await service.create_payment(owner, {"transaction_id": "pi_1", "restaurant_id": 999})
    denied = await service.create_payment(
        intruder, {"transaction_id": "pi_2", "restaurant_id": restaurant.id}
    )
    declined = await service.create_payment(
        owner, {"transaction_id": "declined_card", "restaurant_id": restaurant.id}
    )

    assert missing.error == "Restaurant not found"
    assert denied.error == "You are not allowed to do this."
    assert declined.error == "Payment could not be verified"
    assert restaurant.is_promoted is False
    count = await session.execute(select(func.count(Payment.id)))
    assert count.scalar() == 0


async def test_get_payments_only_own(session, payment_service):
    owner = await create_user(session, "owner@example.com", role=UserRole.OWNER)
    other = await create_user(session, "other@example.com", role=UserRole.OWNER)
    mine = await create_restaurant(session, owner, name="Mine")
    theirs = await create_restaurant(session, other, name="Theirs")
    service = PaymentsService(session, payment_service)

    await service.create_payment(owner, {"transaction_id": "pi_a", "restaurant_id": mine.id})
    await service.create_payment(other, {"transaction_id": "pi_b", "restaurant_id": theirs.id})

    output = await service.get_payments(owner)

    assert [p.transaction_id for p in output.payments] == ["pi_a"]


async def test_check_promoted_restaurants(session):
    owner = await create_user(session, "owner@example.com", role=UserRole.OWNER)
    expired = await create_restaurant(
        session, owner, name="Expired",
        is_promoted=True, promoted_until=utcnow() - timedelta(hours=1),
    )
    active = await create_restaurant(
        session, owner, name="Active",
        is_promoted=True, promoted_until=utcnow() + timedelta(days=1),
    )

    demoted = await PaymentsService(session).check_promoted_restaurants()

    assert demoted == 1
    rows = await session.execute(
        select(Restaurant.id, Restaurant.is_promoted, Restaurant.promoted_until)
        .order_by(Restaurant.id)
    )
    result = {row.id: (row.is_promoted, row.promoted_until) for row in rows}
    assert result[expired.id] == (False, None)
    assert result[active.id][0] is True
