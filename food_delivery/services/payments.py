"""
Payments Service

Owners pay to promote a restaurant. A payment is recorded only after the
payment provider confirms the transaction; the restaurant is then promoted
for a fixed number of days, and a periodic job clears expired promotions.
"""

import logging
from datetime import timedelta
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from food_delivery import schemas
from food_delivery.api.outputs import CoreOutput, GetPaymentsOutput
from food_delivery.core.config import get_settings
from food_delivery.models import Payment, Restaurant, User, utcnow
from food_delivery.services.base import BaseService, handle_errors
from food_delivery.services.exceptions import AccessDenied, PaymentRejected, RecordNotFound
from food_delivery.services.payment import BasePaymentService

logger = logging.getLogger(__name__)


class PaymentsService(BaseService):
    """Promotion payments for the GraphQL resolvers and the beat task."""

    def __init__(
        self,
        db: AsyncSession,
        payment_service: Optional[BasePaymentService] = None,
        promotion_days: Optional[int] = None,
    ):
        super().__init__(db)
        self.payment_service = payment_service
        self.promotion_days = promotion_days or get_settings().promotion_days

    @handle_errors(CoreOutput, "Could not create payment")
    async def create_payment(self, owner: User, input: Any) -> CoreOutput:
        data = schemas.CreatePaymentInput.model_validate(input)

        restaurant = await self.db.get(Restaurant, data.restaurant_id)
        if restaurant is None:
            raise RecordNotFound("Restaurant not found")
        if restaurant.owner_id != owner.id:
            raise AccessDenied("You are not allowed to do this.")

        result = await self.payment_service.verify_transaction(data.transaction_id)
        if not result.success:
            logger.warning(
                f"Payment {data.transaction_id} rejected for restaurant "
                f"#{restaurant.id}: {result.error_message}"
            )
            raise PaymentRejected("Payment could not be verified")

        self.db.add(
            Payment(
                transaction_id=data.transaction_id,
                user_id=owner.id,
                restaurant_id=restaurant.id,
            )
        )
        restaurant.is_promoted = True
        restaurant.promoted_until = utcnow() + timedelta(days=self.promotion_days)
        await self.db.commit()

        logger.info(
            f"Restaurant #{restaurant.id} promoted until "
            f"{restaurant.promoted_until.isoformat()} (payment {data.transaction_id})"
        )
        return CoreOutput(ok=True)

    @handle_errors(GetPaymentsOutput, "Could not load payments")
    async def get_payments(self, owner: User) -> GetPaymentsOutput:
        result = await self.db.execute(
            select(Payment).where(Payment.user_id == owner.id).order_by(Payment.id)
        )
        return GetPaymentsOutput(ok=True, payments=list(result.scalars().all()))

    async def check_promoted_restaurants(self) -> int:
        """
        Clear promotions whose end date has passed.

        Returns:
            int: Number of restaurants demoted
        """
        result = await self.db.execute(
            update(Restaurant)
            .where(Restaurant.is_promoted.is_(True))
            .where(Restaurant.promoted_until < utcnow())
            .values(is_promoted=False, promoted_until=None)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

        if result.rowcount:
            logger.info(f"Expired promotion for {result.rowcount} restaurant(s)")
        return result.rowcount
