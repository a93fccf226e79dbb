"""
GraphQL Request Context

Carries the database session and provider services into resolvers and
resolves the authenticated user from the ``x-jwt`` header (HTTP) or
connection parameter (websocket subscriptions).
"""

import logging
from typing import Optional

import jwt
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from food_delivery.core.config import get_settings
from food_delivery.database import get_db
from food_delivery.models import User
from food_delivery.services.jwt import JwtService, get_jwt_service
from food_delivery.services.mail import BaseMailService, get_mail_service
from food_delivery.services.orders import OrdersService
from food_delivery.services.payment import BasePaymentService, get_payment_service
from food_delivery.services.payments import PaymentsService
from food_delivery.services.pubsub import BasePubSub, get_pubsub
from food_delivery.services.restaurants import RestaurantsService
from food_delivery.services.users import UsersService

logger = logging.getLogger(__name__)


class Context(BaseContext):
    """Per-operation context shared by every resolver."""

    def __init__(
        self,
        db: AsyncSession,
        jwt_service: JwtService,
        mail_service: BaseMailService,
        payment_service: BasePaymentService,
        pubsub: BasePubSub,
    ):
        super().__init__()
        self.db = db
        self.jwt_service = jwt_service
        self.mail_service = mail_service
        self.payment_service = payment_service
        self.pubsub = pubsub
        self._current_user: Optional[User] = None
        self._user_loaded = False

    # =========================================================================
    # AUTHENTICATION
    # =========================================================================

    def _token(self) -> Optional[str]:
        header = get_settings().jwt_header
        params = getattr(self, "connection_params", None)
        if isinstance(params, dict) and params.get(header):
            return params[header]
        if self.request is not None:
            return self.request.headers.get(header)
        return None

    async def _load_user(self) -> Optional[User]:
        token = self._token()
        if not token:
            return None
        try:
            payload = self.jwt_service.verify(token)
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            return None
        user_id = payload.get("id")
        if not isinstance(user_id, int):
            return None
        return await self.db.get(User, user_id)

    async def get_current_user(self) -> Optional[User]:
        """The authenticated user, or None for anonymous requests."""
        if not self._user_loaded:
            self._current_user = await self._load_user()
            self._user_loaded = True
        return self._current_user

    # =========================================================================
    # SERVICES
    # =========================================================================

    @property
    def users(self) -> UsersService:
        return UsersService(self.db, self.jwt_service, self.mail_service)

    @property
    def restaurants(self) -> RestaurantsService:
        return RestaurantsService(self.db)

    @property
    def orders(self) -> OrdersService:
        return OrdersService(self.db, self.pubsub)

    @property
    def payments(self) -> PaymentsService:
        return PaymentsService(self.db, self.payment_service)


async def get_context(
    db: AsyncSession = Depends(get_db),
    jwt_service: JwtService = Depends(get_jwt_service),
    mail_service: BaseMailService = Depends(get_mail_service),
    payment_service: BasePaymentService = Depends(get_payment_service),
    pubsub: BasePubSub = Depends(get_pubsub),
) -> Context:
    return Context(
        db=db,
        jwt_service=jwt_service,
        mail_service=mail_service,
        payment_service=payment_service,
        pubsub=pubsub,
    )
