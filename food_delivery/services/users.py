"""
Users Service

Account lifecycle: registration with email verification, login, profile
edits and account deletion.
"""

import logging
import uuid
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from food_delivery import schemas
from food_delivery.api.outputs import CoreOutput, LoginOutput, UserProfileOutput
from food_delivery.core.security import check_password, hash_password
from food_delivery.models import User, Verification
from food_delivery.services.base import BaseService, handle_errors
from food_delivery.services.exceptions import RecordNotFound, ServiceError
from food_delivery.services.jwt import JwtService
from food_delivery.services.mail import BaseMailService

logger = logging.getLogger(__name__)


class UsersService(BaseService):
    """Account operations for the GraphQL resolvers."""

    def __init__(
        self,
        db: AsyncSession,
        jwt_service: JwtService,
        mail_service: BaseMailService,
    ):
        super().__init__(db)
        self.jwt_service = jwt_service
        self.mail_service = mail_service

    async def find_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    def _new_verification(self, user_id: int) -> Verification:
        verification = Verification(code=str(uuid.uuid4()), user_id=user_id)
        self.db.add(verification)
        return verification

    # =========================================================================
    # REGISTRATION & LOGIN
    # =========================================================================

    @handle_errors(CoreOutput, "Couldn't create account")
    async def create_account(self, input: Any) -> CoreOutput:
        data = schemas.CreateAccountInput.model_validate(input)

        if await self.find_by_email(data.email):
            raise ServiceError("There is a user with that email already")

        user = User(
            email=data.email,
            password=hash_password(data.password),
            role=data.role,
            verified=False,
        )
        self.db.add(user)
        await self.db.flush()

        verification = self._new_verification(user.id)
        await self.db.commit()

        logger.info(f"Account created: #{user.id} ({user.role.value})")
        await self.mail_service.send_verification_email(user.email, verification.code)
        return CoreOutput(ok=True)

    @handle_errors(LoginOutput, "Couldn't log in")
    async def login(self, input: Any) -> LoginOutput:
        data = schemas.LoginInput.model_validate(input)

        user = await self.find_by_email(data.email)
        if not user:
            raise RecordNotFound("User not found")
        if not check_password(data.password, user.password):
            raise ServiceError("Wrong password")

        return LoginOutput(ok=True, token=self.jwt_service.sign(user.id))

    # =========================================================================
    # PROFILE
    # =========================================================================

    @handle_errors(UserProfileOutput, "Couldn't load user")
    async def user_profile(self, input: Any) -> UserProfileOutput:
        data = schemas.UserProfileInput.model_validate(input)

        user = await self.find_by_id(data.user_id)
        if not user:
            raise RecordNotFound("User not found")
        return UserProfileOutput(ok=True, user=user)

    @handle_errors(CoreOutput, "Couldn't update profile")
    async def edit_profile(self, user: User, input: Any) -> CoreOutput:
        data = schemas.EditProfileInput.model_validate(input)

        verification = None
        if data.email and data.email != user.email:
            if await self.find_by_email(data.email):
                raise ServiceError("Email already in use")
            user.email = data.email
            user.verified = False
            await self.db.execute(
                delete(Verification).where(Verification.user_id == user.id)
            )
            verification = self._new_verification(user.id)

        if data.password:
            user.password = hash_password(data.password)

        await self.db.commit()

        if verification is not None:
            await self.mail_service.send_verification_email(user.email, verification.code)
        return CoreOutput(ok=True)

    @handle_errors(CoreOutput, "Couldn't verify email")
    async def verify_email(self, input: Any) -> CoreOutput:
        data = schemas.VerifyEmailInput.model_validate(input)

        result = await self.db.execute(
            select(Verification).where(Verification.code == data.code)
        )
        verification = result.scalar_one_or_none()
        if not verification:
            raise RecordNotFound("Verification not found")

        user = await self.db.get(User, verification.user_id)
        user.verified = True
        await self.db.execute(delete(Verification).where(Verification.id == verification.id))
        await self.db.commit()

        logger.info(f"Email verified for user #{user.id}")
        return CoreOutput(ok=True)

    @handle_errors(CoreOutput, "Couldn't delete account")
    async def delete_account(self, user: User) -> CoreOutput:
        user_id = user.id
        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()

        logger.info(f"Account deleted: #{user_id}")
        return CoreOutput(ok=True)
