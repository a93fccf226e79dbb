"""
Pydantic Schemas for Input Validation and REST Responses

GraphQL inputs are re-validated against these models inside the services,
so the same rules apply whether a service is called from a resolver, a
Celery task or a test.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from food_delivery.models import OrderStatus, UserRole

EMAIL_PATTERN = re.compile(r"^[\w\.\+-]+@[\w\.-]+\.\w+$")

# bcrypt only hashes the first 72 bytes and rejects anything longer
PASSWORD_MAX_BYTES = 72


class InputSchema(BaseModel):
    """Base for service inputs; accepts GraphQL input objects as attributes."""
    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)


def validation_message(error: ValidationError) -> str:
    """Render the first validation problem as a single client-facing line."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    message = first["msg"].removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Invalid email format")
    return v.lower()


def _check_password(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return v


# =============================================================================
# USERS
# =============================================================================

class CreateAccountInput(InputSchema):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=4)
    role: UserRole

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class LoginInput(InputSchema):
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)


class EditProfileInput(InputSchema):
    email: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, min_length=4)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class UserProfileInput(InputSchema):
    user_id: int


class VerifyEmailInput(InputSchema):
    code: str = Field(..., min_length=1)


# =============================================================================
# RESTAURANTS & CATEGORIES
# =============================================================================

class PaginationInput(InputSchema):
    page: int = Field(default=1, ge=1)


class CreateRestaurantInput(InputSchema):
    name: str = Field(..., min_length=2, max_length=100)
    cover_img: str = Field(..., min_length=1, max_length=500)
    address: str = Field(..., min_length=1, max_length=255)
    category_name: str = Field(..., min_length=1, max_length=100)


class EditRestaurantInput(InputSchema):
    restaurant_id: int
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    cover_img: Optional[str] = Field(None, min_length=1, max_length=500)
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    category_name: Optional[str] = Field(None, min_length=1, max_length=100)


class RestaurantIdInput(InputSchema):
    restaurant_id: int


class RestaurantsInput(PaginationInput):
    pass


class SearchRestaurantInput(PaginationInput):
    query: str = Field(..., min_length=1, max_length=100)


class CategoryInput(PaginationInput):
    slug: str = Field(..., min_length=1)


# =============================================================================
# DISHES
# =============================================================================

class DishChoice(InputSchema):
    name: str = Field(..., min_length=1)
    extra: Optional[int] = Field(None, ge=0)


class DishOption(InputSchema):
    name: str = Field(..., min_length=1)
    choices: Optional[List[DishChoice]] = None
    extra: Optional[int] = Field(None, ge=0)


class CreateDishInput(InputSchema):
    restaurant_id: int
    name: str = Field(..., min_length=1, max_length=100)
    price: int = Field(..., ge=0)
    description: str = Field(..., min_length=1, max_length=500)
    photo: Optional[str] = Field(None, max_length=500)
    options: List[DishOption] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, v):
        return [] if v is None else v


class EditDishInput(InputSchema):
    dish_id: int
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[int] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    photo: Optional[str] = Field(None, max_length=500)
    options: Optional[List[DishOption]] = None


class DishIdInput(InputSchema):
    dish_id: int


# =============================================================================
# ORDERS
# =============================================================================

class OrderItemOption(InputSchema):
    name: str = Field(..., min_length=1)
    choice: Optional[str] = None


class CreateOrderItemInput(InputSchema):
    dish_id: int
    options: List[OrderItemOption] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, v):
        return [] if v is None else v


class CreateOrderInput(InputSchema):
    restaurant_id: int
    items: List[CreateOrderItemInput]


class GetOrdersInput(InputSchema):
    status: Optional[OrderStatus] = None


class OrderIdInput(InputSchema):
    id: int


class EditOrderInput(InputSchema):
    id: int
    status: OrderStatus


# =============================================================================
# PAYMENTS
# =============================================================================

class CreatePaymentInput(InputSchema):
    transaction_id: str = Field(..., min_length=1, max_length=255)
    restaurant_id: int


# =============================================================================
# REST RESPONSE SCHEMAS
# =============================================================================

class UploadResponse(BaseModel):
    """Result of a file upload."""
    ok: bool
    url: Optional[str] = None
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    pubsub: str
    mail_service: str
    payment_service: str
    storage_service: str
    timestamp: datetime
