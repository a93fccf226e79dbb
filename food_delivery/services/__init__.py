"""
                        Services Module

Business logic behind the GraphQL API, plus external providers following the
hybrid architecture pattern: each provider has a Mock (development) and a
Real (staging/production) implementation.

Services:
    - users, restaurants, orders, payments: domain services
    - jwt: token signing and verification
    - mail: SendGrid transactional email
    - payment: Stripe payment verification
    - pubsub: order events for subscriptions
    - storage: S3 uploads
"""

from food_delivery.services.orders import OrdersService
from food_delivery.services.payments import PaymentsService
from food_delivery.services.restaurants import RestaurantsService
from food_delivery.services.users import UsersService

__all__ = ["OrdersService", "PaymentsService", "RestaurantsService", "UsersService"]
