"""
Domain exceptions raised inside services.

They carry the client-facing message; ``handle_errors`` turns them into
``ok=False`` results.
"""

__all__ = ["ServiceError", "RecordNotFound", "AccessDenied", "InvalidOrder", "PaymentRejected"]


class ServiceError(Exception):
    pass


class RecordNotFound(ServiceError):
    pass


class AccessDenied(ServiceError):
    pass


class InvalidOrder(ServiceError):
    pass


class PaymentRejected(ServiceError):
    pass
