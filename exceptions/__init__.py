"""
Custom exceptions for the storefront.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the application.

Exception Hierarchy:
--------------------
StorefrontException (base)
├── CartException
│   ├── EmptyCartException
│   └── InvalidCartStateException
├── OrderException
│   ├── OrderNotFoundException
│   ├── InvalidOrderStateException
│   ├── InvalidOrderStatusException
│   ├── InvalidOrderTotalException
│   ├── OrderSubmissionException
│   ├── OrderStatusUpdateException
│   └── OrderFetchException
├── DeliveryException
│   └── MissingDeliveryDetailsException
└── AuthException
    ├── NotAuthenticatedException
    ├── InvalidCredentialsException
    ├── UserAlreadyRegisteredException
    ├── AdminAccessDeniedException
    └── IdentityProviderError

Usage:
------
Services raise specific exceptions:
    raise OrderNotFoundException(order_id=123)

The presentation layer catches them and shows str(e) as a dismissable notification:
    try:
        await admin_view.set_status(order_id, "delivered")
    except OrderException as e:
        notify(str(e))
"""

from .base import StorefrontException
from .cart import CartException, EmptyCartException, InvalidCartStateException
from .order import (
    OrderException,
    OrderNotFoundException,
    InvalidOrderStateException,
    InvalidOrderStatusException,
    InvalidOrderTotalException,
    OrderSubmissionException,
    OrderStatusUpdateException,
    OrderFetchException
)
from .delivery import DeliveryException, MissingDeliveryDetailsException
from .auth import (
    AuthException,
    NotAuthenticatedException,
    InvalidCredentialsException,
    UserAlreadyRegisteredException,
    AdminAccessDeniedException,
    IdentityProviderError
)

__all__ = [
    # Base
    'StorefrontException',

    # Cart
    'CartException',
    'EmptyCartException',
    'InvalidCartStateException',

    # Order
    'OrderException',
    'OrderNotFoundException',
    'InvalidOrderStateException',
    'InvalidOrderStatusException',
    'InvalidOrderTotalException',
    'OrderSubmissionException',
    'OrderStatusUpdateException',
    'OrderFetchException',

    # Delivery
    'DeliveryException',
    'MissingDeliveryDetailsException',

    # Auth
    'AuthException',
    'NotAuthenticatedException',
    'InvalidCredentialsException',
    'UserAlreadyRegisteredException',
    'AdminAccessDeniedException',
    'IdentityProviderError',
]
