"""
Authentication and authorization exceptions.
"""

from .base import StorefrontException


class AuthException(StorefrontException):
    pass


class NotAuthenticatedException(AuthException):
    def __init__(self, action: str):
        super().__init__(f"You need to be signed in to {action}", action=action)
        self.action = action


class InvalidCredentialsException(AuthException):
    """Sign-in or sign-up rejected by the identity provider; the provider's text is shown as-is."""

    def __init__(self, reason: str):
        super().__init__(reason, reason=reason)
        self.reason = reason


class UserAlreadyRegisteredException(AuthException):
    def __init__(self, email: str):
        super().__init__("This email is already registered. Try logging in.", email=email)
        self.email = email


class AdminAccessDeniedException(AuthException):
    def __init__(self, user_id: str):
        super().__init__("You don't have admin privileges.", user_id=user_id)
        self.user_id = user_id


class IdentityProviderError(AuthException):
    """Raw provider error; SessionContext maps it to one of the exceptions above."""

    def __init__(self, message: str):
        super().__init__(message)
