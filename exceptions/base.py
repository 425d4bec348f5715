"""
Root of the storefront exception hierarchy.
"""


class StorefrontException(Exception):
    """
    Base for every error the storefront raises on purpose.

    ``str(exc)`` is the text shown to the user in a dismissable notification;
    keyword arguments end up in ``details`` for logs and tests.
    """

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        context = ''.join(f", {key}={value}" for key, value in self.details.items())
        return f"{self.__class__.__name__}('{self.message}'{context})"
