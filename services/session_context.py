"""
Process-wide authentication state.

One SessionContext is built at startup and handed to every component that
needs to know who is signed in. Components read ``current_user`` and register
listeners with ``subscribe()``; they never reach into the identity provider
themselves.

The identity provider is external. Anything with the IdentityProvider shape
can be plugged in (hosted auth service client, test double, ...).
"""

import logging
from typing import Callable, Protocol

from exceptions.auth import (
    IdentityProviderError,
    InvalidCredentialsException,
    UserAlreadyRegisteredException
)
from models.user import UserIdentityDTO
from services.cart import CartStore

logger = logging.getLogger(__name__)

SessionListener = Callable[[UserIdentityDTO | None], None]


class IdentityProvider(Protocol):
    async def sign_up(self, email: str, password: str, full_name: str) -> UserIdentityDTO | None:
        ...

    async def sign_in(self, email: str, password: str) -> UserIdentityDTO:
        ...

    async def sign_out(self) -> None:
        ...

    async def get_session(self) -> UserIdentityDTO | None:
        ...

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Register for sign-in/sign-out/token-refresh events. Returns an unsubscribe callable."""
        ...


class SessionContext:
    def __init__(self, identity_provider: IdentityProvider, cart: CartStore):
        self._identity_provider = identity_provider
        self._cart = cart
        self._current_user: UserIdentityDTO | None = None
        self._is_loading = True
        self._listeners: list[SessionListener] = []
        self._provider_unsubscribe: Callable[[], None] | None = None

    @property
    def current_user(self) -> UserIdentityDTO | None:
        return self._current_user

    @property
    def user_id(self) -> str | None:
        return self._current_user.id if self._current_user else None

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def subscribe(self, listener: SessionListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: SessionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def start(self) -> None:
        """Hook the provider's change stream first, then pick up an existing session."""
        if self._provider_unsubscribe is None:
            self._provider_unsubscribe = self._identity_provider.on_session_change(self._set_user)
        self._set_user(await self._identity_provider.get_session())

    def close(self) -> None:
        if self._provider_unsubscribe is not None:
            self._provider_unsubscribe()
            self._provider_unsubscribe = None
        self._listeners.clear()

    async def sign_up(self, email: str, password: str, full_name: str) -> UserIdentityDTO | None:
        """
        Register a new account.

        Raises:
            UserAlreadyRegisteredException: E-mail already has an account
            InvalidCredentialsException: Any other rejection by the provider
        """
        try:
            user = await self._identity_provider.sign_up(email, password, full_name)
        except IdentityProviderError as e:
            if "already registered" in e.message.lower():
                logger.info("Sign-up rejected: account already exists")
                raise UserAlreadyRegisteredException(email) from e
            logger.info(f"Sign-up failed: {e.message}")
            raise InvalidCredentialsException(e.message) from e
        if user is not None:
            self._set_user(user)
        return user

    async def sign_in(self, email: str, password: str) -> UserIdentityDTO:
        """
        Raises:
            InvalidCredentialsException: Provider rejected the credentials
        """
        try:
            user = await self._identity_provider.sign_in(email, password)
        except IdentityProviderError as e:
            logger.info(f"Sign-in failed: {e.message}")
            raise InvalidCredentialsException(e.message) from e
        self._set_user(user)
        return user

    async def sign_out(self) -> None:
        await self._identity_provider.sign_out()
        self._cart.clear()
        self._set_user(None)

    def _set_user(self, user: UserIdentityDTO | None) -> None:
        previous_id = self.user_id
        self._current_user = user
        self._is_loading = False
        if previous_id != self.user_id:
            logger.info(f"Session changed: {previous_id or 'anonymous'} -> {self.user_id or 'anonymous'}")
        # Copy: listeners may unsubscribe themselves
        for listener in list(self._listeners):
            listener(user)
