"""
Admin verdict for the storefront.

Role determination belongs to an external collaborator; views only need an
object with an async ``is_admin(user_id)``. The verdict is asked again on
every entry into an admin view and never cached here, since it may change
out of band.

ConfigAdminAuthorizer is the built-in implementation backed by
config.ADMIN_ID_LIST.
"""

from typing import Protocol

import config


class AdminAuthorizer(Protocol):
    async def is_admin(self, user_id: str) -> bool:
        ...


def is_admin_user(user_id: str | None) -> bool:
    """
    Check if a user id is listed in ADMIN_ID_LIST.

    Example:
        >>> is_admin_user("7f0c...")   # listed
        True
        >>> is_admin_user(None)
        False
    """
    if not user_id:
        return False
    return user_id in config.ADMIN_ID_LIST


class ConfigAdminAuthorizer:
    async def is_admin(self, user_id: str) -> bool:
        return is_admin_user(user_id)
