from enum import Enum


class ViewEntity(Enum):
    """Which audience an order list or label is rendered for."""
    USER = 1
    ADMIN = 2
