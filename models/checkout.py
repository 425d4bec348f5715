from typing import ClassVar

from pydantic import BaseModel


class DeliveryDetailsDTO(BaseModel):
    # Required for every order
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    phone: str | None = None

    # Collected by the checkout form, not persisted on the order
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None

    REQUIRED_FIELDS: ClassVar[tuple[str, ...]] = ("street", "city", "state", "zip_code", "phone")

    def missing_fields(self) -> list[str]:
        return [name for name in self.REQUIRED_FIELDS
                if getattr(self, name) is None or not getattr(self, name).strip()]


class CheckoutTotalsDTO(BaseModel):
    subtotal: int
    delivery_fee: int
    total: int
