from pydantic import BaseModel

from models.catalogItem import CatalogItemDTO


class CartLineDTO(BaseModel):
    """One cart entry resolved against the catalog, for cart and checkout summaries."""
    item: CatalogItemDTO
    quantity: int

    @property
    def line_total(self) -> int:
        return self.item.price * self.quantity
