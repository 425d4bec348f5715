from pydantic import BaseModel, ConfigDict, Field


class CatalogItemDTO(BaseModel):
    """A purchasable menu item. The catalog is static, so instances are frozen."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    price: int = Field(gt=0)  # Whole Taka
    image: str
    category: str
    rating: float
