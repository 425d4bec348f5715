from models.catalogItem import CatalogItemDTO

# Static menu, never mutated at runtime. Prices are whole Taka.
_CATALOG: tuple[CatalogItemDTO, ...] = (
    CatalogItemDTO(
        id="1",
        name="Margherita Pizza",
        description="Fresh tomatoes, mozzarella, basil on a crispy crust",
        price=450,
        image="https://images.unsplash.com/photo-1604382355076-af4b0eb60143?w=400&q=80",
        category="Pizza",
        rating=4.8,
    ),
    CatalogItemDTO(
        id="2",
        name="Chicken Burger",
        description="Juicy grilled chicken with lettuce, tomato & special sauce",
        price=280,
        image="https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=400&q=80",
        category="Burgers",
        rating=4.6,
    ),
    CatalogItemDTO(
        id="3",
        name="Pad Thai",
        description="Classic Thai stir-fried noodles with shrimp & peanuts",
        price=350,
        image="https://images.unsplash.com/photo-1559314809-0d155014e29e?w=400&q=80",
        category="Noodles",
        rating=4.7,
    ),
    CatalogItemDTO(
        id="4",
        name="Caesar Salad",
        description="Crisp romaine, parmesan, croutons with caesar dressing",
        price=220,
        image="https://images.unsplash.com/photo-1546793665-c74683f339c1?w=400&q=80",
        category="Salads",
        rating=4.5,
    ),
    CatalogItemDTO(
        id="5",
        name="Beef Biryani",
        description="Aromatic basmati rice with tender beef & exotic spices",
        price=380,
        image="https://images.unsplash.com/photo-1563379091339-03b21ab4a4f8?w=400&q=80",
        category="Rice",
        rating=4.9,
    ),
    CatalogItemDTO(
        id="6",
        name="Sushi Platter",
        description="Assorted fresh sushi rolls with wasabi & ginger",
        price=650,
        image="https://images.unsplash.com/photo-1579871494447-9811cf80d66c?w=400&q=80",
        category="Japanese",
        rating=4.8,
    ),
    CatalogItemDTO(
        id="7",
        name="Chocolate Cake",
        description="Rich dark chocolate layers with ganache frosting",
        price=180,
        image="https://images.unsplash.com/photo-1578985545062-69928b1d9587?w=400&q=80",
        category="Desserts",
        rating=4.9,
    ),
    CatalogItemDTO(
        id="8",
        name="Mango Smoothie",
        description="Fresh tropical mangoes blended with yogurt",
        price=120,
        image="https://images.unsplash.com/photo-1623065422902-30a2d299bbe4?w=400&q=80",
        category="Drinks",
        rating=4.6,
    ),
    CatalogItemDTO(
        id="9",
        name="Pepperoni Pizza",
        description="Classic pepperoni with mozzarella & tomato sauce",
        price=520,
        image="https://images.unsplash.com/photo-1628840042765-356cda07504e?w=400&q=80",
        category="Pizza",
        rating=4.7,
    ),
    CatalogItemDTO(
        id="10",
        name="Veggie Wrap",
        description="Grilled vegetables with hummus in a tortilla wrap",
        price=200,
        image="https://images.unsplash.com/photo-1626700051175-6818013e1d4f?w=400&q=80",
        category="Wraps",
        rating=4.4,
    ),
    CatalogItemDTO(
        id="11",
        name="Fried Rice",
        description="Wok-tossed rice with vegetables, egg & soy sauce",
        price=250,
        image="https://images.unsplash.com/photo-1603133872878-684f208fb84b?w=400&q=80",
        category="Rice",
        rating=4.5,
    ),
    CatalogItemDTO(
        id="12",
        name="Ice Cream Sundae",
        description="Three scoops with chocolate, caramel & whipped cream",
        price=150,
        image="https://images.unsplash.com/photo-1563805042-7684c019e1cb?w=400&q=80",
        category="Desserts",
        rating=4.7,
    ),
)

_CATALOG_BY_ID: dict[str, CatalogItemDTO] = {item.id: item for item in _CATALOG}

# Menu tabs in display order; "All" is not a catalog category
MENU_CATEGORIES: tuple[str, ...] = (
    "All", "Pizza", "Burgers", "Noodles", "Rice", "Salads", "Japanese", "Desserts", "Drinks", "Wraps",
)


class CatalogRepository:
    @staticmethod
    def get_all() -> tuple[CatalogItemDTO, ...]:
        return _CATALOG

    @staticmethod
    def get_by_id(item_id: str) -> CatalogItemDTO | None:
        return _CATALOG_BY_ID.get(item_id)

    @staticmethod
    def get_categories() -> tuple[str, ...]:
        return MENU_CATEGORIES
