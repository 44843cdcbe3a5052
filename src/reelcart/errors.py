"""
ReelCart Errors

Domain exceptions raised by entities and the catalog. The dispatcher turns
any ``ReelCartError`` into a user-facing snackbar (or a 400 JSON body).
"""


class ReelCartError(Exception):
    """Base exception for ReelCart domain errors"""
    title = "Something went wrong"


class CatalogError(ReelCartError):
    """Raised for catalog lookups"""
    title = "Catalog"


class UnknownProductError(CatalogError):
    """Raised when a product id is not in the catalog"""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Unknown product: {product_id}")


class CartError(ReelCartError):
    """Raised for invalid cart operations"""
    title = "Cart"


class CartItemNotFoundError(CartError):
    """Raised when a cart line does not exist"""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not in the cart")


class EmptyCartError(CartError):
    """Raised when checking out an empty cart"""

    def __init__(self):
        super().__init__("Your cart is empty")


class NavigationError(ReelCartError):
    """Raised for invalid navigation"""
    title = "Navigation"


class InvalidTabError(NavigationError):
    """Raised when switching to a tab that does not exist"""

    def __init__(self, tab: str):
        self.tab = tab
        super().__init__(f"Unknown tab: {tab}")


class FeedError(ReelCartError):
    """Raised for invalid feed operations"""
    title = "Feed"


class InvalidPageError(FeedError):
    """Raised when the reported reel index is outside the feed"""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Reel {index} is outside the feed (size {size})")
