"""
ReelCart Models

Value objects shared by the feed and the cart: products, reels, cart lines
and snackbar notifications.
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Product(BaseModel):
    """A single product that can be tagged in a video."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: float
    image_url: str

    @property
    def price_label(self) -> str:
        return f"${self.price:.2f}"


class VideoItem(BaseModel):
    """A single shoppable reel."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    creator: str
    video_url: str
    shoppable_products: List[Product] = Field(default_factory=list)
    mock_color: str = "#000000"

    @property
    def tag_count(self) -> int:
        return len(self.shoppable_products)


class CartItem(BaseModel):
    """One cart line: a product and how many of it."""
    product: Product
    quantity: int = Field(default=1, ge=1)

    @computed_field
    @property
    def line_total(self) -> float:
        return round(self.product.price * self.quantity, 2)


class Snackbar(BaseModel):
    """A transient notification shown in the snackbar host."""
    title: str
    message: str
    position: Literal["top", "bottom"] = "bottom"
    variant: Literal["info", "success", "accent", "error"] = "info"
    duration: float = 3.0

    def __ft__(self):
        from .pages.components import SnackbarHost
        return SnackbarHost(self)
