"""
ReelCart Entities

Reactive controllers for the feed, the cart and tab navigation.
"""

from .feed import VideoFeed
from .cart import Cart
from .navigation import Navigation, TABS

__all__ = [
    "VideoFeed",
    "Cart",
    "Navigation",
    "TABS",
]
