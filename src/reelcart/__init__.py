"""
ReelCart - Shoppable Video Feed

An infinite vertical feed of shoppable reels, a reactive cart and tab
navigation, built on reactive entities for FastHTML + Datastar.
"""

from .core import Entity, event, ElementPatch, DatastarPayload, datastar_script
from .config import AppConfig, Environment, get_config, set_config
from .errors import ReelCartError
from .models import Product, VideoItem, CartItem, Snackbar

__all__ = [
    "Entity",
    "event",
    "ElementPatch",
    "DatastarPayload",
    "datastar_script",
    "AppConfig",
    "Environment",
    "get_config",
    "set_config",
    "ReelCartError",
    "Product",
    "VideoItem",
    "CartItem",
    "Snackbar",
]
