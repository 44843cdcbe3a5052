"""
ReelCart Pages

FastHTML components for the feed and cart tabs plus the app shell route.
"""

from .index import rt, TabContent

__all__ = ["rt", "TabContent"]
