"""
Infrastructure Adapters

Web framework integrations that turn entity events into routes.
"""

from .fasthtml import FastHTMLDispatcher, configure_app

__all__ = ["FastHTMLDispatcher", "configure_app"]
