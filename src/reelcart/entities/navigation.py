"""
Navigation Entity

Bottom tab bar state. Leaving the feed tab pauses the session's feed,
coming back resumes it.
"""

import logging

from starlette.requests import Request

from ..core import Entity, event
from ..errors import InvalidTabError
from .feed import VideoFeed

logger = logging.getLogger(__name__)

TABS = ("feed", "cart")


class Navigation(Entity):
    current_tab: str = "feed"

    def go_to(self, tab: str, feed: VideoFeed) -> None:
        """Change tab and drive the feed lifecycle."""
        if tab not in TABS:
            raise InvalidTabError(tab)

        previous, self.current_tab = self.current_tab, tab
        if previous == tab:
            return
        if previous == "feed":
            feed.pause()
        elif tab == "feed":
            feed.resume()
        logger.debug("%s: %s -> %s", self.id, previous, tab)

    @event(method="POST")
    def switch_tab(self, tab: str, request: Request):
        from ..pages.index import TabContent

        feed = VideoFeed.get(request)
        self.go_to(tab, feed)
        yield feed
        yield TabContent(tab, request)
