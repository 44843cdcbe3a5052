"""
Video Feed Entity

The endless, personalized feed of shoppable reels. Mirrors the feed
controller: initial batch on creation, more reels appended as the viewer
approaches the end, a product overlay toggled by tapping the reel, and
pause/resume driven by tab switches.
"""

import asyncio
import logging
from typing import List

from pydantic import Field, computed_field

from ..catalog import generate_mock_videos
from ..config import get_config
from ..core import Entity, ElementPatch, event
from ..errors import InvalidPageError
from ..models import Snackbar, VideoItem

logger = logging.getLogger(__name__)


class VideoFeed(Entity):
    """Feed state for one session."""

    # Server-side only; reels are rendered as HTML, not shipped as signals
    videos: List[VideoItem] = Field(default_factory=list, exclude=True)
    notices: List[Snackbar] = Field(default_factory=list, exclude=True)

    overlay_visible: bool = False
    current_index: int = 0
    is_loading: bool = False
    is_playing: bool = True

    @computed_field
    @property
    def video_count(self) -> int:
        return len(self.videos)

    @computed_field
    @property
    def is_curating(self) -> bool:
        """True while the viewer sits on the last reels of a feed that can still grow."""
        count = len(self.videos)
        if not count:
            return False
        return count - 1 <= self.current_index + 1 and count < get_config().feed.max_videos

    def on_init(self) -> None:
        self.load_initial_feed()

    def load_initial_feed(self) -> None:
        """Replace the feed with the first recommended batch."""
        self.videos = generate_mock_videos(get_config().feed.initial_batch)
        self.current_index = 0
        self.overlay_visible = False
        self.notices.append(Snackbar(
            title="Feed Ready",
            message=f"{len(self.videos)} personalized videos loaded.",
            position="bottom",
        ))
        logger.info("Loaded initial feed of %d reels for %s", len(self.videos), self.id)

    def take_notices(self) -> List[Snackbar]:
        notices, self.notices = self.notices, []
        return notices

    def pause(self) -> None:
        self.is_playing = False
        self.overlay_visible = False

    def resume(self) -> None:
        self.is_playing = True

    @event(method="POST")
    async def load_more_videos(self):
        """Append the next batch of reels to the end of the feed."""
        from ..pages.feed import ReelList

        cfg = get_config().feed
        if len(self.videos) > cfg.max_videos:
            logger.debug("Feed %s reached its limit of %d reels", self.id, cfg.max_videos)
            return
        if self.is_loading:
            return

        self.is_loading = True
        yield self
        try:
            if cfg.load_delay:
                await asyncio.sleep(cfg.load_delay)
            start = len(self.videos)
            new_videos = generate_mock_videos(cfg.batch_size, start=start + 1)
            self.videos = [*self.videos, *new_videos]
        finally:
            self.is_loading = False

        logger.info("Appended %d reels to %s (now %d)", len(new_videos), self.id, len(self.videos))
        yield ElementPatch(ReelList(new_videos, start), selector="#feed", mode="append")
        yield Snackbar(
            title="AI Recommendation",
            message=f"New batch of {len(new_videos)} videos added to the end of the feed.",
            position="bottom",
            duration=1.0,
        )

    @event(method="POST")
    async def on_video_page_changed(self, index: int):
        """The viewer scrolled to reel `index`."""
        if not 0 <= index < len(self.videos):
            raise InvalidPageError(index, len(self.videos))

        self.current_index = index
        self.overlay_visible = False
        yield self

        if index >= len(self.videos) - get_config().feed.prefetch_threshold:
            async for item in self.load_more_videos():
                yield item

    @event(method="POST")
    def toggle_product_overlay(self):
        self.overlay_visible = not self.overlay_visible

    @event(method="POST")
    def open_seller_tool(self):
        return Snackbar(
            title="Seller Tool",
            message="Opening AI video tagging tool for sellers...",
            position="bottom",
        )
