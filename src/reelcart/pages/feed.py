from fasthtml.common import *
from monsterui.all import *

from ..entities import Cart, VideoFeed


def ProductTag(product):
    """Product card shown in the overlay; buying never leaves the video."""
    return Div(cls="product-tag", id=f"tag-{product.id}")(
        Img(src=product.image_url, alt=product.name),
        Div(cls="flex-1")(
            P(product.name, cls="font-bold text-sm"),
            P(product.price_label, cls="product-price"),
        ),
        Button(
            {"data-on-click__stop": Cart.add_item(product.id)},
            UkIcon("shopping-cart", height=20),
            cls=ButtonT.ghost,
            aria_label=f"Add {product.name} to cart",
        ),
    )


def ShoppableOverlay(video):
    return Div(data_show=VideoFeed.Soverlay_visible, cls="reel-overlay", style="display: none")(
        *[ProductTag(p) for p in video.shoppable_products],
        Div("Tap anywhere to close tags", cls="overlay-hint mt-4"),
    )


def ReelCard(video, index: int):
    """A single reel: mock video surface, metadata, actions and the product overlay."""
    return Section(
        {"data-on-intersect__half": VideoFeed.on_video_page_changed(index)},
        cls="reel",
        id=f"reel-{video.id}",
        style=f"background-color: {video.mock_color}",
        data_on_click=VideoFeed.toggle_product_overlay(),
    )(
        Div(cls="absolute inset-0 flex flex-col items-center justify-center opacity-60")(
            UkIcon("play", height=80, width=80),
            Span("Paused", data_show=f"!{VideoFeed.Sis_playing}", cls="text-sm mt-2"),
        ),
        Div(cls="reel-meta")(
            P(f"@{video.creator}", cls="font-bold"),
            P(video.title, cls="text-sm line-clamp-2"),
        ),
        Div(cls="reel-actions")(
            UkIcon("tag", height=30, cls="text-pink-400"),
            Span(str(video.tag_count), cls="font-bold", id=f"tag-count-{video.id}"),
            UkIcon("heart", height=30, cls="mt-4"),
            Span("1.2K"),
            UkIcon("share-2", height=30, cls="mt-4"),
            Span("45"),
        ),
        ShoppableOverlay(video),
    )


def ReelList(videos, start: int = 0):
    """Reels `start`, `start + 1`, ... as siblings for appending to #feed."""
    return [ReelCard(video, start + i) for i, video in enumerate(videos)]


def CuratingIndicator():
    return Div(data_show=VideoFeed.Sis_curating, cls="curating", style="display: none")(
        DivLAligned(
            UkIcon("loader-circle", height=20, cls="animate-spin"),
            Span("AI Curating Next Reel..."),
        )
    )


def FeedView(feed: VideoFeed):
    if not feed.videos:
        return Div(cls="flex h-full items-center justify-center text-white")(
            UkIcon("loader-circle", height=40, cls="animate-spin")
        )
    return Div(cls="h-full relative")(
        Div(id="feed")(*ReelList(feed.videos)),
        CuratingIndicator(),
    )
