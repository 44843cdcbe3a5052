"""
Mock Data Service

Synthetic products and reels. Nothing here touches the network; reels are
generated on demand from a seedable random source.
"""

import random
from typing import Dict, List, Optional

from .errors import UnknownProductError
from .models import Product, VideoItem

MOCK_PRODUCTS: List[Product] = [
    Product(
        id='p1',
        name='Vintage Camera',
        price=299.99,
        image_url='https://placehold.co/100x100/007bff/ffffff?text=Camera',
    ),
    Product(
        id='p2',
        name='Leather Satchel',
        price=145.00,
        image_url='https://placehold.co/100x100/dc3545/ffffff?text=Satchel',
    ),
    Product(
        id='p3',
        name='Noise Cancelling Headphones',
        price=350.50,
        image_url='https://placehold.co/100x100/28a745/ffffff?text=Headphones',
    ),
    Product(
        id='p4',
        name='Minimalist Watch',
        price=89.99,
        image_url='https://placehold.co/100x100/ffc107/343a40?text=Watch',
    ),
]

_PRODUCTS_BY_ID: Dict[str, Product] = {p.id: p for p in MOCK_PRODUCTS}

_random = random.Random()


def seed(value: Optional[int]) -> None:
    """Reseed the module-level random source."""
    _random.seed(value)


def get_product(product_id: str) -> Product:
    try:
        return _PRODUCTS_BY_ID[product_id]
    except KeyError:
        raise UnknownProductError(product_id) from None


def random_color(rng: Optional[random.Random] = None) -> str:
    rng = rng or _random
    r, g, b = (rng.randint(0, 255) for _ in range(3))
    return f"#{r:02x}{g:02x}{b:02x}"


def generate_mock_videos(count: int, start: int = 1, rng: Optional[random.Random] = None) -> List[VideoItem]:
    """
    Generate ``count`` reels numbered from ``start``.

    Each reel tags either the first product or the first two products,
    decided by a coin flip.
    """
    rng = rng or _random
    videos = []
    for n in range(start, start + max(count, 0)):
        products = MOCK_PRODUCTS[:1] if rng.random() < 0.5 else MOCK_PRODUCTS[:2]
        videos.append(VideoItem(
            id=f'v{n}',
            title=f'Aesthetic shot #{n}',
            creator=f'ReelCartCreator{n}',
            video_url=f'mock_video_url_{n}',
            shoppable_products=list(products),
            mock_color=random_color(rng),
        ))
    return videos
