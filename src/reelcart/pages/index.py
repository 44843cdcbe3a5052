from fasthtml.common import *
from fasthtml.core import APIRouter
from monsterui.all import *

from ..entities import Cart, Navigation, VideoFeed
from .cart import CartView
from .components import AppHeader, SnackbarHost, TabBar
from .feed import FeedView

rt = APIRouter()


def TabContent(tab: str, req: Request):
    """Body of the selected tab, wrapped in the element tab switches replace."""
    if tab == "cart":
        body = CartView(Cart.get(req))
    else:
        body = FeedView(VideoFeed.get(req))
    return Div(body, id="tab-content")


@rt('/')
def index(req: Request):
    """The app shell: header, current tab, tab bar and snackbar host."""
    navigation = Navigation.get(req)
    feed = VideoFeed.get(req)
    cart = Cart.get(req)
    notices = feed.take_notices()

    return Title("ReelCart AI"), Main(cls="app-shell")(
        navigation,
        feed,
        cart,
        AppHeader(),
        TabContent(navigation.current_tab, req),
        TabBar(),
        SnackbarHost(notices[-1] if notices else None),
    )
