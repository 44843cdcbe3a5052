from fasthtml.common import *
from monsterui.all import *

app_styles = Style("""
.app-shell { max-width: 480px; margin: 0 auto; height: 100vh; position: relative; background: #000; overflow: hidden; }
.app-header { position: absolute; top: 0; left: 0; right: 0; z-index: 20; padding: 12px 16px; color: #fff;
              display: flex; justify-content: space-between; align-items: center; }
.app-title { font-weight: 700; letter-spacing: 1.5px; }
#tab-content { height: calc(100vh - 56px); }
#feed { height: 100%; overflow-y: scroll; scroll-snap-type: y mandatory; }
.reel { height: 100%; scroll-snap-align: start; position: relative; color: #fff; }
.reel-meta { position: absolute; bottom: 20px; left: 15px; width: 70%; }
.reel-actions { position: absolute; bottom: 20px; right: 10px; display: flex; flex-direction: column; align-items: center; gap: 4px; }
.reel-overlay { position: absolute; bottom: 60px; left: 10px; right: 10px; }
.product-tag { display: flex; align-items: center; gap: 8px; margin-bottom: 8px; padding: 8px; border-radius: 12px;
               background: rgba(255,255,255,.95); color: #222; box-shadow: 0 2px 4px rgba(0,0,0,.1); }
.product-tag img { width: 40px; height: 40px; border-radius: 8px; object-fit: cover; background: #eee; }
.product-price { color: #e91e63; font-size: 13px; font-weight: 600; }
.overlay-hint { display: inline-block; padding: 8px 12px; border-radius: 16px; background: rgba(233,30,99,.9); color: #fff; font-size: 12px; }
.curating { position: absolute; bottom: 66px; left: 50%; transform: translateX(-50%); z-index: 15; padding: 8px;
            border-radius: 10px; background: rgba(0,0,0,.55); color: #fff; font-size: 12px; }
.tab-bar { position: absolute; bottom: 0; left: 0; right: 0; height: 56px; display: flex; background: #111; }
.tab-bar button { flex: 1; color: #aaa; }
.tab-bar button.active { color: #e91e63; }
.cart-badge { margin-left: 4px; padding: 0 6px; border-radius: 9999px; background: #e91e63; color: #fff; font-size: 11px; }
.snackbar-host { position: absolute; left: 12px; right: 12px; z-index: 30; }
.snackbar-host.top { top: 56px; }
.snackbar-host.bottom { bottom: 68px; }
.snackbar { padding: 10px 14px; border-radius: 10px; background: #333; color: #fff; display: flex; justify-content: space-between; gap: 8px; }
.snackbar.accent { background: #ff4081; }
.snackbar.success { background: #2e7d32; }
.snackbar.error { background: #c62828; }
""")


def SnackbarHost(snackbar=None):
    """The single element every snackbar is patched into."""
    if snackbar is None:
        return Div(id="snackbar-host", cls="snackbar-host")
    return Div(id="snackbar-host", cls=f"snackbar-host {snackbar.position}")(
        Div({f"data-on-interval__duration.{int(snackbar.duration * 1000)}ms": "el.remove()"},
            cls=f"snackbar {snackbar.variant}", role="status")(
            Div(Strong(snackbar.title), P(snackbar.message, cls="text-sm")),
            Button(UkIcon("x", height=16), data_on_click="el.closest('.snackbar').remove()",
                   cls=ButtonT.ghost, aria_label="Dismiss"),
        )
    )


def AppHeader():
    from ..entities import VideoFeed
    return Header(cls="app-header")(
        Span("ReelCart AI", cls="app-title"),
        Div(cls="flex gap-2")(
            Button(UkIcon("camera"), data_on_click=VideoFeed.open_seller_tool(),
                   cls=ButtonT.ghost, aria_label="Seller tool"),
            Button(UkIcon("search"), cls=ButtonT.ghost, aria_label="Search"),
        ),
    )


def TabButton(tab: str, label: str, icon: str, *extra):
    from ..entities import Navigation
    return Button(
        {"data-class": f"{{active: {Navigation.Scurrent_tab} == '{tab}'}}"},
        UkIcon(icon), Span(label, cls="ml-1"), *extra,
        data_on_click=Navigation.switch_tab(tab),
        cls=ButtonT.ghost,
        id=f"tab-{tab}",
    )


def TabBar():
    from ..entities import Cart
    return Nav(cls="tab-bar")(
        TabButton("feed", "Feed", "house"),
        TabButton("cart", "Cart", "shopping-cart",
                  Span(data_text=Cart.Sitem_count, data_show=f"{Cart.Sitem_count} > 0", cls="cart-badge")),
    )
