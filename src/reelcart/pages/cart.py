from fasthtml.common import *
from monsterui.all import *

from ..config import get_config
from ..entities import Cart


def money(signal: str) -> str:
    """Datastar expression rendering a numeric signal as currency."""
    return f"'{get_config().cart.currency}' + {signal}.toFixed(2)"


def CartLine(item):
    product = item.product
    return DivFullySpaced(cls="py-3 border-b border-border", id=f"cart-line-{product.id}")(
        DivLAligned(
            Img(src=product.image_url, alt=product.name, cls="w-12 h-12 rounded"),
            Div(
                P(product.name, cls=TextPresets.bold_sm),
                P(f"{product.price_label} × {item.quantity}", cls=TextPresets.muted_sm),
            ),
        ),
        DivLAligned(
            Button(UkIcon("minus", height=16), data_on_click=Cart.decrement(product.id),
                   cls=ButtonT.ghost, aria_label=f"Remove one {product.name}"),
            Span(str(item.quantity), cls="w-6 text-center"),
            Button(UkIcon("plus", height=16), data_on_click=Cart.increment(product.id),
                   cls=ButtonT.ghost, aria_label=f"Add one {product.name}"),
            Span(f"{get_config().cart.currency}{item.line_total:.2f}", cls="w-20 text-right font-medium"),
            Button(UkIcon("trash-2", height=16), data_on_click=Cart.remove_item(product.id),
                   cls=ButtonT.ghost, aria_label=f"Remove {product.name}"),
        ),
    )


def CartSummary():
    """Totals bound to the cart's computed signals."""
    rate = get_config().cart.tax_rate
    return Div(cls="space-y-1 pt-4", id="cart-summary")(
        DivFullySpaced(Span("Subtotal"), Span(data_text=money(Cart.Ssubtotal))),
        DivFullySpaced(Span(f"Tax ({rate * 100:g}%)"), Span(data_text=money(Cart.Stax))),
        DivFullySpaced(Strong("Total"), Strong(data_text=money(Cart.Stotal))),
    )


def CartPanel(cart: Cart):
    if not cart.items:
        return Div(id="cart-panel", cls="py-16 text-center space-y-2")(
            UkIcon("shopping-cart", height=40, cls="mx-auto"),
            P("Your cart is empty", cls=TextPresets.bold_sm),
            P("Tap a reel and add tagged products.", cls=TextPresets.muted_sm),
        )
    return Div(id="cart-panel")(
        *[CartLine(item) for item in cart.items],
        CartSummary(),
        DivFullySpaced(cls="pt-4")(
            Button("Clear", data_on_click=Cart.clear(), cls=ButtonT.secondary),
            Button("Checkout", data_on_click=Cart.checkout(), cls=ButtonT.primary),
        ),
    )


def CartView(cart: Cart):
    return Div(cls="h-full overflow-y-auto bg-background px-4 pt-16 pb-4")(
        Card(
            CartPanel(cart),
            header=DivFullySpaced(
                H3("Your Cart"),
                Span(data_text=f"{Cart.Sitem_count} + ' items'", cls=TextPresets.muted_sm),
            ),
        )
    )
