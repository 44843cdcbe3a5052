from typing import Any, Dict

from starlette.requests import Request
from datastar_py.fastapi import read_signals

from ..core.events import DatastarPayload


def is_datastar_request(request: Request) -> bool:
    """Check if the request is a Datastar request."""
    return "Datastar-Request" in request.headers


def _dig(d: Dict[str, Any], path) -> Dict[str, Any] | None:
    """Walk `d` following path segments; return the subtree or None."""
    cur: Any = d
    for seg in path:
        if not isinstance(cur, dict) or seg not in cur:
            return None
        cur = cur[seg]
    return cur if isinstance(cur, dict) else None


async def extract_datastar_payload(request: Request, namespace: str | None = None) -> DatastarPayload:
    """
    Read the Datastar signals sent with `request`.

    When `namespace` is given its subtree is merged into the top level, so an
    event parameter `quantity` also matches the signal `$Cart.quantity`.
    """
    try:
        data = await read_signals(request)
    except ValueError:
        # Empty or non-JSON body
        data = None
    if not isinstance(data, dict):
        return DatastarPayload()

    if namespace:
        subtree = _dig(data, namespace.split("."))
        if subtree is not None:
            data = {**data, **subtree}
    return DatastarPayload(data)
