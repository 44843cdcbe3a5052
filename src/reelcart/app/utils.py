"""Request body lookup and value casting for event parameters."""

import json
from datetime import date
from types import UnionType
from typing import Any, Union, get_args, get_origin

from fastcore.basics import listify, str2bool, str2date, str2int
from starlette.requests import Request

# Query and form values arrive as strings; these understand "on", "2024-01-31", ...
_CASTS = {bool: str2bool, int: str2int, date: str2date}


async def form_value(req: Request, name: str) -> Any:
    """
    Value of `name` in the request body, or None.

    Handles JSON and form bodies. Repeated form keys come back as a list.
    """
    ctype = req.headers.get("Content-Type", "")
    if ctype.startswith("application/json"):
        body = await req.body()
        data = json.loads(body) if body else {}
        return data.get(name) if isinstance(data, dict) else None

    # Starlette rejects multipart requests without a body
    if ctype.startswith("multipart/form-data") and not int(req.headers.get("Content-Length") or 0):
        return None

    values = (await req.form()).getlist(name)
    if not values:
        return None
    return values[0] if len(values) == 1 else values


def _caster(anno):
    return _CASTS.get(anno, anno)


def cast_param(anno, value: Any) -> Any:
    """Cast `value` to `anno`. Optionals and unions use their first non-None member."""
    if get_origin(anno) in (Union, UnionType):
        anno = next(a for a in get_args(anno) if a is not type(None))

    if get_origin(anno) is list:
        args = get_args(anno)
        conv = _caster(args[0]) if args else str
        return [conv(v) if isinstance(v, str) else v for v in listify(value)]

    if isinstance(value, (list, tuple)):
        value = value[-1]
    if not isinstance(value, str):
        return value
    return _caster(anno)(value)
