"""
Request body lookup and parameter casting.
"""

import json
from datetime import date
from typing import List, Optional
from urllib.parse import urlencode

import pytest
from starlette.requests import Request

from reelcart.app.datastar import extract_datastar_payload
from reelcart.app.utils import cast_param, form_value


def make_request(body: bytes = b"", content_type: str = "", headers=None, method: str = "POST") -> Request:
    raw = [(b"content-length", str(len(body)).encode())]
    if content_type:
        raw.append((b"content-type", content_type.encode()))
    for key, value in (headers or {}).items():
        raw.append((key.lower().encode(), value.encode()))
    scope = {"type": "http", "method": method, "path": "/cart/add_item", "query_string": b"", "headers": raw}
    sent = False

    async def receive():
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


def json_request(data, **kwargs) -> Request:
    return make_request(json.dumps(data).encode(), "application/json", **kwargs)


def form_request(pairs) -> Request:
    return make_request(urlencode(pairs).encode(), "application/x-www-form-urlencoded")


class TestFormValue:

    @pytest.mark.asyncio
    async def test_json_body(self):
        assert await form_value(json_request({"product_id": "p1", "qty": 2}), "qty") == 2

    @pytest.mark.asyncio
    async def test_json_body_missing_key(self):
        assert await form_value(json_request({"product_id": "p1"}), "qty") is None

    @pytest.mark.asyncio
    async def test_json_array_body(self):
        assert await form_value(json_request(["p1"]), "product_id") is None

    @pytest.mark.asyncio
    async def test_form_body(self):
        assert await form_value(form_request([("product_id", "p2")]), "product_id") == "p2"

    @pytest.mark.asyncio
    async def test_repeated_form_keys(self):
        request = form_request([("tag", "a"), ("tag", "b"), ("product_id", "p2")])
        assert await form_value(request, "tag") == ["a", "b"]
        assert await form_value(request, "product_id") == "p2"

    @pytest.mark.asyncio
    async def test_absent(self):
        assert await form_value(form_request([("product_id", "p2")]), "tab") is None
        assert await form_value(make_request(), "tab") is None

    @pytest.mark.asyncio
    async def test_empty_multipart(self):
        request = make_request(content_type="multipart/form-data; boundary=x")
        assert await form_value(request, "product_id") is None


class TestCastParam:

    def test_optional(self):
        assert cast_param(Optional[int], "3") == 3
        assert cast_param(int | None, "7") == 7

    def test_list(self):
        assert cast_param(List[int], ["1", "2"]) == [1, 2]
        assert cast_param(list[int], "5") == [5]

    def test_bool_strings(self):
        assert cast_param(bool, "on") is True
        assert cast_param(bool, "false") is False

    def test_date(self):
        assert cast_param(date, "2024-01-31") == date(2024, 1, 31)

    def test_repeated_value_for_scalar_takes_last(self):
        assert cast_param(int, ["1", "2"]) == 2

    def test_non_strings_pass_through(self):
        assert cast_param(int, 4) == 4
        assert cast_param(str, {"a": 1}) == {"a": 1}

    def test_invalid(self):
        with pytest.raises(ValueError):
            cast_param(int, "abc")


class TestDatastarPayload:

    @pytest.mark.asyncio
    async def test_namespace_flattened(self):
        request = json_request({"Cart": {"product_id": "p1"}, "theme": "dark"}, headers={"Datastar-Request": "true"})
        payload = await extract_datastar_payload(request, "Cart")
        assert payload["product_id"] == "p1"
        assert payload.theme == "dark"
        assert payload["Cart"] == {"product_id": "p1"}

    @pytest.mark.asyncio
    async def test_dotted_namespace(self):
        request = json_request({"shop": {"Cart": {"qty": 2}}}, headers={"Datastar-Request": "true"})
        payload = await extract_datastar_payload(request, "shop.Cart")
        assert payload["qty"] == 2

    @pytest.mark.asyncio
    async def test_namespace_signal_shadows_top_level(self):
        request = json_request({"qty": 1, "Cart": {"qty": 2}}, headers={"Datastar-Request": "true"})
        payload = await extract_datastar_payload(request, "Cart")
        assert payload["qty"] == 2

    @pytest.mark.asyncio
    async def test_plain_request_has_no_signals(self):
        payload = await extract_datastar_payload(json_request({"Cart": {"product_id": "p1"}}), "Cart")
        assert payload == {}

    @pytest.mark.asyncio
    async def test_empty_body(self):
        request = make_request(content_type="application/json", headers={"Datastar-Request": "true"})
        assert await extract_datastar_payload(request, "Cart") == {}
