"""
End-to-end route tests through the FastHTML app.

Datastar requests (``Datastar-Request`` header) answer with an SSE stream of
signal and element patches; ``Accept: application/json`` gets entity state.
"""

import json
import time
from typing import List, Optional

import pytest
from fasthtml.common import fast_app
from pydantic import Field
from starlette.requests import Request
from starlette.testclient import TestClient

from conftest import DATASTAR, JSON, element_patches, merged_signals
from reelcart.adapters import configure_app
from reelcart.core import DatastarPayload, Entity, event
from reelcart.persistence import MemoryStore

DATASTAR_JSON = {**DATASTAR, "Content-Type": "application/json"}


class Tally(Entity):
    total: int = 0
    last_path: str = ""
    signal_keys: List[str] = Field(default_factory=list)

    @event(method="POST")
    def bump(self, request: Request, datastar: DatastarPayload, step: int = 1, limit: Optional[int] = None):
        self.total += step
        if limit is not None:
            self.total = min(self.total, limit)
        self.last_path = request.url.path
        self.signal_keys = sorted(datastar)


@pytest.fixture
def published(app):
    """Names of the command records the app publishes."""
    events = []

    async def record(command):
        events.append(command["event"])

    app.state.dispatcher.bus.subscribe(record)
    return events


class TestIndexPage:

    def test_index_renders_shell(self, app):
        with TestClient(app) as client:
            response = client.get("/")
        assert response.status_code == 200
        html = response.text
        assert "ReelCart AI" in html
        assert 'id="reel-v1"' in html
        assert 'id="reel-v5"' in html
        assert 'id="tab-content"' in html
        assert 'id="tab-cart"' in html
        assert "datastar" in html
        assert "/videofeed/on_video_page_changed?index=0" in html
        print("✅ App shell rendered")

    def test_feed_ready_shown_once(self, app):
        with TestClient(app) as client:
            assert "Feed Ready" in client.get("/").text
            assert "Feed Ready" not in client.get("/").text

    def test_sessions_are_isolated(self, app):
        with TestClient(app) as alice, TestClient(app) as bob:
            alice.get("/")
            bob.get("/")
            alice.post("/cart/add_item?product_id=p1", headers=JSON)
            data = bob.post("/cart/add_item?product_id=p2", headers=JSON).json()
        assert data["entity"]["item_count"] == 1
        assert data["entity"]["items"][0]["product"]["id"] == "p2"

    def test_routes_registered(self, app):
        routes = app.state.dispatcher.namespace_routes
        assert routes["/cart/add_item"] == "Cart"
        assert routes["/videofeed/load_more_videos"] == "VideoFeed"
        assert routes["/navigation/switch_tab"] == "Navigation"

    def test_sweeper_follows_app_lifecycle(self, app):
        store = MemoryStore()
        with TestClient(app) as client:
            assert client.get("/").status_code == 200
            assert store.sweeping
        assert not store.sweeping


class TestCartRoutes:

    def test_add_item_datastar(self, client):
        response = client.post("/cart/add_item?product_id=p1", headers=DATASTAR)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")

        cart = merged_signals(response.text, "Cart")
        assert cart["item_count"] == 1
        assert cart["subtotal"] == 299.99
        elements = element_patches(response.text)
        assert "Purchased!" in elements
        assert "Vintage Camera added to cart instantly." in elements

    def test_add_item_json(self, client):
        client.post("/cart/add_item?product_id=p1", headers=JSON)
        data = client.post("/cart/add_item?product_id=p1", headers=JSON).json()
        assert data["success"] is True
        assert data["command"] == "add_item"
        assert data["entity"]["items"][0]["quantity"] == 2
        assert data["entity"]["total"] == round(599.98 + round(599.98 * 0.08, 2), 2)

    def test_unknown_product_json(self, client):
        response = client.post("/cart/add_item?product_id=p99", headers=JSON)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Unknown product: p99"}

    def test_unknown_product_datastar_shows_error(self, client):
        response = client.post("/cart/add_item?product_id=p99", headers=DATASTAR)
        assert response.status_code == 200
        elements = element_patches(response.text)
        assert "snackbar error" in elements
        assert "Unknown product: p99" in elements

    def test_missing_parameter(self, client):
        response = client.post("/cart/add_item", headers=JSON)
        assert response.status_code == 400

    def test_decrement_patches_panel(self, client):
        client.post("/cart/add_item?product_id=p4", headers=JSON)
        response = client.post("/cart/decrement?product_id=p4", headers=DATASTAR)
        assert merged_signals(response.text, "Cart")["item_count"] == 0
        elements = element_patches(response.text)
        assert 'id="cart-panel"' in elements
        assert "Your cart is empty" in elements

    def test_checkout(self, client):
        client.post("/cart/add_item?product_id=p4", headers=JSON)
        response = client.post("/cart/checkout", headers=DATASTAR)
        assert merged_signals(response.text, "Cart")["item_count"] == 0
        elements = element_patches(response.text)
        assert "Order placed" in elements
        assert "$97.19" in elements

    def test_checkout_empty_cart(self, client):
        response = client.post("/cart/checkout", headers=DATASTAR)
        elements = element_patches(response.text)
        assert "snackbar error" in elements
        assert "Your cart is empty" in elements


class TestFeedRoutes:

    def test_page_change_near_end_appends_reels(self, client):
        response = client.post("/videofeed/on_video_page_changed?index=2", headers=DATASTAR)
        assert response.status_code == 200
        body = response.text

        feed = merged_signals(body, "VideoFeed")
        assert feed["current_index"] == 2
        assert feed["video_count"] == 10
        assert feed["is_loading"] is False

        elements = element_patches(body)
        assert "data: selector #feed" in body
        assert "data: mode append" in body
        assert 'id="reel-v6"' in elements
        assert 'id="reel-v10"' in elements
        assert "AI Recommendation" in elements

    def test_page_change_far_from_end(self, client):
        response = client.post("/videofeed/on_video_page_changed?index=1", headers=DATASTAR)
        feed = merged_signals(response.text, "VideoFeed")
        assert feed == {"current_index": 1}
        assert element_patches(response.text) == ""

    def test_invalid_page_index(self, client):
        response = client.post("/videofeed/on_video_page_changed?index=abc", headers=JSON)
        assert response.status_code == 400

    def test_toggle_overlay(self, client):
        response = client.post("/videofeed/toggle_product_overlay", headers=DATASTAR)
        assert merged_signals(response.text, "VideoFeed") == {"overlay_visible": True}

    def test_seller_tool(self, client):
        response = client.post("/videofeed/open_seller_tool", headers=DATASTAR)
        assert "Seller Tool" in element_patches(response.text)


class TestNavigationRoutes:

    def test_switch_to_cart_pauses_feed(self, client):
        response = client.post("/navigation/switch_tab?tab=cart", headers=DATASTAR)
        body = response.text

        assert merged_signals(body, "Navigation")["current_tab"] == "cart"
        assert merged_signals(body, "VideoFeed")["is_playing"] is False
        elements = element_patches(body)
        assert 'id="tab-content"' in elements
        assert "Your Cart" in elements

    def test_switch_back_resumes_feed(self, client):
        client.post("/navigation/switch_tab?tab=cart", headers=JSON)
        response = client.post("/navigation/switch_tab?tab=feed", headers=DATASTAR)
        assert merged_signals(response.text, "VideoFeed")["is_playing"] is True
        assert 'id="reel-v1"' in element_patches(response.text)

    def test_unknown_tab(self, client):
        response = client.post("/navigation/switch_tab?tab=profile", headers=JSON)
        assert response.status_code == 400
        assert response.json()["error"] == "Unknown tab: profile"


class TestParameterSources:

    def test_datastar_signals_in_json_body(self, client):
        body = json.dumps({"Cart": {"product_id": "p1"}})
        response = client.post("/cart/add_item", content=body, headers=DATASTAR_JSON)
        assert response.status_code == 200
        assert merged_signals(response.text, "Cart")["item_count"] == 1
        assert "Vintage Camera added to cart instantly." in element_patches(response.text)

    def test_form_encoded_body(self, client):
        response = client.post("/cart/add_item", data={"product_id": "p2"}, headers=JSON)
        assert response.status_code == 200
        items = response.json()["entity"]["items"]
        assert [line["product"]["id"] for line in items] == ["p2"]

    def test_json_body(self, client):
        response = client.post("/cart/add_item", json={"product_id": "p3"}, headers=JSON)
        assert response.json()["entity"]["items"][0]["product"]["id"] == "p3"

    def test_query_wins_over_body(self, client):
        response = client.post("/cart/add_item?product_id=p1", data={"product_id": "p2"}, headers=JSON)
        assert response.json()["entity"]["items"][0]["product"]["id"] == "p1"


class TestInjectedParameters:

    @pytest.fixture
    def tally_client(self):
        app, rt = fast_app(secret_key="test-secret", htmx=False, pico=False)
        configure_app(app, rt, [Tally])
        with TestClient(app) as c:
            yield c

    def test_request_and_signals_injected(self, tally_client):
        body = json.dumps({"Tally": {"step": 3}, "theme": "dark"})
        response = tally_client.post("/tally/bump?limit=4", content=body, headers=DATASTAR_JSON)
        assert response.status_code == 200

        tally = merged_signals(response.text, "Tally")
        assert tally["total"] == 3
        assert tally["last_path"] == "/tally/bump"
        assert tally["signal_keys"] == ["Tally", "step", "theme"]

    def test_optional_query_parameter_cast(self, tally_client):
        response = tally_client.post("/tally/bump?limit=4", json={"step": 5}, headers=JSON)
        entity = response.json()["entity"]
        assert entity["total"] == 4
        assert entity["signal_keys"] == []

    def test_defaults_when_nothing_sent(self, tally_client):
        response = tally_client.post("/tally/bump", headers=JSON)
        assert response.json()["entity"]["total"] == 1


class TestCommandPublishing:

    def test_sync_event_published(self, client, published):
        client.post("/cart/add_item?product_id=p1", headers=JSON)
        assert published == ["add_item"]

    def test_rejected_event_not_published(self, client, published):
        client.post("/cart/add_item?product_id=p99", headers=JSON)
        assert published == []

    def test_failed_checkout_json_not_published(self, client, published):
        response = client.post("/cart/checkout", headers={**JSON, "Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json()["error"] == "Your cart is empty"
        assert published == []

    def test_failed_checkout_datastar_not_published(self, client, published):
        response = client.post("/cart/checkout", headers=DATASTAR)
        assert "snackbar error" in element_patches(response.text)
        assert published == []

    def test_checkout_published_after_stream(self, client, published):
        client.post("/cart/add_item?product_id=p4", headers=JSON)
        response = client.post("/cart/checkout", headers=DATASTAR)
        assert "Order placed" in element_patches(response.text)
        assert published == ["add_item", "checkout"]
        print("✅ Checkout committed once its stream finished")


class TestSessionLifetime:

    def test_idle_sessions_are_purged(self, app, config, monkeypatch):
        config.session.ttl = 30
        store = MemoryStore()
        for _ in range(3):
            with TestClient(app) as visitor:
                visitor.get("/")
        assert len(store) == 9

        now = time.time()
        monkeypatch.setattr(time, "time", lambda: now + 31)
        assert store.purge_expired() == 9
        assert len(store) == 0

    def test_active_session_survives(self, app, config, monkeypatch):
        config.session.ttl = 30
        store = MemoryStore()
        now = time.time()
        with TestClient(app) as visitor:
            visitor.get("/")
            monkeypatch.setattr(time, "time", lambda: now + 20)
            visitor.post("/cart/add_item?product_id=p1", headers=JSON)
            monkeypatch.setattr(time, "time", lambda: now + 45)
            assert store.purge_expired() == 2
            data = visitor.post("/cart/add_item?product_id=p1", headers=JSON).json()
        assert data["entity"]["item_count"] == 2
