"""Shared fixtures for the ReelCart test suite."""

import json

import pytest
from starlette.testclient import TestClient

from reelcart import catalog
from reelcart.config import AppConfig, Environment, set_config
from reelcart.persistence import MemoryStore


@pytest.fixture(autouse=True)
def config():
    """Testing configuration: no load delay, fixed seed, clean entity store."""
    cfg = AppConfig.for_environment(Environment.TESTING)
    cfg.web.secret_key = "test-secret"
    set_config(cfg)
    catalog.seed(cfg.feed.seed)
    MemoryStore().clear()
    yield cfg
    MemoryStore().clear()
    set_config(None)


@pytest.fixture
def app(config):
    from reelcart.main import create_app
    return create_app(config)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        c.get("/")  # establishes the session cookie
        yield c


DATASTAR = {"Datastar-Request": "true"}
JSON = {"Accept": "application/json"}


def signal_patches(body: str):
    """Every `data: signals {...}` payload in an SSE body, decoded."""
    prefix = "data: signals "
    return [json.loads(line[len(prefix):]) for line in body.splitlines() if line.startswith(prefix)]


def element_patches(body: str) -> str:
    """All `data: elements ...` lines of an SSE body joined together."""
    prefix = "data: elements "
    return "\n".join(line[len(prefix):] for line in body.splitlines() if line.startswith(prefix))


def merged_signals(body: str, namespace: str) -> dict:
    """Fold every signal patch for `namespace` into one dict (later patches win)."""
    merged = {}
    for patch in signal_patches(body):
        merged.update(patch.get(namespace, {}))
    return merged
