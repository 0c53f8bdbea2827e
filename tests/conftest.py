"""Shared fixtures for scenariogen tests."""

import os

import pytest


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "smoke: mark test as smoke test (fast, critical path - included in CI)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep SCENARIOGEN_* variables from the outer environment out of tests."""
    for key in list(os.environ):
        if key.startswith("SCENARIOGEN_"):
            monkeypatch.delenv(key, raising=False)


def make_action(name, frame=None, **fields):
    """Recorder payload for one action in context."""
    action = {"name": name, "signals": []}
    action.update(fields)
    return {
        "frame": frame or {"pageAlias": "page", "framePath": []},
        "action": action,
        "startTime": 1700000000000,
    }


@pytest.fixture
def action_factory():
    """Factory for recorder action payloads."""
    return make_action


@pytest.fixture
def login_recording():
    """A short login flow as recorded by the browser."""
    return [
        make_action("openPage", url="about:blank"),
        make_action("navigate", url="https://example.com/login?next=%2Fhome"),
        make_action("fill", selector='internal:label="Email"i', text="ada@example.com"),
        make_action(
            "fill",
            selector='internal:testid=[data-testid="login-password"s]',
            text="hunter2",
        ),
        make_action(
            "click",
            selector='internal:role=button[name="Sign in"i]',
            signals=[{"name": "navigation", "url": "https://example.com/home"}],
        ),
        make_action("assertText", selector="css=h1", text="Welcome", substring=True),
    ]
