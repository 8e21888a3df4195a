"""Shared test fixtures for the tabdeck test suite."""

from __future__ import annotations

import pytest

from tabdeck.core import NavigationStack, TabRegistry, Workspace


class FakeClock:
    """Monotonic millisecond clock advancing by one second per reading."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1000
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock: FakeClock) -> TabRegistry:
    return TabRegistry(clock=clock)


@pytest.fixture
def workspace(clock: FakeClock) -> Workspace:
    return Workspace(clock=clock)


@pytest.fixture
def nav() -> NavigationStack:
    return NavigationStack("/app")


# -- Tab-opening requests -----------------------------------------------------


def make_tab(tab_id: str, component: str | None = None, url: str | None = None, **extra):
    """Tab-opening request as a collaborator would send it."""
    return {
        "id": tab_id,
        "title": tab_id.title(),
        "component": component or f"{tab_id.title()}View",
        "url": url if url is not None else f"/{tab_id}",
        **extra,
    }


@pytest.fixture
def tab():
    """Factory for tab-opening requests."""
    return make_tab
