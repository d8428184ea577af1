"""Shared test fixtures for academy.

Provides an isolated config environment, a controllable clock for the
response cache, a scriptable fake of the institute's API built on
:class:`httpx.MockTransport`, and output/CLI helpers. These fixtures are
automatically discovered by pytest and available to all test modules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Union

import httpx
import pytest

from academy.models import ApiSettings, RequestConfig
from academy.output import OutputFormat, OutputManager, reset_output, set_output

BASE_URL = "http://api.test"

Handler = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and data to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME below tmp_path, clears all
    ACADEMY_* environment variables, forces XDG path resolution, and changes
    the working directory to tmp_path.
    """
    monkeypatch.setattr("academy.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "ACADEMY_API_URL",
        "ACADEMY_ADMIN_USERNAME",
        "ACADEMY_ADMIN_PASSWORD",
        "ACADEMY_ADMIN_USERNAME_1",
        "ACADEMY_ADMIN_PASSWORD_1",
        "ACADEMY_ADMIN_USERNAME_2",
        "ACADEMY_ADMIN_PASSWORD_2",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced replacement for :func:`time.monotonic`."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeApi:
    """In-process stand-in for the institute's REST API.

    Routes are keyed by ``(method, path)`` and answer with a JSON body and
    status, or with a handler callable. Every request is recorded in
    :attr:`calls` so tests can count network hits.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Union[tuple[int, Any], Handler]] = {}
        self.calls: list[httpx.Request] = []

    def add(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = (status, body)

    def add_handler(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "Route not found"})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def count(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.calls if r.method == method and r.url.path == path
        )

    def last_json(self) -> Any:
        return json.loads(self.calls[-1].content)


def envelope(data: Any) -> dict[str, Any]:
    """Wrap *data* the way the API does."""
    return {"success": True, "data": data}


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def api_settings() -> ApiSettings:
    """Settings pointing at the fake API with retries disabled."""
    return ApiSettings(base_url=BASE_URL, request=RequestConfig(max_retries=0))


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
