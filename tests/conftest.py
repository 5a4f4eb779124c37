import asyncio
import io
import os
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image


def pytest_sessionstart(session):  # noqa: ARG001
    # Ensure src/ is importable when running pytest without installation
    root = Path(__file__).resolve().parents[1]
    src = root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))
    os.environ.setdefault("HEADLESS", "true")
    os.environ.setdefault("OTEL_ENABLED", "false")


COMPONENT_SELECTOR = 'div[data-em-cmp="flights-booking"]'


def make_png(width: int = 4, height: int = 3) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buf, format="PNG")
    return buf.getvalue()


class FakeElement:
    """Element handle stand-in: resolves child selectors from a dict."""

    def __init__(self, children=None, enabled=True, screenshot=None, screenshot_error=None):
        self.children = children or {}
        self.enabled = enabled
        self.screenshot_bytes = screenshot if screenshot is not None else make_png()
        self.screenshot_error = screenshot_error
        self.screenshot_calls = []

    async def wait_for_selector(self, selector, state="visible", timeout=None):
        child = self.children.get(selector)
        if child is None:
            raise TimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return child

    async def is_enabled(self):
        return self.enabled

    async def screenshot(self, path=None, type="png"):  # noqa: A002
        self.screenshot_calls.append({"path": path, "type": type})
        if self.screenshot_error:
            raise self.screenshot_error
        if path:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            Path(path).write_bytes(self.screenshot_bytes)
        return self.screenshot_bytes


class FakeResponse:
    def __init__(self, status=200):
        self.status = status


class FakePage:
    def __init__(
        self,
        component=None,
        goto_error=None,
        goto_delay=0.0,
        locate_delay=0.0,
        status=200,
    ):
        self.component = component
        self.goto_error = goto_error
        self.goto_delay = goto_delay
        self.locate_delay = locate_delay
        self.status = status
        self.goto_calls = []
        self.wait_calls = []
        self.default_navigation_timeout = None

    def set_default_navigation_timeout(self, timeout):
        self.default_navigation_timeout = timeout

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_delay:
            await asyncio.sleep(self.goto_delay)
        if self.goto_error:
            raise self.goto_error
        return FakeResponse(self.status)

    async def wait_for_selector(self, selector, state=None, timeout=None):
        self.wait_calls.append({"selector": selector, "state": state, "timeout": timeout})
        if self.locate_delay:
            await asyncio.sleep(self.locate_delay)
        if self.component is None:
            raise TimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return self.component


def make_component(missing=(), button_enabled=True, **kwargs):
    """A booking component whose default check selectors all resolve."""
    from lookout.core.validator.checks import DEFAULT_CHECKS, SEARCH_BUTTON

    children = {}
    for check in DEFAULT_CHECKS:
        if check.selector in missing:
            continue
        enabled = button_enabled if check.selector == SEARCH_BUTTON else True
        children[check.selector] = FakeElement(enabled=enabled)
    return FakeElement(children=children, **kwargs)


class FakeBrowser:
    """Records the objects a BrowserSessionManager creates and closes."""

    def __init__(self, page, launch_error=None, close_error=None, context_error=None):
        self.page = page
        self.context = MagicMock()
        self.context.new_page = AsyncMock(return_value=page)
        self.browser = MagicMock()
        self.browser.new_context = AsyncMock(
            return_value=self.context, side_effect=context_error
        )
        self.browser.close = AsyncMock(side_effect=close_error)
        self.driver = MagicMock()
        self.driver.chromium.launch = AsyncMock(
            return_value=self.browser, side_effect=launch_error
        )
        self.driver.stop = AsyncMock()

    def factory(self):
        starter = MagicMock()
        starter.start = AsyncMock(return_value=self.driver)
        return starter


@pytest.fixture
def run_ctx(tmp_path):
    from lookout.core.context import RunContext

    return RunContext(
        url="https://flights.example.test/en/ist-ath",
        selector=COMPONENT_SELECTOR,
        navigation_timeout_ms=1000,
        selector_timeout_ms=500,
        viewport=(1280, 720),
        user_agent="TestAgent/1.0",
        screenshot_path=str(tmp_path / "screenshots" / "component.png"),
        scratch_dirs=(str(tmp_path / "scratch"), str(tmp_path / "scratch" / ".cache")),
    )


@pytest.fixture
def storage_config():
    from lookout.core.context import StorageConfig

    return StorageConfig(bucket="test-bucket", region="eu-west-1", backend="inmemory")


@pytest.fixture
def artifact_store():
    from lookout.adapters.artifact_store import InMemoryArtifactStore

    return InMemoryArtifactStore()
