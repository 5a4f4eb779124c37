"""Page navigation and component resolution.

Both operations are bounded by a fixed timeout and never retried. A failure
here aborts the run: without a loaded page and a resolved component there is
nothing to capture or validate.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from ...api.dto import StepResult, StepStatus
from ..errors import ComponentNotFoundError, NavigationError
from ..timing import elapsed_ms

if TYPE_CHECKING:
    from playwright.async_api import ElementHandle, Page


async def navigate(page: Page, url: str, timeout_ms: int) -> StepResult:
    """Load ``url``, waiting only for DOMContentLoaded."""
    start = time.perf_counter()
    try:
        response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
    except Exception as e:
        raise NavigationError(
            "navigation", f"Navigation to {url} failed: {e}", elapsed_ms(start)
        ) from e

    details = f"Loaded {url}"
    if response is not None:
        details += f" (HTTP {response.status})"
    return StepResult(
        name="navigation",
        status=StepStatus.SUCCESS,
        details=details,
        elapsed_ms=elapsed_ms(start),
    )


async def locate(
    page: Page, selector: str, timeout_ms: int
) -> tuple[ElementHandle, StepResult]:
    """Wait until the single element matching ``selector`` is visible."""
    start = time.perf_counter()
    try:
        handle = await page.wait_for_selector(selector, state="visible", timeout=timeout_ms)
    except Exception as e:
        raise ComponentNotFoundError(
            "locate_component", f"Component {selector} not visible: {e}", elapsed_ms(start)
        ) from e
    if handle is None:
        raise ComponentNotFoundError(
            "locate_component", f"Component not found: {selector}", elapsed_ms(start)
        )
    return handle, StepResult(
        name="locate_component",
        status=StepStatus.SUCCESS,
        details=f"Found {selector}",
        elapsed_ms=elapsed_ms(start),
    )
