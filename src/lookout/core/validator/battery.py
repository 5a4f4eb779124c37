"""Validation battery.

Runs the declared checks one after another against the resolved component.
Every check is its own failure domain: an error inside a probe becomes a
FAILURE step result and the loop moves on to the next check.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ...api.dto import StepResult, StepStatus
from ..errors import CheckFailure
from ..timing import elapsed_ms
from .checks import Probe, ValidationCheck

if TYPE_CHECKING:
    from playwright.async_api import ElementHandle

logger = logging.getLogger(__name__)

BATTERY_STEP = "validation_battery"


async def _probe(component: ElementHandle, check: ValidationCheck, timeout_ms: int) -> str:
    label = check.description or check.name
    element = await component.wait_for_selector(
        check.selector, state="visible", timeout=timeout_ms
    )
    if element is None:
        raise CheckFailure(f"{label} not found: {check.selector}")
    if check.probe is Probe.ENABLED:
        if not await element.is_enabled():
            raise CheckFailure(f"{label} is not enabled")
        return f"{label} is enabled"
    return f"{label} is visible"


async def run_check(
    component: ElementHandle, check: ValidationCheck, timeout_ms: int
) -> StepResult:
    start = time.perf_counter()
    try:
        details = await _probe(component, check, timeout_ms)
    except Exception as e:
        logger.warning("[Battery] Check %s failed: %s", check.name, e)
        return StepResult(
            name=check.name,
            status=StepStatus.FAILURE,
            details=str(e) or type(e).__name__,
            elapsed_ms=elapsed_ms(start),
        )
    return StepResult(
        name=check.name,
        status=StepStatus.SUCCESS,
        details=details,
        elapsed_ms=elapsed_ms(start),
    )


async def run_battery(
    component: ElementHandle,
    checks: Sequence[ValidationCheck],
    timeout_ms: int,
) -> list[StepResult]:
    """Run every check in order, then append the completion summary."""
    start = time.perf_counter()
    results: list[StepResult] = []
    for check in checks:
        results.append(await run_check(component, check, timeout_ms))

    passed = sum(1 for r in results if r.status is StepStatus.SUCCESS)
    results.append(
        StepResult(
            name=BATTERY_STEP,
            status=StepStatus.SUCCESS,
            details=f"{passed}/{len(results)} checks passed",
            elapsed_ms=elapsed_ms(start),
        )
    )
    return results
