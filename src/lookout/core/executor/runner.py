"""Run one probe: prepare, open a browser, navigate, locate, capture, validate, report.

Pipeline stage failures are fatal and stop the remaining stages, with one
exception: once the component is resolved, a capture or upload failure still
lets the validation battery run. The browser session is released on every
exit path before the report is assembled, so release errors show up in it.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ...adapters.artifact_store import get_store
from ...adapters.browser_session import BrowserSessionManager
from ...api.dto import InvocationResponse, RunReport, StepResult, StepStatus
from ...runtime.storage import prepare_environment
from ...telemetry import step_span
from ..capture.artifact import capture, describe_image, store
from ..context import RunPhase
from ..errors import PipelineError, PreparationError, SessionError
from ..nav.navigator import locate, navigate
from ..report.reporter import build_report, fatal_step, to_response
from ..timing import elapsed_ms
from ..validator.battery import run_battery

if TYPE_CHECKING:
    from playwright.async_api import Page

    from ...adapters.artifact_store import ArtifactStore
    from ..context import RunContext, StorageConfig

logger = logging.getLogger(__name__)

_TERMINAL = (RunPhase.CLOSED, RunPhase.REPORTED)


@dataclass(frozen=True)
class RunOutcome:
    report: RunReport
    failed: bool
    phase: RunPhase  # furthest phase reached, or FATAL

    def response(self) -> InvocationResponse:
        return to_response(self.report, self.failed)


class ProbeRun:
    """State for exactly one invocation. Not reusable."""

    def __init__(
        self,
        ctx: RunContext,
        storage: StorageConfig,
        artifact_store: ArtifactStore | None = None,
        sessions: BrowserSessionManager | None = None,
    ) -> None:
        self.ctx = ctx
        self.storage = storage
        self._artifact_store = artifact_store
        self._sessions = sessions or BrowserSessionManager()
        self.steps: list[StepResult] = []
        self.phase = RunPhase.INIT
        self.reached = RunPhase.INIT
        self.fatal: PipelineError | None = None
        self.screenshot_url: str | None = None

    async def execute(self, event: Any = None) -> RunOutcome:
        start = time.perf_counter()
        try:
            await self._prepare()
            await self._run_in_session()
        except PipelineError as e:
            self._fail(e)
        except Exception as e:
            logger.exception("[Runner] Unexpected error")
            self._fail(PipelineError("run", f"Unexpected error: {e}"))

        report = build_report(
            self.steps, self.screenshot_url, elapsed_ms(start), event, self.fatal
        )
        self._advance(RunPhase.REPORTED)
        return RunOutcome(report=report, failed=self.fatal is not None, phase=self.reached)

    async def _prepare(self) -> None:
        t = time.perf_counter()
        with step_span("prepare_environment"):
            try:
                problems = await asyncio.to_thread(prepare_environment, self.ctx.scratch_dirs)
            except Exception as e:
                raise PreparationError(
                    "prepare_environment", f"Environment preparation failed: {e}", elapsed_ms(t)
                ) from e
        details = f"Prepared {len(self.ctx.scratch_dirs)} directories"
        if problems:
            details += "; not prepared: " + "; ".join(problems)
        self.steps.append(
            StepResult(
                name="prepare_environment",
                status=StepStatus.SUCCESS,
                details=details,
                elapsed_ms=elapsed_ms(t),
            )
        )
        self._advance(RunPhase.ENV_READY)

    async def _run_in_session(self) -> None:
        t = time.perf_counter()
        try:
            async with self._sessions.open_session(self.ctx) as session:
                self.steps.append(
                    StepResult(
                        name="launch_browser",
                        status=StepStatus.SUCCESS,
                        details="Chromium launched",
                        elapsed_ms=elapsed_ms(t),
                    )
                )
                self._advance(RunPhase.SESSION_OPEN)
                try:
                    await self._drive(session.page)
                except PipelineError as e:
                    self._fail(e)
                except Exception as e:
                    logger.exception("[Runner] Unexpected error while driving the page")
                    self._fail(PipelineError("run", f"Unexpected error: {e}"))
        except SessionError as e:
            # Only acquisition can raise here; the body records its own failures.
            if e.elapsed_ms is None:
                e.elapsed_ms = elapsed_ms(t)
            raise

        if session.release_error:
            self.steps.append(
                StepResult(
                    name="close_browser",
                    status=StepStatus.FAILURE,
                    details=session.release_error,
                )
            )
        self._advance(RunPhase.CLOSED)

    async def _drive(self, page: Page) -> None:
        ctx = self.ctx
        with step_span("navigation", url=ctx.url):
            self.steps.append(await navigate(page, ctx.url, ctx.navigation_timeout_ms))
        self._advance(RunPhase.NAVIGATED)

        with step_span("locate_component", selector=ctx.selector):
            component, located = await locate(page, ctx.selector, ctx.selector_timeout_ms)
        self.steps.append(located)
        self._advance(RunPhase.LOCATED)

        await self._capture_and_store(component)

        with step_span("validation_battery", checks=len(ctx.checks)):
            self.steps.extend(
                await run_battery(component, ctx.checks, ctx.selector_timeout_ms)
            )
        self._advance(RunPhase.VALIDATED)

    async def _capture_and_store(self, component: Any) -> None:
        t = time.perf_counter()
        try:
            with step_span("capture_screenshot"):
                data = await capture(component, self.ctx.screenshot_path)
            self.steps.append(
                StepResult(
                    name="capture_screenshot",
                    status=StepStatus.SUCCESS,
                    details=describe_image(data),
                    elapsed_ms=elapsed_ms(t),
                )
            )

            t = time.perf_counter()
            with step_span("upload_screenshot", bucket=self.storage.bucket):
                if self._artifact_store is None:
                    self._artifact_store = get_store(self.storage.region, self.storage.backend)
                url = await store(self._artifact_store, data, self.storage)
            self.steps.append(
                StepResult(
                    name="upload_screenshot",
                    status=StepStatus.SUCCESS,
                    details=url,
                    elapsed_ms=elapsed_ms(t),
                )
            )
        except PipelineError as e:
            if e.elapsed_ms is None:
                e.elapsed_ms = elapsed_ms(t)
            self._fail(e)
            return
        except Exception as e:
            # boto3 client construction and similar setup errors
            self._fail(PipelineError("upload_screenshot", str(e), elapsed_ms(t)))
            return

        self.screenshot_url = url
        self._advance(RunPhase.CAPTURED)

    def _fail(self, error: PipelineError) -> None:
        logger.error("[Runner] %s failed: %s", error.step, error.message)
        if self.fatal is None:
            self.fatal = error
        self.steps.append(fatal_step(error))
        self.phase = self.reached = RunPhase.FATAL

    def _advance(self, phase: RunPhase) -> None:
        if self.phase is RunPhase.FATAL and phase not in _TERMINAL:
            return
        logger.info("[Runner] %s -> %s", self.phase.value, phase.value)
        self.phase = phase
        if phase not in _TERMINAL and self.reached is not RunPhase.FATAL:
            self.reached = phase


async def run_probe(
    ctx: RunContext,
    storage: StorageConfig,
    event: Any = None,
    artifact_store: ArtifactStore | None = None,
    sessions: BrowserSessionManager | None = None,
) -> RunOutcome:
    """Main entry point for one probe run."""
    return await ProbeRun(ctx, storage, artifact_store, sessions).execute(event)
