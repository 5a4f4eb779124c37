from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from ...api.dto import InvocationResponse, RunReport, StepResult, StepStatus
from ..capture.artifact import iso_timestamp
from ..errors import PipelineError

FATAL_STEP = "fatal_error"
SUCCESS_MESSAGE = "Success"


def fatal_step(error: PipelineError) -> StepResult:
    return StepResult(
        name=FATAL_STEP,
        status=StepStatus.FAILURE,
        details=f"{error.step}: {error.message}",
        elapsed_ms=error.elapsed_ms,
    )


def _coerce(value: Any, seen: frozenset[int]) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        if id(value) in seen:
            return "<cycle>"
        inner = seen | {id(value)}
        return {str(k): _coerce(v, inner) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        if id(value) in seen:
            return "<cycle>"
        inner = seen | {id(value)}
        return [_coerce(v, inner) for v in value]
    return str(value)


def _jsonable(event: Any) -> Any:
    # Events from some transports carry non-JSON values (bytes, datetimes)
    try:
        return json.loads(json.dumps(event, default=str))
    except (TypeError, ValueError):
        # Non-string keys or reference cycles
        return _coerce(event, frozenset())


def build_report(
    steps: Sequence[StepResult],
    screenshot_url: str | None,
    total_elapsed_ms: int,
    event: Any,
    fatal: PipelineError | None = None,
) -> RunReport:
    """Assemble the single report for a run.

    Check failures do not affect the message; only a fatal pipeline error does.
    """
    message = SUCCESS_MESSAGE if fatal is None else f"Error: {fatal.message}"
    return RunReport(
        message=message,
        timestamp=iso_timestamp(),
        screenshot_url=None if fatal is not None else screenshot_url,
        total_elapsed_ms=total_elapsed_ms,
        steps=list(steps),
        event=_jsonable(event),
    )


def to_response(report: RunReport, failed: bool) -> InvocationResponse:
    return InvocationResponse(
        status_code=500 if failed else 200,
        body=report.model_dump_json(by_alias=True),
    )
