"""Lambda-style invocation entry point.

``handler(event, context)`` always returns
``{"statusCode": 200|500, "headers": {...}, "body": "<RunReport JSON>"}`` and
never raises.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from .config.settings import Settings, load_settings
from .core.context import RunContext, StorageConfig
from .core.errors import PipelineError
from .core.executor.runner import run_probe
from .core.report.reporter import build_report, fatal_step, to_response
from .core.timing import elapsed_ms

logger = logging.getLogger(__name__)


def _request_id(context: Any) -> str | None:
    return getattr(context, "aws_request_id", None) if context is not None else None


async def async_handler(
    event: Any,
    context: Any | None = None,
    settings: Settings | None = None,
    url: str | None = None,
    selector: str | None = None,
    **run_kwargs: Any,
) -> dict[str, Any]:
    start = time.perf_counter()
    logger.info("[Handler] Invocation started (request_id=%s)", _request_id(context))
    try:
        settings = settings or load_settings()
        ctx = RunContext.from_settings(settings, url=url, selector=selector)
        storage = StorageConfig.from_settings(settings)
        outcome = await run_probe(ctx, storage, event, **run_kwargs)
        response = outcome.response()
    except Exception as e:
        # Configuration errors and anything else that escaped the run
        logger.exception("[Handler] Invocation failed before a report was built")
        error = PipelineError("configuration", f"{e}", elapsed_ms(start))
        report = build_report([fatal_step(error)], None, elapsed_ms(start), event, error)
        response = to_response(report, failed=True)

    logger.info("[Handler] Invocation finished with status %s", response.status_code)
    return response.model_dump(by_alias=True)


def handler(event: Any, context: Any | None = None) -> dict[str, Any]:
    """Synchronous entry point for the Lambda Python runtime."""
    return asyncio.run(async_handler(event, context))
