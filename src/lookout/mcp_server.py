"""FastMCP server exposing a single probe run as a tool."""

from __future__ import annotations

import json
import logging
import os

from fastmcp import Context, FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from .handler import async_handler
from .telemetry import init_telemetry, shutdown_telemetry

logger = logging.getLogger(__name__)

mcp = FastMCP(name="lookout-probe")


@mcp.custom_route("/health", methods=["GET"])
async def health_check(request: Request) -> JSONResponse:  # noqa: ARG001
    """Health check endpoint for Kubernetes probes."""
    return JSONResponse({"status": "healthy", "service": "lookout-mcp"})


@mcp.tool
async def probe_component(
    ctx: Context,
    url: str | None = None,
    selector: str | None = None,
):
    """Screenshot a page component and check its controls.

    Opens a headless browser, loads the page, waits for the component,
    uploads an element screenshot and runs the validation checks.

    Args:
        ctx: FastMCP context for progress reporting (automatically provided)
        url: Page to visit (defaults to TARGET_URL)
        selector: CSS selector of the component (defaults to COMPONENT_SELECTOR)

    Returns:
        dict with the HTTP-style status code and the run report
    """
    event = {k: v for k, v in {"url": url, "selector": selector}.items() if v}
    await ctx.report_progress(progress=0, total=1, message="running")
    response = await async_handler(event, url=url, selector=selector)
    await ctx.report_progress(progress=1, total=1, message="completed")

    report = json.loads(response["body"])
    logger.info("[MCP] Probe finished: %s", report["message"])
    return {"statusCode": response["statusCode"], "report": report}


def main() -> None:
    """Run the MCP server with streamable-http transport."""
    port = int(os.getenv("MCP_PORT", "8085"))
    host = os.getenv("MCP_HOST", "0.0.0.0")  # nosec B104 - Docker container binding

    init_telemetry()
    logger.info("[Lookout MCP] Starting server on %s:%s/mcp", host, port)
    try:
        mcp.run(transport="streamable-http", host=host, port=port, path="/mcp")
    finally:
        shutdown_telemetry()


if __name__ == "__main__":
    main()
