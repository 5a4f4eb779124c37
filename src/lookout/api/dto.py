from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StepStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class StepResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Pipeline stage or check identifier")
    status: StepStatus
    details: str | None = None
    elapsed_ms: int | None = Field(None, ge=0, alias="elapsedMs")


class RunReport(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message: str
    timestamp: str = Field(..., description="ISO-8601 completion time (UTC)")
    screenshot_url: str | None = Field(None, alias="screenshotUrl")
    total_elapsed_ms: int = Field(..., ge=0, alias="totalElapsedMs")
    steps: list[StepResult]
    event: Any = Field(None, description="Inbound invocation payload, echoed for debugging")


class InvocationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(..., alias="statusCode")
    headers: dict[str, str] = Field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )
    body: str


class RunRequest(BaseModel):
    """Optional overrides accepted by the HTTP trigger."""

    model_config = ConfigDict(extra="allow")

    url: str | None = Field(None, description="Page to visit instead of TARGET_URL")
    selector: str | None = Field(
        None, description="Component selector instead of COMPONENT_SELECTOR"
    )
