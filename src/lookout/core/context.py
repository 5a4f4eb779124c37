"""Per-run inputs and the run phase machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..config.settings import Settings
from .validator.checks import DEFAULT_CHECKS, ValidationCheck


class RunPhase(str, Enum):
    INIT = "INIT"
    ENV_READY = "ENV_READY"
    SESSION_OPEN = "SESSION_OPEN"
    NAVIGATED = "NAVIGATED"
    LOCATED = "LOCATED"
    CAPTURED = "CAPTURED"
    VALIDATED = "VALIDATED"
    FATAL = "FATAL"
    REPORTED = "REPORTED"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class RunContext:
    url: str
    selector: str
    navigation_timeout_ms: int = 60000
    selector_timeout_ms: int = 60000
    viewport: tuple[int, int] = (1280, 720)
    user_agent: str = ""
    headless: bool = True
    executable_path: str | None = None
    extra_args: tuple[str, ...] = ()
    screenshot_path: str | None = None
    scratch_dirs: tuple[str, ...] = ()
    checks: tuple[ValidationCheck, ...] = field(default=DEFAULT_CHECKS)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        url: str | None = None,
        selector: str | None = None,
    ) -> RunContext:
        return cls(
            url=url or settings.target_url,
            selector=selector or settings.component_selector,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            selector_timeout_ms=settings.selector_timeout_ms,
            viewport=(settings.viewport_width, settings.viewport_height),
            user_agent=settings.user_agent,
            headless=settings.headless,
            executable_path=settings.chromium_executable_path,
            extra_args=tuple(settings.browser_extra_args),
            screenshot_path=settings.screenshot_path,
            scratch_dirs=tuple(settings.scratch_dirs),
        )


@dataclass(frozen=True)
class StorageConfig:
    bucket: str
    region: str = "us-east-2"
    key_prefix: str = "screenshots"
    filename_prefix: str | None = None
    slug: str = "flight-booking"
    base_url: str | None = None
    backend: str = "s3"

    @property
    def public_base_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"https://{self.bucket}.s3.amazonaws.com"

    @classmethod
    def from_settings(cls, settings: Settings) -> StorageConfig:
        return cls(
            bucket=settings.s3_bucket,
            region=settings.aws_region,
            key_prefix=settings.artifact_key_prefix,
            filename_prefix=settings.filename_prefix,
            slug=settings.artifact_slug,
            base_url=settings.artifact_base_url,
            backend=settings.storage_backend,
        )
