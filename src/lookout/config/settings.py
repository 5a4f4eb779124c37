from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


def _env_list(name: str, default: list[str], sep: str) -> list[str]:
    val = os.getenv(name)
    if val is None:
        return list(default)
    return [part for part in val.split(sep) if part]


DEFAULT_URL = "https://flights.aegeanair.com/en/flights-from-istanbul-to-athens"
DEFAULT_SELECTOR = 'div[data-em-cmp="flights-booking"]'
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36"
)
DEFAULT_SCRATCH_DIRS = ["/tmp", "/tmp/screenshots", "/tmp/.cache"]  # nosec B108


@dataclass
class Settings:
    """Process configuration read from the environment at construction time."""

    target_url: str = field(default_factory=lambda: os.getenv("TARGET_URL", DEFAULT_URL))
    component_selector: str = field(
        default_factory=lambda: os.getenv("COMPONENT_SELECTOR", DEFAULT_SELECTOR)
    )
    navigation_timeout_ms: int = field(
        default_factory=lambda: _env_int("NAVIGATION_TIMEOUT_MS", 60000)
    )
    selector_timeout_ms: int = field(
        default_factory=lambda: _env_int("SELECTOR_TIMEOUT_MS", 60000)
    )
    viewport_width: int = field(default_factory=lambda: _env_int("VIEWPORT_WIDTH", 1280))
    viewport_height: int = field(default_factory=lambda: _env_int("VIEWPORT_HEIGHT", 720))
    user_agent: str = field(default_factory=lambda: os.getenv("USER_AGENT", DEFAULT_USER_AGENT))
    headless: bool = field(default_factory=lambda: _env_bool("HEADLESS", True))
    chromium_executable_path: str | None = field(
        default_factory=lambda: os.getenv("CHROMIUM_EXECUTABLE_PATH") or None
    )
    browser_extra_args: list[str] = field(
        default_factory=lambda: _env_list("BROWSER_EXTRA_ARGS", [], " ")
    )
    scratch_dirs: list[str] = field(
        default_factory=lambda: _env_list("SCRATCH_DIRS", DEFAULT_SCRATCH_DIRS, ":")
    )
    screenshot_path: str = field(
        default_factory=lambda: os.getenv(
            "SCREENSHOT_PATH", "/tmp/screenshots/flight-booking-component.png"  # nosec B108
        )
    )
    storage_backend: str = field(default_factory=lambda: os.getenv("STORAGE_BACKEND", "s3"))
    aws_region: str = field(default_factory=lambda: os.getenv("AWS_REGION", "us-east-2"))
    s3_bucket: str = field(
        default_factory=lambda: os.getenv("AWS_S3_BUCKET", "technical-playwright-result")
    )
    artifact_key_prefix: str = field(
        default_factory=lambda: os.getenv("ARTIFACT_KEY_PREFIX", "screenshots")
    )
    filename_prefix: str | None = field(default_factory=lambda: os.getenv("PREFIX") or None)
    artifact_slug: str = field(
        default_factory=lambda: os.getenv("ARTIFACT_SLUG", "flight-booking")
    )
    artifact_base_url: str | None = field(
        default_factory=lambda: os.getenv("ARTIFACT_BASE_URL") or None
    )


def load_settings() -> Settings:
    """Read a fresh Settings snapshot from the current environment."""
    return Settings()
