from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

SCRATCH_MODE = 0o777


def ensure_dir(path: Path, mode: int = SCRATCH_MODE) -> None:
    path.mkdir(parents=True, exist_ok=True)
    os.chmod(path, mode)  # noqa: PTH101


def prepare_environment(dirs: Iterable[str | Path]) -> list[str]:
    """Create scratch directories for the browser and screenshots.

    Failures are logged and returned, never raised: the runtime image may
    already ship usable directories we are not allowed to chmod.
    """
    problems: list[str] = []
    for d in dirs:
        path = Path(d)
        try:
            ensure_dir(path)
        except OSError as e:
            logger.warning("[Env] Directory %s already exists or couldn't be prepared: %s", path, e)
            problems.append(f"{path}: {e}")
    return problems
