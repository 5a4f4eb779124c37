from __future__ import annotations

import time


def elapsed_ms(start: float) -> int:
    """Milliseconds since a ``time.perf_counter()`` reading, never negative."""
    return max(0, int((time.perf_counter() - start) * 1000))
