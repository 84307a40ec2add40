from __future__ import annotations

from typing import Iterator


def ease_out_cubic(progress: float) -> float:
    p = min(max(float(progress), 0.0), 1.0)
    return 1.0 - (1.0 - p) ** 3


def counter_value(start: float, end: float, elapsed_ms: float, duration_ms: float) -> float:
    if duration_ms <= 0:
        return float(end)
    progress = min(max(elapsed_ms / float(duration_ms), 0.0), 1.0)
    if progress >= 1.0:
        return float(end)
    return start + (end - start) * ease_out_cubic(progress)


def counter_frames(
    start: float,
    end: float,
    duration_ms: float,
    frame_ms: float,
) -> Iterator[float]:
    """Yield displayed values for an eased counter, ending on ``end`` exactly."""
    if duration_ms <= 0 or frame_ms <= 0:
        yield float(end)
        return
    elapsed = 0.0
    while elapsed < duration_ms:
        yield counter_value(start, end, elapsed, duration_ms)
        elapsed += frame_ms
    yield float(end)
