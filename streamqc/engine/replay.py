"""Offline replay of a frame source through the engine."""
from __future__ import annotations

import logging

from streamqc.engine.engine import FrameSource, MeteringEngine

logger = logging.getLogger(__name__)


def replay(
    engine: MeteringEngine,
    source: FrameSource,
    fs: float,
    *,
    frame_size: int | None = None,
    start_ms: float = 0.0
) -> int:
    """
    Drive ``engine`` with every frame of ``source`` on a simulated clock.

    Each frame advances the clock and media time by ``frame_size / fs``,
    so the rolling windows and throttles behave as they would in real
    time. Returns the number of frames processed.
    """
    if fs <= 0:
        raise ValueError("fs must be > 0.")
    frame_size = int(frame_size or engine.config.frame_size)
    frame_ms = 1000.0 * frame_size / float(fs)

    frames = 0
    while True:
        frame = source.next_frame()
        if frame is None:
            break
        media_time_s = frames * frame_ms / 1000.0
        engine.tick(
            frame,
            now_ms=start_ms + frames * frame_ms,
            media_time_s=media_time_s,
        )
        frames += 1
    logger.debug("Replayed %d frames (%.2fs)", frames, frames * frame_ms / 1000.0)
    return frames
