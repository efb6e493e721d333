from __future__ import annotations
import numpy as np
from streamqc.types import StereoFrame


class BufferFrameSource:
    """
    Serve an in-memory (n, 2) buffer as fixed-length stereo frames.

    The last partial block is zero-padded to ``frame_size``. Once the
    buffer is exhausted ``next_frame`` returns None.
    """

    def __init__(self, samples: np.ndarray, frame_size: int = 1024):
        x = np.asarray(samples, dtype=np.float64)
        if x.ndim != 2 or x.shape[1] != 2:
            raise ValueError("Expected stereo samples with shape (n, 2).")
        if frame_size <= 0:
            raise ValueError("frame_size must be > 0.")
        self.samples = x
        self.frame_size = int(frame_size)
        self.position = 0

    def __len__(self) -> int:
        n = self.samples.shape[0]
        return (n + self.frame_size - 1) // self.frame_size

    def next_frame(self) -> StereoFrame | None:
        n = self.samples.shape[0]
        if self.position >= n:
            return None
        block = self.samples[self.position:self.position + self.frame_size]
        self.position += self.frame_size
        if block.shape[0] < self.frame_size:
            pad = np.zeros((self.frame_size - block.shape[0], 2), dtype=np.float64)
            block = np.concatenate([block, pad], axis=0)
        return StereoFrame(left=block[:, 0].copy(), right=block[:, 1].copy())

    def rewind(self) -> None:
        self.position = 0
