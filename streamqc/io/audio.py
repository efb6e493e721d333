"""Audio decoding for offline replay."""
from __future__ import annotations
import warnings as py_warnings
import numpy as np
from streamqc.types import AudioBuffer


def to_stereo(
    samples: np.ndarray,
    *,
    backend: str,
    warnings: list[str]
) -> np.ndarray:
    """Normalize decoded audio to an (n, 2) float64 array."""
    x = np.asarray(samples, dtype=np.float64)
    if x.ndim == 1:
        x = x[:, None]
    if x.ndim != 2:
        raise ValueError("Decoded audio must be 1D or 2D array.")
    if x.shape[1] == 1:
        return np.repeat(x, 2, axis=1)
    if x.shape[1] == 2:
        return x
    warnings.append(
        f"{backend}: downmixed {x.shape[1]} channels to stereo."
    )
    half = x.shape[1] // 2
    left = np.mean(x[:, :half], axis=1)
    right = np.mean(x[:, half:], axis=1)
    return np.stack([left, right], axis=1)


def load_audio(path: str) -> AudioBuffer:
    """
    Decode an audio file with soundfile (libsndfile) into a stereo buffer.

    Mono input is duplicated to both channels; more than two channels are
    folded into left/right halves. Decoder warnings are kept on the buffer.
    """
    import soundfile as sf

    with py_warnings.catch_warnings(record=True) as w:
        py_warnings.simplefilter("always")
        data, fs = sf.read(path, always_2d=True, dtype="float64")
    warnings_list = [str(wi.message) for wi in w]
    channels = int(data.shape[1])
    stereo = to_stereo(data, backend="soundfile", warnings=warnings_list)
    return AudioBuffer(
        samples=stereo,
        fs=float(fs),
        duration=stereo.shape[0] / float(fs),
        channels=channels,
        backend="soundfile",
        warnings=tuple(warnings_list),
    )
