from __future__ import annotations

import numpy as np
import pytest
import soundfile as sf

from streamqc.config import EngineConfig
from streamqc.engine import MeteringEngine, replay
from streamqc.io.audio import load_audio, to_stereo
from streamqc.io.frames import BufferFrameSource


def test_load_audio_mono_is_duplicated(tmp_path):
    fs = 48000
    t = np.arange(0, 0.1, 1.0 / fs)
    mono = 0.25 * np.sin(2.0 * np.pi * 440.0 * t)
    path = tmp_path / "mono.wav"
    sf.write(path, mono, fs, subtype="FLOAT")

    audio = load_audio(str(path))
    assert audio.channels == 1
    assert audio.backend == "soundfile"
    assert audio.samples.shape == (mono.size, 2)
    assert np.allclose(audio.samples[:, 0], audio.samples[:, 1])
    assert audio.duration == pytest.approx(mono.size / fs)


def test_to_stereo_downmixes_extra_channels():
    x = np.array([[1.0, 0.0, 0.5, 0.5], [0.0, 1.0, 0.0, 1.0]])
    warnings: list[str] = []
    out = to_stereo(x, backend="test", warnings=warnings)
    assert np.allclose(out, [[0.5, 0.5], [0.5, 0.5]])
    assert warnings and "4 channels" in warnings[0]


def test_to_stereo_rejects_bad_shape():
    with pytest.raises(ValueError):
        to_stereo(np.zeros((2, 2, 2)), backend="test", warnings=[])


def test_buffer_frame_source_pads_last_block():
    samples = np.ones((10, 2))
    src = BufferFrameSource(samples, frame_size=4)
    assert len(src) == 3
    frames = [src.next_frame() for _ in range(3)]
    assert src.next_frame() is None
    assert np.allclose(frames[-1].left, [1.0, 1.0, 0.0, 0.0])

    src.rewind()
    assert src.next_frame() is not None


def test_buffer_frame_source_requires_stereo():
    with pytest.raises(ValueError):
        BufferFrameSource(np.zeros(8), frame_size=4)


def test_replay_advances_simulated_clock():
    fs = 48000.0
    samples = np.full((1024 * 100, 2), 0.1)
    engine = MeteringEngine(EngineConfig(timeline_hz=20.0))
    frames = replay(engine, BufferFrameSource(samples, 1024), fs)
    assert frames == 100
    snap = engine.timeline_snapshot()
    # 21.33 ms frames: every third frame clears the 50 ms gate
    assert len(snap) == 34
    assert snap[-1].t < 100 * 1024 / fs
    assert engine.published().media_time_s <= snap[-1].t + 0.1
