"""Engine modules for StreamQC."""

from streamqc.engine.engine import FrameSource, MeteringEngine, advance
from streamqc.engine.replay import replay
from streamqc.engine.state import EngineState, new_engine_state

__all__ = [
    "EngineState",
    "FrameSource",
    "MeteringEngine",
    "advance",
    "new_engine_state",
    "replay",
]
