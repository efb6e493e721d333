from __future__ import annotations

import math

import pytest

from streamqc.engine.throttle import RateGate
from streamqc.metrics.smoothing import ExponentialSmoother
from streamqc.utils.hashing import canonical_dumps, sha256_hex_canonical_json
from streamqc.utils.numeric import amplitude_to_db, finite_or
from streamqc.utils.quantize import q


def test_exponential_smoother_ignores_non_finite():
    s = ExponentialSmoother(0.5)
    assert s.update(1.0) == 0.5
    assert s.update(math.nan) == 0.5
    assert s.update(1.0) == 0.75
    s.reset()
    assert s.value == 0.0
    with pytest.raises(ValueError):
        ExponentialSmoother(0.0)


def test_rate_gate():
    gate = RateGate(20.0)
    assert gate.ready(100.0)
    assert not gate.ready(149.0)
    assert gate.ready(150.0)
    gate.reset()
    assert gate.ready(0.0)
    with pytest.raises(ValueError):
        RateGate(0.0)


def test_quantize():
    assert q(1.005, 0.1) == 1.0
    assert q(-0.125, 0.25) == -0.25
    assert q(math.inf) is None
    assert q(None) is None


def test_amplitude_to_db_floor():
    assert amplitude_to_db(0.0) == -70.0
    assert amplitude_to_db(1.0, offset_db=0.691) == pytest.approx(-0.691)
    assert finite_or(math.nan, -70.0) == -70.0


def test_canonical_hash_ignores_key_order():
    a = {"b": 1, "a": [1, 2]}
    b = {"a": [1, 2], "b": 1}
    assert canonical_dumps(a) == '{"a":[1,2],"b":1}'
    assert sha256_hex_canonical_json(a) == sha256_hex_canonical_json(b)
