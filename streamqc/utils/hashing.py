from __future__ import annotations
import hashlib
import json


def canonical_dumps(obj) -> str:
    """Serialize to canonical JSON (sorted keys, minimal whitespace)."""
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def sha256_hex_canonical_json(obj) -> str:
    """SHA256 over the canonical JSON encoding of ``obj``."""
    return hashlib.sha256(canonical_dumps(obj).encode("utf-8")).hexdigest()


def sha256_hex_file(path: str) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(65536), b""):
            h.update(chunk)
    return h.hexdigest()
