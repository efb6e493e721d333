from __future__ import annotations
import json
from streamqc.types import TargetProfile
from streamqc.utils.numeric import is_finite

DEFAULT_PROFILE_ID = "spotify"
DEFAULT_TARGET_LUFS = -14.0
DEFAULT_TOLERANCE_LU = 1.0
CUSTOM_PROFILE_ID = "custom"

TARGET_PROFILES: tuple[TargetProfile, ...] = (
    TargetProfile("spotify", "Spotify", -14.0, 1.0),
    TargetProfile("apple_music", "Apple Music", -16.0, 1.0),
    TargetProfile("club_master", "Club Master", -8.0, 1.0),
    TargetProfile("film_dialogue", "Film / Dialogue", -24.0, 2.0),
)


def find_profile(profile_id: str) -> TargetProfile | None:
    for p in TARGET_PROFILES:
        if p.id == profile_id:
            return p
    return None


def resolve_target_profile(
    profile_id: str,
    custom_lufs: float = DEFAULT_TARGET_LUFS
) -> TargetProfile:
    """
    Resolve a preset id (or ``custom``) to a concrete target.

    Unknown ids fall back to -14 LUFS with 1 LU tolerance.
    """
    if profile_id == CUSTOM_PROFILE_ID:
        return TargetProfile(
            CUSTOM_PROFILE_ID, "Custom", float(custom_lufs), DEFAULT_TOLERANCE_LU
        )
    p = find_profile(profile_id)
    if p is None:
        return TargetProfile(
            profile_id, profile_id, DEFAULT_TARGET_LUFS, DEFAULT_TOLERANCE_LU
        )
    return p


def load_target_profile(path: str) -> TargetProfile:
    """
    Load a target profile from a JSON file.

    Expected layout::

        {"profile": {"id": "broadcast", "label": "Broadcast",
                     "target_lufs": -23.0, "tolerance_lu": 1.0}}

    Raises:
        KeyError: when ``profile`` or ``target_lufs`` is missing
        ValueError: when the target is not finite or the tolerance negative
    """
    with open(path, "r", encoding="utf-8") as f:
        j = json.load(f)

    p = j["profile"]
    target = float(p["target_lufs"])
    tol = float(p.get("tolerance_lu", DEFAULT_TOLERANCE_LU))
    if not is_finite(target):
        raise ValueError("profile target_lufs must be finite.")
    if not is_finite(tol) or tol < 0:
        raise ValueError("profile tolerance_lu must be a non-negative number.")
    profile_id = str(p.get("id", "file"))
    return TargetProfile(
        id=profile_id,
        label=str(p.get("label", profile_id)),
        target_lufs=target,
        tolerance_lu=tol,
    )
