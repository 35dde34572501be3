"""Small DSP helpers shared by the splice and effect code."""

from __future__ import annotations

import math
from collections.abc import MutableSequence, Sequence

PI_OVER_TWO = math.pi / 2.0

# Selects the sine/cosine crossfade curve instead of the square-root curve.
USE_SIN_COS_XFADE = False


def ms_to_samples(sample_rate: int, milliseconds: float) -> int:
    """Convert a duration in milliseconds to a whole number of samples (truncated)."""
    samples = int((milliseconds / 1000.0) * sample_rate)
    return max(samples, 0)


def align_up(value: int, boundary: int) -> int:
    """Round ``value`` up to the next multiple of ``boundary``."""
    if boundary <= 0:
        raise ValueError(f"boundary must be positive, got {boundary}")
    return ((value + boundary - 1) // boundary) * boundary


def wet_dry_mix(dry: float, wet: float, mix: float) -> float:
    """Blend a dry and a wet sample; ``mix`` of 0 is fully dry, 1 fully wet."""
    return dry * (1.0 - mix) + wet * mix


def _fade_ratio(current: int, total: int) -> float:
    if total <= 0:
        raise ValueError(f"crossfade length must be positive, got {total}")
    if not 0 <= current <= total:
        raise ValueError(f"crossfade position {current} outside 0..{total}")
    return current / total


def _weight_from(ratio: float) -> float:
    if USE_SIN_COS_XFADE:
        return math.cos(ratio * PI_OVER_TWO)
    return math.sqrt(1.0 - ratio)


def _weight_to(ratio: float) -> float:
    if USE_SIN_COS_XFADE:
        return math.sin(ratio * PI_OVER_TWO)
    return math.sqrt(ratio)


def equal_power_xfade(current: int, total: int, from_sample: float, to_sample: float) -> float:
    """Equal-power crossfade from ``from_sample`` to ``to_sample`` at step ``current`` of ``total``."""
    ratio = _fade_ratio(current, total)
    return _weight_from(ratio) * from_sample + _weight_to(ratio) * to_sample


def equal_power_fade_in(current: int, total: int, sample: float) -> float:
    """Apply the outgoing (``from``) weight of the equal-power curve to ``sample``."""
    return _weight_from(_fade_ratio(current, total)) * sample


def equal_power_fade_out(current: int, total: int, sample: float) -> float:
    """Apply the incoming (``to``) weight of the equal-power curve to ``sample``."""
    return _weight_to(_fade_ratio(current, total)) * sample


def mix_buffer_into(buffer_a: MutableSequence[float], buffer_b: Sequence[float], mix: float) -> None:
    """Mix ``buffer_b`` (wet) into ``buffer_a`` (dry) in place."""
    if len(buffer_b) < len(buffer_a):
        raise ValueError("buffer_b is shorter than buffer_a")
    for index, (dry, wet) in enumerate(zip(buffer_a, buffer_b)):
        buffer_a[index] = wet_dry_mix(dry, wet, mix)


def calculate_speed(pitch: float) -> float:
    """Playback speed for a pitch shift given in cents."""
    return 2.0 ** (pitch / 1200.0)