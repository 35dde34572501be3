"""Effect parameters: identifiers, the live parameter set and bank encoding."""

from __future__ import annotations

import struct
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import IntEnum

COMPANY_ID = 64
PLUGIN_ID = 2246

# A parameter block is a run of little-endian 32-bit floats.
_FLOAT = struct.Struct("<f")


class ParamId(IntEnum):
    """Identifiers of the effect's parameters, in bank order."""

    REVERSE = 0
    PITCH = 1
    SPLICE = 2
    DELAY = 3
    RECYCLE = 4
    MIX = 5
    SMOOTHING = 6


PARAM_COUNT = len(ParamId)

# Order in which a full parameter block stores its values.
_BLOCK_ORDER = (
    ParamId.REVERSE,
    ParamId.PITCH,
    ParamId.SPLICE,
    ParamId.DELAY,
    ParamId.RECYCLE,
    ParamId.MIX,
    ParamId.SMOOTHING,
)
_BLOCK = struct.Struct("<" + "f" * len(_BLOCK_ORDER))

# Parameters given as 0-100 % and stored as 0-1.
_PERCENT_PARAMS = frozenset({ParamId.RECYCLE, ParamId.MIX, ParamId.SMOOTHING})

# Property names written to a bank, in order.
BANK_PROPERTIES = ("reverse", "pitch", "splice", "delay", "recycle", "mix")


class ParamBlockError(ValueError):
    """A parameter block does not have the expected size."""


@dataclass
class RtpcParams:
    """Current parameter values as the effect uses them.

    ``pitch`` is in cents, ``splice`` and ``delay`` in milliseconds, and
    ``recycle``, ``mix`` and ``smoothing`` are ratios from 0 to 1.
    """

    reverse: bool = False
    pitch: float = 0.0
    splice: float = 0.0
    delay: float = 0.0
    recycle: float = 0.0
    mix: float = 0.0
    smoothing: float = 0.0

    def clear(self) -> None:
        """Return every value to its default."""
        self.reverse = False
        self.pitch = 0.0
        self.splice = 0.0
        self.delay = 0.0
        self.recycle = 0.0
        self.mix = 0.0
        self.smoothing = 0.0


def _store(rtpcs: RtpcParams, param_id: ParamId, value: float) -> None:
    if param_id is ParamId.REVERSE:
        # Booleans arrive as floats: zero is false, anything else true.
        rtpcs.reverse = value != 0
        return
    if param_id in _PERCENT_PARAMS:
        value = value / 100.0
    setattr(rtpcs, param_id.name.lower(), float(value))


class FXParams:
    """The effect's parameter set, with tracking of which values changed."""

    def __init__(self) -> None:
        self.rtpcs = RtpcParams()
        self._changes: set[ParamId] = set()

    def _mark_all_changed(self) -> None:
        self._changes = set(ParamId)

    def clone(self) -> FXParams:
        """Copy of these parameters with every parameter marked as changed."""
        copy = FXParams()
        copy.rtpcs = replace(self.rtpcs)
        copy._mark_all_changed()
        return copy

    @classmethod
    def from_block(cls, block: bytes) -> FXParams:
        """Create parameters from a block; an empty block gives the defaults."""
        params = cls()
        if not block:
            params.rtpcs.clear()
            params._mark_all_changed()
        else:
            params.set_params_block(block)
        return params

    def set_params_block(self, block: bytes) -> None:
        """Set every parameter from a block of seven little-endian floats.

        Raises :class:`ParamBlockError` when the block has any other size.
        """
        if len(block) != _BLOCK.size:
            raise ParamBlockError(
                f"parameter block must be {_BLOCK.size} bytes, got {len(block)}"
            )
        for param_id, value in zip(_BLOCK_ORDER, _BLOCK.unpack(block)):
            _store(self.rtpcs, param_id, value)
        self._mark_all_changed()

    def set_param(self, param_id: int, value: float) -> None:
        """Set one parameter; percentages are converted to ratios.

        Raises ``ValueError`` for an unknown parameter id.
        """
        try:
            key = ParamId(param_id)
        except ValueError:
            raise ValueError(f"unknown parameter id {param_id}") from None
        _store(self.rtpcs, key, value)
        self._changes.add(key)

    def take_changes(self) -> frozenset[ParamId]:
        """Return the parameters changed since the last call and forget them."""
        changes = frozenset(self._changes)
        self._changes.clear()
        return changes


def encode_bank_parameters(properties: Mapping[str, float]) -> bytes:
    """Encode authoring properties as the bank's parameter block.

    Writes ``reverse``, ``pitch``, ``splice``, ``delay``, ``recycle`` and
    ``mix`` as little-endian 32-bit floats; smoothing is not written.
    Raises ``KeyError`` when a property is missing.
    """
    return b"".join(_FLOAT.pack(float(properties[name])) for name in BANK_PROPERTIES)