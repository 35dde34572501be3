"""Splice capture buffer that replays its contents reversed and/or pitched."""

from __future__ import annotations

import math
from collections.abc import Sequence

from maggilizer.ring_buffer import RingBuffer
from maggilizer.utilities import equal_power_xfade

# Largest share of a splice that the crossfade at each end may take up.
MAX_SMOOTHING_RATIO = 0.25


class Splice:
    """Collects a splice of input and renders it into a playback ring buffer.

    ``data`` holds ``size`` samples of storage; the active splice length is
    set by :meth:`update_settings` and must fit within that storage before
    any samples are mixed in or pushed out.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"splice storage size must not be negative, got {size}")
        self.size = size
        self.data: list[float] = [0.0] * size
        self.write_position = 0
        self._reverse = False
        self._speed = 0.0
        self._splice = 0
        self._recycle = 0.0
        self._smoothing_frames = 0

    def update_settings(
        self,
        reverse: bool,
        speed: float,
        splice_size: int,
        recycle: float,
        smoothing: float,
    ) -> None:
        """Set direction, playback speed, splice length, feedback and smoothing."""
        if splice_size <= 0:
            raise ValueError(f"splice size must be positive, got {splice_size}")
        if speed <= 0:
            raise ValueError(f"playback speed must be positive, got {speed}")
        self._reverse = reverse
        self._speed = speed
        self._splice = splice_size
        self._recycle = recycle
        # Faster playback renders fewer frames, so the fades shrink with it.
        speed_factor = min(1.0, 1.0 / speed)
        self._smoothing_frames = int(
            splice_size * MAX_SMOOTHING_RATIO * smoothing * speed_factor
        )

    def reset(self) -> None:
        """Start collecting a new splice from the beginning."""
        self.write_position = 0

    def is_empty(self) -> bool:
        """True when nothing has been collected into the current splice."""
        return self.write_position == 0

    def is_full(self) -> bool:
        """True when the current splice has been collected completely."""
        return self.write_position == self._splice

    def free_space(self) -> int:
        """Number of samples still needed to complete the current splice."""
        return self._splice - self.write_position

    def smoothing_frames(self) -> int:
        """Length in frames of the crossfade applied at each end of the splice."""
        return self._smoothing_frames

    def _check_storage(self) -> None:
        if self._splice > self.size:
            raise ValueError(
                f"splice of {self._splice} samples does not fit in storage of {self.size}"
            )

    def mix_in_block(
        self, input_buffer: Sequence[float], recycle_buffer: Sequence[float]
    ) -> int:
        """Append input plus scaled recycled playback until the splice is full.

        Returns the number of samples taken from ``input_buffer``.
        """
        if len(recycle_buffer) < len(input_buffer):
            raise ValueError("recycle buffer is shorter than the input buffer")
        self._check_storage()
        count = min(len(input_buffer), self.free_space())
        for offset, (sample, recycled) in enumerate(
            zip(input_buffer[:count], recycle_buffer[:count])
        ):
            self.data[self.write_position + offset] = sample + self._recycle * recycled
        self.write_position += count
        return count

    def _read_interpolated(self, position: float) -> float:
        index = math.ceil(position) if self._reverse else int(position)
        delta = abs(position - index)
        current = following = self.data[index]
        if self._reverse and position > 0:
            following = self.data[index - 1]
        elif not self._reverse and position < self._splice - 1:
            following = self.data[index + 1]
        return (1.0 - delta) * current + delta * following

    def push_to_buffer(self, ring_buffer: RingBuffer, apply_smoothing: bool) -> int:
        """Render the splice into ``ring_buffer`` at its write head.

        Exactly one splice length of frames is written. When playing faster
        than normal the rendered audio is shorter and the rest is silence.
        With ``apply_smoothing`` the ends are crossfaded with the samples
        already in the ring buffer. Returns the number of frames written.
        """
        self._check_storage()
        if self._speed > 1.0:
            frames_to_write = int(self._splice / self._speed)
        else:
            frames_to_write = self._splice
        direction = -1 if self._reverse else 1
        read_position = float(self._splice - 1) if self._reverse else 0.0
        smoothing = self._smoothing_frames

        for frames_written in range(self._splice):
            output = 0.0
            if frames_written < frames_to_write:
                output = self._read_interpolated(read_position)
                read_position += self._speed * direction

            position = ring_buffer.write_position
            frames_left = frames_to_write - frames_written
            if apply_smoothing and frames_written < smoothing:
                output = equal_power_xfade(
                    frames_written, smoothing, ring_buffer.data[position], output
                )
            elif apply_smoothing and 0 < frames_left <= smoothing:
                output = equal_power_xfade(
                    smoothing - frames_left + 1,
                    smoothing,
                    output,
                    ring_buffer.data[position],
                )

            ring_buffer.data[position] = output
            ring_buffer.write_position = (position + 1) % ring_buffer.size

        return self._splice

    def has_nonzero_data(self) -> bool:
        """True when any stored sample is non-zero."""
        return any(sample != 0.0 for sample in self.data)

    def zero_data(self) -> None:
        """Clear all stored samples to silence."""
        self.data = [0.0] * self.size