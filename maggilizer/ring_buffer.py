"""Fixed-size circular sample buffer with independent read and write heads."""

from __future__ import annotations

from collections.abc import Sequence


class RingBuffer:
    """Circular buffer of float samples.

    The buffer owns its storage in ``data``. The read head never passes the
    write head, so equal heads mean the buffer holds nothing readable.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError(f"ring buffer size must be positive, got {size}")
        self.size = size
        self.data: list[float] = [0.0] * size
        self.read_position = 0
        self.write_position = 0

    def has_data(self) -> bool:
        """True when there are samples between the read and write heads."""
        return self.read_position != self.write_position

    def reset(self) -> None:
        """Move both heads back to the start; the stored samples are kept."""
        self.read_position = 0
        self.write_position = 0

    def _free_space(self) -> int:
        return (self.read_position - self.write_position + self.size - 1) % self.size

    def write_block(self, samples: Sequence[float]) -> None:
        """Copy ``samples`` in at the write head and advance it."""
        count = len(samples)
        if count == 0:
            raise ValueError("cannot write an empty block")
        if self._free_space() <= count:
            raise ValueError(
                f"block of {count} samples does not fit in {self._free_space()} free slots"
            )
        first = min(self.size - self.write_position, count)
        self.data[self.write_position:self.write_position + first] = samples[:first]
        rest = count - first
        if rest:
            self.data[:rest] = samples[first:]
            self.write_position = rest
        else:
            self.write_position += first
        self.write_position %= self.size

    def write_silent_block(self, size: int) -> None:
        """Write ``size`` zero samples at the write head and advance it."""
        if size <= 0:
            raise ValueError(f"silent block size must be positive, got {size}")
        for offset in range(min(size, self.size)):
            self.data[(self.write_position + offset) % self.size] = 0.0
        self.write_position = (self.write_position + size) % self.size

    def advance_write_head(self, size: int) -> None:
        """Move the write head forward without touching the samples."""
        self.write_position = (self.write_position + size) % self.size

    def backtrack_write_head(self, size: int) -> None:
        """Move the write head back without touching the samples."""
        self.write_position = (self.write_position - size) % self.size

    def read_block(self, size: int) -> list[float]:
        """Read up to ``size`` samples and advance the read head.

        Fewer samples come back when fewer are readable.
        """
        samples, self.read_position = self._read(size, self.read_position)
        return samples

    def peek_read_block(self, size: int) -> list[float]:
        """Read up to ``size`` samples from the read head without advancing it."""
        samples, _ = self._read(size, self.read_position)
        return samples

    def peek_block(self, size: int, read_position: int) -> tuple[list[float], int]:
        """Read from ``read_position`` without moving the read head.

        Returns the samples and the position following the last one read.
        """
        return self._read(size, read_position)

    def _read(self, size: int, position: int) -> tuple[list[float], int]:
        if size <= 0:
            raise ValueError(f"read size must be positive, got {size}")
        if not 0 <= position < self.size:
            raise ValueError(f"read position {position} outside 0..{self.size - 1}")
        if not self.has_data():
            raise ValueError("ring buffer has no data to read")

        distance = (self.write_position - self.read_position) % self.size
        first = min(self.size - position, size, distance)
        samples = self.data[position:position + first]
        second = min(size - first, distance - first)
        if second:
            samples.extend(self.data[:second])
            position = second
        else:
            position += first
        return samples, position % self.size